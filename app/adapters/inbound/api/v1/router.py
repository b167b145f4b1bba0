# app/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
from app.adapters.inbound.api.v1.endpoints import admin_client_endpoint, sms_endpoint

api_router = APIRouter()

# SMS routes, authenticated by API key and secret
api_router.include_router(sms_endpoint.router, prefix="/sms", tags=["SMS"])

# Administrative routes, authenticated by HTTP basic
api_router.include_router(admin_client_endpoint.router, prefix="/admin/clients", tags=["Admin"])
