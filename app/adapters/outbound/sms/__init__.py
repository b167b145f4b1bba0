# app/adapters/outbound/sms/__init__.py

from app.adapters.outbound.sms.delivery_client import DeliveryClient

__all__ = ["DeliveryClient"]
