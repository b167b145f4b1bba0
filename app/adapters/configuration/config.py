# app/adapters/configuration/config.py

from functools import lru_cache
from typing import Optional
from logging import getLevelName
from pydantic import Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"
    DEBUG: bool = False

    # Server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    USE_HTTPS: bool = False

    # Database
    DB_DRIVER: str = "asyncpg"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "sms_gateway"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)
    CREATE_TABLES_ON_STARTUP: bool = True

    # SMS provider
    SMS_LIVE_URL: str = "https://www.egosms.co/api/v1/json/"
    SMS_SANDBOX_URL: str = "http://sandbox.egosms.co/api/v1/json/"
    SMS_USERNAME: str = ""
    SMS_PASSWORD: str = ""
    SMS_SENDER_ID: str = ""
    SMS_SANDBOX_MODE: bool = True
    SMS_TIMEOUT_SECONDS: float = 10.0

    # Phone numbers
    DEFAULT_COUNTRY_CODE: str = "256"

    # Admin basic auth
    ADMIN_USER: str = "admin"
    ADMIN_PASSWORD: str = "admin"

    # In-process request rate limit per caller IP (requests per second)
    RATE_LIMIT_RPS: int = 100

    # Background counter resets
    USAGE_RESET_ENABLED: bool = True

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_url(cls, value, info):
        if value:
            return value

        data = info.data
        return (
            f"postgresql+{data.get('DB_DRIVER', 'asyncpg')}://"
            f"{data['POSTGRES_USER']}:{data['POSTGRES_PASSWORD']}"
            f"@{data['POSTGRES_HOST']}:{data['POSTGRES_PORT']}/{data['POSTGRES_DB']}"
        )

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Make sure the value is a valid logging level name."""
        lvl = v.upper()
        getLevelName(lvl)
        return lvl

    @field_validator("DEFAULT_COUNTRY_CODE", mode="before")
    def strip_country_code(cls, v) -> str:
        return str(v).lstrip("+").strip()

    @property
    def sms_api_url(self) -> str:
        """Provider endpoint for the current sandbox/live mode."""
        return self.SMS_SANDBOX_URL if self.SMS_SANDBOX_MODE else self.SMS_LIVE_URL

    model_config = ConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
