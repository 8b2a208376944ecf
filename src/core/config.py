"""FundRaiser Donation Backend - Core Configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The instance is frozen: it is built once at startup and injected into
    the services that need it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    # Application
    app_name: str = "FundRaiser Donation API"
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level")
    allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Database
    database_url: str = Field(..., description="SQLAlchemy async URL (mysql+aiomysql://...)")

    # Security
    jwt_secret: str = Field(..., description="HMAC secret used to sign session tokens")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_days: int = Field(default=15, description="Session token lifetime in days")
    cookie_secure: bool = Field(default=False, description="Send the session cookie over HTTPS only")

    # Public URLs
    frontend_url: str = Field(..., description="Frontend base URL for outcome redirects")
    backend_url: str = Field(..., description="Public base URL of this API (gateway callbacks)")

    # SSLCommerz
    ssl_store_id: str = Field(..., description="SSLCommerz store ID")
    ssl_store_password: str = Field(..., description="SSLCommerz store password")
    ssl_mode: Literal["sandbox", "live"] = Field(default="sandbox", description="Gateway environment")
    gateway_timeout_seconds: float = Field(default=30.0)

    # Donation defaults
    currency: str = Field(default="BDT")
    country: str = Field(default="Bangladesh")
    default_postcode: str = Field(default="1000")

    # Email
    admin_email: str = Field(..., description="Recipient of contact messages, reply-to for receipts")
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587)
    smtp_user: str = Field(default="")
    smtp_password: str = Field(default="")
    email_from_name: str = Field(default="FundRaiser")

    # Redis (for task queue)
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL for task queue",
    )

    # Password reset
    otp_expiry_minutes: int = Field(default=10)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()  # type: ignore[call-arg]
