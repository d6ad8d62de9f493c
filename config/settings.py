"""
Environment-driven settings for the guest post manager API.

Values come from the process environment or a .env file; anything
missing or out of range stops the app at import time.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration. Only the Supabase credentials are required."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_key: str = Field(..., description="Supabase anon/public key")

    # ===================
    # PRICING
    # ===================
    default_markup_percentage: Decimal = Field(
        default=Decimal("25"),
        ge=0,
        le=1000,
        description="Markup on base price when no client is selected"
    )

    # ===================
    # BULK UPLOAD
    # ===================
    max_upload_size_mb: int = Field(default=10, ge=1, le=100)
    allowed_upload_extensions: str = Field(
        default=".csv,.xls,.xlsx",
        description="Comma-separated, e.g. .csv,.xlsx"
    )
    upload_session_ttl_minutes: int = Field(
        default=30,
        ge=1,
        le=24 * 60,
        description="Idle minutes before a parsed upload is forgotten"
    )
    fuzzy_match_threshold: int = Field(
        default=85,
        ge=50,
        le=100,
        description="Lowest rapidfuzz score accepted when auto-mapping headers"
    )

    # ===================
    # SERVER
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$"
    )
    debug: bool = True
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"
    )
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=8000, ge=1000, le=65535)
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated origins allowed by CORS"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def upload_extensions(self) -> tuple[str, ...]:
        """Accepted extensions, lower-cased with leading dot."""
        return _split_csv(self.allowed_upload_extensions, lower=True)

    @property
    def cors_origin_list(self) -> list[str]:
        return list(_split_csv(self.cors_origins))


def _split_csv(raw: str, lower: bool = False) -> tuple[str, ...]:
    parts = (part.strip() for part in raw.split(","))
    return tuple(part.lower() if lower else part for part in parts if part)


@lru_cache()
def get_settings() -> Settings:
    """Load settings once; get_settings.cache_clear() forces a reload."""
    return Settings()


settings = get_settings()
