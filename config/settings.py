"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )
    reports_table: str = Field(
        default="production_reports",
        description="Relation holding one row per store/SKU/week report"
    )
    catalog_table: str = Field(
        default="sku_catalog",
        description="Read-only SKU catalog relation"
    )

    # ===================
    # STORES
    # ===================
    known_stores: list[str] = Field(
        default_factory=list,
        description="Locations registered before the first load (JSON list in env)"
    )

    # ===================
    # REPORT VIEWS
    # ===================
    report_page_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Rows per page in store and aggregated views"
    )
    week_options_past: int = Field(
        default=4,
        ge=0,
        le=52,
        description="Past weeks offered by the week selector"
    )
    week_options_future: int = Field(
        default=4,
        ge=0,
        le=52,
        description="Future weeks offered by the week selector"
    )

    # ===================
    # BULK WORKFLOWS
    # ===================
    bulk_batch_size: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Records persisted per batch during bulk workflows"
    )
    bulk_batch_pause_seconds: float = Field(
        default=0.5,
        ge=0,
        le=10,
        description="Pause between batches (backpressure on the remote store)"
    )

    # ===================
    # DASHBOARD
    # ===================
    low_fill_rate_threshold: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Rows below this fill rate are reported as alerts"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API (JSON list in env)"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
