"""
Application configuration and settings.
Centralized configuration management using Pydantic Settings.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Allow extra fields from .env files that aren't defined here
    # (the frontend build reads VITE_* variables from the same files)
    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=[".env", ".env.local"],  # Load .env first, then .env.local (so .env.local overrides)
    )

    # Application settings
    app_name: str = "Model Chat API"
    environment: str = Field(
        default="local",
        validation_alias=AliasChoices("SYSTEM_ENVIRONMENT", "ENVIRONMENT"),
    )
    debug: bool = True
    port: int = 3001

    # CORS settings
    allowed_origins: Optional[List[str]] = None

    # Database settings
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: str = ""

    # Authentication settings
    supabase_jwt_secret: str = ""

    # Logging settings
    log_level: str = "INFO"
    enable_request_logging: bool = True

    # Generation provider settings. The presence of a key selects the provider;
    # with no key at all the service runs in echo mode.
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_key: str = ""

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == "local"

    @property
    def storage_configured(self) -> bool:
        """Check whether Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_service_role_key)

    @property
    def generation_mode(self) -> str:
        """Name of the generation provider the current credentials select."""
        if self.gemini_api_key:
            return "gemini"
        if self.openai_api_key:
            return "openai"
        return "echo"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
