"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="CookSmart", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Hosted backend
    backend_url: str = Field(
        default="http://localhost:54321",
        description="Base URL of the hosted backend (REST, auth, storage)",
    )
    backend_key: str = Field(
        default="public-anon-key", description="Public API key sent with every call"
    )

    # Resilience
    request_timeout_sec: float = Field(
        default=5.0, gt=0, description="Per-attempt timeout for remote calls"
    )
    max_retries: int = Field(
        default=2, ge=0, le=10, description="Retries after the first attempt"
    )
    retry_base_delay_sec: float = Field(
        default=1.0, ge=0, description="First backoff delay, doubled per retry"
    )
    retry_max_delay_sec: float = Field(
        default=8.0, ge=0, description="Ceiling for a single backoff delay"
    )
    probe_timeout_sec: float = Field(
        default=3.0, gt=0, description="Timeout for the foreground probe query"
    )
    startup_attempts: int = Field(
        default=3, ge=1, description="Session initialization attempts on startup"
    )
    startup_delay_sec: float = Field(
        default=1.0, ge=0, description="Delay between session init attempts"
    )

    # Session
    session_check_interval_sec: float = Field(
        default=600.0,
        ge=60,
        le=7200,
        description="How often the session monitor re-validates the session",
    )
    session_file: Optional[str] = Field(
        default=None, description="JSON file used to persist the auth session"
    )
    oauth_provider: str = Field(default="google", description="OAuth provider")
    oauth_redirect_url: str = Field(
        default="http://localhost:4200/", description="Where OAuth sign-in returns to"
    )

    # Storage
    recipe_image_bucket: str = Field(
        default="recipe-images", description="Bucket for recipe images"
    )
    avatar_bucket: str = Field(default="avatars", description="Bucket for avatars")
    storage_cache_control: str = Field(
        default="3600", description="Cache-Control max-age for uploads"
    )

    # Domain behaviour
    default_language: str = Field(default="bg", description="Default UI language")
    transactional_recipe_writes: bool = Field(
        default=False,
        description="Save recipe and ingredients through one server-side procedure",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:4200", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="CookSmart Gateway", description="API documentation title"
    )
    api_description: str = Field(
        default="Recipe browsing and pantry matching over a hosted backend",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("default_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        v = v.lower()
        if v not in ("bg", "en"):
            raise ValueError("default_language must be 'bg' or 'en'")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
