"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-secret-key-change-in-production"
DEV_ADMIN_PASSWORD = "admin123"

# Load .env file without clobbering variables already set in the environment
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = True
    frontend_url: str = "http://localhost:3000"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 5000

    # Completion service (Grok-compatible chat completions)
    completion_api_key: str = Field(default="")
    completion_api_url: str = "https://api.x.ai/v1"
    completion_model: str = "grok-beta"
    completion_max_tokens: int = 8000
    completion_temperature: float = 0.7
    completion_timeout_seconds: float = 120.0

    # Upper bound for one per-type generation, parse included
    generation_timeout_seconds: float = 150.0

    # Auth
    jwt_secret: str = Field(default=DEV_JWT_SECRET)
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # Admin console; an empty password skips seeding the admin account
    admin_username: str = "admin"
    admin_password: str = Field(default=DEV_ADMIN_PASSWORD)
    admin_email: str = "admin@builder.com"
    admin_token_expire_hours: int = 24

    # Deployment platforms
    vercel_token: str = Field(default="")
    vercel_api_url: str = "https://api.vercel.com"
    netlify_token: str = Field(default="")
    netlify_api_url: str = "https://api.netlify.com/api/v1"
    deployment_timeout_seconds: float = 60.0

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_directory: str = "logs"
    log_file_name: str = "promptbuilder.log"

    @model_validator(mode="after")
    def require_real_secrets_in_production(self) -> "Settings":
        if self.app_env != "production":
            return self
        if self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set when APP_ENV=production")
        if self.admin_password == DEV_ADMIN_PASSWORD:
            raise ValueError("ADMIN_PASSWORD must be changed (or emptied) when APP_ENV=production")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
