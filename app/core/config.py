"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (Mongo URI, AWS, Twilio, quote API)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="inspirebot",
        description="MongoDB database name"
    )

    # AWS (SNS for SMS, Secrets Manager for bootstrap)
    AWS_REGION: str = Field(
        default="us-east-1",
        description="AWS region for SNS and Secrets Manager"
    )
    SNS_TOPIC_ARN: Optional[str] = Field(
        default=None,
        description="SNS topic phone numbers are subscribed to"
    )
    AWS_SECRET_ID: Optional[str] = Field(
        default=None,
        description="Secrets Manager secret loaded into the environment at startup"
    )

    # Twilio WhatsApp (chat channel)
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    TWILIO_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    TWILIO_WHATSAPP_NUMBER: Optional[str] = Field(
        default=None,
        description="Bot's WhatsApp sender, e.g. whatsapp:+14155238886"
    )

    # Quote source
    QUOTE_API_URL: str = Field(
        default="https://zenquotes.io/api/random",
        description="Random quote endpoint"
    )
    QUOTE_API_TIMEOUT: float = Field(
        default=10.0,
        description="Quote request timeout in seconds"
    )

    # Subscription flows
    SERIALIZE_USER_MUTATIONS: bool = Field(
        default=False,
        description="Run flows for the same user one at a time"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    ADMIN_TOKEN: Optional[str] = Field(
        default=None,
        description="Token required by the subscription admin endpoints"
    )

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def reload_settings() -> Settings:
    """
    Rebuilds the global settings in place from the current environment.
    Used after secrets have been loaded into os.environ.
    """
    fresh = Settings()
    for name in Settings.model_fields:
        setattr(settings, name, getattr(fresh, name))
    return settings


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.QUOTE_API_URL:
        errors.append("QUOTE_API_URL is required")

    # Production-specific validations
    if settings.is_production:
        if not settings.SNS_TOPIC_ARN:
            errors.append("SNS_TOPIC_ARN is required in production")
        if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN):
            errors.append("TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN are required in production")
        if not settings.TWILIO_WHATSAPP_NUMBER:
            errors.append("TWILIO_WHATSAPP_NUMBER is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
