"""
Configuration Management

Pydantic-settings based configuration for the image text notifier.
All settings can be overridden via environment variables and are read
once per Lambda execution context.
"""

from functools import lru_cache
from typing import Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GMAIL_SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with TEXTALERT_ and are case-insensitive.
    Example: TEXTALERT_NOTIFICATION_RECIPIENT=ops@example.com
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXTALERT_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AWS / Rekognition Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region for Rekognition",
    )
    aws_access_key_id: str | None = Field(
        default=None,
        description="Access key ID (default credential chain when unset)",
    )
    aws_secret_access_key: str | None = Field(
        default=None,
        description="Secret access key paired with aws_access_key_id",
    )
    rekognition_endpoint_url: str | None = Field(
        default=None,
        description="Rekognition endpoint URL (for local development)",
    )
    rekognition_max_labels: int = Field(
        default=10,
        ge=1,
        description="Maximum labels returned by DetectLabels",
    )
    rekognition_min_confidence: float | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Minimum label confidence requested from DetectLabels",
    )

    # Outbound call bounds
    connect_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Connect timeout for outbound calls",
    )
    read_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Read timeout for outbound calls",
    )

    # Gmail OAuth Configuration
    gmail_client_id: str | None = Field(default=None, description="OAuth client ID")
    gmail_client_secret: str | None = Field(default=None, description="OAuth client secret")
    gmail_refresh_token: str | None = Field(default=None, description="OAuth refresh token")
    gmail_access_token: str | None = Field(
        default=None,
        description="Current OAuth access token (refreshed automatically when expired)",
    )
    gmail_token_uri: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="OAuth token endpoint",
    )
    gmail_user_id: str = Field(
        default="me",
        description="Sender identity passed to users.messages.send",
    )

    # Notification Configuration
    notification_recipient: str = Field(
        default="alerts@example.com",
        description="Address that receives text detection emails",
    )
    notification_sender: str = Field(
        default="alerts@example.com",
        description="From address of text detection emails",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("notification_recipient", "notification_sender")
    @classmethod
    def _validate_address(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address '{value}': {e}") from e
        return value

    @property
    def gmail_configured(self) -> bool:
        """Whether every OAuth field needed to refresh a token is present."""
        return bool(
            self.gmail_client_id
            and self.gmail_client_secret
            and self.gmail_refresh_token
        )

    @property
    def rekognition_config(self) -> dict:
        """Rekognition client configuration."""
        config = {"region_name": self.aws_region}
        if self.rekognition_endpoint_url:
            config["endpoint_url"] = self.rekognition_endpoint_url
        if self.aws_access_key_id and self.aws_secret_access_key:
            config["aws_access_key_id"] = self.aws_access_key_id
            config["aws_secret_access_key"] = self.aws_secret_access_key
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache so settings are loaded once per execution context.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
