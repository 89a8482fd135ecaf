"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_base_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the marketplace used to build links inside emails",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Asia/Seoul",
        description="Timezone used for timestamps stored by the service",
    )
    from_email: str = Field(
        default="noreply@connectone.com",
        description="Email address that will appear as the sender of notifications",
        min_length=3,
    )
    email_server_context: bool = Field(
        default=True,
        description="Whether the host can run the real email transports",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    aws_access_key_id: str | None = Field(
        default=None, description="AWS access key used by the SES transport"
    )
    aws_secret_access_key: str | None = Field(
        default=None, description="AWS secret key used by the SES transport"
    )
    aws_region: str = Field(default="us-east-1", description="AWS region for SES")
    smtp_username: str | None = Field(
        default=None, description="SMTP account used to authenticate outgoing mail"
    )
    smtp_password: str | None = Field(
        default=None, description="Password for the SMTP account"
    )
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port", gt=0)

    @model_validator(mode="after")
    def _validate_credential_pairs(self) -> "Settings":
        if bool(self.aws_access_key_id) ^ bool(self.aws_secret_access_key):
            raise ValueError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must both be provided to enable SES"
            )
        if bool(self.smtp_username) ^ bool(self.smtp_password):
            raise ValueError(
                "SMTP_USERNAME and SMTP_PASSWORD must both be provided to enable SMTP"
            )
        if "@" not in self.from_email:
            raise ValueError("FROM_EMAIL must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
