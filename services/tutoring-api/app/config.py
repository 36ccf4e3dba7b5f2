"""Configuration management for the tutoring API."""

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "https://flow.equussystems.co",
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Legacy variable names used by older deployments are accepted through
    validation aliases (for example ``BUG_ALERT_TO`` or ``MAILER_HOST``).
    """

    # Service Configuration
    SERVICE_NAME: str = "tutoring-api"
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = Field(default=8000, validation_alias=AliasChoices("SERVICE_PORT", "PORT"))
    ENVIRONMENT: str = Field(
        default="development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV")
    )
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"

    # Database Configuration
    MONGODB_URI: str = ""
    MONGODB_DB: str = "tutoring"
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # CORS Configuration
    CORS_ORIGINS: str = ""

    # Email Configuration (Resend)
    RESEND_API_KEY: str = ""
    MAIL_FROM: str = ""
    MAIL_REPLY_TO: str = ""
    MAIL_BCC: str = Field(
        default="", validation_alias=AliasChoices("MAIL_BCC", "MAILER_BCC", "EMAIL_BCC")
    )
    MAIL_TAG_CATEGORY: str = ""

    # Email Configuration (SMTP)
    SMTP_HOST: str = Field(
        default="", validation_alias=AliasChoices("SMTP_HOST", "MAILER_HOST", "EMAIL_HOST")
    )
    SMTP_PORT: int = Field(
        default=587, validation_alias=AliasChoices("SMTP_PORT", "MAILER_PORT", "EMAIL_PORT")
    )
    SMTP_USER: str = Field(
        default="", validation_alias=AliasChoices("SMTP_USER", "MAILER_USER", "EMAIL_USER")
    )
    SMTP_PASSWORD: str = Field(
        default="", validation_alias=AliasChoices("SMTP_PASSWORD", "MAILER_PW", "EMAIL_PASS")
    )
    SMTP_FROM: str = Field(
        default="", validation_alias=AliasChoices("SMTP_FROM", "MAILER_FROM", "EMAIL_FROM")
    )
    EMAIL_TIMEOUT: float = 10.0
    EMAIL_RETRY_ATTEMPTS: int = Field(default=3, ge=1)

    # Alert recipients
    ISSUE_ALERT_TO: str = Field(
        default="", validation_alias=AliasChoices("ISSUE_ALERT_TO", "BUG_ALERT_TO")
    )
    SUMMARY_REPORT_ALERT_TO: str = ""
    STUDENT_ALERT_TO: str = ""

    SUMMARY_REPORT_LIST_LIMIT: int = Field(default=200, ge=1)
    DEFAULT_CHATFLOW_ID: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise the log level name."""
        return v.strip().upper() or "INFO"

    @property
    def api_prefix(self) -> str:
        """API prefix with a leading slash and no trailing slash."""
        prefix = self.API_PREFIX.strip()
        if not prefix.startswith("/"):
            prefix = f"/{prefix}"
        return prefix.rstrip("/")

    @property
    def cors_origins_list(self) -> List[str]:
        """Configured CORS origins merged with the built-in frontend origins."""
        configured = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return list(dict.fromkeys([*configured, *DEFAULT_CORS_ORIGINS]))

    @property
    def issue_alert_recipient(self) -> Optional[str]:
        return self.ISSUE_ALERT_TO or None

    @property
    def summary_report_alert_recipient(self) -> Optional[str]:
        return self.SUMMARY_REPORT_ALERT_TO or self.ISSUE_ALERT_TO or None

    @property
    def student_alert_recipient(self) -> Optional[str]:
        return (
            self.STUDENT_ALERT_TO
            or self.SUMMARY_REPORT_ALERT_TO
            or self.ISSUE_ALERT_TO
            or None
        )

    @property
    def resend_configured(self) -> bool:
        return bool(self.RESEND_API_KEY and self.MAIL_FROM)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASSWORD)

    @property
    def smtp_from_address(self) -> str:
        """Sender used by the SMTP channel."""
        return self.SMTP_FROM or self.MAIL_FROM or self.SMTP_USER or "no-reply@example.com"


settings = Settings()
