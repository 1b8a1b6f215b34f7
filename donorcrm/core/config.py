"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Channel provider credentials are validated at load
time for the provider that is selected.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EMAIL_PROVIDERS = ("log", "sendgrid")
SMS_PROVIDERS = ("log", "twilio")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Everything has a default so the app can start (and tests can import it)
    without a database; database-backed routes raise SqlNotConfiguredException
    until DATABASE_URL is set.
    """

    # App
    app_name: str = "donorcrm"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    # Public base URL; used to build unsubscribe links in automation emails.
    app_url: str = "http://localhost:3000"

    # Database (PostgreSQL via asyncpg; schema managed by Alembic)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Request / middleware
    tenant_header_name: str = "X-Tenant-ID"
    request_id_header: str = "X-Request-ID"

    # Cron: when set, the sweep endpoint requires ?key= or Authorization: Bearer.
    cron_secret: SecretStr | None = None

    # Automation engine
    automation_short_delay_minutes: int = 5
    # False reproduces the legacy resume (remaining steps back to back, no delays).
    automation_resume_honors_step_delays: bool = True
    automation_sweep_batch_size: int = 500
    automation_drain_timeout_seconds: float = 30.0

    # Contact formatting
    phone_default_country_code: str = "40"

    # Channel providers
    email_provider: str = "log"
    sendgrid_api_key: SecretStr | None = None
    sendgrid_from_email: str = "noreply@ngohub.ro"
    sendgrid_from_name: str = "NGO HUB"
    sms_provider: str = "log"
    twilio_account_sid: str | None = None
    twilio_auth_token: SecretStr | None = None
    twilio_phone_number: str | None = None
    provider_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def database_configured(self) -> bool:
        """True when DATABASE_URL is set (SQL engine can be created)."""
        return bool(self.database_url)

    @model_validator(mode="after")
    def validate_automation_and_providers(self) -> "Settings":
        """Validate engine tuning and the selected channel providers.

        - SendGrid: SENDGRID_API_KEY required.
        - Twilio: TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER required.
        """
        if self.automation_short_delay_minutes < 0:
            raise ValueError("AUTOMATION_SHORT_DELAY_MINUTES must be >= 0")
        if self.automation_sweep_batch_size < 1:
            raise ValueError("AUTOMATION_SWEEP_BATCH_SIZE must be >= 1")
        if not self.phone_default_country_code.isdigit():
            raise ValueError(
                f"PHONE_DEFAULT_COUNTRY_CODE must be digits only, got: {self.phone_default_country_code!r}"
            )

        self.email_provider = self.email_provider.lower()
        if self.email_provider not in EMAIL_PROVIDERS:
            raise ValueError(
                f"email_provider must be one of {EMAIL_PROVIDERS}, got: {self.email_provider!r}"
            )
        if self.email_provider == "sendgrid":
            has_key = self.sendgrid_api_key and self.sendgrid_api_key.get_secret_value()
            if not has_key:
                raise ValueError(
                    "SENDGRID_API_KEY is required when EMAIL_PROVIDER is 'sendgrid'. "
                    "Set in environment or .env file."
                )

        self.sms_provider = self.sms_provider.lower()
        if self.sms_provider not in SMS_PROVIDERS:
            raise ValueError(
                f"sms_provider must be one of {SMS_PROVIDERS}, got: {self.sms_provider!r}"
            )
        if self.sms_provider == "twilio":
            has_token = self.twilio_auth_token and self.twilio_auth_token.get_secret_value()
            if not (self.twilio_account_sid and has_token and self.twilio_phone_number):
                raise ValueError(
                    "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER are required "
                    "when SMS_PROVIDER is 'twilio'."
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
