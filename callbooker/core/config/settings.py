"""Application settings with Pydantic validation."""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import CallerIdentityMissingError
from ...models.booking import CallerDetails
from ...utils.timezones import resolve_timezone


class BookerSettings(BaseSettings):
    """Application settings with validation and environment variable support."""

    # Caller identity used to fill booking forms
    user_name: str = Field(default="", description="Name entered on booking forms")
    user_email: str = Field(default="", description="Email entered on booking forms")
    user_phone: Optional[str] = Field(default=None, description="Optional phone number")

    # Marketplace
    topmate_api_token: Optional[SecretStr] = Field(
        default=None, description="Authorization token for the marketplace profile API"
    )
    topmate_api_base: str = Field(
        default="https://galactus.run", description="Base URL of the marketplace profile API"
    )
    topmate_site_base: str = Field(
        default="https://topmate.io", description="Base URL of the marketplace website"
    )

    # Browser
    headless: bool = Field(default=True, description="Run Chromium headless")
    navigation_timeout_ms: int = Field(
        default=30_000, ge=1_000, description="Timeout for page navigation and page actions"
    )
    search_results_timeout_ms: int = Field(
        default=20_000, ge=1_000, description="Timeout waiting for search result cards"
    )
    slot_listing_timeout_ms: int = Field(
        default=120_000, ge=1_000, description="Timeout for listing booking-page slots"
    )
    max_date_chips: int = Field(
        default=21, ge=1, description="Most date chips scanned on a booking page"
    )
    browser_timezone: str = Field(
        default="UTC", description="Timezone the browser renders booking-page times in"
    )

    # API
    api_timeout_seconds: float = Field(
        default=15.0, gt=0, description="Timeout for a single profile API call"
    )

    # Qualification
    role_synonyms_file: Optional[Path] = Field(
        default=None, description="Optional YAML file with extra role synonyms"
    )

    # Environment
    env: str = Field(
        default="production", description="Environment (production, development, testing)"
    )

    @model_validator(mode="before")
    @classmethod
    def default_env_for_pytest(cls, data: Any) -> Any:
        """Auto-detect testing environment when running under pytest."""
        import sys

        if not isinstance(data, dict):
            return data

        if ("env" not in data or not data.get("env")) and "pytest" in sys.modules:
            data["env"] = "testing"

        return data

    # Web server
    host: str = Field(default="0.0.0.0", description="Bind address for the HTTP server")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP server port")
    booking_rate_limit: str = Field(
        default="5/minute", description="Rate limit for the booking endpoint (slowapi syntax)"
    )
    cors_allowed_origins: str = Field(
        default="http://localhost:3000", description="Comma-separated list of allowed CORS origins"
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    json_logging: bool = Field(default=True, description="Write the file log sink as JSON lines")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("user_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        if v and "@" not in v:
            raise ValueError("Invalid email format")
        return v.strip()

    @field_validator("user_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("user_phone")
    @classmethod
    def blank_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("topmate_api_base", "topmate_site_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("browser_timezone")
    @classmethod
    def validate_browser_timezone(cls, v: str) -> str:
        """Validate timezone name against the IANA database."""
        resolve_timezone(v)
        return v.strip()

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value."""
        allowed = ["production", "development", "testing", "staging"]
        if v.lower() not in allowed:
            raise ValueError(f'ENV must be one of: {", ".join(allowed)}')
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f'LOG_LEVEL must be one of: {", ".join(allowed)}')
        return v_upper

    def caller_details(self) -> CallerDetails:
        """
        Build the caller identity used on booking forms.

        Returns:
            CallerDetails with name, email and optional phone

        Raises:
            CallerIdentityMissingError: If USER_NAME or USER_EMAIL is not set
        """
        missing = [
            name
            for name, value in (("user_name", self.user_name), ("user_email", self.user_email))
            if not value
        ]
        if missing:
            raise CallerIdentityMissingError(missing)
        return CallerDetails(name=self.user_name, email=self.user_email, phone=self.user_phone)

    def get_cors_origins(self) -> List[str]:
        """Get CORS allowed origins as a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    def is_development(self) -> bool:
        """Check if running in development or testing mode."""
        return self.env in ("development", "testing")


# Singleton instance
_settings: Optional[BookerSettings] = None


def get_settings() -> BookerSettings:
    """
    Get application settings singleton.

    Returns:
        BookerSettings instance

    Raises:
        ValidationError: If settings are invalid
    """
    global _settings
    if _settings is None:
        _settings = BookerSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
