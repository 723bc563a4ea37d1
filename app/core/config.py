"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.

Notion credentials default to empty strings so the app can boot without
them; the Notion client raises ``ConfigurationError`` on first use instead.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Notion
    NOTION_API_KEY: str = ""
    NOTION_DATABASE_ID: str = ""
    NOTION_API_BASE_URL: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"
    NOTION_PAGE_SIZE: int = Field(default=100, ge=1, le=100)
    NOTION_TIMEOUT_SECONDS: float | None = None

    # Metrics
    DASHBOARD_TIMEZONE: str = "UTC"
    METRICS_WINDOW_DAYS: int = Field(default=30, ge=1)

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("DASHBOARD_TIMEZONE")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        if value.upper() == "UTC":
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    @property
    def cors_origins(self) -> list[str]:
        """``ALLOWED_ORIGINS`` as a list; ``*`` allows any origin."""
        raw = self.ALLOWED_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


settings = Settings()
