"""Configuration management for taskpilot."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TASKPILOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote task API
    api_base_url: str | None = Field(
        default=None,
        description="Base URL of the task API. Unset means the remote is always unreachable.",
    )
    api_prefix: str = Field(default="/api", description="Path prefix for all task API routes")
    request_timeout_seconds: float = Field(default=10.0, description="Timeout for a single API request")

    # Local cache
    cache_db_path: str = Field(
        default=".local/taskpilot/cache.sqlite3",
        description="SQLite file backing the durable key/value cache",
    )
    cache_key: str = Field(default="@tasks", description="Key holding the serialized task collection")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    @property
    def remote_configured(self) -> bool:
        """True when a non-blank API base URL is set."""
        return bool(self.api_base_url and self.api_base_url.strip())


# Application Constants
class Constants:
    """Application-wide constants."""

    # Task field limits
    TITLE_MAX_LENGTH: int = 200
    DESCRIPTION_MAX_LENGTH: int = 1000
    MAX_TAGS: int = 10
    DEFAULT_CATEGORY: str = "general"

    # Filter selector meaning "no constraint"
    FILTER_ALL: str = "all"

    # Category catalogue offered by the task form
    CATEGORIES: tuple[str, ...] = (
        "general",
        "work",
        "personal",
        "shopping",
        "health",
        "finance",
        "education",
        "travel",
    )


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()

