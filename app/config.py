# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Integrations other than Supabase are optional: routes that need a missing
# integration fail with an actionable "not configured" error instead of
# preventing startup.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # Separate project used only for chat analytics
    SUPABASE_ANALYTICS_URL: str | None = Field(
        default=None,
        description="Supabase URL of the analytics project (analytics disabled if unset)"
    )

    SUPABASE_ANALYTICS_KEY: str | None = Field(
        default=None,
        description="Service key of the analytics project"
    )

    FAMILY_USER_ID: str = Field(
        default="00000000-0000-0000-0000-000000000000",
        description="Owner id that scopes children, doodles and media to this family"
    )

    MEDIA_BUCKET: str = Field(
        default="family-media",
        description="Supabase Storage bucket for family media"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    CALENDAR_SYNC_INTERVAL_MINUTES: int = Field(
        default=30,
        ge=5,
        le=1440,
        description="How often the worker re-syncs iCal feeds"
    )

    # -------------------------------------------------------------------------
    # OpenAI / LLM Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str | None = Field(
        default=None,
        description="OpenAI API key for the chat assistant and daily content"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o",
        description="Chat model (must support tool calling and JSON mode)"
    )

    CHAT_MAX_TOKENS: int = Field(
        default=1500,
        ge=64,
        le=8192,
        description="Max completion tokens for the full chat assistant"
    )

    CHAT_MAX_TOOL_ROUNDS: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Max model round-trips per chat request when tools are used"
    )

    # -------------------------------------------------------------------------
    # Task API (Todoist)
    # -------------------------------------------------------------------------

    TODOIST_API_TOKEN: str | None = Field(
        default=None,
        description="Todoist REST API token"
    )

    HOUSE_TASKS_PROJECT: str = Field(
        default="House Tasks",
        description="Todoist project shown on the shared home screen"
    )

    PRIVATE_TASK_PROJECTS: str = Field(
        default="Personal",
        description="Projects hidden from everyone except PRIVATE_TASK_OWNER (comma-separated)"
    )

    PRIVATE_TASK_OWNER: str = Field(
        default="max",
        description="Family member allowed to see the private projects"
    )

    REMINDERS_OWNER: str = Field(
        default="alex",
        description="Family member whose phone reminders are cached"
    )

    # -------------------------------------------------------------------------
    # Knowledge Base (Notion)
    # -------------------------------------------------------------------------

    NOTION_API_KEY: str | None = Field(
        default=None,
        description="Notion integration token"
    )

    NOTION_PEOPLE_DB_ID: str | None = Field(default=None, description="People & Providers database")
    NOTION_HEALTH_DB_ID: str | None = Field(default=None, description="Family Health database")
    NOTION_ASSETS_DB_ID: str | None = Field(default=None, description="Assets & Properties database")
    NOTION_ACCOUNTS_DB_ID: str | None = Field(default=None, description="Accounts & Policies database")

    # -------------------------------------------------------------------------
    # Calendar / Sync
    # -------------------------------------------------------------------------

    # Format: NAME1|URL1,NAME2|URL2
    ICAL_FEEDS: str = Field(
        default="",
        description="iCal feeds to sync (NAME|URL pairs, comma-separated)"
    )

    CRON_SECRET: str | None = Field(
        default=None,
        description="Bearer secret expected by the cron sync endpoint"
    )

    SHORTCUTS_SECRET_KEY: str | None = Field(
        default=None,
        description="X-Shortcut-Key expected from phone automations"
    )

    TIMEZONE: str = Field(
        default="America/New_York",
        description="Family timezone used for 'today' and all-day events"
    )

    # -------------------------------------------------------------------------
    # Weather
    # -------------------------------------------------------------------------

    WEATHER_LATITUDE: float = Field(default=40.9385, ge=-90, le=90)
    WEATHER_LONGITUDE: float = Field(default=-73.8326, ge=-180, le=180)

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing PIN session tokens"
    )

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 12,
        ge=1,
        description="Lifetime of a PIN session token"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Media Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum media upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def ical_feeds_list(self) -> list[tuple[str, str]]:
        """
        Parse ICAL_FEEDS into (name, url) pairs.

        Entries without both a name and a URL are dropped.
        Example: "Home|webcal://a, Work|https://b" -> [("Home", "webcal://a"), ("Work", "https://b")]
        """
        feeds = []
        for entry in self.ICAL_FEEDS.split(","):
            name, _, url = entry.partition("|")
            name, url = name.strip(), url.strip()
            if name and url:
                feeds.append((name, url))
        return feeds

    @property
    def private_task_projects_list(self) -> list[str]:
        """Private Todoist project names, lowercased."""
        return [p.strip().lower() for p in self.PRIVATE_TASK_PROJECTS.split(",") if p.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def analytics_enabled(self) -> bool:
        """Analytics need both the URL and key of the analytics project."""
        return bool(self.SUPABASE_ANALYTICS_URL and self.SUPABASE_ANALYTICS_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
