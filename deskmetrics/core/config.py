"""Application configuration with environment variables."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Relational store (cases, surveys, follow-ups, sites, reporters, assignees)
    DATABASE_URL: str = "sqlite:///./deskmetrics.db"

    # Conversation store (conversations, messages), keyed by phone
    CONVERSATIONS_DATABASE_URL: str = "sqlite:///./deskmetrics_conversations.db"

    # Max store queries in flight for a single aggregation call
    QUERY_CONCURRENCY: int = 8

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def log_level_value(self) -> int:
        """Resolve LOG_LEVEL to a logging level number (INFO on unknown names)."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


settings = Settings()
