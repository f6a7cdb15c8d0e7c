"""
Application configuration using Pydantic settings.

Usage:
    from qa_routing.config import get_settings
    settings = get_settings()

For constants, import from qa_routing.constants:
    from qa_routing.constants import QuestionStatus, ACTIVE_STATUSES
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Nothing is required: without Redis the moderator locks stay in-process,
    and without GEMINI_API_KEY skill suggestion uses keyword matching.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Question Router"
    api_prefix: str = "/api"
    debug: bool = Field(default=False)

    # Database
    database_url: str = Field(default="sqlite:///question_router.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # CORS
    cors_allowed_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ALLOWED_ORIGINS")

    # Redis
    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")
    redis_password: Optional[str] = Field(default=None, validation_alias="REDIS_PASSWORD")

    # Routing
    routing_lock_backend: Literal["auto", "redis", "memory"] = Field(
        default="auto", validation_alias="ROUTING_LOCK_BACKEND"
    )
    # Upper bound on how long a moderator lock may be held (Redis lock TTL)
    routing_lock_timeout: float = Field(default=30.0, validation_alias="ROUTING_LOCK_TIMEOUT")
    # How long a decision waits for a busy moderator before giving up
    routing_lock_wait: float = Field(default=10.0, validation_alias="ROUTING_LOCK_WAIT")
    stale_hours_default: float = Field(default=24.0, validation_alias="STALE_HOURS_DEFAULT")

    # Skill classifier
    gemini_api_key: Optional[str] = Field(default=None, validation_alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-pro", validation_alias="GEMINI_MODEL")
    classifier_max_skills: int = Field(default=3, validation_alias="CLASSIFIER_MAX_SKILLS")
    classifier_timeout: float = Field(default=15.0, validation_alias="CLASSIFIER_TIMEOUT")

    # Scheduler
    enable_scheduler: bool = Field(default=False, validation_alias="ENABLE_SCHEDULER")
    scheduler_process_pending_cron: str = Field(
        default="*/15 * * * *", validation_alias="SCHEDULER_PROCESS_PENDING_CRON"
    )
    scheduler_stale_scan_cron: str = Field(default="0 * * * *", validation_alias="SCHEDULER_STALE_SCAN_CRON")

    @field_validator("routing_lock_timeout", "routing_lock_wait")
    @classmethod
    def validate_lock_durations(cls, v: float) -> float:
        """Lock durations must be positive."""
        if v <= 0:
            raise ValueError("Lock durations must be greater than zero")
        return v

    @field_validator("classifier_max_skills")
    @classmethod
    def validate_max_skills(cls, v: int) -> int:
        """Suggested skills are capped at 10 per question."""
        if not 1 <= v <= 10:
            raise ValueError("CLASSIFIER_MAX_SKILLS must be between 1 and 10")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
