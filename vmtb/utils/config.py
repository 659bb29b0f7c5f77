"""
Configuration management for the VMTB core.
Handles backing store credentials, table names, and logging settings.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class Settings(PydanticBaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    debug: bool = Field(False)

    # Supabase backing store
    supabase_url: Optional[str] = Field(None)
    supabase_key: Optional[str] = Field(None)
    cases_table: str = Field("cases")
    meetings_table: str = Field("meetings")
    documents_bucket: str = Field("case-documents")
    signed_url_ttl_seconds: int = Field(3600)

    # Collaborator calls
    registry_timeout_seconds: float = Field(10.0)
    registry_latency_threshold_ms: int = Field(1500)
    store_latency_threshold_ms: int = Field(2000)

    # Meetings
    meeting_link_base: str = Field("https://meet.google.com/new")
    meeting_feed_ttl_seconds: int = Field(1800)
    max_meeting_feeds: int = Field(1000)

    # Logging
    log_level: str = Field("INFO")
    enable_structured_logging: bool = Field(True)
    audit_log_file: Optional[str] = Field(None)


# Global settings instance
settings = Settings()


class MeetingPolicy:
    """Join-window policy constants (fixed, not environment-configurable)."""

    # Join opens this many minutes before the scheduled start
    JOIN_LEAD_MINUTES = 5
    # Join closes, and a dated meeting counts as ended, this many minutes after start
    JOIN_GRACE_MINUTES = 60

    # Sunday=0 .. Saturday=6
    WEEKDAYS = range(0, 7)


class WorkflowPolicy:
    """Case intake validation bounds."""

    MIN_PATIENT_AGE = 0
    MAX_PATIENT_AGE = 150
