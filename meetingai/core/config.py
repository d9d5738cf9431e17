"""
MeetingAI client settings.

Every field can be set from the environment or a local ``.env`` file;
``get_settings()`` returns the process-wide instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration.

    Env var names are the upper-cased field names (``BACKEND_URL``,
    ``MAX_FILE_SIZE_MB``, ...).

    Attributes:
        backend_url: Base URL of the transcription/summarization backend.
        request_timeout: Seconds to wait for the processing request.
            ``None`` waits indefinitely.
        database_url: Async SQLAlchemy URL of the on-device session store.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Backend ---
    backend_url: str = "http://localhost:8000"
    health_path: str = "/api/health"  # Connectivity check
    process_path: str = "/api/process-audio/"
    request_timeout: float | None = None
    health_timeout: float = 5.0  # Health checks never wait longer than this

    # --- Upload ---
    max_file_size_mb: int = 50

    # --- Workflow ---
    progress_interval_seconds: float = 1.5  # Cosmetic ticker cadence
    max_retries: int = 3
    ack_seconds: float = 2.0  # "Copied!" / "Saved!" display time

    # --- Local data ---
    # Relative paths resolve against the working directory
    database_url: str = "sqlite+aiosqlite:///data/meetingai.db"
    exports_dir: str = "data/exports"

    # --- Logging ---
    log_level: str = "INFO"

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Build the settings once and hand out the same instance afterwards.

    Tests that change the environment call ``get_settings.cache_clear()``.
    """
    return Settings()
