"""
File: config.py
Purpose: Centralized configuration using environment variables (12-factor).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Load service configuration from environment variables."""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    ENV: str = "prod"
    SERVICE_NAME: str = "val-search"
    LOG_LEVEL: str = "INFO"

    # HTTP listener
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # SQLite FTS5 index file
    DB_PATH: str = "./valtown.db"

    # Remote paginated API
    REMOTE_FIRST_PAGE_URL: str = "https://api.val.town/v1/search/vals?query=%20&offset=0&limit=100"
    HTTP_TIMEOUT_SECS: float = 30.0

    # Sync policy
    SYNC_STALE_MINUTES: int = 60
    SYNC_PAGE_MAX_ATTEMPTS: int = 0  # 0 => retry the same page forever
    SYNC_RETRY_WAIT_MIN_SECS: float = 0.5
    SYNC_RETRY_WAIT_MAX_SECS: float = 30.0
    SYNC_PURGE_MISSING: bool = False  # drop rows not seen in a complete pass
    SYNC_ON_STARTUP: bool = False

settings = Settings()
