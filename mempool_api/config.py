"""Library configuration"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .transport.retry import BASE_BACKOFF_MS, DEFAULT_MAX_RETRIES


class Settings(BaseSettings):
    """Settings loaded from ``MEMPOOL_*`` environment variables or ``.env``"""

    model_config = SettingsConfigDict(
        env_prefix="MEMPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Esplora-compatible REST root, no trailing slash needed
    base_url: str = "https://mempool.space/api"

    # Retry policy of the concrete transports
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    base_backoff_ms: int = Field(default=BASE_BACKOFF_MS, ge=0)

    # Handed to the HTTP library; this library imposes no timeout of its own
    request_timeout: float = 30.0
    http_user_agent: str = "mempool-api/0.1.0"

    # Logging (CLI only)
    log_level: str = "INFO"

    # Gap-limit wallet scan
    gap_limit: int = Field(default=20, ge=0)
    scan_batch_size: int = Field(default=5, ge=1)


# Global settings instance
settings = Settings()
