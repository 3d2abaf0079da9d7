"""Client configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings."""

    # Gateway
    base_url: str = "http://localhost:8080"
    request_timeout: float = 10.0

    # Polling
    poll_interval_ms: int = 2000

    # Read backoff (reads only, actions are never retried)
    read_retries: int = 2
    backoff_base: float = 0.25
    backoff_max: float = 2.0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "POKER_"


settings = Settings()
