"""
Configuration Management
Loads and validates environment variables
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
    BASE_URL: str = "http://localhost:8000"

    # Upstream metadata provider (placeholder key makes every upstream call fail)
    TMDB_API_KEY: str = "demo_key"
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL: str = "https://image.tmdb.org/t/p"
    TMDB_TIMEOUT_SECONDS: float = 10.0

    # Streaming providers (embed URLs are templated from these)
    VIDSRC_BASE_URL: str = "https://vidsrc.wtf"
    VIKING_EMBED_BASE_URL: str = "https://vembed.stream"
    FILMKU_BASE_URL: str = "https://filmku.stream"

    # Redis (per-user library storage)
    REDIS_URL: str = "redis://localhost:6379/0"
    STORAGE_PREFIX: str = "coolstream"
    DEFAULT_USER_ID: str = "default"
    STORAGE_MAX_RETRIES: int = 5  # Optimistic transaction attempts per mutation

    # Library limits
    CONTINUE_WATCHING_LIMIT: int = 20

    # API Rate Limits (requests per second)
    TMDB_RATE_LIMIT: int = 40

    # Development
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    DISABLE_RATE_LIMITING: bool = False  # Set to True to disable rate limiting for local dev


settings = Settings()
