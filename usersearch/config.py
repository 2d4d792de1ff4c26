"""Configuration management for User Search."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="USERSEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Search Provider
    # ==========================================================================
    api_base_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the user search API",
    )
    search_path: str = Field(
        default="/search/users",
        description="Path of the user search endpoint",
    )
    request_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Request timeout in seconds",
    )

    # ==========================================================================
    # Query Pipeline
    # ==========================================================================
    debounce_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Quiet period after the last edit before a term is searched",
    )
    min_query_length: int = Field(
        default=3,
        ge=0,
        description="Terms must be strictly longer than this to be searched",
    )
    discard_stale_responses: bool = Field(
        default=True,
        description="Ignore responses for searches superseded by a newer one",
    )
    surface_decode_errors: bool = Field(
        default=False,
        description="Show an error when a response cannot be decoded",
    )

    # ==========================================================================
    # Logging & Paths
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Logging level")
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".usersearch",
        description="Directory for logs",
    )

    @property
    def logs_dir(self) -> Path:
        """Logs directory."""
        return self.data_dir / "logs"

    @property
    def search_url(self) -> str:
        """Absolute URL of the search endpoint."""
        return self.api_base_url.rstrip("/") + "/" + self.search_path.lstrip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (useful after env changes)."""
    get_settings.cache_clear()
    return get_settings()
