"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchConfig(BaseModel):
    """Configuration for search ranking and query suggestions.

    The suggestion threshold formula itself is fixed in
    ``campushub.search.suggester``; only the absolute distance cap is tunable.
    """

    result_limit: int = Field(default=20, ge=1, le=100)
    """Maximum number of results returned for a single query."""

    vocabulary_size: int = Field(default=50, ge=1, le=1000)
    """Number of historical search terms sampled as suggestion candidates."""

    trending_limit: int = Field(default=5, ge=1, le=50)
    """Number of terms shown as trending searches."""

    max_edit_distance: int = Field(default=2, ge=0, le=2)
    """Absolute edit-distance cap for an accepted suggestion; can only be tightened."""

    text_search_config: str = Field(default="english", pattern=r"^[a-z_]+$")
    """PostgreSQL text search configuration used for tsquery and headlines."""

    snippet_chars: int = Field(default=120, ge=1)
    """Body prefix length used as the snippet for substring-only matches."""

    headline_min_words: int = Field(default=15, ge=1)
    headline_max_words: int = Field(default=35, ge=1)

    max_query_length: int = Field(default=256, ge=1)
    """Longest raw query accepted by the HTTP surface."""

    unavailable_message: str = "Search is temporarily unavailable, please try again later."
    """Soft error shown to users when the document store cannot be reached."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/campushub"
    DATABASE_SCHEMA: str = Field(default="public", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 0
    DATABASE_CONNECT_TIMEOUT: float = 2.0

    # Runtime
    ENVIRONMENT: Literal["development", "test", "staging", "production"] = "development"
    DEBUG: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: list[str] = []

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Search Configuration
    search: SearchConfig = SearchConfig()

    @property
    def is_postgres(self) -> bool:
        """Whether the configured database is PostgreSQL."""
        return self.DATABASE_URL.startswith("postgresql")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
