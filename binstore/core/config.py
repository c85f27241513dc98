"""Configuration for binstore (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support and the BINSTORE_ prefix. Nested values (partitions,
partition roots) are given as JSON, e.g.
BINSTORE_PARTITIONS='{"repository": {"prefix": "file:", "levels": 2}}'.
"""

from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from binstore.core.constants import (
    DEFAULT_HTTP_MAX_CONNECTIONS_PER_ROUTE,
    DEFAULT_HTTP_MAX_CONNECTIONS_TOTAL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
)
from binstore.domain.enums import DigestEncoding


class PartitionSettings(BaseModel):
    """Raw partition entry. prefix is validated by the binary service, not here."""

    prefix: str | None = None
    levels: int = 0
    length: int = 2


class Settings(BaseSettings):
    """binstore settings loaded from environment and .env.

    Partition prefixes are checked against bound resolvers when the
    binary service is constructed; this model only validates shape and
    pool sizing.
    """

    # App
    app_name: str = "binstore"
    debug: bool = False
    log_level: str = "INFO"

    # Partitions: name -> {prefix, levels, length}
    partitions: dict[str, PartitionSettings] = Field(default_factory=dict)

    # File backend: partition -> root directory
    file_partitions: dict[str, str] = Field(default_factory=dict)

    # Chunked (multipart) file backend
    chunked_partitions: dict[str, str] = Field(default_factory=dict)
    chunked_staging_root: str | None = None

    # HTTP backend
    http_enabled: bool = True
    http_read_only: bool = False
    http_max_connections_per_route: int = DEFAULT_HTTP_MAX_CONNECTIONS_PER_ROUTE
    http_max_connections_total: int = DEFAULT_HTTP_MAX_CONNECTIONS_TOTAL
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS

    # Digest output for BinaryService.digest (per-call override allowed)
    digest_encoding: DigestEncoding = DigestEncoding.BASE64

    model_config = SettingsConfigDict(
        env_prefix="BINSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate HTTP pool sizing and chunked backend staging.

        - Both pool limits must be positive and total >= per-route.
        - chunked_partitions requires chunked_staging_root.
        """
        if self.http_max_connections_per_route < 1:
            raise ValueError(
                "http_max_connections_per_route must be positive, "
                f"got: {self.http_max_connections_per_route}"
            )
        if self.http_max_connections_total < self.http_max_connections_per_route:
            raise ValueError(
                "http_max_connections_total must be >= http_max_connections_per_route "
                f"({self.http_max_connections_total} < {self.http_max_connections_per_route})"
            )
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if self.chunked_partitions and not self.chunked_staging_root:
            raise ValueError(
                "chunked_staging_root is required when chunked_partitions is set. "
                "Set BINSTORE_CHUNKED_STAGING_ROOT environment variable or update .env file."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
