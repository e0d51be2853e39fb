"""
Environment-driven settings for building a cache.

:class:`CacheSettings` reads ``CACHE_SPINE_*`` environment variables (and a
``.env`` file) so an application can choose its backend, prefix and
serializer without code changes. It only describes *how* to build a cache;
:func:`cache_spine.config.factory.create_cache_from_settings` does the
building.

Examples:
    >>> import os
    >>> os.environ["CACHE_SPINE_BACKEND"] = "redis"
    >>> os.environ["CACHE_SPINE_REDIS_HOST"] = "cache.internal"
    >>> settings = get_settings(_force_reload=True)
    >>> settings.driver_options()["host"]
    'cache.internal'

Tags:
    settings, configuration, pydantic, environment, cache-spine
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..serializers import Serializer
from .components import CacheBackend


class CacheSettings(BaseSettings):
    """cache-spine configuration.

    All fields can be set via ``CACHE_SPINE_*`` environment variables (e.g.
    ``CACHE_SPINE_SERIALIZER=msgpack``).
    """

    model_config = SettingsConfigDict(
        env_prefix="CACHE_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Facade ───────────────────────────────────────────────────
    backend: CacheBackend = Field(default=CacheBackend.MEMORY)
    prefix: str | None = Field(default=None, description="Prefix prepended to every key")
    serializer: Serializer = Field(default=Serializer.NATIVE)

    # ── Redis ────────────────────────────────────────────────────
    redis_host: str = Field(default="127.0.0.1")
    redis_port: int = Field(default=6379)
    redis_timeout: float = Field(default=0.0, description="Connect timeout in seconds (0 → none)")
    redis_database: int = Field(default=0)
    redis_password: str | None = Field(default=None)

    # ── Memcached ────────────────────────────────────────────────
    memcached_host: str = Field(default="127.0.0.1")
    memcached_port: int = Field(default=11211)
    memcached_timeout: float = Field(default=0.0, description="Connect timeout in seconds (0 → none)")

    # ── Local backends ───────────────────────────────────────────
    file_directory: Path = Field(default_factory=lambda: Path.home() / ".cache_spine")
    memory_max_size: int = Field(default=10_000, ge=1)

    # ── Logging ──────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")

    @field_validator("serializer", mode="before")
    @classmethod
    def _resolve_serializer(cls, value: Any) -> Serializer:
        return Serializer.from_tag(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def driver_options(self) -> dict[str, Any]:
        """Return the option mapping for the selected backend's driver."""
        match self.backend:
            case CacheBackend.MEMORY:
                return {"max_size": self.memory_max_size}
            case CacheBackend.FILE:
                return {"directory": str(self.file_directory)}
            case CacheBackend.REDIS:
                return {
                    "host": self.redis_host,
                    "port": self.redis_port,
                    "timeout": self.redis_timeout,
                    "database": self.redis_database,
                    "password": self.redis_password,
                }
            case CacheBackend.MEMCACHED:
                return {
                    "host": self.memcached_host,
                    "port": self.memcached_port,
                    "timeout": self.memcached_timeout,
                }


_settings: CacheSettings | None = None


def get_settings(*, _force_reload: bool = False) -> CacheSettings:
    """Load and cache a :class:`CacheSettings` instance."""
    global _settings
    if _settings is None or _force_reload:
        _settings = CacheSettings()
    return _settings


__all__ = ["CacheSettings", "get_settings"]
