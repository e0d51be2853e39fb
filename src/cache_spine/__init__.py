"""
cache-spine -- one cache API over interchangeable storage backends.

Quick start::

    from cache_spine import Cache, RedisDriver

    with Cache(RedisDriver({"host": "cache.internal"}), prefix="orders:", serializer="msgpack") as cache:
        cache.set("order:42", {"status": "paid"}, ttl=300)
        cache.get_multi(["order:42", "order:43"])   # {'order:42': {...}, 'order:43': None}
        cache.increment("orders:paid")

Architecture::

    errors.py          CacheError hierarchy (InvalidConfiguration, DeserializationError, ...)
    serializers.py     Serializer enum: igbinary / json / json-array / msgpack / php
    keys.py            KeyRenderer (prefix + key)
    cache.py           Cache facade (single-key, multi-key and counter operations)
    backends/          CacheDriver protocol + memory / file / redis / memcached drivers
    config/            CacheConfig, CacheSettings, create_cache() factories
    logging.py         structlog configuration
"""

from .errors import (
    BackendOperationError,
    CacheClosedError,
    CacheConnectionError,
    CacheError,
    CacheValidationError,
    DeserializationError,
    ErrorCategory,
    ErrorContext,
    InvalidConfiguration,
    InvalidConfigurationError,
    SerializationError,
    is_retryable,
)
from .serializers import Serializer
from .keys import KeyRenderer
from .config import (
    CacheBackend,
    CacheConfig,
    CacheSettings,
    create_cache,
    create_cache_from_settings,
    create_driver,
    get_settings,
    merge_options,
)
from .backends import (
    BaseDriver,
    CacheDriver,
    FileDriver,
    InMemoryDriver,
    MemcachedDriver,
    RedisDriver,
)
from .cache import DEFAULT_TTL, Cache

__version__ = "0.1.0"

__all__ = [
    # Facade
    "Cache",
    "DEFAULT_TTL",
    "KeyRenderer",
    "Serializer",
    # Drivers
    "CacheDriver",
    "BaseDriver",
    "InMemoryDriver",
    "FileDriver",
    "RedisDriver",
    "MemcachedDriver",
    # Configuration
    "CacheBackend",
    "CacheConfig",
    "CacheSettings",
    "merge_options",
    "get_settings",
    "create_driver",
    "create_cache",
    "create_cache_from_settings",
    # Errors
    "ErrorCategory",
    "ErrorContext",
    "CacheError",
    "InvalidConfigurationError",
    "InvalidConfiguration",
    "CacheValidationError",
    "CacheConnectionError",
    "BackendOperationError",
    "SerializationError",
    "DeserializationError",
    "CacheClosedError",
    "is_retryable",
]
