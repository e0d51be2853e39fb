"""Configuration: backend enum, per-cache config, settings and factories.

Architecture::

    components.py     CacheBackend enum
    options.py        CacheConfig (immutable) + merge_options()
    settings.py       CacheSettings (pydantic-settings) + get_settings()
    factory.py        create_driver / create_cache / create_cache_from_settings
"""

from .components import CacheBackend
from .factory import create_cache, create_cache_from_settings, create_driver, driver_class
from .options import CacheConfig, merge_options
from .settings import CacheSettings, get_settings

__all__ = [
    "CacheBackend",
    "CacheConfig",
    "merge_options",
    "CacheSettings",
    "get_settings",
    "driver_class",
    "create_driver",
    "create_cache",
    "create_cache_from_settings",
]
