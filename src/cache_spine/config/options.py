"""
Immutable per-cache configuration.

:class:`CacheConfig` is built once when a :class:`~cache_spine.cache.Cache`
is constructed and never changes afterwards: driver options (merged over the
driver's defaults), the key prefix, and the serializer.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..serializers import Serializer


def merge_options(defaults: Mapping[str, Any], overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively merge *overrides* over *defaults*.

    Nested mappings are merged key by key; any other value in *overrides*
    replaces the default. Neither input is modified.

    Example:
        >>> merge_options({"host": "127.0.0.1", "pool": {"size": 5, "block": True}},
        ...               {"pool": {"size": 10}})
        {'host': '127.0.0.1', 'pool': {'size': 10, 'block': True}}
    """
    merged = copy.deepcopy(dict(defaults))
    for key, value in (overrides or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_options(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class CacheConfig:
    """Configuration held by a cache instance.

    Attributes:
        options: Driver options, read-only
        prefix: Prefix prepended to every logical key (``None`` → no prefix)
        serializer: Serializer applied to every value

    Raises:
        InvalidConfigurationError: If *serializer* is not a recognized tag.
    """

    options: Mapping[str, Any] = field(default_factory=dict)
    prefix: str | None = None
    serializer: Serializer = Serializer.NATIVE

    def __post_init__(self) -> None:
        object.__setattr__(self, "serializer", Serializer.from_tag(self.serializer))
        object.__setattr__(self, "options", MappingProxyType(copy.deepcopy(dict(self.options))))


__all__ = ["CacheConfig", "merge_options"]
