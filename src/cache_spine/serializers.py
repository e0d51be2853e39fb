"""
Value serialization strategies.

A :class:`Serializer` is selected once per cache and applied to every value
passing through it: ``encode(value) -> bytes`` on the way in,
``decode(bytes) -> value`` on the way out. Each enum member carries its own
codec, so adding a strategy means adding a member and a codec entry.

Strategies:
    ==============  ============================================================
    ``igbinary``    Compact binary pickle of builtins plus plain value types
    ``json``        UTF-8 JSON; objects decode to ``SimpleNamespace`` records
    ``json-array``  UTF-8 JSON; objects decode to ``dict``
    ``msgpack``     MessagePack
    ``php``         Native pickle (default) of builtin containers and scalars
    ==============  ============================================================

The two pickle strategies check types on the way in as well as on the way out,
so a value that could not be read back fails with SerializationError at
``encode`` time.

Guardrails:
    ❌ DON'T: Use ``pickle.loads`` on cache payloads
    ✅ DO: Go through ``Serializer.decode`` (restricted unpickling)

    ❌ DON'T: Treat a DeserializationError as a cache miss
    ✅ DO: Let it propagate, the payload does not match the serializer

Tags:
    serialization, json, msgpack, pickle, cache-spine
"""

from __future__ import annotations

import io
import json
import pickle
from enum import Enum
from types import SimpleNamespace
from typing import Any

import msgpack

from .errors import DeserializationError, InvalidConfigurationError, SerializationError


class Serializer(Enum):
    """Serializer tags (stable public values)."""

    IGBINARY = "igbinary"
    JSON = "json"
    JSON_ARRAY = "json-array"
    MSGPACK = "msgpack"
    NATIVE = "php"
    PHP = "php"  # alias of NATIVE

    @classmethod
    def from_tag(cls, tag: str | Serializer) -> Serializer:
        """Resolve a tag, raising InvalidConfigurationError for unknown values."""
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            if tag == "native":
                return cls.NATIVE
            try:
                return cls(tag)
            except ValueError:
                pass
        raise InvalidConfigurationError(
            f"Invalid serializer: {tag!r}. "
            f"Expected one of: {', '.join(sorted({m.value for m in cls}))}"
        ).with_context(serializer=str(tag))

    def encode(self, value: Any) -> bytes:
        """Serialize *value* to bytes."""
        return _CODECS[self].encode(value)

    def decode(self, data: bytes) -> Any:
        """Deserialize *data*; corrupted input raises DeserializationError."""
        return _CODECS[self].decode(data)


# ------------------------------------------------------------------ #
# Pickle (native / igbinary)
# ------------------------------------------------------------------ #


class _RestrictedUnpickler(pickle.Unpickler):
    """Unpickler that only resolves globals from an explicit allow-list."""

    def __init__(self, file: io.BytesIO, allowed: frozenset[tuple[str, str]]):
        super().__init__(file)
        self._allowed = allowed

    def find_class(self, module: str, name: str) -> Any:
        if (module, name) in self._allowed:
            return super().find_class(module, name)
        raise pickle.UnpicklingError(f"global '{module}.{name}' is forbidden")


# Value types the binary strategy may reconstruct
_VALUE_TYPES = frozenset(
    {
        ("builtins", "complex"),
        ("builtins", "set"),
        ("builtins", "frozenset"),
        ("builtins", "bytearray"),
        ("collections", "OrderedDict"),
        ("datetime", "date"),
        ("datetime", "datetime"),
        ("datetime", "time"),
        ("datetime", "timedelta"),
        ("datetime", "timezone"),
        ("decimal", "Decimal"),
        ("uuid", "UUID"),
    }
)


# Pickled with dedicated opcodes, never through a global
_OPCODE_TYPES = frozenset({type(None), bool, int, float, str, bytes, list, tuple, dict, set, frozenset})


class _RestrictedPickler(pickle.Pickler):
    """Pickler that refuses anything its matching unpickler would refuse."""

    def __init__(self, file: io.BytesIO, protocol: int, allowed: frozenset[tuple[str, str]]):
        super().__init__(file, protocol=protocol)
        self._allowed = allowed

    def reducer_override(self, obj: Any) -> Any:
        cls = obj if isinstance(obj, type) else type(obj)
        if cls is not obj and cls in _OPCODE_TYPES:
            return NotImplemented
        if (cls.__module__, cls.__qualname__) in self._allowed:
            return NotImplemented
        raise pickle.PicklingError(f"{cls.__module__}.{cls.__qualname__} is not a cacheable value type")


class _PickleCodec:
    def __init__(self, protocol: int, allowed: frozenset[tuple[str, str]], tag: str):
        self._protocol = protocol
        self._allowed = allowed
        self._tag = tag

    def encode(self, value: Any) -> bytes:
        buffer = io.BytesIO()
        try:
            _RestrictedPickler(buffer, self._protocol, self._allowed).dump(value)
            return buffer.getvalue()
        except (pickle.PicklingError, TypeError, AttributeError, RecursionError) as exc:
            raise SerializationError(
                f"Cannot serialize {type(value).__name__} value", cause=exc
            ).with_context(serializer=self._tag)

    def decode(self, data: bytes) -> Any:
        try:
            return _RestrictedUnpickler(io.BytesIO(data), self._allowed).load()
        except Exception as exc:
            raise DeserializationError(
                "Cannot deserialize cached payload", cause=exc
            ).with_context(serializer=self._tag, size=len(data))


# ------------------------------------------------------------------ #
# JSON (json / json-array)
# ------------------------------------------------------------------ #


def _json_default(value: Any) -> Any:
    if isinstance(value, SimpleNamespace):
        return vars(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _as_record(items: dict[str, Any]) -> SimpleNamespace:
    return SimpleNamespace(**items)


class _JsonCodec:
    def __init__(self, records: bool, tag: str):
        self._object_hook = _as_record if records else None
        self._tag = tag

    def encode(self, value: Any) -> bytes:
        try:
            text = json.dumps(
                value, default=_json_default, separators=(",", ":"), allow_nan=False
            )
        except (TypeError, ValueError, RecursionError):
            return b""
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        if not data:
            return None
        try:
            return json.loads(data.decode("utf-8"), object_hook=self._object_hook)
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise DeserializationError(
                "Cannot decode JSON payload", cause=exc
            ).with_context(serializer=self._tag, size=len(data))


# ------------------------------------------------------------------ #
# MessagePack
# ------------------------------------------------------------------ #


class _MsgpackCodec:
    _tag = "msgpack"

    def encode(self, value: Any) -> bytes:
        try:
            return msgpack.packb(value, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as exc:
            raise SerializationError(
                f"Cannot pack {type(value).__name__} value", cause=exc
            ).with_context(serializer=self._tag)

    def decode(self, data: bytes) -> Any:
        try:
            return msgpack.unpackb(data, raw=False, strict_map_key=False)
        except Exception as exc:
            raise DeserializationError(
                "Cannot unpack MessagePack payload", cause=exc
            ).with_context(serializer=self._tag, size=len(data))


_CODECS: dict[Serializer, Any] = {
    Serializer.IGBINARY: _PickleCodec(pickle.HIGHEST_PROTOCOL, _VALUE_TYPES, "igbinary"),
    Serializer.JSON: _JsonCodec(records=True, tag="json"),
    Serializer.JSON_ARRAY: _JsonCodec(records=False, tag="json-array"),
    Serializer.MSGPACK: _MsgpackCodec(),
    Serializer.NATIVE: _PickleCodec(pickle.DEFAULT_PROTOCOL, frozenset(), "php"),
}


__all__ = ["Serializer"]
