"""
Structured error types for cache-spine.

Every failure raised by the cache layer is a :class:`CacheError` carrying a
category, a retryable flag, structured context (backend, key, operation) and
the chained underlying exception.

Manifesto:
    A cache sits between callers and several very different storage engines.
    When something breaks, callers need to know *which* of a handful of
    things went wrong, not which driver library happened to raise:

    - **Construction errors are fatal:** bad configuration, unreachable backend
    - **Operation errors are local:** one key failed, the facade keeps going
    - **Decode errors are loud:** corrupted data is never turned into a miss

Architecture:
    ::

        CacheError  (category, retryable, context, cause)
        ├── InvalidConfigurationError   CONFIG       (= InvalidConfiguration)
        ├── CacheValidationError        VALIDATION
        ├── CacheConnectionError        NETWORK      retryable
        ├── BackendOperationError       STORAGE      retryable
        ├── SerializationError          PARSE
        │   └── DeserializationError    PARSE
        └── CacheClosedError            INTERNAL

Examples:
    >>> error = BackendOperationError("SET failed").with_context(backend="redis", key="user:1")
    >>> error.retryable
    True
    >>> error.context.key
    'user:1'

Guardrails:
    ❌ DON'T: Catch DeserializationError and return None
    ✅ DO: Let it propagate, the stored bytes do not match the serializer

    ❌ DON'T: Retry inside the cache layer
    ✅ DO: Use ``is_retryable()`` in the caller's retry policy

Tags:
    error-handling, exception-hierarchy, cache-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    NETWORK = "NETWORK"  # Connect failures, timeouts
    STORAGE = "STORAGE"  # Backend rejected or failed an operation
    PARSE = "PARSE"  # Encode/decode failures
    VALIDATION = "VALIDATION"  # Bad call arguments
    CONFIG = "CONFIG"  # Bad construction parameters
    INTERNAL = "INTERNAL"  # Misuse, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a cache error.

    Attributes:
        backend: Driver name (``"redis"``, ``"memory"``, ...)
        key: Physical key the operation targeted
        operation: Driver operation (``"get"``, ``"set"``, ``"flush"``, ...)
        serializer: Serializer tag in use
        metadata: Additional key-value pairs
    """

    backend: str | None = None
    key: str | None = None
    operation: str | None = None
    serializer: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for name in ["backend", "key", "operation", "serializer"]:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CacheError(Exception):
    """
    Base exception for all cache-spine errors.

    Subclasses set ``default_category`` and ``default_retryable``; both can be
    overridden per instance.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CacheError:
        """
        Add context to this error (fluent API).

        Usage:
            raise BackendOperationError("DEL failed", cause=exc).with_context(
                backend="redis", key=physical_key, operation="delete"
            )
        """
        for name, value in kwargs.items():
            if hasattr(self.context, name) and name != "metadata":
                setattr(self.context, name, value)
            else:
                self.context.metadata[name] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class InvalidConfigurationError(CacheError):
    """Construction parameters are invalid (unknown serializer, unknown backend)."""

    default_category = ErrorCategory.CONFIG


# Name used by the public contract
InvalidConfiguration = InvalidConfigurationError


class CacheValidationError(CacheError):
    """A call argument is out of range (e.g. negative TTL)."""

    default_category = ErrorCategory.VALIDATION


class CacheConnectionError(CacheError):
    """The backend could not be reached while constructing a cache."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class BackendOperationError(CacheError):
    """A single get/set/delete/flush call failed at the backend."""

    default_category = ErrorCategory.STORAGE
    default_retryable = True


class SerializationError(CacheError):
    """A value could not be encoded by the configured serializer."""

    default_category = ErrorCategory.PARSE


class DeserializationError(SerializationError):
    """Stored bytes could not be decoded by the configured serializer."""


class CacheClosedError(CacheError):
    """The cache was used after ``close()``."""


def is_retryable(error: BaseException) -> bool:
    """Return True when *error* is a cache error flagged as retryable."""
    return isinstance(error, CacheError) and error.retryable


__all__ = [
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
