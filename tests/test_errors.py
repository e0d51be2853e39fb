"""Tests for ``cache_spine.errors``."""

import pytest

from cache_spine.errors import (
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


class TestErrorContext:
    def test_empty(self):
        ctx = ErrorContext()
        assert ctx.to_dict() == {}

    def test_to_dict_skips_unset_fields(self):
        ctx = ErrorContext(backend="redis", key="app:k", metadata={"attempt": 1})
        assert ctx.to_dict() == {"backend": "redis", "key": "app:k", "attempt": 1}


class TestCacheError:
    def test_defaults(self):
        error = CacheError("boom")
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert str(error) == "boom"

    def test_cause_is_chained(self):
        cause = ConnectionResetError("reset")
        error = BackendOperationError("get failed", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_with_context_sets_known_fields_and_metadata(self):
        error = BackendOperationError("x").with_context(backend="memcached", operation="set", size=12)
        assert error.context.backend == "memcached"
        assert error.context.operation == "set"
        assert error.context.metadata == {"size": 12}

    def test_to_dict(self):
        error = DeserializationError("bad payload", cause=ValueError("x")).with_context(serializer="json")
        assert error.to_dict() == {
            "error_type": "DeserializationError",
            "message": "bad payload",
            "category": "PARSE",
            "retryable": False,
            "context": {"serializer": "json"},
            "cause": "x",
        }

    def test_repr(self):
        assert repr(CacheValidationError("ttl")) == "CacheValidationError('ttl', category=VALIDATION)"


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls, category, retryable",
        [
            (InvalidConfigurationError, ErrorCategory.CONFIG, False),
            (CacheValidationError, ErrorCategory.VALIDATION, False),
            (CacheConnectionError, ErrorCategory.NETWORK, True),
            (BackendOperationError, ErrorCategory.STORAGE, True),
            (SerializationError, ErrorCategory.PARSE, False),
            (DeserializationError, ErrorCategory.PARSE, False),
            (CacheClosedError, ErrorCategory.INTERNAL, False),
        ],
    )
    def test_defaults(self, cls, category, retryable):
        error = cls("x")
        assert isinstance(error, CacheError)
        assert error.category == category
        assert error.retryable is retryable

    def test_invalid_configuration_alias(self):
        assert InvalidConfiguration is InvalidConfigurationError

    def test_deserialization_is_serialization_error(self):
        assert issubclass(DeserializationError, SerializationError)


def test_is_retryable():
    assert is_retryable(CacheConnectionError("x"))
    assert not is_retryable(DeserializationError("x"))
    assert not is_retryable(ValueError("x"))
    assert not is_retryable(BackendOperationError("x", retryable=False))
