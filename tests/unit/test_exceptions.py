"""Unit tests for the infrastructure and domain exception hierarchy."""

import pytest
from redis.exceptions import TimeoutError as RedisTimeoutError

from rankboard.core.exceptions import (
    ConfigurationError,
    ErrorSeverity,
    RankboardInfrastructureException,
    StoreConnectionError,
)
from rankboard.modules.shared.exceptions import ValidationError

pytestmark = pytest.mark.unit


def test_store_connection_error_is_retryable():
    error = StoreConnectionError("connect", RedisTimeoutError("timed out"))

    assert isinstance(error, RankboardInfrastructureException)
    assert error.is_retryable is True
    assert error.to_dict() == {
        "error_type": "StoreConnectionError",
        "error_code": "STORE_CONNECTION_ERROR",
        "message": "Store error during connect: timed out",
        "details": {
            "operation": "connect",
            "error": "timed out",
            "error_type": "TimeoutError",
        },
        "severity": "error",
        "is_retryable": True,
    }


def test_configuration_error_is_critical():
    error = ConfigurationError("LEADERBOARD_SORT_ORDER", "unknown value")

    assert error.severity is ErrorSeverity.CRITICAL
    assert error.is_retryable is False
    assert str(error).startswith("[CONFIG_ERROR] Configuration error for")


def test_validation_error_is_a_value_error():
    error = ValidationError("offset", "Offset cannot be negative")

    assert isinstance(error, ValueError)
    assert error.error_code == "VALIDATION_ERROR"
    assert error.details == {
        "field": "offset",
        "validation_message": "Offset cannot be negative",
    }

