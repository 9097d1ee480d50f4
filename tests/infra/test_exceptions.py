"""
Tests for the exception hierarchy.
"""

import pytest

from procinfra.exceptions import (
    ConfigError,
    DrainError,
    InfraError,
    PoolClosedError,
    ProcessError,
    ProcessFailedError,
    ProcessInterruptedError,
    ProcessStartError,
    UnsupportedPlatformError,
)
from procinfra.subprocess import ProcessResult


@pytest.mark.unit
class TestInfraError:
    """Test the base exception."""

    def test_message_only(self):
        """Test str() is the message without context."""
        assert str(InfraError("failed")) == "failed"

    def test_context_rendered(self):
        """Test context is appended as key=value pairs."""
        e = InfraError("failed", pid=12, channel="stdout")
        assert str(e) == "failed (pid=12, channel=stdout)"
        assert e.context == {"pid": 12, "channel": "stdout"}

    @pytest.mark.parametrize(
        "cls",
        [
            ConfigError,
            ProcessError,
            ProcessStartError,
            ProcessInterruptedError,
            PoolClosedError,
            UnsupportedPlatformError,
        ],
    )
    def test_hierarchy(self, cls):
        """Test every error is catchable as InfraError."""
        assert issubclass(cls, InfraError)


@pytest.mark.unit
class TestProcessErrors:
    """Test process-specific errors."""

    def test_drain_error_channel(self):
        """Test DrainError keeps the channel as attribute and context."""
        e = DrainError("read failed", channel="stderr")
        assert e.channel == "stderr"
        assert "channel=stderr" in str(e)
        assert isinstance(e, ProcessError)

    def test_failed_error_embeds_output(self):
        """Test ProcessFailedError carries the result and its output."""
        result = ProcessResult(2, ("line one", "line two"), ("err",))
        e = ProcessFailedError(result)
        assert e.result is result
        assert e.exit_code == 2
        assert e.message == "line one\nline two"
        assert str(e) == "line one\nline two (exit_code=2)"
