"""
Unified exception hierarchy for procinfra.

All errors raised by the package derive from InfraError, so callers can catch
every framework failure with a single except clause while still being able to
distinguish launch failures, interrupted waits, drain I/O failures and strict
completion failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from procinfra.subprocess.result import ProcessResult


class InfraError(Exception):
    """
    Base exception for all procinfra errors.

    Example:
        try:
            wait_for_successful_completion(proc)
        except InfraError as e:
            lg.error("process handling failed", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(InfraError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found or too large
        - Invalid YAML syntax
        - Value rejected by schema validation
    """

    pass


class ProcessError(InfraError):
    """Base class for errors raised while launching or waiting on a child."""

    pass


class ProcessStartError(ProcessError):
    """The child process could not be launched."""

    pass


class ProcessInterruptedError(ProcessError):
    """
    Waiting for the child's exit or for its output to drain was interrupted.

    Output drained before the interruption is discarded; no partial result
    is ever returned.
    """

    pass


class DrainError(ProcessError):
    """An I/O failure occurred while reading one of the child's output channels."""

    def __init__(self, message: str, channel: str, **context: Any) -> None:
        super().__init__(message, channel=channel, **context)
        self.channel = channel


class ProcessFailedError(ProcessError):
    """
    A child exited with a non-zero code under strict completion.

    The message embeds the captured standard output, or standard error when
    nothing was written to standard output, since both streams are already
    closed by the time this is raised.
    """

    def __init__(self, result: ProcessResult, **context: Any) -> None:
        super().__init__(result.output, exit_code=result.exit_code, **context)
        self.result = result
        self.exit_code = result.exit_code


class PoolClosedError(ProcessError):
    """Work was submitted to a drain pool that has already been shut down."""

    pass


class UnsupportedPlatformError(InfraError):
    """The requested operation has no implementation for the host platform."""

    pass
