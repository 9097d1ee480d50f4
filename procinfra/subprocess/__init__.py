"""Child process output capture.

This module provides utilities for running and waiting on child processes,
including concurrent draining of both output channels, strict completion
and process id probing.
"""

from .builder import (
    ProcessBuilder,
    get_builder,
    get_builder_with_pipe_support,
    run,
)
from .coordinator import wait_for, wait_for_successful_completion
from .drain import decode_lines, drain_stream, read_stderr, read_stdout, split_lines
from .pid import get_current_pid, is_pid_running
from .pool import DrainPool, get_default_pool, set_default_pool
from .result import ProcessResult

__all__ = [
    "ProcessResult",
    "ProcessBuilder",
    "get_builder",
    "get_builder_with_pipe_support",
    "run",
    "wait_for",
    "wait_for_successful_completion",
    "drain_stream",
    "decode_lines",
    "split_lines",
    "read_stdout",
    "read_stderr",
    "DrainPool",
    "get_default_pool",
    "set_default_pool",
    "get_current_pid",
    "is_pid_running",
]
