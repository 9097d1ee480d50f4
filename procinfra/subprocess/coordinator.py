"""
Waiting on a child process while capturing everything it writes.

wait_for() runs three activities at once: the caller's blocking wait for the
child to exit and one drain per output channel on the drain pool. All three
must make progress for the call to finish; waiting for the exit without
draining deadlocks as soon as the child fills a pipe buffer.

Example:
    proc = get_builder("ls", "-l").start()
    result = wait_for(proc)
    for line in result.stdout:
        print(line)
"""

from __future__ import annotations

import functools
import logging
import subprocess
import time
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from procinfra.exceptions import (
    DrainError,
    ProcessFailedError,
    ProcessInterruptedError,
)

from .drain import drain_stream
from .pool import DrainPool, get_default_pool
from .result import ProcessResult

_lg = logging.getLogger(__name__)


def _drain_call(
    stream: Any, channel: str, encoding: str | None, errors: str, lg: Any
) -> Callable[[], tuple[str, ...]]:
    return functools.partial(
        drain_stream, stream, encoding=encoding, errors=errors, channel=channel, lg=lg
    )


def _remaining(deadline: float | None) -> float | None:
    """Seconds left until deadline, or None when there is no deadline."""
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def _collect(
    future: Future, channel: str, pid: Any, deadline: float | None, timeout: Any
) -> tuple[str, ...]:
    """Block until a drain reaches end-of-stream and return its lines."""
    try:
        return future.result(timeout=_remaining(deadline))
    except TimeoutError as e:
        raise ProcessInterruptedError(
            f"timed out waiting for {channel} to close",
            pid=pid,
            timeout=timeout,
        ) from e
    except (OSError, ValueError, LookupError) as e:
        raise DrainError(
            f"failed to read {channel}: {e}", channel=channel, pid=pid
        ) from e


def wait_for(
    process: subprocess.Popen,
    pool: DrainPool | None = None,
    timeout: float | None = None,
    encoding: str | None = None,
    errors: str | None = None,
    lg: Any | None = None,
) -> ProcessResult:
    """
    Wait for a child to exit while draining its stdout and stderr.

    The child must have been started with both stdout and stderr piped. A
    non-zero exit code is returned as data; use
    wait_for_successful_completion() to treat it as a failure.

    Args:
        process: Running child (subprocess.Popen or compatible)
        pool: Pool running the drains (defaults to the process-wide pool)
        timeout: Seconds the whole call may take, covering the wait for free
            drain threads, the exit and both channels closing; None waits
            indefinitely
        encoding: Codec for binary pipes (defaults to the configured encoding)
        errors: Codec error handler (defaults to the configured handler)
        lg: Logger (defaults to this module's logger)

    Returns:
        ProcessResult: Exit code plus every line written to either channel

    Raises:
        ProcessInterruptedError: If the timeout expired; output already
            drained is discarded and the child is left running
        DrainError: If reading either channel failed
    """
    lg = lg or _lg
    if pool is None:
        pool = get_default_pool()
    if encoding is None or errors is None:
        from procinfra.config import get_config

        cfg = get_config()
        encoding = encoding if encoding is not None else cfg.encoding
        errors = errors if errors is not None else cfg.errors

    for channel in ("stdout", "stderr"):
        if getattr(process, channel, None) is None:
            raise ValueError(f"process was not started with {channel}=PIPE")

    pid = getattr(process, "pid", None)
    start = time.monotonic()
    deadline = None if timeout is None else start + timeout

    try:
        out_future, err_future = pool.submit_pair(
            _drain_call(process.stdout, "stdout", encoding, errors, lg),
            _drain_call(process.stderr, "stderr", encoding, errors, lg),
            timeout=_remaining(deadline),
        )
    except TimeoutError as e:
        raise ProcessInterruptedError(
            "timed out waiting for a free drain slot", pid=pid, timeout=timeout
        ) from e

    try:
        exit_code = process.wait(timeout=_remaining(deadline))
    except subprocess.TimeoutExpired as e:
        raise ProcessInterruptedError(
            "timed out waiting for process to exit", pid=pid, timeout=timeout
        ) from e

    # The child may close its pipes before or after it is reported exited
    stdout = _collect(out_future, "stdout", pid, deadline, timeout)
    stderr = _collect(err_future, "stderr", pid, deadline, timeout)

    result = ProcessResult(exit_code, stdout, stderr)
    lg.debug(
        "process exited",
        extra={
            "pid": pid,
            "exit_code": exit_code,
            "stdout_lines": len(stdout),
            "stderr_lines": len(stderr),
            "after": time.monotonic() - start,
        },
    )
    return result


def wait_for_successful_completion(
    process: subprocess.Popen, **kwargs: Any
) -> ProcessResult:
    """
    Like wait_for(), but raise if the child exits with a non-zero code.

    Args:
        process: Running child (subprocess.Popen or compatible)
        **kwargs: Passed through to wait_for()

    Returns:
        ProcessResult: The unchanged result when the exit code is 0

    Raises:
        ProcessFailedError: If the exit code is non-zero; its message is the
            captured stdout, or stderr when stdout is empty
    """
    result = wait_for(process, **kwargs)
    if result.exit_code != 0:
        raise ProcessFailedError(result, pid=getattr(process, "pid", None))
    return result
