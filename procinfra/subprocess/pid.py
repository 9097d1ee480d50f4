"""
Process id helpers.
"""

from __future__ import annotations

import os
import re
from typing import Any

from procinfra import platform
from procinfra.exceptions import UnsupportedPlatformError

from .builder import get_builder
from .coordinator import wait_for_successful_completion
from .pool import DrainPool

_TOKEN_SPLIT = re.compile(r'[\s,"]+')


def get_current_pid() -> str:
    """Return the pid of the current process."""
    return str(os.getpid())


def _listing_command(pid: str) -> list[str]:
    if platform.is_linux() or platform.is_macos() or platform.is_solaris():
        return ["ps", "-e", "-o", "pid="]
    if platform.is_windows():
        return ["TASKLIST", "/fi", f"PID eq {pid}", "/fo", "csv", "/nh"]
    raise UnsupportedPlatformError(
        "Cannot check pid on the underlying platform", platform=platform.name()
    )


def is_pid_running(
    pid: str | int, pool: DrainPool | None = None, **kwargs: Any
) -> bool:
    """
    Check whether a process with the given id is running.

    Lists processes with ps (Linux, macOS, Solaris) or TASKLIST (Windows)
    and looks for the id as a whole token in the output.

    Args:
        pid: Process id to look for
        pool: Pool running the drains (defaults to the process-wide pool)
        **kwargs: Passed through to wait_for()

    Returns:
        bool: True if the process is listed

    Raises:
        UnsupportedPlatformError: If the host platform has no listing command
        ProcessFailedError: If the listing command itself fails
    """
    pid = str(pid).strip()
    commands = _listing_command(pid)
    process = get_builder(*commands).start()
    result = wait_for_successful_completion(process, pool=pool, **kwargs)
    return any(pid in _TOKEN_SPLIT.split(line) for line in result.stdout)
