"""
Logging helpers built on the standard logging module.

Adds:
- A custom TRACE level below DEBUG for per-line drain tracing
- resolve_level() accepting names, numbers or False to disable logging
- LogFormatter rendering structured extra fields after the message
- create_lg() for a ready-to-use configured logger

Library code logs through logging.getLogger(__name__) or an injected
logger and never configures handlers itself; applications (and the
procinfra CLI) call create_lg() once at startup.
"""

import logging
import sys
from typing import TextIO

from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .formatters import LogFormatter, extra_fields

TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]
logging.addLevelName(TRACE, "TRACE")


def resolve_level(s: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        s: Log level as string name, numeric value, or False to disable logging

    Returns:
        Union[int, bool]: Numeric log level or False to disable logging

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    if isinstance(s, bool):
        if s:
            raise InvalidLogLevelError(s)
        return s

    if isinstance(s, int):
        return s

    if str(s).isnumeric():
        return int(s)

    key = str(s).lower()
    if key in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[key]

    raise InvalidLogLevelError(s)


def create_lg(
    name: str = "procinfra",
    level: str | int | bool = "info",
    micros: bool = False,
    location: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure and return a logger writing formatted records to a stream.

    Calling it again for the same name replaces the previous handler rather
    than stacking a second one.

    Args:
        name: Logger name; "procinfra" covers every library module
        level: Log level (string, numeric, or False to disable)
        micros: Whether to show microsecond precision
        location: Whether to show file locations in logs
        stream: Destination stream (defaults to sys.stderr)

    Returns:
        logging.Logger: Configured logger

    Example:
        >>> lg = create_lg("procinfra", "debug")
    """
    numeric_level = resolve_level(level)
    lg = logging.getLogger(name)

    for handler in list(lg.handlers):
        if getattr(handler, "_procinfra", False):
            lg.removeHandler(handler)
            handler.close()

    if numeric_level is False:
        lg.disabled = True
        return lg

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(LogFormatter(micros=micros, location=location))
    handler._procinfra = True  # type: ignore[attr-defined]
    lg.addHandler(handler)
    lg.setLevel(numeric_level)
    lg.disabled = False
    lg.propagate = False
    return lg


__all__ = [
    "TRACE",
    "LogConstants",
    "LogError",
    "InvalidLogLevelError",
    "LogFormatter",
    "extra_fields",
    "resolve_level",
    "create_lg",
]
