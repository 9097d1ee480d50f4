"""
Log formatters for the logging system.

Records are rendered as `[time] [L] message` padded to a rule, followed by
the structured fields passed through `extra=` and the process id and logger
name, e.g.:

    [2026-10-19 12:00:00] [D] process exited    [exit_code:0] [1234] [procinfra]
"""

import logging
import time
from typing import Any

from .constants import LogConstants

# Attributes every LogRecord carries; anything else arrived through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields attached to a record via extra=, sorted by name."""
    return {
        key: record.__dict__[key]
        for key in sorted(record.__dict__)
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


def _format_value(key: str, value: Any) -> str:
    if key == "after" and isinstance(value, float):
        return f"{value:.3f}s"
    if isinstance(value, BaseException):
        return value.__class__.__name__
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class LogFormatter(logging.Formatter):
    """
    Formatter that appends structured extra fields to each message.

    Args:
        micros: Render timestamps with microsecond precision
        location: Append the source file and line of the call site
    """

    def __init__(self, micros: bool = False, location: bool = False) -> None:
        super().__init__(LogConstants.DEFAULT_FORMAT, LogConstants.DATE_FORMAT)
        self._micros = micros
        self._location = location

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = time.strftime(
            datefmt or LogConstants.DATE_FORMAT, self.converter(record.created)
        )
        if self._micros:
            return f"{stamp}.{int((record.created % 1) * 1_000_000):06d}"
        return stamp

    def format(self, record: logging.LogRecord) -> str:
        head = super().format(record)
        lines = head.split("\n", 1)

        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        parts = [lines[0] + " " * max(1, rule - len(lines[0]))]
        for key, value in extra_fields(record).items():
            parts.append(f"[{key}:{_format_value(key, value)}]")
        parts.append(f"[{record.process}] [{record.name}]")
        if self._location:
            parts.append(f"[{record.filename}:{record.lineno}]")

        text = " ".join(parts)
        if len(lines) > 1:
            # exception and stack text rendered by the base formatter
            text += "\n" + lines[1]
        return text
