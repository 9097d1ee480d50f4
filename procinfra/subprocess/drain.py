"""
Draining of a single child output channel.

A child blocks as soon as the OS pipe buffer behind one of its output
channels is full. Something must keep reading each channel until the child
closes it, independently of whoever waits for the child to exit, or both
sides stall. drain_stream() is that reader: a blocking readline loop that
ends only on the stream's own end-of-stream.
"""

from __future__ import annotations

import locale
import logging
from typing import IO, TYPE_CHECKING, Any

from procinfra.log import TRACE

if TYPE_CHECKING:
    import subprocess

_lg = logging.getLogger(__name__)


def split_lines(chunk: str) -> list[str]:
    """
    Split one readline() chunk into lines.

    readline() on a binary pipe stops only at \\n, so a chunk may still hold
    bare \\r separators (progress output such as "50%\\r100%\\n"). \\r\\n, \\n
    and a lone \\r all end a line; one trailing terminator is dropped.
    """
    if chunk.endswith("\r\n"):
        chunk = chunk[:-2]
    elif chunk.endswith(("\n", "\r")):
        chunk = chunk[:-1]
    return chunk.split("\r")


def decode_lines(
    raw: bytes | str, encoding: str | None = None, errors: str = "replace"
) -> list[str]:
    """
    Decode one raw chunk read from a child and split it into lines.

    Args:
        raw: Chunk as returned by readline() on a binary or text stream
        encoding: Codec for bytes; None uses the locale's preferred encoding
        errors: Codec error handler

    Returns:
        list[str]: The decoded lines without their terminators
    """
    if isinstance(raw, bytes):
        raw = raw.decode(encoding or locale.getpreferredencoding(False), errors)
    return split_lines(raw)


def drain_stream(
    stream: IO[Any],
    encoding: str | None = None,
    errors: str = "replace",
    channel: str = "stream",
    lg: Any | None = None,
) -> tuple[str, ...]:
    """
    Read a stream line by line until end-of-stream, then close it.

    Blocks on each readline(); returns only once the producer has closed its
    end (the child exited or closed the channel). I/O errors propagate to the
    caller after the stream has been closed.

    Args:
        stream: Readable binary or text stream, e.g. Popen.stdout
        encoding: Codec for binary streams (None: locale preferred encoding)
        errors: Codec error handler
        channel: Channel name used in log records
        lg: Logger (defaults to this module's logger)

    Returns:
        tuple[str, ...]: Lines in the order they were read
    """
    lg = lg or _lg
    lines: list[str] = []
    with stream:
        while True:
            raw = stream.readline()
            if not raw:
                break
            for line in decode_lines(raw, encoding, errors):
                lines.append(line)
                if lg.isEnabledFor(TRACE):
                    lg.log(TRACE, line, extra={"channel": channel})
    return tuple(lines)


def read_stdout(
    process: subprocess.Popen, encoding: str | None = None, errors: str = "replace"
) -> tuple[str, ...]:
    """
    Drain a child's standard output on the calling thread.

    Only safe when standard error is not piped or cannot fill its buffer;
    use wait_for() to capture both channels.
    """
    if process.stdout is None:
        raise ValueError("process was not started with stdout=PIPE")
    return drain_stream(process.stdout, encoding, errors, channel="stdout")


def read_stderr(
    process: subprocess.Popen, encoding: str | None = None, errors: str = "replace"
) -> tuple[str, ...]:
    """
    Drain a child's standard error on the calling thread.

    Only safe when standard output is not piped or cannot fill its buffer;
    use wait_for() to capture both channels.
    """
    if process.stderr is None:
        raise ValueError("process was not started with stderr=PIPE")
    return drain_stream(process.stderr, encoding, errors, channel="stderr")
