"""
Output abstraction for the CLI.

Commands write through an OutputWriter so they can be tested without
capturing stdout.
"""

import sys
from typing import Protocol, TextIO

from rich.console import Console


class OutputWriter(Protocol):
    """Protocol for CLI output writing."""

    def write(self, text: str = "") -> None:
        """Write a line to standard output."""
        ...

    def error(self, text: str = "") -> None:
        """Write a line to standard error."""
        ...


class ConsoleOutput:
    """
    Output writer backed by rich consoles.

    Child output is printed verbatim (no markup or highlighting); error
    lines are shown in red when the terminal supports color.
    """

    def __init__(
        self, stream: TextIO | None = None, err_stream: TextIO | None = None
    ) -> None:
        """
        Initialize with optional output streams.

        Args:
            stream: Output stream (defaults to sys.stdout)
            err_stream: Error stream (defaults to sys.stderr)
        """
        self._out = Console(
            file=stream if stream is not None else sys.stdout,
            highlight=False,
            soft_wrap=True,
        )
        self._err = Console(
            file=err_stream if err_stream is not None else sys.stderr,
            highlight=False,
            soft_wrap=True,
            style="red",
        )

    def write(self, text: str = "") -> None:
        self._out.print(text, markup=False)

    def error(self, text: str = "") -> None:
        self._err.print(text, markup=False)


class BufferedOutput:
    """
    Output writer that captures output to lists.

    Example:
        out = BufferedOutput()
        out.write("Line 1")
        out.error("oops")
        assert out.lines == ["Line 1"]
        assert out.errors == ["oops"]
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.errors: list[str] = []

    def write(self, text: str = "") -> None:
        self.lines.append(text)

    def error(self, text: str = "") -> None:
        self.errors.append(text)

    @property
    def text(self) -> str:
        """All standard output as a single string."""
        return "".join(line + "\n" for line in self.lines)
