"""
Immutable snapshot of a finished child process.
"""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class ProcessResult:
    """
    Exit code and captured output of a child that has been waited on.

    Only constructed once both output channels have reached end-of-stream,
    so the captured lines are complete as of the reported exit.

    Attributes:
        exit_code: The child's exit code (negative for signal termination on POSIX)
        stdout: Lines written to standard output, in order, without terminators
        stderr: Lines written to standard error, in order, without terminators
    """

    exit_code: int
    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but always store tuples
        object.__setattr__(self, "stdout", tuple(self.stdout))
        object.__setattr__(self, "stderr", tuple(self.stderr))

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def out(self) -> str:
        """Standard output joined with newlines."""
        return "\n".join(self.stdout)

    @property
    def err(self) -> str:
        """Standard error joined with newlines."""
        return "\n".join(self.stderr)

    @property
    def output(self) -> str:
        """Standard output, or standard error when nothing went to standard output."""
        return self.out if self.stdout else self.err
