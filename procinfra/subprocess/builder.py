"""
Construction of child process command lines and environments.

On POSIX hosts children get BASH_ENV pointing at the user's interactive
profile, so commands resolve the same PATH and aliases a login shell would.
Pipe support wraps the command in `sh -c` so `|` is interpreted.

Example:
    result = (
        get_builder_with_pipe_support("ps -e | wc -l")
        .with_env("LC_ALL", "C")
        .run(strict=True)
    )
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from procinfra import platform
from procinfra.exceptions import ProcessStartError

if TYPE_CHECKING:
    from procinfra.config import ProcessConfig

    from .result import ProcessResult

_lg = logging.getLogger(__name__)


def _resolve_config(config: ProcessConfig | None) -> ProcessConfig:
    if config is not None:
        return config
    from procinfra.config import get_config

    return get_config()


class ProcessBuilder:
    """
    Fluent builder that starts a child with both output channels piped.

    Standard input is connected to the null device so a child never blocks
    waiting for input that will not come.
    """

    def __init__(
        self,
        commands: Sequence[str],
        env: dict[str, str] | None = None,
        cwd: str | Path | None = None,
        lg: Any | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            commands: Program and its arguments
            env: Environment for the child (defaults to a copy of os.environ)
            cwd: Working directory for the child
            lg: Logger (defaults to this module's logger)
        """
        if not commands:
            raise ValueError("commands must name a program")
        self._commands = list(commands)
        self._env = dict(os.environ) if env is None else dict(env)
        self._cwd = cwd
        self._lg = lg or _lg

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    @property
    def env(self) -> dict[str, str]:
        return self._env

    @property
    def cwd(self) -> str | Path | None:
        return self._cwd

    def with_env(self, key: str, value: str) -> ProcessBuilder:
        """Set an environment variable for the child."""
        self._env[key] = value
        return self

    def with_cwd(self, cwd: str | Path) -> ProcessBuilder:
        """Set the child's working directory."""
        self._cwd = cwd
        return self

    def start(self) -> subprocess.Popen:
        """
        Launch the child.

        Returns:
            subprocess.Popen: Running child with stdout and stderr piped

        Raises:
            ProcessStartError: If the program cannot be launched
        """
        try:
            process = subprocess.Popen(
                self._commands,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._env,
                cwd=self._cwd,
            )
        except OSError as e:
            raise ProcessStartError(
                f"cannot start {self._commands[0]}: {e}", commands=self._commands
            ) from e
        self._lg.debug(
            "process started", extra={"pid": process.pid, "commands": self._commands}
        )
        return process

    def run(self, strict: bool = False, **kwargs: Any) -> ProcessResult:
        """
        Start the child and wait for it, capturing all output.

        Args:
            strict: Raise ProcessFailedError on a non-zero exit code
            **kwargs: Passed through to wait_for()
        """
        from .coordinator import wait_for, wait_for_successful_completion

        kwargs.setdefault("lg", self._lg)
        process = self.start()
        if strict:
            return wait_for_successful_completion(process, **kwargs)
        return wait_for(process, **kwargs)


def get_builder(*commands: str, config: ProcessConfig | None = None) -> ProcessBuilder:
    """
    Create a builder that, on POSIX hosts, sources the user's interactive profile.

    Args:
        *commands: Program and its arguments
        config: Configuration (defaults to the process-wide configuration)

    Returns:
        ProcessBuilder: Builder for the child
    """
    cfg = _resolve_config(config)
    builder = ProcessBuilder(commands)
    if not platform.is_windows() and cfg.shell.profile:
        builder.with_env("BASH_ENV", os.path.expanduser(cfg.shell.profile))
    return builder


def get_builder_with_pipe_support(
    *commands: str, config: ProcessConfig | None = None
) -> ProcessBuilder:
    """
    Create a builder whose command is interpreted by a shell on POSIX hosts.

    The commands are joined with spaces into a single shell script, so
    pipes and redirections work. On Windows this is the same as get_builder().

    Args:
        *commands: Shell command text, possibly in several pieces
        config: Configuration (defaults to the process-wide configuration)

    Returns:
        ProcessBuilder: Builder for the child
    """
    cfg = _resolve_config(config)
    if platform.is_windows():
        return get_builder(*commands, config=cfg)
    return get_builder(cfg.shell.path, "-c", " ".join(commands), config=cfg)


def run(
    *commands: str, strict: bool = False, shell: bool = False, **kwargs: Any
) -> ProcessResult:
    """
    Run a command to completion and capture its output.

    Args:
        *commands: Program and its arguments (or shell text when shell=True)
        strict: Raise ProcessFailedError on a non-zero exit code
        shell: Interpret the commands with the configured shell
        **kwargs: Passed through to wait_for()

    Returns:
        ProcessResult: Exit code and captured output
    """
    config = kwargs.pop("config", None)
    factory = get_builder_with_pipe_support if shell else get_builder
    return factory(*commands, config=config).run(strict=strict, **kwargs)
