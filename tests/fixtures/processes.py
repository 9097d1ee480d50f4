"""
Process fixtures for testing.

Provides a small deterministic drain pool, an isolated configuration,
a fake Popen for unit tests and a factory for real Python children.
"""

import io
import subprocess
import sys
import textwrap
from collections.abc import Callable, Generator

import pytest

from procinfra.config import ProcessConfig, set_config
from procinfra.subprocess import DrainPool, ProcessBuilder


def _stream(data: bytes | str) -> io.IOBase:
    return io.StringIO(data) if isinstance(data, str) else io.BytesIO(data)


class FakeProcess:
    """
    Stand-in for subprocess.Popen with in-memory output channels.

    Args:
        stdout: Bytes (or text) served on the stdout channel
        stderr: Bytes (or text) served on the stderr channel
        exit_code: Value returned by wait()
        wait_error: Exception raised by wait() instead of returning
    """

    def __init__(
        self,
        stdout: bytes | str = b"",
        stderr: bytes | str = b"",
        exit_code: int = 0,
        wait_error: BaseException | None = None,
        pid: int = 4242,
    ) -> None:
        self.stdout = _stream(stdout)
        self.stderr = _stream(stderr)
        self.pid = pid
        self._exit_code = exit_code
        self._wait_error = wait_error
        self.wait_timeouts: list[float | None] = []

    def wait(self, timeout: float | None = None) -> int:
        self.wait_timeouts.append(timeout)
        if self._wait_error is not None:
            raise self._wait_error
        return self._exit_code


@pytest.fixture(autouse=True)
def default_config() -> Generator[ProcessConfig, None, None]:
    """Pin the process-wide configuration to defaults, ignoring the environment."""
    config = ProcessConfig(encoding="utf-8")
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def drain_pool() -> Generator[DrainPool, None, None]:
    """Provide a small private drain pool, shut down after the test."""
    pool = DrainPool(max_workers=4, thread_name_prefix="test-drain")
    try:
        yield pool
    finally:
        pool.shutdown()


@pytest.fixture
def fake_process() -> type[FakeProcess]:
    """Provide the FakeProcess class."""
    return FakeProcess


@pytest.fixture
def python_child() -> Generator[Callable[[str], subprocess.Popen], None, None]:
    """
    Provide a factory starting `python -c <script>` with both channels piped.

    Children still running at teardown are killed.
    """
    started: list[subprocess.Popen] = []

    def _start(script: str) -> subprocess.Popen:
        proc = ProcessBuilder([sys.executable, "-c", textwrap.dedent(script)]).start()
        started.append(proc)
        return proc

    yield _start

    for proc in started:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        for stream in (proc.stdout, proc.stderr):
            if stream is not None and not stream.closed:
                stream.close()
