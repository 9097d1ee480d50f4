"""
Bounded thread pool that runs output drains.

Every wait_for() call needs two drains running at the same time as the
caller's exit wait. Threads come from one long-lived pool instead of being
spawned per call; the process-wide default pool is created on first use and
shut down at interpreter exit. Threads are handed out in pairs, so a call
never has one drain running while the other waits in the queue.
"""

from __future__ import annotations

import atexit
import functools
import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from procinfra.exceptions import PoolClosedError

_lg = logging.getLogger(__name__)

# A single wait_for() call drains two channels concurrently
MIN_WORKERS = 2


class DrainPool:
    """
    Thread pool for drain workers.

    Sized at workers_per_cpu times the number of CPUs unless max_workers is
    given, and never below two workers.

    Example:
        with DrainPool(max_workers=4) as pool:
            result = wait_for(proc, pool=pool)
    """

    def __init__(
        self,
        max_workers: int | None = None,
        workers_per_cpu: int = 2,
        thread_name_prefix: str = "procinfra-drain",
    ) -> None:
        """
        Initialize the pool.

        Args:
            max_workers: Explicit number of worker threads
            workers_per_cpu: Worker threads per CPU when max_workers is None
            thread_name_prefix: Prefix for worker thread names
        """
        if max_workers is None:
            max_workers = workers_per_cpu * (os.cpu_count() or 1)
        self._max_workers = max(MIN_WORKERS, max_workers)
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix=thread_name_prefix
        )
        self._lock = threading.Lock()
        self._closed = False
        # Each admitted pair holds two workers until both of its calls finish
        self._slots = threading.BoundedSemaphore(self._max_workers // 2)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def closed(self) -> bool:
        return self._closed

    def _admit(
        self, calls: tuple[Callable[[], Any], ...], timeout: float | None
    ) -> tuple[Future, ...]:
        """Take one slot, schedule calls together, free the slot when all finish."""
        if self._closed:
            raise PoolClosedError("drain pool is shut down")
        if not self._slots.acquire(timeout=timeout):
            raise TimeoutError("no free drain slot")
        try:
            with self._lock:
                if self._closed:
                    raise PoolClosedError("drain pool is shut down")
                futures = tuple(self._executor.submit(call) for call in calls)
        except BaseException:
            self._slots.release()
            raise

        pending = [len(futures)]
        pending_lock = threading.Lock()

        def _release(_: Future) -> None:
            with pending_lock:
                pending[0] -= 1
                done = pending[0] == 0
            if done:
                self._slots.release()

        for future in futures:
            future.add_done_callback(_release)
        return futures

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """
        Schedule fn(*args, **kwargs) on a worker thread.

        The call occupies a whole slot, so it never takes a thread an
        admitted pair is counting on. Blocks while all slots are in use.

        Raises:
            PoolClosedError: If the pool has been shut down
        """
        (future,) = self._admit((functools.partial(fn, *args, **kwargs),), None)
        return future

    def submit_pair(
        self,
        first: Callable[[], Any],
        second: Callable[[], Any],
        timeout: float | None = None,
    ) -> tuple[Future, Future]:
        """
        Schedule two calls that must run at the same time.

        A pair is admitted only while two worker threads are free for it, so
        neither call can sit queued behind other work while its partner holds
        a thread. The slot is released once both calls have finished.

        Args:
            first: Callable run on one worker
            second: Callable run on another worker
            timeout: Seconds to wait for a free slot; None waits indefinitely

        Returns:
            tuple[Future, Future]: Futures of first and second

        Raises:
            PoolClosedError: If the pool has been shut down
            TimeoutError: If no slot became free within timeout
        """
        first_future, second_future = self._admit((first, second), timeout)
        return first_future, second_future

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting work and release the worker threads.

        Args:
            wait: Block until queued drains have finished
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait)
        _lg.debug("drain pool shut down", extra={"workers": self._max_workers})

    def __enter__(self) -> DrainPool:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"DrainPool(max_workers={self._max_workers}, {state})"


_default_lock = threading.Lock()
_default_pool: DrainPool | None = None
_atexit_registered = False


def _shutdown_default_pool() -> None:
    """Shut down the default pool at interpreter exit."""
    global _default_pool
    with _default_lock:
        pool, _default_pool = _default_pool, None
    if pool is not None:
        pool.shutdown(wait=False)


def get_default_pool() -> DrainPool:
    """
    Return the process-wide drain pool, creating it on first use.

    Sizing comes from the pool section of the loaded configuration.
    """
    global _default_pool, _atexit_registered
    with _default_lock:
        if _default_pool is None or _default_pool.closed:
            from procinfra.config import get_config

            cfg = get_config().pool
            _default_pool = DrainPool(
                max_workers=cfg.max_workers,
                workers_per_cpu=cfg.workers_per_cpu,
                thread_name_prefix=cfg.thread_name_prefix,
            )
            _lg.debug(
                "drain pool created", extra={"workers": _default_pool.max_workers}
            )
            if not _atexit_registered:
                atexit.register(_shutdown_default_pool)
                _atexit_registered = True
        return _default_pool


def set_default_pool(pool: DrainPool | None) -> DrainPool | None:
    """
    Replace the process-wide drain pool.

    The previous pool is returned, not shut down, so callers (typically
    tests) can restore it. Passing None makes the next get_default_pool()
    create a fresh pool.
    """
    global _default_pool
    with _default_lock:
        previous, _default_pool = _default_pool, pool
    return previous
