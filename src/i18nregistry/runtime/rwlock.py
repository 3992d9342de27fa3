"""Readers-writer lock guarding the bundle registry.

Resolution calls (get_string, list_bundle_names, lookup) are readers and may
run side by side; add_bundle, remove_bundle and clear are writers and run
alone. A scan holds the read lock for its whole duration, so it observes the
registry either before or after any single mutation, never in between.

Properties:
- Writer preference: once a writer is waiting, new readers queue behind it,
  so a steady stream of lookups cannot starve registration.
- Reentrant reads: a thread holding the read lock may take it again.
- Optional acquisition timeout (TimeoutError).
- Read-to-write upgrade, write-to-read downgrade and nested writes are
  rejected with RuntimeError instead of deadlocking.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

__all__ = ["RWLock"]


class RWLock:
    """Writer-preferring readers-writer lock.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     pass  # shared with other readers
        >>> with lock.write():
        ...     pass  # exclusive
    """

    __slots__ = ("_cond", "_readers", "_waiting_writers", "_writer")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        # thread id -> reentrant read depth
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._waiting_writers = 0

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock in shared mode for the duration of the block.

        Args:
            timeout: Seconds to wait; None waits forever, 0.0 never blocks.

        Raises:
            RuntimeError: If the calling thread holds the write lock.
            TimeoutError: If the lock is not acquired in time.
            ValueError: If timeout is negative.
        """
        self.acquire_read(timeout)
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock in exclusive mode for the duration of the block.

        Args:
            timeout: Seconds to wait; None waits forever, 0.0 never blocks.

        Raises:
            RuntimeError: If the calling thread already holds the lock.
            TimeoutError: If the lock is not acquired in time.
            ValueError: If timeout is negative.
        """
        self.acquire_write(timeout)
        try:
            yield
        finally:
            self.release_write()

    def acquire_read(self, timeout: float | None = None) -> None:
        """Acquire the lock in shared mode. Prefer the read() context manager."""
        deadline = self._deadline(timeout)
        me = threading.get_ident()

        with self._cond:
            depth = self._readers.get(me)
            if depth is not None:
                self._readers[me] = depth + 1
                return
            if self._writer == me:
                msg = (
                    "Cannot acquire read lock while holding write lock. "
                    "Release the write lock before acquiring a read lock."
                )
                raise RuntimeError(msg)

            self._wait_for(
                lambda: self._writer is None and self._waiting_writers == 0,
                deadline,
                "read",
            )
            self._readers[me] = 1

    def release_read(self) -> None:
        """Release one level of shared ownership held by the calling thread."""
        me = threading.get_ident()

        with self._cond:
            depth = self._readers.get(me)
            if depth is None:
                msg = "Thread does not hold read lock"
                raise RuntimeError(msg)
            if depth > 1:
                self._readers[me] = depth - 1
                return
            del self._readers[me]
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self, timeout: float | None = None) -> None:
        """Acquire the lock in exclusive mode. Prefer the write() context manager."""
        deadline = self._deadline(timeout)
        me = threading.get_ident()

        with self._cond:
            if me in self._readers:
                msg = (
                    "Cannot upgrade read lock to write lock. "
                    "Release read lock before acquiring write lock."
                )
                raise RuntimeError(msg)
            if self._writer == me:
                msg = (
                    "Cannot acquire write lock: already holding write lock. "
                    "Release the write lock before acquiring it again."
                )
                raise RuntimeError(msg)

            self._waiting_writers += 1
            try:
                self._wait_for(
                    lambda: self._writer is None and not self._readers,
                    deadline,
                    "write",
                )
                self._writer = me
            finally:
                self._waiting_writers -= 1
                # Readers blocked on _waiting_writers > 0 must re-check, also
                # when this writer gave up on a timeout.
                self._cond.notify_all()

    def release_write(self) -> None:
        """Release exclusive ownership held by the calling thread."""
        with self._cond:
            if self._writer != threading.get_ident():
                msg = "Thread does not hold write lock"
                raise RuntimeError(msg)
            self._writer = None
            self._cond.notify_all()

    @staticmethod
    def _deadline(timeout: float | None) -> float | None:
        if timeout is None:
            return None
        if timeout < 0:
            msg = f"Timeout must be non-negative, got {timeout}"
            raise ValueError(msg)
        return time.monotonic() + timeout

    def _wait_for(
        self, ready: Callable[[], bool], deadline: float | None, mode: str
    ) -> None:
        """Block on the condition until ready() holds. Caller owns self._cond."""
        while not ready():
            if deadline is None:
                self._cond.wait()
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                msg = f"Timed out waiting for {mode} lock"
                raise TimeoutError(msg)
            self._cond.wait(timeout=remaining)

    @property
    def reader_count(self) -> int:
        """Number of distinct threads currently holding the read lock."""
        with self._cond:
            return len(self._readers)

    @property
    def writer_active(self) -> bool:
        """True if some thread currently holds the write lock."""
        with self._cond:
            return self._writer is not None

    @property
    def writers_waiting(self) -> int:
        """Number of threads blocked waiting for the write lock."""
        with self._cond:
            return self._waiting_writers
