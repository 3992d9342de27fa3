"""Tests for the RWLock readers-writer lock.

Tests verify:
- Multiple concurrent readers
- Exclusive writer access
- Writer preference (prevents starvation)
- Reentrant read locks, including while a writer waits
- Upgrade, downgrade and nested write rejection
- Timeouts
- Release without ownership
"""

import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import pytest

from i18nregistry.runtime.rwlock import RWLock


def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.001)
    return False


class TestRWLockBasics:
    """Basic acquisition and release."""

    def test_single_reader(self) -> None:
        lock = RWLock()
        with lock.read():
            assert lock.reader_count == 1
        assert lock.reader_count == 0

    def test_single_writer(self) -> None:
        lock = RWLock()
        with lock.write():
            assert lock.writer_active
        assert not lock.writer_active

    def test_readers_overlap(self) -> None:
        """All readers hold the lock at the same time."""
        lock = RWLock()
        barrier = threading.Barrier(5, timeout=5)

        def reader() -> None:
            with lock.read():
                barrier.wait()

        with ThreadPoolExecutor(max_workers=5) as executor:
            for future in [executor.submit(reader) for _ in range(5)]:
                future.result(timeout=5)

        assert lock.reader_count == 0

    def test_writer_excludes_readers(self) -> None:
        lock = RWLock()
        writer_in = threading.Event()
        release_writer = threading.Event()
        order: list[str] = []

        def writer() -> None:
            with lock.write():
                writer_in.set()
                release_writer.wait(timeout=5)
                order.append("writer done")

        def reader() -> None:
            with lock.read():
                order.append("reader in")

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        assert writer_in.wait(timeout=5)

        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        time.sleep(0.02)
        assert order == []

        release_writer.set()
        writer_thread.join(timeout=5)
        reader_thread.join(timeout=5)
        assert order == ["writer done", "reader in"]

    def test_lock_released_on_exception(self) -> None:
        lock = RWLock()

        with pytest.raises(KeyError), lock.write():
            raise KeyError("boom")

        with lock.write(timeout=0.0):
            pass

    def test_counter_consistency(self) -> None:
        """Writers serialize read-modify-write updates."""
        lock = RWLock()
        counter = [0]

        def increment() -> None:
            for _ in range(200):
                with lock.write():
                    value = counter[0]
                    counter[0] = value + 1

        threads = [threading.Thread(target=increment) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter[0] == 800


class TestReentrancy:
    """Reentrant reads and rejected mode changes."""

    def test_reentrant_read(self) -> None:
        lock = RWLock()
        with lock.read(), lock.read(), lock.read():
            assert lock.reader_count == 1
        assert lock.reader_count == 0

    def test_reentrant_read_while_writer_waits(self) -> None:
        """A thread already reading is not blocked by writer preference."""
        lock = RWLock()
        writer_done = threading.Event()

        def writer() -> None:
            with lock.write():
                writer_done.set()

        with lock.read():
            writer_thread = threading.Thread(target=writer)
            writer_thread.start()
            assert _wait_until(lambda: lock.writers_waiting == 1)
            with lock.read(timeout=1.0):
                assert not writer_done.is_set()

        writer_thread.join(timeout=5)
        assert writer_done.is_set()

    def test_upgrade_rejected(self) -> None:
        lock = RWLock()
        with lock.read(), pytest.raises(RuntimeError, match="Cannot upgrade"):
            lock.acquire_write()
        # No residual state
        assert lock.writers_waiting == 0
        with lock.write(timeout=0.0):
            pass

    def test_downgrade_rejected(self) -> None:
        lock = RWLock()
        with lock.write(), pytest.raises(RuntimeError, match="holding write lock"):
            lock.acquire_read()

    def test_nested_write_rejected(self) -> None:
        lock = RWLock()
        with lock.write(), pytest.raises(RuntimeError, match="already holding write lock"):
            lock.acquire_write()

    def test_release_read_without_hold(self) -> None:
        with pytest.raises(RuntimeError, match="does not hold read lock"):
            RWLock().release_read()

    def test_release_write_without_hold(self) -> None:
        with pytest.raises(RuntimeError, match="does not hold write lock"):
            RWLock().release_write()

    def test_release_write_from_other_thread(self) -> None:
        lock = RWLock()
        errors: list[Exception] = []

        def release() -> None:
            try:
                lock.release_write()
            except RuntimeError as e:
                errors.append(e)

        with lock.write():
            thread = threading.Thread(target=release)
            thread.start()
            thread.join(timeout=5)

        assert len(errors) == 1


class TestWriterPreference:
    """Waiting writers block new readers."""

    def test_new_reader_waits_for_queued_writer(self) -> None:
        lock = RWLock()
        order: list[str] = []
        first_reader_in = threading.Event()
        release_first = threading.Event()

        def first_reader() -> None:
            with lock.read():
                first_reader_in.set()
                release_first.wait(timeout=5)

        def writer() -> None:
            with lock.write():
                order.append("writer")

        def late_reader() -> None:
            with lock.read():
                order.append("late reader")

        threads = [threading.Thread(target=first_reader)]
        threads[0].start()
        assert first_reader_in.wait(timeout=5)

        threads.append(threading.Thread(target=writer))
        threads[1].start()
        assert _wait_until(lambda: lock.writers_waiting == 1)

        threads.append(threading.Thread(target=late_reader))
        threads[2].start()
        time.sleep(0.02)
        assert order == []

        release_first.set()
        for thread in threads:
            thread.join(timeout=5)

        assert order == ["writer", "late reader"]


class TestTimeouts:
    """Acquisition timeouts."""

    def test_write_times_out_behind_reader(self) -> None:
        lock = RWLock()
        holding = threading.Event()
        release = threading.Event()

        def reader() -> None:
            with lock.read():
                holding.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            assert holding.wait(timeout=5)
            with pytest.raises(TimeoutError, match="write lock"), lock.write(timeout=0.01):
                pass
            assert lock.writers_waiting == 0
        finally:
            release.set()
            thread.join(timeout=5)

    def test_read_times_out_behind_writer(self) -> None:
        lock = RWLock()
        holding = threading.Event()
        release = threading.Event()

        def writer() -> None:
            with lock.write():
                holding.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            assert holding.wait(timeout=5)
            with pytest.raises(TimeoutError, match="read lock"), lock.read(timeout=0.0):
                pass
            assert lock.reader_count == 0
        finally:
            release.set()
            thread.join(timeout=5)

    def test_timed_out_writer_unblocks_readers(self) -> None:
        """A writer that gives up no longer holds back new readers."""
        lock = RWLock()
        holding = threading.Event()
        release = threading.Event()

        def reader() -> None:
            with lock.read():
                holding.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            assert holding.wait(timeout=5)
            with pytest.raises(TimeoutError):
                lock.acquire_write(timeout=0.01)
            with lock.read(timeout=1.0):
                assert lock.reader_count == 2
        finally:
            release.set()
            thread.join(timeout=5)

    @pytest.mark.parametrize("timeout", [-1, -0.001])
    def test_negative_timeout_rejected(self, timeout: float) -> None:
        lock = RWLock()
        with pytest.raises(ValueError, match="non-negative"):
            lock.acquire_read(timeout)
        with pytest.raises(ValueError, match="non-negative"):
            lock.acquire_write(timeout)

    def test_zero_timeout_uncontended(self) -> None:
        lock = RWLock()
        with lock.read(timeout=0.0):
            pass
        with lock.write(timeout=0.0):
            pass
