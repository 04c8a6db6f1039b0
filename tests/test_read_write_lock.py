"""
Unit tests for ReadWriteLock.
"""

import pytest
import threading
import time

from search_engine.concurrent.read_write_lock import ReadWriteLock


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.005)
    return True


class TestReadWriteLock:
    """Test shared and exclusive locking."""

    def test_multiple_readers_hold_lock_together(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=5)
        errors = []

        def reader():
            try:
                with lock.read_lock():
                    # all three readers must be inside at once to pass
                    inside.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert errors == []
        assert lock.active_readers == 0

    def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer():
            with lock.write_lock():
                acquired.set()

        lock.read_lock().acquire()
        thread = threading.Thread(target=writer)
        thread.start()

        assert not acquired.wait(0.1)
        lock.read_lock().release()

        assert acquired.wait(5)
        thread.join(timeout=5)

    def test_reader_waits_for_writer(self):
        lock = ReadWriteLock()
        acquired = threading.Event()

        def reader():
            with lock.read_lock():
                acquired.set()

        lock.write_lock().acquire()
        thread = threading.Thread(target=reader)
        thread.start()

        assert not acquired.wait(0.1)
        assert lock.active_writers == 1
        lock.write_lock().release()

        assert acquired.wait(5)
        thread.join(timeout=5)

    def test_writers_are_exclusive(self):
        lock = ReadWriteLock()
        active = []
        overlaps = []

        def writer():
            for _ in range(50):
                with lock.write_lock():
                    active.append(1)
                    if len(active) > 1:
                        overlaps.append(len(active))
                    active.pop()

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert overlaps == []
        assert lock.active_writers == 0

    def test_read_write_counts_track_holders(self):
        lock = ReadWriteLock()

        with lock.read_lock():
            with lock.read_lock():
                assert lock.active_readers == 2
            assert lock.active_readers == 1

        assert lock.active_readers == 0

        with lock.write_lock():
            assert lock.active_writers == 1
            assert lock.active_readers == 0

    def test_lock_released_when_block_raises(self):
        lock = ReadWriteLock()

        with pytest.raises(KeyError):
            with lock.write_lock():
                raise KeyError("boom")

        assert lock.active_writers == 0
        with lock.read_lock():
            assert lock.active_readers == 1

    def test_release_unheld_lock_raises(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            lock.read_lock().release()

        with pytest.raises(RuntimeError):
            lock.write_lock().release()

    def test_waiting_writer_proceeds_after_all_readers_leave(self):
        lock = ReadWriteLock()
        written = threading.Event()

        lock.read_lock().acquire()
        lock.read_lock().acquire()

        thread = threading.Thread(target=lambda: (lock.write_lock().acquire(), written.set()))
        thread.start()

        lock.read_lock().release()
        assert not written.wait(0.1)

        lock.read_lock().release()
        assert written.wait(5)
        assert wait_until(lambda: lock.active_writers == 1)
        lock.write_lock().release()
        thread.join(timeout=5)

    def test_new_reader_enters_while_writer_waits(self):
        lock = ReadWriteLock()
        writer_acquired = threading.Event()
        reader_acquired = threading.Event()
        reader_done = threading.Event()

        def writer():
            with lock.write_lock():
                writer_acquired.set()

        def reader():
            with lock.read_lock():
                reader_acquired.set()
                reader_done.wait(5)

        lock.read_lock().acquire()
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        assert not writer_acquired.wait(0.1)

        # readers are preferred: the waiting writer does not block a new reader
        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        assert reader_acquired.wait(5)
        assert lock.active_readers == 2
        assert not writer_acquired.is_set()

        lock.read_lock().release()
        reader_done.set()
        reader_thread.join(timeout=5)

        assert writer_acquired.wait(5)
        writer_thread.join(timeout=5)
