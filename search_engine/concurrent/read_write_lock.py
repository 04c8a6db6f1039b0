"""
Shared/exclusive lock built on a single condition variable.

Readers block only while a writer is active; writers block while any reader
or writer is active. There is no fairness: a steady stream of readers can
keep a writer waiting indefinitely.
"""

import threading
from types import TracebackType
from typing import Optional, Type


class _LockHandle:
    """Scoped acquire/release handle returned by ReadWriteLock."""
    
    def __init__(self, acquire, release):
        self._acquire = acquire
        self._release = release
    
    def acquire(self) -> None:
        """Block until the lock is held."""
        self._acquire()
    
    def release(self) -> None:
        """Release the lock."""
        self._release()
    
    def __enter__(self) -> "_LockHandle":
        self._acquire()
        return self
    
    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType]
    ) -> None:
        self._release()


class ReadWriteLock:
    """Maintains a pair of associated locks, one shared for reading and one exclusive for writing."""
    
    def __init__(self):
        self._monitor = threading.Condition(threading.Lock())
        self._active_readers = 0
        self._active_writers = 0
        self._read_handle = _LockHandle(self._acquire_read, self._release_read)
        self._write_handle = _LockHandle(self._acquire_write, self._release_write)
    
    def read_lock(self) -> _LockHandle:
        """
        Returns the reader lock.
        
        Use as ``with lock.read_lock(): ...``.
        """
        return self._read_handle
    
    def write_lock(self) -> _LockHandle:
        """
        Returns the writer lock.
        
        Use as ``with lock.write_lock(): ...``.
        """
        return self._write_handle
    
    @property
    def active_readers(self) -> int:
        with self._monitor:
            return self._active_readers
    
    @property
    def active_writers(self) -> int:
        with self._monitor:
            return self._active_writers
    
    def _acquire_read(self) -> None:
        with self._monitor:
            while self._active_writers > 0:
                self._monitor.wait()
            self._active_readers += 1
    
    def _release_read(self) -> None:
        with self._monitor:
            if self._active_readers <= 0:
                raise RuntimeError("release of an unheld read lock")
            self._active_readers -= 1
            if self._active_readers == 0:
                self._monitor.notify_all()
    
    def _acquire_write(self) -> None:
        with self._monitor:
            while self._active_readers > 0 or self._active_writers > 0:
                self._monitor.wait()
            self._active_writers += 1
    
    def _release_write(self) -> None:
        with self._monitor:
            if self._active_writers <= 0:
                raise RuntimeError("release of an unheld write lock")
            self._active_writers -= 1
            self._monitor.notify_all()
    
    def __repr__(self) -> str:
        return f"ReadWriteLock(readers={self.active_readers}, writers={self.active_writers})"
