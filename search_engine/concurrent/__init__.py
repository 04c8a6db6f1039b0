"""
Concurrency primitives for parallel indexing and crawling.

Main Components:
- WorkQueue: fixed pool of worker threads with drain-to-quiescence
- ReadWriteLock: shared/exclusive lock protecting the shared index
- ThreadSafeCounter, BoundedSet: small shared-state helpers
"""

from .models import WorkQueueConfig, WorkerState, DEFAULT_THREADS
from .read_write_lock import ReadWriteLock
from .thread_safe import ThreadSafeCounter, BoundedSet, AddResult
from .work_queue import WorkQueue, PoolWorker

__all__ = [
    'WorkQueueConfig',
    'WorkerState',
    'DEFAULT_THREADS',
    'ReadWriteLock',
    'ThreadSafeCounter',
    'BoundedSet',
    'AddResult',
    'WorkQueue',
    'PoolWorker'
]
