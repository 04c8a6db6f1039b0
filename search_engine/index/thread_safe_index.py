"""
Thread-safe inverted index.

Wraps an owned InvertedIndex with a ReadWriteLock: every read and search
takes the shared lock, every mutation takes the exclusive lock, and the
wrapped index does the actual work.
"""

from typing import Collection, Dict, List, Optional

from search_engine.concurrent.read_write_lock import ReadWriteLock
from .base import BaseInvertedIndex
from .inverted_index import InvertedIndex
from .models import QueryResult


class ThreadSafeInvertedIndex(BaseInvertedIndex):
    """Inverted index safe for concurrent readers and writers."""

    def __init__(self, index: Optional[InvertedIndex] = None):
        """
        Args:
            index: Index to take ownership of (a new empty one by default)
        """
        self._index = index if index is not None else InvertedIndex()
        self._lock = ReadWriteLock()

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    def add(self, term: str, location: str, position: int) -> bool:
        with self._lock.write_lock():
            return self._index.add(term, location, position)

    def add_all(self, terms: Collection[str], location: str, start: int = 1) -> int:
        with self._lock.write_lock():
            return self._index.add_all(terms, location, start)

    def merge(self, other: InvertedIndex) -> None:
        """
        Merge a task-local index under a single write lock acquisition.

        Args:
            other: Private index not shared with other threads
        """
        with self._lock.write_lock():
            self._index.merge(other)

    def get_terms(self) -> List[str]:
        with self._lock.read_lock():
            return self._index.get_terms()

    def get_locations(self, term: str) -> List[str]:
        with self._lock.read_lock():
            return self._index.get_locations(term)

    def get_positions(self, term: str, location: str) -> List[int]:
        with self._lock.read_lock():
            return self._index.get_positions(term, location)

    def get_count(self, location: str) -> int:
        with self._lock.read_lock():
            return self._index.get_count(location)

    def get_counts(self) -> Dict[str, int]:
        with self._lock.read_lock():
            return self._index.get_counts()

    def to_dict(self) -> Dict[str, Dict[str, List[int]]]:
        with self._lock.read_lock():
            return self._index.to_dict()

    def contains(self, term: str, location: Optional[str] = None, position: Optional[int] = None) -> bool:
        with self._lock.read_lock():
            return self._index.contains(term, location, position)

    def num_terms(self) -> int:
        with self._lock.read_lock():
            return self._index.num_terms()

    def num_locations(self) -> int:
        with self._lock.read_lock():
            return self._index.num_locations()

    def exact_search(self, terms: Collection[str]) -> List[QueryResult]:
        with self._lock.read_lock():
            return self._index.exact_search(terms)

    def partial_search(self, terms: Collection[str]) -> List[QueryResult]:
        with self._lock.read_lock():
            return self._index.partial_search(terms)

    def __repr__(self) -> str:
        with self._lock.read_lock():
            return f"ThreadSafeInvertedIndex(terms={self._index.num_terms()}, locations={self._index.num_locations()})"
