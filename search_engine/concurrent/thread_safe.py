"""
Thread-safe primitives shared by indexing and crawl tasks.
"""

import threading
from enum import Enum
from typing import Hashable, Iterable, Iterator, Optional, Set


class ThreadSafeCounter:
    """Integer counter whose updates are atomic."""

    def __init__(self, initial_value: int = 0):
        self._value = initial_value
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Add amount and return the updated value."""
        with self._lock:
            self._value += amount
            return self._value

    def decrement(self, amount: int = 1) -> int:
        """Subtract amount and return the updated value."""
        return self.increment(-amount)

    def get_value(self) -> int:
        with self._lock:
            return self._value

    def reset(self) -> int:
        """Set the counter back to zero and return what it held."""
        with self._lock:
            value, self._value = self._value, 0
            return value

    def __repr__(self) -> str:
        return f"ThreadSafeCounter(value={self.get_value()})"


class AddResult(Enum):
    """Outcome of BoundedSet.add."""
    ADDED = "added"
    PRESENT = "present"
    LIMIT_REACHED = "limit_reached"


class BoundedSet:
    """
    Set that stops growing at a fixed size.

    The membership test, the size test and the insert of add() happen in one
    critical section, so concurrent adds never take the set past its limit.
    """

    def __init__(self, limit: int, initial_items: Optional[Iterable[Hashable]] = None):
        """
        Args:
            limit: Maximum number of items; initial items count toward it
            initial_items: Items present from the start, even beyond the limit

        Raises:
            ValueError: If limit is below 1
        """
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        self.limit = limit
        self._items: Set[Hashable] = set(initial_items or ())
        self._lock = threading.Lock()

    def add(self, item: Hashable) -> AddResult:
        """
        Add item unless it is already present or the set is full.

        Returns:
            PRESENT if item was already there, LIMIT_REACHED if the set holds
            limit items, ADDED otherwise
        """
        with self._lock:
            if item in self._items:
                return AddResult.PRESENT
            if len(self._items) >= self.limit:
                return AddResult.LIMIT_REACHED
            self._items.add(item)
            return AddResult.ADDED

    def is_full(self) -> bool:
        with self._lock:
            return len(self._items) >= self.limit

    def snapshot(self) -> Set[Hashable]:
        """Copy of the current items."""
        with self._lock:
            return set(self._items)

    def __contains__(self, item: Hashable) -> bool:
        with self._lock:
            return item in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"BoundedSet(size={len(self)}, limit={self.limit})"
