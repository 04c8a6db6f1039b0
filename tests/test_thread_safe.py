"""
Unit tests for thread-safe primitives.
"""

import pytest
import threading

from search_engine.concurrent import AddResult, BoundedSet, ThreadSafeCounter


class TestThreadSafeCounter:
    """Test counter operations."""

    def test_increment_and_decrement(self):
        counter = ThreadSafeCounter(5)

        assert counter.increment() == 6
        assert counter.increment(4) == 10
        assert counter.decrement(3) == 7
        assert counter.reset() == 7
        assert counter.get_value() == 0

    def test_concurrent_increments(self):
        counter = ThreadSafeCounter()

        def work():
            for _ in range(1000):
                counter.increment()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter.get_value() == 8000


class TestBoundedSet:
    """Test the set used to bound a crawl."""

    def test_add_results(self):
        items = BoundedSet(2, ["seed"])

        assert items.add("seed") is AddResult.PRESENT
        assert items.add("a") is AddResult.ADDED
        assert items.add("b") is AddResult.LIMIT_REACHED
        assert items.add("a") is AddResult.PRESENT
        assert len(items) == 2
        assert items.is_full()
        assert "a" in items
        assert "b" not in items

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            BoundedSet(0)

    def test_concurrent_adds_never_exceed_limit(self):
        items = BoundedSet(25)
        added = ThreadSafeCounter()

        def work(offset):
            for i in range(100):
                if items.add(f"url-{offset}-{i}") is AddResult.ADDED:
                    added.increment()

        threads = [threading.Thread(target=work, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(items) == 25
        assert added.get_value() == 25

    def test_snapshot_is_independent(self):
        items = BoundedSet(5, ["a"])
        snapshot = items.snapshot()
        items.add("b")

        assert snapshot == {"a"}
        assert sorted(items) == ["a", "b"]
