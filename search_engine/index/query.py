"""
Parses query files into canonical term sets and records their search results.
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from search_engine.concurrent.work_queue import WorkQueue
from search_engine.text import text_parser
from search_engine.utils.errors import QueryError
from search_engine.utils.logging import get_logger
from .base import BaseInvertedIndex
from .models import QueryResult
from .thread_safe_index import ThreadSafeInvertedIndex


logger = get_logger(__name__)


def canonical_query(line: str) -> Optional[str]:
    """
    Sorted, deduplicated stems of line joined by single spaces, or None
    when the line has no words.
    """
    stems = text_parser.unique_stems(line)
    if not stems:
        return None
    return " ".join(stems)


class BaseQueryParser(ABC):
    """Registry of canonical query -> ranked results."""

    def parse_file(self, path: Union[str, Path], exact: bool) -> None:
        """
        Run every line of a query file.

        Raises:
            QueryError: If the file cannot be read
        """
        path = Path(path)
        logger.info(f"Running {'exact' if exact else 'partial'} queries from {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                for line in f:
                    self.parse_line(line, exact)
        except (OSError, UnicodeDecodeError) as e:
            raise QueryError(f"Unable to read queries from {path}", {"path": str(path), "error": str(e)})

    @abstractmethod
    def parse_line(self, line: str, exact: bool) -> None:
        """Search for one query line unless its canonical form was already run."""
        pass

    @abstractmethod
    def get_results(self) -> Dict[str, List[QueryResult]]:
        """Snapshot of canonical query -> results, ordered by query."""
        pass

    def get_queries(self) -> List[str]:
        return list(self.get_results())

    def get_query_results(self, query: str) -> List[QueryResult]:
        """Results for a canonical query, empty if it was never run."""
        return self.get_results().get(query, [])


class QueryParser(BaseQueryParser):
    """Runs queries inline against an index."""

    def __init__(self, index: BaseInvertedIndex):
        self.index = index
        self._results: Dict[str, List[QueryResult]] = {}

    def parse_line(self, line: str, exact: bool) -> None:
        query = canonical_query(line)
        if query is None or query in self._results:
            return

        self._results[query] = self.index.search(query.split(" "), exact)

    def get_results(self) -> Dict[str, List[QueryResult]]:
        return {query: list(self._results[query]) for query in sorted(self._results)}


class ThreadSafeQueryParser(BaseQueryParser):
    """
    Runs one work-queue task per query line.

    A task claims its canonical query before searching, so two lines with
    the same canonical form are searched once no matter how their tasks
    interleave.
    """

    def __init__(self, index: ThreadSafeInvertedIndex, work_queue: WorkQueue):
        self.index = index
        self.work_queue = work_queue
        self._results: Dict[str, List[QueryResult]] = {}
        self._claimed: Set[str] = set()
        self._lock = threading.Lock()

    def parse_file(self, path: Union[str, Path], exact: bool) -> None:
        """
        Submit every line of a query file and wait until all are done.

        Lines submitted before a read error still finish before the error
        propagates.
        """
        try:
            super().parse_file(path, exact)
        finally:
            self.work_queue.drain()

    def parse_line(self, line: str, exact: bool) -> None:
        """Submit a task for line; returns before the search runs."""
        self.work_queue.submit(lambda: self._query_task(line, exact))

    def _query_task(self, line: str, exact: bool) -> None:
        query = canonical_query(line)
        if query is None:
            return

        with self._lock:
            if query in self._claimed:
                return
            self._claimed.add(query)

        try:
            results = self.index.search(query.split(" "), exact)
        except Exception:
            # failed queries stay unclaimed
            with self._lock:
                self._claimed.discard(query)
            raise

        with self._lock:
            self._results[query] = results

    def get_results(self) -> Dict[str, List[QueryResult]]:
        with self._lock:
            return {query: list(self._results[query]) for query in sorted(self._results)}
