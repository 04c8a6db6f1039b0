"""
Builds an inverted index from a directory of text files or from fetched text.
"""

from pathlib import Path
from typing import Iterator, Union

from search_engine.concurrent.work_queue import WorkQueue
from search_engine.text import text_parser
from search_engine.utils.errors import IndexBuildError
from search_engine.utils.logging import get_logger
from .base import BaseInvertedIndex
from .inverted_index import InvertedIndex
from .thread_safe_index import ThreadSafeInvertedIndex


logger = get_logger(__name__)

TEXT_EXTENSIONS = (".txt", ".text")


def is_text_file(path: Path) -> bool:
    """Regular file whose name ends in .txt or .text, ignoring case."""
    return path.is_file() and path.name.lower().endswith(TEXT_EXTENSIONS)


def find_text_files(start: Union[str, Path]) -> Iterator[Path]:
    """
    Yield every text file under start, recursing into subdirectories.

    A start path that is itself a text file yields just that file.
    """
    start = Path(start)
    if start.is_dir():
        try:
            children = sorted(start.iterdir())
        except OSError as e:
            logger.warning(f"Cannot list directory {start}: {e}")
            return
        for child in children:
            yield from find_text_files(child)
    elif is_text_file(start):
        yield start


def index_file(path: Union[str, Path], index: BaseInvertedIndex) -> int:
    """
    Add every stemmed word of a file to index, positions counted from 1
    across all lines.

    Args:
        path: Text file to read as UTF-8
        index: Index to add to

    Returns:
        Number of words indexed

    Raises:
        IndexBuildError: If the file cannot be read or decoded
    """
    path = Path(path)
    location = str(path)
    position = 1

    try:
        with open(path, 'r', encoding='utf-8') as f:
            for line in f:
                for word in text_parser.parse(line):
                    index.add(text_parser.stem(word), location, position)
                    position += 1
    except (OSError, UnicodeDecodeError) as e:
        raise IndexBuildError(f"Unable to read {location}", {"path": location, "error": str(e)})

    return position - 1


def index_text(location: str, text: str, index: BaseInvertedIndex) -> int:
    """
    Add every stemmed word of an in-memory document to index.

    Returns:
        Number of words indexed
    """
    return index.add_all(text_parser.stem_line(text), location)


class IndexBuilder:
    """Populates an index inline, one file after another."""

    def __init__(self, index: BaseInvertedIndex):
        self.index = index

    def add_file(self, path: Union[str, Path]) -> None:
        """
        Index a single file into the builder's index.

        A file that fails part way through leaves the index untouched.

        Raises:
            IndexBuildError: If the file cannot be read
        """
        local_index = InvertedIndex()
        words = index_file(path, local_index)
        self.index.merge(local_index)
        logger.debug(f"Indexed {words} words from {path}")

    def build(self, start: Union[str, Path]) -> None:
        """
        Index every text file under start. Unreadable files are logged and
        skipped.

        Raises:
            IndexBuildError: If start does not exist
        """
        start = Path(start)
        if not start.exists():
            raise IndexBuildError(f"Path does not exist: {start}", {"path": str(start)})

        logger.info(f"Building index from {start}")
        for path in find_text_files(start):
            try:
                self.add_file(path)
            except IndexBuildError as e:
                logger.warning(f"Skipping {path}: {e.details.get('error', e.message)}")


class ThreadSafeIndexBuilder:
    """
    Populates a shared index with one work-queue task per file.

    Each task indexes its file into a private InvertedIndex without any
    locking and then merges it into the shared index once, so the write
    lock is taken once per file rather than once per word.
    """

    def __init__(self, index: ThreadSafeInvertedIndex, work_queue: WorkQueue):
        self.index = index
        self.work_queue = work_queue

    def add_file(self, path: Union[str, Path]) -> None:
        """Submit a task indexing path; returns before the file is indexed."""
        path = Path(path)
        self.work_queue.submit(lambda: self._index_task(path))

    def submit_directory(self, start: Union[str, Path]) -> int:
        """
        Submit one task per text file under start without waiting for them.

        Returns:
            Number of tasks submitted

        Raises:
            IndexBuildError: If start does not exist
        """
        start = Path(start)
        if not start.exists():
            raise IndexBuildError(f"Path does not exist: {start}", {"path": str(start)})

        submitted = 0
        for path in find_text_files(start):
            self.add_file(path)
            submitted += 1

        logger.info(f"Submitted {submitted} file(s) from {start}")
        return submitted

    def build(self, start: Union[str, Path]) -> None:
        """Submit every text file under start and wait until all are merged."""
        self.submit_directory(start)
        self.work_queue.drain()
        logger.info(f"Finished building index from {start}")

    def _index_task(self, path: Path) -> None:
        local_index = InvertedIndex()
        try:
            words = index_file(path, local_index)
        except IndexBuildError as e:
            logger.warning(f"Skipping {path}: {e.details.get('error', e.message)}")
            return

        self.index.merge(local_index)
        logger.debug(f"Merged {words} words from {path}")
