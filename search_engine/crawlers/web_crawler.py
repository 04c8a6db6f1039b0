"""
Bounded breadth-first web crawler feeding a shared inverted index.
"""

from typing import Optional, Set

from search_engine.concurrent.thread_safe import AddResult, BoundedSet
from search_engine.concurrent.work_queue import WorkQueue
from search_engine.index.builder import index_text
from search_engine.index.inverted_index import InvertedIndex
from search_engine.index.thread_safe_index import ThreadSafeInvertedIndex
from search_engine.utils.errors import CrawlerError
from search_engine.utils.logging import get_logger
from .http_client import HTMLFetcher
from .link_parser import clean_url, list_links, strip_html


logger = get_logger(__name__)

DEFAULT_LIMIT = 50


class WebCrawler:
    """
    Crawls outward from a seed URL, one work-queue task per page.

    A task fetches its page, queues every newly discovered link while the
    visited set is below the limit, then indexes the page's visible text
    into a private index and merges it into the shared one. The limit counts
    every URL ever queued, seed included, whether or not its fetch succeeds.
    """

    def __init__(
        self,
        index: ThreadSafeInvertedIndex,
        seed_url: str,
        limit: int,
        work_queue: WorkQueue,
        fetcher: Optional[HTMLFetcher] = None
    ):
        """
        Initialize crawler.

        Args:
            index: Shared index to merge pages into
            seed_url: First URL to crawl, marked visited immediately
            limit: Maximum number of URLs to crawl
            work_queue: Queue running the page tasks
            fetcher: HTML fetcher (a default HTMLFetcher if omitted)

        Raises:
            CrawlerError: If the seed URL is malformed or the limit is below 1
        """
        if limit < 1:
            raise CrawlerError("Crawl limit must be at least 1", {"limit": limit})

        try:
            self.seed_url = clean_url(seed_url)
        except ValueError as e:
            raise CrawlerError(f"Invalid seed URL: {seed_url}", {"error": str(e)})

        self.index = index
        self.limit = limit
        self.work_queue = work_queue
        self.fetcher = fetcher or HTMLFetcher()
        self._visited = BoundedSet(limit, [self.seed_url])

    def start(self) -> None:
        """Submit the seed task without waiting for the crawl to finish."""
        logger.info(f"Crawling from {self.seed_url} (limit {self.limit})")
        self.work_queue.submit(lambda: self._crawl_task(self.seed_url))

    def build(self) -> None:
        """Crawl from the seed and wait until every page task has finished."""
        self.start()
        self.work_queue.drain()
        logger.info(f"Crawl finished: {len(self._visited)} URL(s) visited")

    @property
    def visited(self) -> Set[str]:
        """Snapshot of every URL queued so far."""
        return self._visited.snapshot()

    def _crawl_task(self, url: str) -> None:
        html = self.fetcher.fetch(url)
        if html is None:
            logger.warning(f"Skipping {url}: no HTML content")
            return

        self._enqueue_links(url, html)

        local_index = InvertedIndex()
        words = index_text(url, strip_html(html), local_index)
        self.index.merge(local_index)
        logger.debug(f"Indexed {words} words from {url}")

    def _enqueue_links(self, url: str, html: str) -> None:
        for link in list_links(url, html):
            result = self._visited.add(link)
            if result is AddResult.LIMIT_REACHED:
                break
            if result is AddResult.ADDED:
                self.work_queue.submit(lambda link=link: self._crawl_task(link))
