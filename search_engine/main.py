"""
Command-line entry point: build an index from files and/or the web, write
JSON snapshots, run query files and optionally serve a search page.
"""

import sys
import time
import argparse
from typing import Optional

from search_engine.concurrent.work_queue import WorkQueue
from search_engine.crawlers.http_client import FetchConfig, HTMLFetcher
from search_engine.crawlers.web_crawler import WebCrawler
from search_engine.data import json_writer
from search_engine.index.base import BaseInvertedIndex
from search_engine.index.builder import IndexBuilder, ThreadSafeIndexBuilder
from search_engine.index.inverted_index import InvertedIndex
from search_engine.index.query import BaseQueryParser, QueryParser, ThreadSafeQueryParser
from search_engine.index.thread_safe_index import ThreadSafeInvertedIndex
from search_engine.services.search_server import SearchServer
from search_engine.utils.errors import SearchEngineError, ConfigurationError, WorkQueueError, handle_error
from search_engine.utils.logging import get_logger, setup_logging
from config import ConfigManager, SystemConfig


logger = get_logger(__name__)

# Marks an output flag given without a path
DEFAULT_PATH = ""


class SearchEngineApp:
    """Wires the index, builders, crawler and query parser for one run."""

    def __init__(self, config: Optional[SystemConfig] = None):
        """
        Initialize the application.

        Args:
            config: System configuration (defaults when omitted)
        """
        self.config = config or SystemConfig()

        self.index: Optional[BaseInvertedIndex] = None
        self.builder = None
        self.query_parser: Optional[BaseQueryParser] = None
        self.work_queue: Optional[WorkQueue] = None
        self.fetcher: Optional[HTMLFetcher] = None

        self.failed_stages = 0

    @property
    def concurrent(self) -> bool:
        return self.work_queue is not None

    def initialize(self, concurrent: bool, threads: Optional[int] = None) -> None:
        """
        Create the index and its collaborators.

        Args:
            concurrent: Use a work queue and a thread-safe index
            threads: Worker count overriding the configured one

        Raises:
            WorkQueueError: If the worker threads cannot be started
        """
        if not concurrent:
            self.index = InvertedIndex()
            self.builder = IndexBuilder(self.index)
            self.query_parser = QueryParser(self.index)
            logger.info("Initialized single-threaded pipeline")
            return

        if threads is not None:
            self.config.threads = threads

        self.work_queue = WorkQueue(self.config.work_queue_config())
        self.index = ThreadSafeInvertedIndex()
        self.builder = ThreadSafeIndexBuilder(self.index, self.work_queue)
        self.query_parser = ThreadSafeQueryParser(self.index, self.work_queue)
        logger.info(f"Initialized concurrent pipeline with {self.work_queue.size()} thread(s)")

    def _run_stage(self, name: str, operation, *args) -> bool:
        """Run one stage, logging its failure so later stages still run."""
        try:
            operation(*args)
            return True
        except (SearchEngineError, OSError) as e:
            logger.error(f"{name} failed: {e}")
            self.failed_stages += 1
            return False

    def build_from_path(self, path: str) -> bool:
        return self._run_stage("Building index", self.builder.build, path)

    def crawl(self, seed_url: str, limit: Optional[int] = None) -> bool:
        """Crawl from seed_url into the shared index; requires the concurrent pipeline."""
        crawl_limit = limit if limit is not None else self.config.crawler.limit

        def run_crawl():
            if self.fetcher is None:
                self.fetcher = HTMLFetcher(FetchConfig(
                    redirects=self.config.crawler.redirects,
                    timeout=self.config.crawler.request_timeout,
                    user_agent=self.config.crawler.user_agent
                ))
            crawler = WebCrawler(self.index, seed_url, crawl_limit, self.work_queue, self.fetcher)
            crawler.build()

        return self._run_stage("Crawl", run_crawl)

    def write_index(self, path: str) -> bool:
        path = path or self.config.output.index_path
        return self._run_stage("Writing index", json_writer.write_index, self.index, path)

    def write_counts(self, path: str) -> bool:
        path = path or self.config.output.counts_path
        return self._run_stage("Writing counts", json_writer.write_counts, self.index, path)

    def run_queries(self, path: str, exact: bool) -> bool:
        return self._run_stage("Running queries", self.query_parser.parse_file, path, exact)

    def write_results(self, path: str) -> bool:
        path = path or self.config.output.results_path
        return self._run_stage("Writing results", json_writer.write_results,
                               self.query_parser.get_results(), path)

    def serve(self, port: Optional[int] = None) -> None:
        """Serve the search page until interrupted."""
        server = SearchServer(
            self.index,
            host=self.config.server.host,
            port=port if port is not None else self.config.server.port
        )
        server.start(block=True)

    def stop(self) -> None:
        """Shut down the work queue and close the fetcher."""
        if self.work_queue is not None:
            self.work_queue.shutdown()
        if self.fetcher is not None:
            self.fetcher.close()


def create_cli_parser() -> argparse.ArgumentParser:
    """Create command-line interface parser."""
    parser = argparse.ArgumentParser(
        description='Search Engine - inverted index builder, crawler and query runner',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --text docs/ --index                    # Index a directory, write index.json
  %(prog)s --text docs/ --query q.txt --results     # Partial search, write results.json
  %(prog)s --text docs/ --threads 8 --counts out.json
  %(prog)s --url https://example.com/ --limit 20 --port 8080
        """
    )

    # Configuration options
    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Path to configuration file (default: config.json)'
    )

    # Sources
    parser.add_argument(
        '--text', '--path',
        dest='text',
        type=str,
        help='Text file or directory to index (.txt and .text files)'
    )

    parser.add_argument(
        '--url',
        type=str,
        help='Seed URL to crawl (enables the concurrent pipeline)'
    )

    parser.add_argument(
        '--limit',
        type=int,
        help='Maximum number of URLs to crawl (default: 50)'
    )

    parser.add_argument(
        '--threads',
        type=int,
        nargs='?',
        const=0,
        help='Worker threads (enables the concurrent pipeline; values below 1 use 5)'
    )

    # Outputs
    parser.add_argument(
        '--index',
        type=str,
        nargs='?',
        const=DEFAULT_PATH,
        help='Write the inverted index as JSON (default path: index.json)'
    )

    parser.add_argument(
        '--counts',
        type=str,
        nargs='?',
        const=DEFAULT_PATH,
        help='Write word counts per location as JSON (default path: counts.json)'
    )

    # Queries
    parser.add_argument(
        '--query',
        type=str,
        help='File with one query per line'
    )

    parser.add_argument(
        '--exact',
        action='store_true',
        help='Use exact search instead of partial (prefix) search'
    )

    parser.add_argument(
        '--results',
        type=str,
        nargs='?',
        const=DEFAULT_PATH,
        help='Write query results as JSON (default path: results.json)'
    )

    # Server
    parser.add_argument(
        '--port',
        type=int,
        nargs='?',
        const=0,
        help='Serve a search page on this port after building (default: 8080)'
    )

    # Logging options
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Override log level from configuration'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output (equivalent to --log-level DEBUG)'
    )

    return parser


def uses_concurrency(args: argparse.Namespace) -> bool:
    """Check if the run needs the work queue and the thread-safe index."""
    return args.threads is not None or args.url is not None or args.port is not None


def run(args: argparse.Namespace, config: SystemConfig) -> int:
    """
    Run every requested stage in order and return the exit code.

    Stages: index files, crawl, write index, write counts, run queries,
    write results, then serve.
    """
    start = time.perf_counter()
    app = SearchEngineApp(config)

    try:
        app.initialize(uses_concurrency(args), args.threads)

        if args.text is not None:
            app.build_from_path(args.text)

        if args.url is not None:
            app.crawl(args.url, args.limit)

        if args.index is not None:
            app.write_index(args.index)

        if args.counts is not None:
            app.write_counts(args.counts)

        if args.query is not None:
            app.run_queries(args.query, args.exact)

        if args.results is not None:
            app.write_results(args.results)
    finally:
        app.stop()
        elapsed = time.perf_counter() - start
        print(f"Elapsed: {elapsed:f} seconds")

    if args.port is not None:
        app.serve(args.port or None)

    return 1 if app.failed_stages else 0


def main():
    """Main entry point with command-line interface."""
    parser = create_cli_parser()
    args = parser.parse_args()

    exit_code = 0

    try:
        config_manager = ConfigManager(args.config) if args.config else ConfigManager()
        config = config_manager.load_config()

        # Set up logging level
        if args.verbose:
            config.log_level = 'DEBUG'
        elif args.log_level:
            config.log_level = args.log_level

        setup_logging(config.log_level, config.log_file)

        exit_code = run(args, config)

    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
        exit_code = 0
    except (ConfigurationError, WorkQueueError) as e:
        logger.error(f"Application error: {e}")
        exit_code = 1
    except Exception as e:
        handle_error(e, logger, {"operation": "main"}, reraise=False)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
