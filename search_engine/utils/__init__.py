"""
Logging and error utilities shared by the search engine.
"""

from .errors import (
    SearchEngineError,
    IndexBuildError,
    QueryError,
    CrawlerError,
    WorkQueueError,
    ConfigurationError,
    ValidationError,
    handle_error
)
from .logging import setup_logging, get_logger, cleanup_old_logs

__all__ = [
    'SearchEngineError',
    'IndexBuildError',
    'QueryError',
    'CrawlerError',
    'WorkQueueError',
    'ConfigurationError',
    'ValidationError',
    'handle_error',
    'setup_logging',
    'get_logger',
    'cleanup_old_logs'
]
