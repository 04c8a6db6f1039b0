"""
Custom exception classes and error handling utilities.
"""

from typing import Optional, Dict, Any
import traceback


class SearchEngineError(Exception):
    """Base exception for all search engine errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class IndexBuildError(SearchEngineError):
    """Exception raised while reading or indexing a document."""
    pass


class QueryError(SearchEngineError):
    """Exception raised while reading or running queries."""
    pass


class CrawlerError(SearchEngineError):
    """Exception raised during crawling operations."""
    pass


class WorkQueueError(SearchEngineError):
    """Exception raised by the work queue (thread start failure, use after shutdown)."""
    pass


class ConfigurationError(SearchEngineError):
    """Exception raised for configuration-related issues."""
    pass


class ValidationError(SearchEngineError):
    """Exception raised for data validation failures."""
    pass


def handle_error(
    error: Exception,
    logger,
    context: Optional[Dict[str, Any]] = None,
    reraise: bool = True
) -> None:
    """
    Handle and log errors with context information.
    
    Args:
        error: The exception that occurred
        logger: Logger instance to use for logging
        context: Additional context information
        reraise: Whether to reraise the exception after logging
    """
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **(context or {})
    }
    
    if isinstance(error, SearchEngineError):
        error_context.update(error.details)
    
    logger.error(f"Error occurred: {error_context}")
    logger.debug(traceback.format_exc())
    
    if reraise:
        raise error
