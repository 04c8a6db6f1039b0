"""
Search engine: inverted index, concurrent builders, web crawler and query runner.
"""

__version__ = "1.0.0"
