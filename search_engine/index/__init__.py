"""
Inverted index, builders and query parsers.
"""

from .models import QueryResult
from .base import BaseInvertedIndex
from .inverted_index import InvertedIndex
from .thread_safe_index import ThreadSafeInvertedIndex
from .builder import IndexBuilder, ThreadSafeIndexBuilder, index_file, index_text, find_text_files, is_text_file
from .query import BaseQueryParser, QueryParser, ThreadSafeQueryParser, canonical_query

__all__ = [
    'QueryResult',
    'BaseInvertedIndex',
    'InvertedIndex',
    'ThreadSafeInvertedIndex',
    'IndexBuilder',
    'ThreadSafeIndexBuilder',
    'index_file',
    'index_text',
    'find_text_files',
    'is_text_file',
    'BaseQueryParser',
    'QueryParser',
    'ThreadSafeQueryParser',
    'canonical_query'
]
