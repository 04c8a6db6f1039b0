"""
Network services exposing the index.
"""

from .search_server import SearchServer, create_app, render_results

__all__ = [
    'SearchServer',
    'create_app',
    'render_results'
]
