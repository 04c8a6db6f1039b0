"""
Web crawling: HTML fetching, link parsing and the breadth-first crawler.
"""

from .http_client import HTMLFetcher, FetchConfig, is_html, is_redirect
from .link_parser import clean_url, list_links, strip_html
from .web_crawler import WebCrawler, DEFAULT_LIMIT

__all__ = [
    'HTMLFetcher',
    'FetchConfig',
    'is_html',
    'is_redirect',
    'clean_url',
    'list_links',
    'strip_html',
    'WebCrawler',
    'DEFAULT_LIMIT'
]
