"""
HTML helpers for the crawler: link extraction, URL cleaning and tag stripping.
"""

import warnings
from typing import List
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, Comment, MarkupResemblesLocatorWarning

warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)


HTML_PARSER = "html.parser"
LINK_SCHEMES = ("http", "https")
INVISIBLE_ELEMENTS = ["head", "script", "style", "noscript", "template"]


def clean_url(url: str) -> str:
    """
    Drop the fragment of url and lowercase its scheme and host.

    Returns:
        Cleaned URL

    Raises:
        ValueError: If url cannot be parsed
    """
    parts = urlsplit(url.strip())
    # userinfo is case sensitive, host and port are not
    userinfo, at, host_port = parts.netloc.rpartition('@')
    netloc = userinfo + at + host_port.lower()
    return urlunsplit((parts.scheme.lower(), netloc, parts.path, parts.query, ''))


def list_links(base: str, html: str) -> List[str]:
    """
    Return every http(s) link in the href of an anchor tag, in document
    order, resolved against base and cleaned. Links that cannot be resolved
    are skipped.

    Args:
        base: URL the html was fetched from
        html: Raw page HTML
    """
    soup = BeautifulSoup(html, HTML_PARSER)
    links = []

    for anchor in soup.find_all('a', href=True):
        href = anchor['href'].strip()
        if not href:
            continue

        try:
            absolute = clean_url(urljoin(base, href))
        except ValueError:
            continue

        if urlsplit(absolute).scheme in LINK_SCHEMES:
            links.append(absolute)

    return links


def strip_html(html: str) -> str:
    """
    Return the visible text of html: comments and head, script, style,
    noscript and template elements removed, tags dropped, entities decoded.
    """
    soup = BeautifulSoup(html, HTML_PARSER)

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for element in soup(INVISIBLE_ELEMENTS):
        element.decompose()

    return soup.get_text(separator=" ")
