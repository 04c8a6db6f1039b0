"""
HTTP client that fetches HTML pages, following a bounded number of redirects.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from search_engine.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class FetchConfig:
    """Fetch configuration."""
    redirects: int = 3
    timeout: float = 30.0
    user_agent: str = "search-engine-crawler/1.0"
    pool_maxsize: int = 10


def is_html(headers: Dict[str, str]) -> bool:
    """True if the Content-Type header starts with text/html."""
    return headers.get('Content-Type', '').lower().startswith('text/html')


def is_redirect(status_code: int, headers: Dict[str, str]) -> bool:
    """True for a 3xx response carrying a Location header."""
    return 300 <= status_code <= 399 and bool(headers.get('Location'))


class HTMLFetcher:
    """
    Fetches the body of HTML pages.

    Only a 200 response whose Content-Type is text/html yields content; a
    3xx with a Location header is followed while the redirect budget lasts;
    everything else, including network errors and malformed URLs, yields
    None. Each thread uses its own requests session.
    """

    def __init__(self, config: Optional[FetchConfig] = None):
        """
        Initialize HTML fetcher.

        Args:
            config: Fetch configuration
        """
        self.config = config or FetchConfig()
        self._local = threading.local()

    def _create_session(self) -> requests.Session:
        """Create a requests session that never retries or follows redirects on its own."""
        session = requests.Session()

        retry_strategy = Retry(total=0, redirect=0, raise_on_redirect=False, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_maxsize=self.config.pool_maxsize)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml;q=0.9,*/*;q=0.8'
        })
        return session

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._local.session = self._create_session()
        return session

    def fetch(self, url: str, redirects: Optional[int] = None) -> Optional[str]:
        """
        Fetch the HTML of url.

        Args:
            url: Absolute http(s) URL
            redirects: Redirect budget (defaults to the configured one)

        Returns:
            Page HTML, or None if the page is not a fetchable HTML page
        """
        remaining = self.config.redirects if redirects is None else redirects

        while True:
            try:
                with self.session.get(
                    url,
                    allow_redirects=False,
                    timeout=self.config.timeout,
                    stream=True
                ) as response:
                    status_code = response.status_code
                    headers = response.headers

                    if status_code == 200 and is_html(headers):
                        return response.text

                    if is_redirect(status_code, headers) and remaining > 0:
                        location = urljoin(url, headers['Location'])
                        logger.debug(f"Following redirect {url} -> {location} ({remaining} left)")
                        url = location
                        remaining -= 1
                        continue

                    logger.debug(f"Not indexing {url}: status={status_code}, "
                                 f"content-type={headers.get('Content-Type')}")
                    return None

            except requests.exceptions.RequestException as e:
                logger.warning(f"Failed to fetch {url}: {e}")
                return None

    def close(self) -> None:
        """Close the calling thread's session."""
        session = getattr(self._local, 'session', None)
        if session is not None:
            session.close()
            self._local.session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
