"""
URL Fetcher - Download a web page for ingestion.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..errors import ProcessingError

logger = logging.getLogger(__name__)


@dataclass
class FetchedPage:
    """Raw payload of a fetched URL."""
    url: str
    content: bytes
    encoding: Optional[str] = None
    status_code: int = 200


class UrlFetcher:
    """
    Blocking HTTP GET with a timeout.

    Usage:
        page = UrlFetcher().fetch("https://example.com/article.html")
    """

    def __init__(self, timeout: float = None, user_agent: str = None, session=None):
        """
        Initialize fetcher.

        Args:
            timeout: Request timeout in seconds (defaults to config)
            user_agent: User-Agent header (defaults to config)
            session: Optional requests.Session to reuse
        """
        from ..config import config

        self.timeout = timeout or config.output.fetch_timeout
        self.user_agent = user_agent or config.output.user_agent
        self.session = session or requests

    def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a URL.

        Args:
            url: HTTP or HTTPS URL

        Returns:
            FetchedPage with the raw response body
        """
        logger.info("Fetching %s", url)
        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent}
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ProcessingError(f"Failed to fetch URL ({e}): {url}") from e
        except requests.RequestException as e:
            raise ProcessingError(f"Error fetching URL {url}: {e}") from e

        return FetchedPage(
            url=url,
            content=response.content,
            encoding=response.encoding,
            status_code=response.status_code
        )
