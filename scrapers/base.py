"""
base.py — Plain-HTTP page fetcher for job board listing pages.
Sends browser-like headers to reduce anti-bot rejections; no JS rendering.
"""

import random
from typing import Optional
from urllib.parse import urlparse

import httpx

from errors import HttpStatusFetchError, TransportFetchError
from monitoring import get_logger

logger = get_logger("scrapers.base")

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36 Edg/120.0.0.0",
]


def default_headers(user_agent: Optional[str] = None) -> dict[str, str]:
    return {
        "User-Agent": user_agent or random.choice(USER_AGENTS),
        "Referer": "https://www.google.com",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
    }


def is_well_formed_url(url: str) -> bool:
    parsed = urlparse(url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class PageFetcher:
    """
    Fetches a listing page and returns its HTML.

    Raises HttpStatusFetchError on non-2xx responses and TransportFetchError for
    anything that prevents a response (timeouts, DNS, refused connections,
    malformed URLs). `transport` is an optional httpx transport for tests.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    def fetch(self, url: str) -> str:
        if not is_well_formed_url(url):
            raise TransportFetchError(url, f"Malformed URL: {url!r}")

        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers=default_headers(self.user_agent),
                transport=self.transport,
            ) as client:
                response = client.get(url)
        except httpx.TimeoutException as e:
            raise TransportFetchError(url, f"Timed out after {self.timeout:.0f}s fetching {url}", cause=e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportFetchError(url, f"{type(e).__name__}: {e}", cause=e) from e

        if not response.is_success:
            raise HttpStatusFetchError(url, response.status_code)

        logger.debug(f"Fetched {url} ({len(response.text)} chars, final URL {response.url})")
        return response.text
