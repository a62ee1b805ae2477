"""
cache_warmer.py — In-memory cache of fetched listing pages plus a start-up
warm-up that pre-fetches popular boards.

Warm-up is best effort: a board that fails to load is logged and skipped,
and never blocks start-up. Only successful fetches are cached.
"""

import threading
import time
from typing import Callable, Iterable, Optional

from config import CACHE_TTL_SECONDS, CACHE_WARM_DELAY_SECONDS
from errors import FetchError
from monitoring import get_logger
from scrapers.base import PageFetcher

logger = get_logger("cache_warmer")


class ListingCache:
    """Thread-safe url → html cache with a fixed time-to-live."""

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None
            stored_at, html = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[url]
                return None
            return html

    def put(self, url: str, html: str):
        with self._lock:
            self._entries[url] = (self._clock(), html)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CachingFetcher:
    """PageFetcher wrapper that serves cached pages when fresh."""

    def __init__(self, fetcher: PageFetcher, cache: Optional[ListingCache] = None):
        self.fetcher = fetcher
        self.cache = cache if cache is not None else ListingCache()

    def fetch(self, url: str) -> str:
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug(f"Cache hit for {url}")
            return cached
        html = self.fetcher.fetch(url)
        self.cache.put(url, html)
        return html


def warm_cache(
    fetcher: CachingFetcher,
    urls: Iterable[str],
    delay_seconds: float = CACHE_WARM_DELAY_SECONDS,
) -> int:
    """Pre-fetch popular boards. Returns how many were cached."""
    urls = list(urls)
    logger.info(f"Starting cache warm-up with {len(urls)} popular boards...")

    success_count = 0
    for i, url in enumerate(urls):
        try:
            fetcher.fetch(url)
            success_count += 1
            logger.info(f"Cached: {url}")
        except FetchError as e:
            logger.warning(f"Failed to cache '{url}': {e}")
        except Exception as e:
            logger.warning(f"Failed to cache '{url}': {type(e).__name__}: {e}")

        # Small delay to avoid hammering the boards
        if delay_seconds and i < len(urls) - 1:
            time.sleep(delay_seconds)

    logger.info(f"Cache warm-up complete: {success_count}/{len(urls)} boards cached")
    return success_count


def start_background_warmup(
    fetcher: CachingFetcher,
    urls: Iterable[str],
    delay_seconds: float = CACHE_WARM_DELAY_SECONDS,
) -> threading.Thread:
    """Run warm_cache on a daemon thread so start-up never waits for it."""
    thread = threading.Thread(
        target=warm_cache,
        args=(fetcher, list(urls), delay_seconds),
        name="cache-warmup",
        daemon=True,
    )
    thread.start()
    return thread
