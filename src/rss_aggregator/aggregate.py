"""Fetches every configured feed, pacing the requests to the conversion service."""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from rss_aggregator.interfaces.protocols import FeedFetcherProtocol
from rss_aggregator.models import Article, FeedDescriptor


class Aggregator:
    """Runs the fetcher over all feeds and collects the results in feed order."""

    def __init__(
        self,
        fetcher: FeedFetcherProtocol,
        pause: float = 0.5,
        max_workers: int = 1,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the aggregator.

        Args:
            fetcher: Fetches and normalizes a single feed.
            pause: Seconds between two consecutive fetch starts.
            max_workers: Feeds fetched concurrently; 1 fetches strictly one at a time.
            sleep: Sleep function, replaced in tests.
            clock: Monotonic clock used to space concurrent starts.
        """
        self.fetcher = fetcher
        self.pause = pause
        self.max_workers = max_workers
        self._sleep = sleep
        self._clock = clock
        self._start_lock = threading.Lock()
        self._last_start: Optional[float] = None

    def fetch_all(self, feeds: List[FeedDescriptor]) -> List[List[Article]]:
        """Fetch all feeds.

        Returns:
            One article list per feed, in the order of ``feeds``. A feed that
            failed contributes an empty list.
        """
        logging.info(f"Fetching {len(feeds)} RSS feeds.")
        if self.max_workers > 1 and len(feeds) > 1:
            return self._fetch_parallel(feeds)
        return self._fetch_sequential(feeds)

    def _fetch_sequential(self, feeds: List[FeedDescriptor]) -> List[List[Article]]:
        results = []
        for index, feed in enumerate(feeds):
            if index > 0:
                self._sleep(self.pause)
            results.append(self._fetch_one(feed))
        return results

    def _fetch_parallel(self, feeds: List[FeedDescriptor]) -> List[List[Article]]:
        self._last_start = None
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map keeps the input order regardless of completion order
            return list(executor.map(self._fetch_paced, feeds))

    def _fetch_paced(self, feed: FeedDescriptor) -> List[Article]:
        with self._start_lock:
            if self._last_start is not None:
                wait = self._last_start + self.pause - self._clock()
                if wait > 0:
                    self._sleep(wait)
            self._last_start = self._clock()
        return self._fetch_one(feed)

    def _fetch_one(self, feed: FeedDescriptor) -> List[Article]:
        try:
            return self.fetcher.fetch(feed)
        except Exception as e:
            logging.error(f"Unhandled error fetching feed {feed.name}: {e}")
            return []
