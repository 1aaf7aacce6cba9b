import logging
import time
from typing import Callable, List, Optional

import requests
from pydantic import ValidationError

from rss_aggregator.config import DEFAULT_CONVERSION_ENDPOINT
from rss_aggregator.errors import FeedFetchError, RateLimitedError, UpstreamStatusError
from rss_aggregator.models import Article, ConversionResponse, FeedDescriptor, RawItem
from rss_aggregator.text_normalizer import (
    characteristics,
    clean,
    estimate_reading_time,
    smart_truncate,
)

TOO_MANY_REQUESTS = 429
DESCRIPTION_MAX_LENGTH = 200

# Characters that end up in hand-edited feed URLs.
_URL_JUNK = "'\"`"


def sanitize_url(url: str) -> str:
    """
    Trim whitespace and strip stray quote and backtick characters from a feed URL.
    """
    return url.strip().translate(str.maketrans("", "", _URL_JUNK))


def normalize_item(raw: RawItem, feed: FeedDescriptor) -> Article:
    """
    Turn a raw conversion service item into an article of the given feed.
    """
    title = clean(raw.title)
    description = clean(raw.description)
    return Article(
        title=title,
        link=raw.link or "",
        description=smart_truncate(description, DESCRIPTION_MAX_LENGTH),
        full_description=description,
        pub_date=raw.pub_date,
        source=feed.name,
        category=feed.category,
        reading_time=estimate_reading_time(description),
        characteristics=characteristics(title, description),
        content_length=len(description),
    )


class FeedFetcher:
    """
    Fetches one feed through the RSS-to-JSON conversion service.
    """

    def __init__(
            self,
            api_key: str,
            session: Optional[requests.Session] = None,
            endpoint: str = DEFAULT_CONVERSION_ENDPOINT,
            timeout: float = 15.0, # Seconds per attempt
            max_retries: int = 2, # Retries after a 429 response
            backoff_base: float = 2.0, # Seconds; retry n waits 2^n times this
            items_per_feed: int = 20,
            sleep: Callable[[float], None] = time.sleep,
        ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.items_per_feed = items_per_feed
        self._sleep = sleep

    def fetch(self, feed: FeedDescriptor) -> List[Article]:
        """
        Fetch and normalize the items of a feed.

        Never raises: any failure is logged and yields an empty list so that
        the other feeds still contribute.
        """
        logging.info(f"Fetching {feed.name} ({feed.category})")
        try:
            response = self._request(feed)
            articles = [normalize_item(item, feed) for item in response.items]
        except FeedFetchError as e:
            logging.error(f"Failed to fetch {e}")
            return []
        logging.info(f"Fetched {feed.name}: {len(articles)} items")
        return articles

    def request_params(self, feed: FeedDescriptor) -> dict:
        """
        Query parameters of the conversion service request for a feed.
        """
        return {
            "rss_url": sanitize_url(feed.url),
            "api_key": self.api_key,
            "count": self.items_per_feed,
        }

    def _request(self, feed: FeedDescriptor) -> ConversionResponse:
        params = self.request_params(feed)
        attempt = 0
        while True:
            try:
                response = self.session.get(
                    self.endpoint,
                    params=params,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise FeedFetchError(feed.name, f"request failed: {e}") from e

            if response.status_code != TOO_MANY_REQUESTS:
                break
            if attempt >= self.max_retries:
                raise RateLimitedError(feed.name, attempt + 1)
            delay = (2 ** attempt) * self.backoff_base
            logging.warning(f"Rate limited {feed.name}, retrying in {delay:g}s...")
            self._sleep(delay)
            attempt += 1

        if not 200 <= response.status_code < 300:
            raise UpstreamStatusError(feed.name, response.status_code)
        return self._parse(feed, response)

    def _parse(self, feed: FeedDescriptor, response: requests.Response) -> ConversionResponse:
        try:
            data = response.json()
        except ValueError as e:
            raise FeedFetchError(feed.name, "response is not valid JSON") from e

        if not isinstance(data, dict):
            raise FeedFetchError(feed.name, "unexpected response body")
        if data.get("status") != "ok":
            raise FeedFetchError(feed.name, f"API error: {data.get('message') or 'Unknown error'}")

        try:
            return ConversionResponse.model_validate(data)
        except ValidationError as e:
            raise FeedFetchError(feed.name, f"malformed items: {e.error_count()} errors") from e
