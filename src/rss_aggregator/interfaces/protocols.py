"""Defines protocols for dependency injection and mocking core components."""

from typing import List, Optional, Protocol

from rss_aggregator.models import Article, FeedDescriptor


class FeedFetcherProtocol(Protocol):
    """Protocol defining the interface for fetching a single feed."""

    def fetch(self, feed: FeedDescriptor) -> List[Article]:
        """Fetch and normalize a feed; returns an empty list on failure."""
        ...


class BlobStoreProtocol(Protocol):
    """Protocol defining the interface of the object store holding the snapshot."""

    def put(self, key: str, body: str, content_type: str, cache_control: str) -> None:
        """Store ``body`` under ``key``, replacing any previous blob."""
        ...

    def get(self, key: str) -> Optional[str]:
        """Return the blob stored under ``key``, or None if there is none."""
        ...
