"""Assembly and persistence of the aggregated snapshot."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from rss_aggregator.config import DEFAULT_SNAPSHOT_KEY
from rss_aggregator.errors import BlobStoreError, SnapshotWriteError
from rss_aggregator.interfaces.protocols import BlobStoreProtocol
from rss_aggregator.models import (
    Article,
    FeedDescriptor,
    Snapshot,
    SnapshotSummary,
    SourceSummary,
    Stats,
)

CONTENT_TYPE = "application/json"
CACHE_CONTROL = "public, max-age=300"


def iso_timestamp(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def source_summaries(articles: List[Article], feeds: List[FeedDescriptor]) -> List[SourceSummary]:
    """Per-feed article counts, in feed order."""
    return [
        SourceSummary(
            name=feed.name,
            category=feed.category,
            count=sum(1 for article in articles if article.source == feed.name),
        )
        for feed in feeds
    ]


def build_snapshot(
    articles: List[Article],
    feeds: List[FeedDescriptor],
    stats: Stats,
    timestamp: datetime,
    fetch_duration_ms: int,
) -> Snapshot:
    """Assemble the snapshot from the sorted articles and their stats."""
    return Snapshot(
        items=articles,
        summary=SnapshotSummary(
            total=len(articles),
            timestamp=iso_timestamp(timestamp),
            fetch_duration=fetch_duration_ms,
            sources=source_summaries(articles, feeds),
            category_counts=stats.category_counts,
            trending_topics=stats.trending_topics,
            fresh_content=stats.fresh_content,
        ),
    )


class SnapshotWriter:
    """Saves and loads the snapshot blob."""

    def __init__(self, blob_store: BlobStoreProtocol, key: str = DEFAULT_SNAPSHOT_KEY):
        self.blob_store = blob_store
        self.key = key

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot, replacing any previous one.

        Raises:
            SnapshotWriteError: If the blob store rejects the write.
        """
        body = snapshot.to_json(indent=2)
        try:
            self.blob_store.put(
                self.key,
                body,
                content_type=CONTENT_TYPE,
                cache_control=CACHE_CONTROL,
            )
        except BlobStoreError as e:
            logging.error(f"Error saving snapshot: {e}")
            raise SnapshotWriteError(str(e)) from e
        logging.info(f"Saved snapshot to {self.key}")

    def load(self) -> Optional[Snapshot]:
        """Load the stored snapshot.

        Returns:
            The snapshot, or None if it is missing or unreadable.
        """
        try:
            body = self.blob_store.get(self.key)
        except BlobStoreError as e:
            logging.info(f"No existing snapshot found: {e}")
            return None
        if body is None:
            logging.info(f"No existing snapshot found at {self.key}")
            return None
        try:
            return Snapshot.model_validate_json(body)
        except ValidationError as e:
            logging.info(f"Stored snapshot at {self.key} is unreadable: {e.error_count()} errors")
            return None
