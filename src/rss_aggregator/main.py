import logging
import sys
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from rss_aggregator.aggregate import Aggregator
from rss_aggregator.blob_store import LocalBlobStore, S3BlobStore
from rss_aggregator.config import AppConfig, load_config, parse_cli_arguments
from rss_aggregator.dedupe import dedupe_articles, sort_articles
from rss_aggregator.errors import AggregatorError
from rss_aggregator.fetch_feed import FeedFetcher
from rss_aggregator.interfaces.protocols import BlobStoreProtocol, FeedFetcherProtocol
from rss_aggregator.models import Snapshot
from rss_aggregator.snapshot import SnapshotWriter, build_snapshot
from rss_aggregator.stats import compute_stats
from rss_aggregator.utils.date_parser import RobustDateParser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_blob_store(config: AppConfig) -> BlobStoreProtocol:
    """
    Pick the blob store for the configuration: S3 when a bucket is set, a local directory otherwise.
    """
    if config.s3_bucket:
        return S3BlobStore(bucket=config.s3_bucket, region=config.aws_region)
    return LocalBlobStore(directory=config.output_dir)


class Main:
    """
    Runs the aggregation pipeline: fetch, dedupe and sort, stats, write.
    """
    def __init__(
            self,
            config: AppConfig,
            blob_store: Optional[BlobStoreProtocol] = None,
            fetcher: Optional[FeedFetcherProtocol] = None,
            now: Callable[[], datetime] = utc_now,
            sleep: Callable[[float], None] = time.sleep,
            ):
        self.config = config
        self.blob_store = blob_store or create_blob_store(config)
        self.fetcher = fetcher or FeedFetcher(
            api_key=config.rss2json_api_key,
            endpoint=config.conversion_endpoint,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            backoff_base=config.backoff_base,
            items_per_feed=config.items_per_feed,
            sleep=sleep,
        )
        self.now = now
        self.sleep = sleep
        self.date_parser = RobustDateParser()
        self.writer = SnapshotWriter(blob_store=self.blob_store, key=config.snapshot_key)

    def run(self) -> Snapshot:
        """
        Aggregate all feeds and write the snapshot.

        Raises:
            SnapshotWriteError: If the snapshot could not be persisted.
        """
        logging.info("Starting RSS aggregation...")
        started = time.monotonic()

        # Fetch and normalize.
        aggregator = Aggregator(
            fetcher=self.fetcher,
            pause=self.config.feed_pause,
            max_workers=self.config.max_workers,
            sleep=self.sleep,
        )
        results = aggregator.fetch_all(self.config.feeds)

        # Deduplicate and sort.
        articles = sort_articles(dedupe_articles(results), self.date_parser)

        # Stats.
        now = self.now()
        stats = compute_stats(articles, now, self.date_parser)

        snapshot = build_snapshot(
            articles=articles,
            feeds=self.config.feeds,
            stats=stats,
            timestamp=now,
            fetch_duration_ms=int((time.monotonic() - started) * 1000),
        )

        # Write.
        self.writer.save(snapshot)

        logging.info(
            f"Processed {snapshot.summary.total} articles from {len(self.config.feeds)} sources. "
            f"Fresh: {stats.fresh_content}. Duration: {snapshot.summary.fetch_duration}ms"
        )
        return snapshot

    def load_snapshot(self) -> Optional[Snapshot]:
        """
        Load the previously written snapshot, if any.
        """
        return self.writer.load()


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)
    cli_args = parse_cli_arguments(argv)
    try:
        config = load_config(cli_args)
    except ValueError as e:
        logging.error(f"Configuration error: {e}")
        return 1

    app = Main(config=config)
    if cli_args.show:
        snapshot = app.load_snapshot()
        if snapshot is None:
            print("No snapshot stored.")
            return 1
        print(snapshot.summary.to_json(indent=2))
        return 0

    try:
        app.run()
    except AggregatorError as e:
        logging.error(f"Aggregation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
