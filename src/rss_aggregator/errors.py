"""
Error taxonomy for the aggregation pipeline.

Per-feed errors (FeedFetchError and subclasses) are recovered inside the
fetcher: the feed contributes no articles. Persistence errors propagate and
fail the run.
"""


class AggregatorError(Exception):
    """Base class for all aggregator errors."""


class FeedFetchError(AggregatorError):
    """A feed could not be fetched or its response could not be used."""

    def __init__(self, feed_name: str, message: str):
        super().__init__(f"{feed_name}: {message}")
        self.feed_name = feed_name
        self.message = message


class RateLimitedError(FeedFetchError):
    """The conversion service kept answering 429 after all retries."""

    def __init__(self, feed_name: str, attempts: int):
        super().__init__(feed_name, f"rate limited after {attempts} attempts")
        self.attempts = attempts


class UpstreamStatusError(FeedFetchError):
    """The conversion service answered with a non-retryable status."""

    def __init__(self, feed_name: str, status_code: int):
        super().__init__(feed_name, f"HTTP {status_code}")
        self.status_code = status_code


class BlobStoreError(AggregatorError):
    """The object store rejected a read or a write."""


class SnapshotWriteError(AggregatorError):
    """The snapshot could not be persisted."""
