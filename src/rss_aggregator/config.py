"""Configuration handling for the RSS aggregator using pydantic settings and CLI overrides."""

import logging
from argparse import ArgumentParser
from argparse import Namespace as ArgNamespace
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rss_aggregator.feeds import DEFAULT_FEEDS
from rss_aggregator.models import FeedDescriptor

DEFAULT_SNAPSHOT_KEY = "rss-data.json"
DEFAULT_CONVERSION_ENDPOINT = "https://api.rss2json.com/v1/api.json"


class AppEnvSettings(BaseSettings):
    """
    App settings from environment variables.
    """
    rss2json_api_key: Optional[str] = None # The API key for the conversion service.
    aws_region: Optional[str] = None # The region of the S3 bucket.
    s3_bucket: Optional[str] = None # The bucket the snapshot is written to.
    output_dir: Optional[str] = None # A local directory used instead of S3 when no bucket is set.
    snapshot_key: str = DEFAULT_SNAPSHOT_KEY # The blob key of the snapshot.
    feeds: Optional[List[FeedDescriptor]] = None # JSON list overriding the built-in feeds.
    conversion_endpoint: str = DEFAULT_CONVERSION_ENDPOINT # The conversion service URL.
    request_timeout: float = 15.0 # Seconds per request attempt.
    max_retries: int = 2 # Retries after a rate-limited response.
    backoff_base: float = 2.0 # Seconds; the n-th retry waits 2^n times this.
    feed_pause: float = 0.5 # Seconds between two consecutive fetch starts.
    items_per_feed: int = 20 # Number of items requested per feed.
    max_workers: int = 1 # Number of feeds fetched concurrently.

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
        extra="ignore",
    )


class AppConfig(BaseModel):
    """
    Global app config.
    """
    rss2json_api_key: str # The API key for the conversion service.
    aws_region: Optional[str] = None # The region of the S3 bucket.
    s3_bucket: Optional[str] = None # The bucket the snapshot is written to.
    output_dir: Optional[str] = None # A local directory used instead of S3 when no bucket is set.
    snapshot_key: str = DEFAULT_SNAPSHOT_KEY # The blob key of the snapshot.
    feeds: List[FeedDescriptor] # The feeds to aggregate, in order.
    conversion_endpoint: str = DEFAULT_CONVERSION_ENDPOINT # The conversion service URL.
    request_timeout: float = 15.0 # Seconds per request attempt.
    max_retries: int = 2 # Retries after a rate-limited response.
    backoff_base: float = 2.0 # Seconds; the n-th retry waits 2^n times this.
    feed_pause: float = 0.5 # Seconds between two consecutive fetch starts.
    items_per_feed: int = 20 # Number of items requested per feed.
    max_workers: int = 1 # Number of feeds fetched concurrently.

    model_config = ConfigDict(
        frozen=True,
    )

    @field_validator("feeds")
    @classmethod
    def _validate_feeds(cls, feeds: List[FeedDescriptor]) -> List[FeedDescriptor]:
        if not feeds:
            raise ValueError("No feeds configured.")
        names = [feed.name for feed in feeds]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Feed names must be unique, duplicated: {', '.join(duplicates)}")
        return feeds

    @field_validator(
        "request_timeout",
        "max_retries",
        "backoff_base",
        "feed_pause",
        "items_per_feed",
        "max_workers",
    )
    @classmethod
    def _validate_non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Must not be negative.")
        return value


def parse_cli_arguments(argv: Optional[List[str]] = None) -> ArgNamespace:
    """
    Parse the command line arguments.
    """
    parser = ArgumentParser(description="RSS Aggregator")
    parser.add_argument(
        "-k", "--api-key",
        type=str,
        help="The API key for the rss2json conversion service.",
    )
    parser.add_argument(
        "-b", "--bucket",
        type=str,
        help="The S3 bucket to write the snapshot to.",
    )
    parser.add_argument(
        "-r", "--region",
        type=str,
        help="The region of the S3 bucket.",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=str,
        help="A local directory to write the snapshot to when no bucket is given.",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the summary of the stored snapshot instead of aggregating.",
    )
    return parser.parse_args(argv)


def load_config(cli_args: Optional[ArgNamespace] = None) -> AppConfig:
    """
    Load the configuration from the environment, overridden by CLI arguments if given.
    """
    load_dotenv()
    env_settings = AppEnvSettings()

    api_key = _cli_value(cli_args, "api_key") or env_settings.rss2json_api_key
    if not api_key:
        raise ValueError("No rss2json API key provided.")

    s3_bucket = _cli_value(cli_args, "bucket") or env_settings.s3_bucket
    output_dir = _cli_value(cli_args, "output_dir") or env_settings.output_dir
    if not s3_bucket and not output_dir:
        raise ValueError("Neither an S3 bucket nor an output directory is configured.")

    feeds = env_settings.feeds
    if feeds is None:
        feeds = DEFAULT_FEEDS
    else:
        logging.info(f"Using {len(feeds)} feeds from the environment.")

    return AppConfig(
        rss2json_api_key=api_key,
        aws_region=_cli_value(cli_args, "region") or env_settings.aws_region,
        s3_bucket=s3_bucket,
        output_dir=output_dir,
        snapshot_key=env_settings.snapshot_key,
        feeds=feeds,
        conversion_endpoint=env_settings.conversion_endpoint,
        request_timeout=env_settings.request_timeout,
        max_retries=env_settings.max_retries,
        backoff_base=env_settings.backoff_base,
        feed_pause=env_settings.feed_pause,
        items_per_feed=env_settings.items_per_feed,
        max_workers=env_settings.max_workers,
    )


def _cli_value(cli_args: Optional[ArgNamespace], name: str) -> Optional[str]:
    if cli_args is None:
        return None
    return getattr(cli_args, name, None)
