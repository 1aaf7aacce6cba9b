"""RSS Aggregator: fetches feeds, normalizes articles and writes one JSON snapshot."""

__version__ = "1.0.0"
