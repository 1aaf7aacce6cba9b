"""Built-in list of feeds aggregated when no FEEDS override is configured."""

from typing import List

from rss_aggregator.models import FeedDescriptor

DEFAULT_FEEDS: List[FeedDescriptor] = [
    FeedDescriptor(
        name="TechCrunch",
        url="https://techcrunch.com/feed/",
        category="tech",
    ),
    FeedDescriptor(
        name="Hacker News",
        url="https://hnrss.org/frontpage",
        category="tech",
    ),
    FeedDescriptor(
        name="BBC News",
        url="http://feeds.bbci.co.uk/news/rss.xml",
        category="news",
    ),
    FeedDescriptor(
        name="The Verge",
        url="https://www.theverge.com/rss/index.xml",
        category="tech",
    ),
    FeedDescriptor(
        name="Reuters Business",
        url="https://feeds.reuters.com/reuters/businessNews",
        category="business",
    ),
]
