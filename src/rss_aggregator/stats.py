"""Summary statistics over the deduplicated article set."""

import re
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List

from rss_aggregator.models import Article, Category, Stats, TrendingTopic
from rss_aggregator.utils.date_parser import DateParserProtocol

TRENDING_LIMIT = 10
MIN_WORD_LENGTH = 4
FRESH_WINDOW = timedelta(hours=2)

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
    "for", "of", "with", "by", "as", "is", "was", "are", "were",
    "this", "that", "will", "be", "has", "have", "can", "could",
})

_NON_WORD_PATTERN = re.compile(r"[^a-z0-9\s]")


def category_counts(articles: List[Article]) -> Dict[Category, int]:
    """Count articles per category."""
    return dict(Counter(article.category for article in articles))


def tokenize(text: str) -> List[str]:
    """Lowercase words of a text with punctuation removed and stop words dropped."""
    words = _NON_WORD_PATTERN.sub("", text.lower()).split()
    return [word for word in words if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS]


def trending_topics(articles: List[Article], limit: int = TRENDING_LIMIT) -> List[TrendingTopic]:
    """Most frequent words across titles and descriptions.

    Words with equal counts keep the order in which they were first seen.
    """
    frequency: Counter = Counter()
    for article in articles:
        frequency.update(tokenize(f"{article.title} {article.description}"))
    return [TrendingTopic(word=word, count=count) for word, count in frequency.most_common(limit)]


def fresh_content(
    articles: List[Article],
    now: datetime,
    date_parser: DateParserProtocol,
) -> int:
    """Count articles published less than two hours before ``now``.

    Articles with unparseable dates are never fresh.
    """
    count = 0
    for article in articles:
        published = date_parser.parse_date(article.pub_date)
        if published is not None and now - published < FRESH_WINDOW:
            count += 1
    return count


def compute_stats(
    articles: List[Article],
    now: datetime,
    date_parser: DateParserProtocol,
) -> Stats:
    """Compute category counts, trending topics and the fresh article count."""
    return Stats(
        category_counts=category_counts(articles),
        trending_topics=trending_topics(articles),
        fresh_content=fresh_content(articles, now, date_parser),
    )
