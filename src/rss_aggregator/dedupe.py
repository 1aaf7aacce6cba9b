from typing import Iterable, List, Set

from rss_aggregator.models import Article
from rss_aggregator.utils.date_parser import RobustDateParser


def dedupe_articles(article_lists: Iterable[List[Article]]) -> List[Article]:
    """
    Flatten per-feed article lists in feed order, keeping the first article of each link.
    """
    seen_links: Set[str] = set()
    articles = []
    for feed_articles in article_lists:
        for article in feed_articles:
            if article.link in seen_links:
                continue
            seen_links.add(article.link)
            articles.append(article)
    return articles


def sort_articles(
        articles: List[Article],
        date_parser: RobustDateParser,
    ) -> List[Article]:
    """
    Sort articles newest first. Unparseable dates sort last, keeping their relative order.
    """
    return sorted(
        articles,
        key=lambda article: date_parser.timestamp(article.pub_date),
        reverse=True,
    )
