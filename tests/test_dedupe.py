from datetime import timedelta

import pytest

from rss_aggregator.dedupe import dedupe_articles, sort_articles
from rss_aggregator.utils.date_parser import RobustDateParser
from tests.test_utils import NOW, generate_test_article, rfc822


@pytest.fixture
def date_parser():
    return RobustDateParser()


def test_dedupe_keeps_first_feed_occurrence():
    first = generate_test_article(1, link="https://x/1", source="First Feed")
    second = generate_test_article(2, link="https://x/1", source="Second Feed")
    other = generate_test_article(3, link="https://x/3", source="Second Feed")

    articles = dedupe_articles([[first], [second, other]])

    assert articles == [first, other]
    assert articles[0].source == "First Feed"


def test_dedupe_within_one_feed():
    a = generate_test_article(1, link="https://x/1")
    b = generate_test_article(2, link="https://x/1")

    assert dedupe_articles([[a, b]]) == [a]


def test_dedupe_keeps_links_differing_in_query():
    a = generate_test_article(1, link="https://x/1?utm_source=a")
    b = generate_test_article(2, link="https://x/1?utm_source=b")

    assert dedupe_articles([[a], [b]]) == [a, b]


def test_dedupe_empty():
    assert dedupe_articles([]) == []
    assert dedupe_articles([[], []]) == []


def test_sort_newest_first(date_parser):
    old = generate_test_article(1, pub_date=rfc822(NOW - timedelta(days=1)))
    new = generate_test_article(2, pub_date="2024-05-01T11:59:00Z")
    middle = generate_test_article(3, pub_date=rfc822(NOW - timedelta(hours=3)))

    assert sort_articles([old, new, middle], date_parser) == [new, middle, old]


def test_sort_unparseable_dates_last_and_stable(date_parser):
    dated = generate_test_article(1, pub_date=rfc822(NOW - timedelta(days=400)))
    broken = generate_test_article(2, pub_date="sometime last week")
    missing = generate_test_article(3, pub_date="")

    assert sort_articles([broken, dated, missing], date_parser) == [dated, broken, missing]


def test_sort_mixed_formats_compare_in_utc(date_parser):
    # 10:30 at +02:00 is 08:30 UTC, older than 09:00 UTC
    offset = generate_test_article(1, pub_date="2024-05-01T10:30:00+02:00")
    utc = generate_test_article(2, pub_date="Wed, 01 May 2024 09:00:00 GMT")

    assert sort_articles([offset, utc], date_parser) == [utc, offset]
