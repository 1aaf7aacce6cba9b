import importlib
import json
import logging
from unittest.mock import MagicMock, patch

import pytest

import rss_aggregator.handler
from rss_aggregator.errors import SnapshotWriteError
from rss_aggregator.handler import handler, is_preflight, scheduled_handler
from rss_aggregator.models import Stats, TrendingTopic
from rss_aggregator.snapshot import build_snapshot
from tests.test_utils import NOW, generate_test_article, generate_test_feed


@pytest.mark.parametrize(
    "event, expected",
    [
        ({"requestContext": {"http": {"method": "OPTIONS"}}}, True),
        ({"httpMethod": "OPTIONS"}, True),
        ({"requestContext": {"http": {"method": "GET"}}}, False),
        ({"httpMethod": "POST"}, False),
        ({"source": "aws.events"}, False),
        ({}, False),
        (None, False),
    ]
)
def test_is_preflight(event, expected):
    assert is_preflight(event) == expected


@patch("rss_aggregator.handler.Main")
@patch("rss_aggregator.handler.load_config")
def test_preflight_skips_pipeline(mock_load_config, mock_main):
    response = handler({"httpMethod": "OPTIONS"})

    assert response == {
        "statusCode": 200,
        "headers": {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, Authorization",
            "Access-Control-Max-Age": "86400",
        },
        "body": "",
    }
    mock_load_config.assert_not_called()
    mock_main.assert_not_called()


@patch("rss_aggregator.handler.Main")
@patch("rss_aggregator.handler.load_config")
def test_success_response(mock_load_config, mock_main):
    feeds = [generate_test_feed(1), generate_test_feed(2, category="news")]
    articles = [
        generate_test_article(1, source=feeds[0].name),
        generate_test_article(2, source=feeds[1].name, category="news"),
    ]
    stats = Stats(
        category_counts={"tech": 1, "news": 1},
        trending_topics=[TrendingTopic(word="test", count=4)],
        fresh_content=1,
    )
    snapshot = build_snapshot(articles, feeds, stats, timestamp=NOW, fetch_duration_ms=42)
    mock_main.return_value.run.return_value = snapshot

    response = handler({"requestContext": {"http": {"method": "GET"}}})

    mock_main.assert_called_once_with(config=mock_load_config.return_value)
    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "application/json"
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"
    assert json.loads(response["body"]) == {
        "success": True,
        "count": 2,
        "categories": {"tech": 1, "news": 1},
        "sources": [
            {"name": "Test Feed 1", "category": "tech", "count": 1},
            {"name": "Test Feed 2", "category": "news", "count": 1},
        ],
        "freshContent": 1,
        "fetchDuration": 42,
        "timestamp": "2024-05-01T12:00:00.000Z",
    }


@patch("rss_aggregator.handler.Main")
@patch("rss_aggregator.handler.load_config")
def test_write_failure_response(mock_load_config, mock_main):
    mock_main.return_value.run.side_effect = SnapshotWriteError("access denied")

    response = handler({})

    assert response["statusCode"] == 500
    assert response["headers"] == {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    body = json.loads(response["body"])
    assert body["success"] is False
    assert body["error"] == "access denied"
    assert body["timestamp"].endswith("Z")


@patch("rss_aggregator.handler.load_config")
def test_configuration_failure_response(mock_load_config):
    mock_load_config.side_effect = ValueError("No rss2json API key provided.")

    response = handler({})

    assert response["statusCode"] == 500
    assert json.loads(response["body"])["error"] == "No rss2json API key provided."


@patch("rss_aggregator.handler.handler")
def test_scheduled_handler_delegates(mock_handler):
    event = {"source": "aws.events"}
    context = MagicMock()

    assert scheduled_handler(event, context) is mock_handler.return_value
    mock_handler.assert_called_once_with(event, context)


@pytest.fixture
def root_level():
    root = logging.getLogger()
    level = root.level
    root.setLevel(logging.WARNING)
    yield root
    root.setLevel(level)


def test_import_leaves_root_logger_level(root_level):
    importlib.reload(rss_aggregator.handler)
    assert root_level.level == logging.WARNING


def test_handler_raises_root_logger_to_info(root_level):
    handler({"httpMethod": "OPTIONS"})
    assert root_level.level == logging.INFO
