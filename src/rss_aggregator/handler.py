"""Serverless entry points: an HTTP-style event handler and a scheduled-event handler."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rss_aggregator.config import load_config
from rss_aggregator.main import Main
from rss_aggregator.snapshot import iso_timestamp

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


def is_preflight(event: Optional[Dict[str, Any]]) -> bool:
    """Whether the event is a CORS preflight (OPTIONS) request."""
    if not event:
        return False
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("method") == "OPTIONS" or event.get("httpMethod") == "OPTIONS"


def handler(event: Optional[Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
    """Run one aggregation and describe the outcome as an HTTP response."""
    _configure_logging()
    if is_preflight(event):
        return {"statusCode": 200, "headers": dict(PREFLIGHT_HEADERS), "body": ""}

    try:
        config = load_config()
        snapshot = Main(config=config).run()
    except Exception as e:
        logging.exception("Handler error")
        return _json_response(500, {
            "success": False,
            "error": str(e),
            "timestamp": iso_timestamp(datetime.now(timezone.utc)),
        })

    summary = snapshot.summary
    return _json_response(
        200,
        {
            "success": True,
            "count": summary.total,
            "categories": summary.category_counts,
            "sources": [source.to_dict() for source in summary.sources],
            "freshContent": summary.fresh_content,
            "fetchDuration": summary.fetch_duration,
            "timestamp": summary.timestamp,
        },
        extra_headers={"Access-Control-Allow-Headers": "Content-Type"},
    )


def scheduled_handler(event: Optional[Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
    """Entry point for timer events."""
    _configure_logging()
    logging.info("Scheduled RSS aggregation triggered")
    return handler(event, context)


def _configure_logging() -> None:
    # The serverless runtime installs its own handler on the root logger at WARNING
    logging.getLogger().setLevel(logging.INFO)


def _json_response(
    status_code: int,
    body: Dict[str, Any],
    extra_headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    headers = dict(JSON_HEADERS)
    if extra_headers:
        headers.update(extra_headers)
    return {"statusCode": status_code, "headers": headers, "body": json.dumps(body)}
