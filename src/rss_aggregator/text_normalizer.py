"""Text cleanup and lightweight feature extraction for feed items.

All functions are total over strings: ``None`` and empty input are accepted and
never raise.
"""

import math
import re
from typing import List, Optional

from rss_aggregator.models import Characteristic

DATA = "data"
BREAKING = "breaking"
LONGREAD = "longread"
TECH = "tech"

ELLIPSIS = "..."
WORDS_PER_MINUTE = 200
MAX_READING_TIME = 10
LONGREAD_THRESHOLD = 300

_CDATA_PATTERN = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_PATTERN = re.compile(r"<[^>]*>")
_ENTITY_PATTERN = re.compile(r"&[a-zA-Z0-9#]+;")
_WHITESPACE_PATTERN = re.compile(r"\s+")

_DATA_PATTERN = re.compile(r"[0-9]{2,}|%")
_BREAKING_PATTERN = re.compile(
    r"breaking|urgent|alert|immediate|just in|now|update", re.IGNORECASE
)
_TECH_PATTERN = re.compile(
    r"AI|tech|software|startup|programming|code|api|app", re.IGNORECASE
)

_SENTENCE_BOUNDARIES = (". ", "? ", "! ")


def clean(text: Optional[str]) -> str:
    """Strip CDATA wrappers, tags and entities, then collapse whitespace.

    Entities are replaced with a space rather than decoded.
    """
    if not text:
        return ""
    text = _CDATA_PATTERN.sub(r"\1", text)
    text = _TAG_PATTERN.sub("", text)
    text = _ENTITY_PATTERN.sub(" ", text)
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def smart_truncate(text: Optional[str], max_length: int = 200) -> str:
    """Shorten text to at most ``max_length`` characters.

    Prefers ending after a sentence boundary in the last 40% of the window,
    then the last word boundary followed by an ellipsis, then a hard cut. The
    ellipsis counts towards ``max_length``.
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text

    window = text[:max_length]
    boundary = max(window.rfind(mark) for mark in _SENTENCE_BOUNDARIES)
    if boundary > max_length * 0.6:
        return text[: boundary + 2]

    room = max(max_length - len(ELLIPSIS), 0)
    last_space = text.rfind(" ", 0, room + 1)
    if last_space > 0:
        return text[:last_space] + ELLIPSIS
    return text[:room] + ELLIPSIS


def estimate_reading_time(text: Optional[str]) -> int:
    """Estimate reading time in whole minutes, between 1 and 10."""
    if not text:
        return 1
    words = len(text.split())
    minutes = math.ceil(words / WORDS_PER_MINUTE)
    return min(max(minutes, 1), MAX_READING_TIME)


def characteristics(title: Optional[str], description: Optional[str]) -> List[Characteristic]:
    """Tag an article as data, breaking, longread and/or tech."""
    title = title or ""
    description = description or ""

    tags: List[Characteristic] = []
    if _DATA_PATTERN.search(title):
        tags.append(DATA)
    if _BREAKING_PATTERN.search(title):
        tags.append(BREAKING)
    if len(description) > LONGREAD_THRESHOLD:
        tags.append(LONGREAD)
    if _TECH_PATTERN.search(f"{title} {description}"):
        tags.append(TECH)
    return tags
