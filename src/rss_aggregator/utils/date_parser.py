"""Lenient parsing of feed publication dates."""

import datetime
import re
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Protocol

from dateutil import parser

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=timezone.utc)


class DateParserProtocol(Protocol):
    """Protocol defining the interface for date parsing."""

    def parse_date(self, date_str: Optional[str]) -> Optional[datetime.datetime]:
        """Parse a date string into a timezone-aware datetime in UTC, or None."""
        ...


class RobustDateParser(DateParserProtocol):
    """Parses RFC-822 and ISO-8601 dates, plus the looser formats feeds emit."""

    # Timezone abbreviations dateutil does not resolve on its own
    _timezone_offsets = {
        "PDT": -7 * 3600,
        "PST": -8 * 3600,
        "EDT": -4 * 3600,
        "EST": -5 * 3600,
        "CEST": 2 * 3600,
        "CET": 1 * 3600,
        "BST": 1 * 3600,
        "AEST": 10 * 3600,
        "AEDT": 11 * 3600,
        "GMT": 0,
        "UTC": 0,
    }

    # "2024-01-31 12:00:00" embedded in a longer string
    _embedded_datetime = re.compile(r"(\d{4}-\d{2}-\d{2})[ T](\d{2}:\d{2}(?::\d{2})?)")

    # Two defaults that differ in every date field
    _first_default = datetime.datetime(2000, 1, 1)
    _second_default = datetime.datetime(2001, 2, 2)

    def parse_date(self, date_str: Optional[str]) -> Optional[datetime.datetime]:
        """Parse a date string into a timezone-aware datetime in UTC, or None."""
        if not date_str or not date_str.strip():
            return None
        date_str = date_str.strip()

        parsed_date = (
            self._parse_rfc822(date_str)
            or self._parse_with_dateutil(date_str)
            or self._parse_embedded(date_str)
        )
        if parsed_date is None:
            return None

        # Naive dates are taken as UTC
        if parsed_date.tzinfo is None:
            parsed_date = parsed_date.replace(tzinfo=timezone.utc)
        try:
            return parsed_date.astimezone(timezone.utc)
        except (OverflowError, ValueError):
            return None

    def timestamp(self, date_str: Optional[str]) -> datetime.datetime:
        """Parse a date, falling back to the epoch so unparseable dates sort oldest."""
        return self.parse_date(date_str) or EPOCH

    def _parse_rfc822(self, date_str: str) -> Optional[datetime.datetime]:
        try:
            parsed_date = parsedate_to_datetime(date_str)
        except (TypeError, ValueError, IndexError):
            return None
        # Unknown zone names come back naive; dateutil knows more of them
        if parsed_date is None or parsed_date.tzinfo is None:
            return None
        return parsed_date

    def _parse_with_dateutil(self, date_str: str) -> Optional[datetime.datetime]:
        try:
            return self._parse_complete(date_str, tzinfos=self._timezone_offsets)
        except (ValueError, OverflowError):
            pass
        # An unknown zone name must not lose the rest of the date
        try:
            return self._parse_complete(date_str, ignoretz=True)
        except (ValueError, OverflowError):
            return None

    def _parse_complete(self, date_str: str, **kwargs) -> Optional[datetime.datetime]:
        # dateutil fills missing fields from its default; a result that depends
        # on the default was not a full date ("10:00", "Tuesday", "May")
        first = parser.parse(date_str, default=self._first_default, **kwargs)
        second = parser.parse(date_str, default=self._second_default, **kwargs)
        if first != second:
            return None
        return first

    def _parse_embedded(self, date_str: str) -> Optional[datetime.datetime]:
        match = self._embedded_datetime.search(date_str)
        if not match:
            return None
        date_part, time_part = match.groups()
        try:
            return parser.parse(f"{date_part} {time_part}")
        except (ValueError, OverflowError):
            return None
