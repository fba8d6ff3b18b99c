"""
Date resolution utility.

Turns raw date cells from review exports into absolute instants.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import isoparse, parse as parse_calendar_date

logger = logging.getLogger(__name__)

# ASCII digits only: str.isdigit and \d also accept other scripts
_EPOCH_SECONDS = re.compile(r"[0-9]{10}")
_DAY_MONTH_YEAR = re.compile(r"([0-9]{1,2})[/-]([0-9]{1,2})[/-]([0-9]{4})(?:\s|T|$)")
_FOUR_DIGIT_YEAR = re.compile(r"(?<![0-9])[0-9]{4}(?![0-9])")
_INTEGER = re.compile(r"[0-9]+")

# Checked in this order; first substring hit wins.
RELATIVE_UNITS = (
    ("hour", 3600),
    ("day", 86400),
    ("week", 7 * 86400),
    ("month", 30 * 86400),
    ("year", 365 * 86400),
)


def _to_naive_utc(parsed: datetime) -> Optional[datetime]:
    """Drop tzinfo after converting to UTC; None when UTC is out of range."""
    if parsed.tzinfo is None:
        return parsed
    try:
        return parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (OverflowError, ValueError):
        return None


class DateResolver:
    """
    Resolves raw date text against a reference instant.

    Rules, first match wins:
    1. Exactly 10 ASCII digits: Unix epoch seconds (UTC)
    2. D/M/YYYY or D-M-YYYY: day first, never month first
    3. Calendar date: strict ISO first, then common export layouts
       ("March 5, 2025", "2025/03/05", "Monday, 5 Jan 2026") that carry a
       four-digit year
    4. Relative phrase ("3 weeks ago", "an hour ago")
    5. The reference instant itself

    All instants are naive. Offsets are converted to UTC.
    """

    def resolve(self, raw: Optional[str], reference: datetime) -> datetime:
        """
        Resolve a raw date cell.

        Args:
            raw: Date text as captured from the source export
            reference: "Now" for relative phrases and the fallback value

        Returns:
            Resolved naive datetime; `reference` if nothing matched
        """
        text = (raw or "").strip()
        if not text:
            return reference

        for rule in (self._from_epoch, self._from_day_month_year, self._from_iso):
            resolved = rule(text)
            if resolved is not None:
                return resolved

        resolved = self._from_calendar_text(text, reference)
        if resolved is not None:
            return resolved

        resolved = self._from_relative(text, reference)
        if resolved is not None:
            return resolved

        logger.debug(f"Unresolvable date '{text}', using reference {reference.isoformat()}")
        return reference

    def _from_epoch(self, text: str) -> Optional[datetime]:
        if not _EPOCH_SECONDS.fullmatch(text):
            return None
        return datetime.fromtimestamp(int(text), tz=timezone.utc).replace(tzinfo=None)

    def _from_day_month_year(self, text: str) -> Optional[datetime]:
        match = _DAY_MONTH_YEAR.match(text)
        if not match:
            return None

        day, month, year = (int(part) for part in match.groups())
        if not (1 <= month <= 12 and 1 <= day <= 31):
            return None

        try:
            return datetime(year, month, day)
        except ValueError:
            # e.g. 31/02/2025
            return None

    def _from_iso(self, text: str) -> Optional[datetime]:
        try:
            parsed = isoparse(text)
        except (ValueError, OverflowError):
            return None
        return _to_naive_utc(parsed)

    def _from_calendar_text(self, text: str, reference: datetime) -> Optional[datetime]:
        # Without a year, dateutil reads "2 hours" as today at 02:00
        if not _FOUR_DIGIT_YEAR.search(text):
            return None

        try:
            parsed = parse_calendar_date(text, default=datetime(reference.year, 1, 1))
        except (ValueError, OverflowError, TypeError):
            return None
        return _to_naive_utc(parsed)

    def _from_relative(self, text: str, reference: datetime) -> Optional[datetime]:
        lower = text.lower()
        number = _INTEGER.search(lower)
        count = int(number.group()) if number else 1

        for unit, seconds in RELATIVE_UNITS:
            if unit in lower:
                try:
                    return reference - timedelta(seconds=count * seconds)
                except OverflowError:
                    logger.debug(f"Relative date '{text}' out of range")
                    return None
        return None


_default_resolver = DateResolver()


def resolve_date(raw: Optional[str], reference: datetime) -> datetime:
    """Resolve with a shared stateless DateResolver."""
    return _default_resolver.resolve(raw, reference)


def parse_reference_date(value: Optional[str]) -> datetime:
    """
    Parse a configured reference date, or return the current time.

    Used by entry points only; library calls always take `now` explicitly.
    """
    if not value:
        return datetime.now()
    parsed = isoparse(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
