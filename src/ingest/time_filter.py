"""
Time Window Filter.

Restricts export text to rows whose resolved date falls inside a window,
re-serializing the original header row with the surviving data rows.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

from src.ingest.extractor import find_date_column, find_header_row
from src.utils.csv_tokenizer import rows_to_csv, tokenize
from src.utils.dates import DateResolver
import config.settings as settings

logger = logging.getLogger(__name__)

Window = Union[str, float, int]

ALL_TIME = "all"


class TimeWindowFilter:
    """
    Filters CSV text by trailing windows and bounded month or day ranges.

    Every method takes the reference instant `now` explicitly.
    """

    def __init__(
        self,
        date_resolver: Optional[DateResolver] = None,
        days_per_month: int = settings.DAYS_PER_MONTH
    ):
        """
        Initialize filter.

        Args:
            date_resolver: Resolver for raw date cells
            days_per_month: Length of a "month" window in days
        """
        self.date_resolver = date_resolver or DateResolver()
        self.days_per_month = days_per_month

    def filter_trailing(self, csv_text: str, window: Window, now: datetime) -> str:
        """
        Keep rows dated within the last `window` months, up to `now`.

        Args:
            csv_text: Raw or canonical CSV text
            window: "all", or a month count (0.25 means roughly a week)
            now: Reference instant

        Returns:
            Filtered CSV text. Without a date column the text is returned
            unchanged, since an all-time view is still meaningful.
        """
        if window == ALL_TIME:
            return csv_text

        months = float(window)
        cutoff = now - timedelta(days=months * self.days_per_month)

        filtered = self._filter(csv_text, now, lambda d: cutoff <= d <= now)
        return csv_text if filtered is None else filtered

    def filter_month_range(
        self,
        csv_text: str,
        start_months_ago: float,
        end_months_ago: float,
        now: datetime
    ) -> str:
        """
        Keep rows dated in [now - start months, now - end months).

        E.g. (1, 0) is the last month, (2, 1) the month before.
        Returns "" for an invalid range or when no date column exists.
        """
        if start_months_ago <= end_months_ago:
            logger.debug(f"Invalid month range {start_months_ago} -> {end_months_ago}")
            return ""

        start = now - timedelta(days=start_months_ago * self.days_per_month)
        end = now - timedelta(days=end_months_ago * self.days_per_month)
        return self._filter(csv_text, now, lambda d: start <= d < end) or ""

    def filter_day_range(
        self,
        csv_text: str,
        start_days_ago: float,
        end_days_ago: float,
        now: datetime
    ) -> str:
        """
        Keep rows dated in [now - start days, now - end days).

        E.g. (7, 0) is the last 7 days, (14, 7) the week before.
        """
        if start_days_ago <= end_days_ago:
            logger.debug(f"Invalid day range {start_days_ago} -> {end_days_ago}")
            return ""

        start = now - timedelta(days=start_days_ago)
        end = now - timedelta(days=end_days_ago)
        return self._filter(csv_text, now, lambda d: start <= d < end) or ""

    def _filter(
        self,
        csv_text: str,
        now: datetime,
        in_window: Callable[[datetime], bool]
    ) -> Optional[str]:
        """
        Shared row selection.

        Returns:
            Filtered CSV text, or None when there is nothing to filter on
            (fewer than two rows or no date column)
        """
        rows = tokenize(csv_text.strip())
        if len(rows) < 2:
            return None

        header_index = find_header_row(rows)
        header = rows[header_index]
        date_index = find_date_column(header)

        if date_index is None:
            logger.info(f"No date column in header {header}, cannot filter by time")
            return None

        kept: List[List[str]] = []
        for row in rows[header_index + 1:]:
            resolved = self._row_date(row, date_index, now)
            if resolved is not None and in_window(resolved):
                kept.append(row)

        logger.debug(f"Time filter kept {len(kept)}/{len(rows) - header_index - 1} rows")
        return rows_to_csv(header, kept)

    def _row_date(self, row: List[str], date_index: int, now: datetime) -> Optional[datetime]:
        if date_index >= len(row):
            return None
        value = row[date_index].replace('"', "").strip()
        if not value:
            return None
        return self.date_resolver.resolve(value, now)
