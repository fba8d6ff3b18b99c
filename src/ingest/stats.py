"""
Review statistics.

Review counts and average ratings per time window, and period-over-period
change for dashboards.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pandas as pd

from src.ingest.extractor import ReviewExtractor
from src.ingest.time_filter import ALL_TIME, TimeWindowFilter, Window
import config.settings as settings

logger = logging.getLogger(__name__)

WEEK_MODE = "week"
MONTH_MODE = "month"


@dataclass(frozen=True)
class PeriodBounds:
    """Current trailing window and the equally long window before it, in months."""
    current: float
    prev_start: float
    prev_end: float


@dataclass(frozen=True)
class PeriodSummary:
    total_reviews: int
    average_rating: float
    previous_total: int = 0
    period_change: Optional[float] = None  # Percent; None when there is no previous period


def period_bounds(window: Window) -> Optional[PeriodBounds]:
    if window == ALL_TIME:
        return None
    months = float(window)
    return PeriodBounds(current=months, prev_start=months * 2, prev_end=months)


def period_change(current: int, previous: int) -> float:
    """
    Percent change from the previous period.

    With no previous reviews, any current review counts as +100%.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0


class ReviewStats:
    """
    Computes review statistics over time windows.
    """

    def __init__(
        self,
        extractor: Optional[ReviewExtractor] = None,
        time_filter: Optional[TimeWindowFilter] = None
    ):
        self.extractor = extractor or ReviewExtractor()
        self.time_filter = time_filter or TimeWindowFilter()

    def review_frame(self, csv_text: str) -> pd.DataFrame:
        """
        Extract reviews into a DataFrame with the canonical columns.
        """
        reviews = self.extractor.extract(csv_text)
        df = pd.DataFrame(
            [review.to_row() for review in reviews],
            columns=settings.CANONICAL_COLUMNS
        )
        df["rating"] = df["rating"].astype(int)
        return df

    def review_count(self, csv_text: str, window: Window, now: datetime) -> int:
        if not csv_text:
            return 0
        filtered = self.time_filter.filter_trailing(csv_text, window, now)
        return len(self.review_frame(filtered))

    def average_rating(self, csv_text: str, window: Window, now: datetime) -> float:
        """
        Mean rating of reviews in the trailing window.

        Returns:
            Average rating, or 0.0 when the window has no reviews
        """
        if not csv_text:
            return 0.0
        filtered = self.time_filter.filter_trailing(csv_text, window, now)
        df = self.review_frame(filtered)
        if df.empty:
            return 0.0
        return float(df["rating"].mean())

    def count_for_month_range(
        self,
        csv_text: str,
        start_months_ago: float,
        end_months_ago: float,
        now: datetime
    ) -> int:
        if not csv_text or start_months_ago <= end_months_ago:
            return 0
        filtered = self.time_filter.filter_month_range(csv_text, start_months_ago, end_months_ago, now)
        return len(self.review_frame(filtered))

    def count_for_day_range(
        self,
        csv_text: str,
        start_days_ago: float,
        end_days_ago: float,
        now: datetime
    ) -> int:
        if not csv_text or start_days_ago <= end_days_ago:
            return 0
        filtered = self.time_filter.filter_day_range(csv_text, start_days_ago, end_days_ago, now)
        return len(self.review_frame(filtered))

    def summarize(
        self,
        csv_text: str,
        window: Window,
        now: datetime,
        mode: str = MONTH_MODE
    ) -> PeriodSummary:
        """
        Summarize one dataset for a time window.

        Args:
            csv_text: Dataset csv text
            window: Trailing window ("all" or months)
            now: Reference instant
            mode: "month" compares the window with the one before it,
                  "week" compares the last 7 days with the 7 before

        Returns:
            PeriodSummary for the window
        """
        if mode not in (MONTH_MODE, WEEK_MODE):
            raise ValueError(f"Invalid comparison mode: {mode}. Must be 'month' or 'week'")

        total = self.review_count(csv_text, window, now)
        average = self.average_rating(csv_text, window, now)

        if mode == WEEK_MODE:
            this_week = self.count_for_day_range(csv_text, 7, 0, now)
            previous = self.count_for_day_range(csv_text, 14, 7, now)
            change = period_change(this_week, previous)
        else:
            bounds = period_bounds(window)
            if bounds is None:
                return PeriodSummary(total_reviews=total, average_rating=average)
            previous = self.count_for_month_range(csv_text, bounds.prev_start, bounds.prev_end, now)
            change = period_change(total, previous)

        logger.debug(f"Window {window} ({mode}): {total} reviews, previous {previous}, change {change:.1f}%")
        return PeriodSummary(
            total_reviews=total,
            average_rating=average,
            previous_total=previous,
            period_change=change
        )
