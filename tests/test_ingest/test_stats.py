"""
Unit tests for ReviewStats.
"""

import pytest
from datetime import datetime
from src.ingest.stats import PeriodBounds, ReviewStats, period_bounds, period_change

NOW = datetime(2026, 1, 11, 12, 0, 0)

CSV_TEXT = "\n".join([
    "author,date,content,rating,source",
    "A,3 days ago,Great,5,google",
    "B,10 days ago,Ok,3,google",
    "C,40 days ago,Good,4,google",
    "D,50 days ago,Bad,2,google",
])


@pytest.fixture
def stats():
    return ReviewStats()


def test_review_frame(stats):
    df = stats.review_frame(CSV_TEXT)

    assert list(df.columns) == ["author", "date", "content", "rating", "source"]
    assert len(df) == 4
    assert df["rating"].sum() == 14


def test_review_frame_empty(stats):
    df = stats.review_frame("")
    assert df.empty
    assert list(df.columns) == ["author", "date", "content", "rating", "source"]


def test_review_count_and_average(stats):
    assert stats.review_count(CSV_TEXT, 1, NOW) == 2
    assert stats.average_rating(CSV_TEXT, 1, NOW) == pytest.approx(4.0)
    assert stats.review_count(CSV_TEXT, "all", NOW) == 4
    assert stats.average_rating(CSV_TEXT, "all", NOW) == pytest.approx(3.5)


def test_empty_dataset(stats):
    assert stats.review_count("", 1, NOW) == 0
    assert stats.average_rating("", 1, NOW) == 0.0
    assert stats.average_rating("author,date,content,rating", "all", NOW) == 0.0


def test_range_counts(stats):
    assert stats.count_for_month_range(CSV_TEXT, 2, 1, NOW) == 2
    assert stats.count_for_day_range(CSV_TEXT, 7, 0, NOW) == 1
    assert stats.count_for_day_range(CSV_TEXT, 14, 7, NOW) == 1
    assert stats.count_for_day_range(CSV_TEXT, 7, 14, NOW) == 0


def test_period_bounds():
    assert period_bounds("all") is None
    assert period_bounds("0.25") == PeriodBounds(current=0.25, prev_start=0.5, prev_end=0.25)
    assert period_bounds(3) == PeriodBounds(current=3.0, prev_start=6.0, prev_end=3.0)


def test_period_change():
    assert period_change(3, 2) == pytest.approx(50.0)
    assert period_change(1, 2) == pytest.approx(-50.0)
    assert period_change(5, 0) == 100.0
    assert period_change(0, 0) == 0.0


def test_summarize_month(stats):
    summary = stats.summarize(CSV_TEXT, 1, NOW)

    assert summary.total_reviews == 2
    assert summary.previous_total == 2
    assert summary.period_change == pytest.approx(0.0)


def test_summarize_week(stats):
    summary = stats.summarize(CSV_TEXT, 1, NOW, mode="week")

    assert summary.total_reviews == 2
    assert summary.previous_total == 1
    assert summary.period_change == pytest.approx(0.0)


def test_summarize_all_time_has_no_change(stats):
    summary = stats.summarize(CSV_TEXT, "all", NOW)

    assert summary.total_reviews == 4
    assert summary.period_change is None


def test_summarize_invalid_mode(stats):
    with pytest.raises(ValueError, match="Invalid comparison mode"):
        stats.summarize(CSV_TEXT, 1, NOW, mode="year")


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
