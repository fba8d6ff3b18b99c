"""
Unit tests for TimeWindowFilter.
"""

import pytest
from datetime import datetime
from src.ingest.time_filter import TimeWindowFilter

NOW = datetime(2026, 1, 11, 12, 0, 0)

HEADER = "author,date,content,rating,source"


def _csv(*rows):
    return "\n".join([HEADER, *rows])


@pytest.fixture
def time_filter():
    return TimeWindowFilter()


def test_trailing_month_window(time_filter):
    """A row 40 days old is outside the last month; 20 days old is inside."""
    csv_text = _csv("A,40 days ago,Old,4,google", "B,20 days ago,Recent,5,google")

    filtered = time_filter.filter_trailing(csv_text, 1, NOW)

    assert filtered == _csv("B,20 days ago,Recent,5,google")


def test_trailing_all_is_identity(time_filter):
    csv_text = _csv("A,40 days ago,Old,4,google") + "\n"
    assert time_filter.filter_trailing(csv_text, "all", NOW) == csv_text


def test_trailing_fractional_window(time_filter):
    """0.25 months is 7.5 days."""
    csv_text = _csv("A,3 days ago,x,4,google", "B,10 days ago,y,5,google")

    filtered = time_filter.filter_trailing(csv_text, "0.25", NOW)

    assert filtered == _csv("A,3 days ago,x,4,google")


def test_trailing_excludes_future_dates(time_filter):
    csv_text = _csv("A,2026-02-01,future,4,google", "B,2026-01-10,past,5,google")

    filtered = time_filter.filter_trailing(csv_text, 1, NOW)

    assert filtered == _csv("B,2026-01-10,past,5,google")


def test_trailing_without_date_column_returns_original(time_filter):
    csv_text = "author,content,rating\nA,x,5"
    assert time_filter.filter_trailing(csv_text, 1, NOW) == csv_text


def test_rows_without_date_are_dropped(time_filter):
    csv_text = _csv("A,,x,4,google", "B,1 day ago,y,5,google")

    filtered = time_filter.filter_trailing(csv_text, 1, NOW)

    assert filtered == _csv("B,1 day ago,y,5,google")


def test_unresolvable_date_counts_as_now(time_filter):
    csv_text = _csv("A,sometime,x,4,google")
    assert time_filter.filter_trailing(csv_text, 1, NOW) == csv_text


def test_header_row_kept_verbatim(time_filter):
    """Metadata rows before the header are dropped; the header is kept as-is."""
    csv_text = (
        "Exported from Google Maps\n"
        "Reviewer,Time,Comment,Rating\n"
        'J,1 day ago,"Good, tasty",5\n'
        "K,3 months ago,Meh,2"
    )

    filtered = time_filter.filter_trailing(csv_text, 1, NOW)

    assert filtered == 'Reviewer,Time,Comment,Rating\nJ,1 day ago,"Good, tasty",5'


def test_month_range_previous_month(time_filter):
    csv_text = _csv("A,40 days ago,x,4,google", "B,20 days ago,y,5,google")

    filtered = time_filter.filter_month_range(csv_text, 2, 1, NOW)

    assert filtered == _csv("A,40 days ago,x,4,google")


def test_month_range_invalid(time_filter):
    csv_text = _csv("A,20 days ago,x,4,google")

    assert time_filter.filter_month_range(csv_text, 1, 1, NOW) == ""
    assert time_filter.filter_month_range(csv_text, 1, 2, NOW) == ""


def test_month_range_without_date_column(time_filter):
    assert time_filter.filter_month_range("author,content,rating\nA,x,5", 1, 0, NOW) == ""


def test_day_range_is_half_open(time_filter):
    """A row exactly 7 days old belongs to [7, 0), not [14, 7)."""
    csv_text = _csv(
        "A,3 days ago,x,4,google",
        "B,7 days ago,y,5,google",
        "C,10 days ago,z,3,google",
    )

    this_week = time_filter.filter_day_range(csv_text, 7, 0, NOW)
    last_week = time_filter.filter_day_range(csv_text, 14, 7, NOW)

    assert this_week == _csv("A,3 days ago,x,4,google", "B,7 days ago,y,5,google")
    assert last_week == _csv("C,10 days ago,z,3,google")


def test_day_range_invalid(time_filter):
    assert time_filter.filter_day_range(_csv("A,1 day ago,x,4,google"), 0, 7, NOW) == ""


def test_bounded_range_with_header_only(time_filter):
    assert time_filter.filter_day_range(HEADER, 7, 0, NOW) == ""


def test_empty_match_keeps_header(time_filter):
    csv_text = _csv("A,2 years ago,x,4,google")
    assert time_filter.filter_trailing(csv_text, 1, NOW) == HEADER


def test_out_of_range_offset_date_does_not_raise(time_filter):
    """A date whose UTC conversion overflows counts as now and is kept."""
    csv_text = "author,date,content,rating\nA,0001-01-01T00:00:00+05:00,x,5\nB,1 day ago,y,4"

    assert time_filter.filter_trailing(csv_text, 1, NOW) == csv_text


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
