"""
Review Extractor.

Maps arbitrary review export layouts onto canonical Review records.
Header detection and column mapping are plain functions so schema drift
can be diagnosed without running a full extraction.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from src.models.review import Review
from src.utils.csv_tokenizer import tokenize
import config.settings as settings

logger = logging.getLogger(__name__)

DATE_HEADERS = ("commented_at", "time", "date")
CONTENT_HEADERS = ("content", "comment")

_DIGITS = re.compile(r"[0-9]+")  # ASCII only


@dataclass(frozen=True)
class ColumnMap:
    """Column indexes resolved from a header row. None means not found."""
    author: Optional[int] = None
    date: Optional[int] = None
    content: Optional[int] = None
    rating: Optional[int] = None
    source: Optional[int] = None

    @property
    def missing_required(self) -> List[str]:
        return [
            name for name in ("author", "content", "rating")
            if getattr(self, name) is None
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_required


def is_header_row(row: Sequence[str]) -> bool:
    joined = " ".join(cell.lower().strip() for cell in row)
    return any(marker in joined for marker in settings.HEADER_MARKERS)


def find_header_row(rows: Sequence[Sequence[str]], scan_limit: int = settings.HEADER_SCAN_ROWS) -> int:
    """
    Locate the header row among optional leading metadata rows.

    Returns:
        Index of the first row mentioning "reviewer" or "author" within
        the first `scan_limit` rows, else 0
    """
    for index, row in enumerate(rows[:scan_limit]):
        if is_header_row(row):
            return index
    return 0


def _first_index(labels: List[str], predicate) -> Optional[int]:
    for index, label in enumerate(labels):
        if predicate(label):
            return index
    return None


def find_date_column(header: Sequence[str]) -> Optional[int]:
    """Exact match only: "atmosphere" must not count as "time"."""
    labels = [cell.lower().strip() for cell in header]
    return _first_index(labels, lambda h: h in DATE_HEADERS)


def resolve_columns(header: Sequence[str]) -> ColumnMap:
    """
    Map header labels onto canonical review fields.

    Each field is resolved independently, so conventions can mix
    (e.g. "Reviewer" with "commented_at").
    """
    labels = [cell.lower().strip() for cell in header]
    return ColumnMap(
        author=_first_index(labels, lambda h: "author" in h or "reviewer" in h),
        date=find_date_column(header),
        # "commented_at" contains "comment", so content is exact match too
        content=_first_index(labels, lambda h: h in CONTENT_HEADERS),
        rating=_first_index(labels, lambda h: "rating" in h and "overall" not in h),
        source=_first_index(labels, lambda h: "source" in h or "souce" in h),
    )


def parse_rating(value: str) -> int:
    """
    First run of digits in the cell; 0 when none is found.

    Values above the rating scale ("80%", "10/10") count as unparsed.
    """
    match = _DIGITS.search(value or "")
    if not match:
        return 0
    rating = int(match.group())
    return rating if rating <= settings.MAX_RATING else 0


def _cell(row: Sequence[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


class ReviewExtractor:
    """
    Extracts canonical reviews from tokenized export text.
    """

    def __init__(self, header_scan_rows: int = settings.HEADER_SCAN_ROWS):
        """
        Initialize extractor.

        Args:
            header_scan_rows: How many leading rows to search for the header
        """
        self.header_scan_rows = header_scan_rows

    def extract(self, csv_text: str) -> List[Review]:
        """
        Extract reviews from raw CSV text.

        Args:
            csv_text: Raw export text

        Returns:
            Reviews in source order; empty when the text is empty or the
            author, content or rating column cannot be found
        """
        if not csv_text:
            return []
        return self.extract_rows(tokenize(csv_text))

    def extract_rows(self, rows: List[List[str]]) -> List[Review]:
        """Extract reviews from already tokenized rows."""
        if len(rows) < 2:
            return []

        header_index = find_header_row(rows, self.header_scan_rows)
        columns = resolve_columns(rows[header_index])

        if not columns.is_complete:
            logger.warning(
                f"Unrecognized review schema, missing columns: {', '.join(columns.missing_required)} "
                f"(header: {rows[header_index]})"
            )
            return []

        reviews = []
        for row in rows[header_index + 1:]:
            # Blank lines tokenize to a single empty cell
            if len(row) <= 1:
                continue
            reviews.append(self._to_review(row, columns))

        logger.debug(f"Extracted {len(reviews)} reviews (header at row {header_index})")
        return reviews

    def _to_review(self, row: List[str], columns: ColumnMap) -> Review:
        return Review(
            author=_cell(row, columns.author) or settings.DEFAULT_AUTHOR,
            date=_cell(row, columns.date),
            content=_cell(row, columns.content),
            rating=parse_rating(_cell(row, columns.rating)),
            source=_cell(row, columns.source) or settings.DEFAULT_SOURCE,
        )
