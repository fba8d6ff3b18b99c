"""
Review Merger.

Combines previously stored review data with a fresh import.
Existing reviews are never dropped; re-imported reviews only refresh
their date.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Set, Tuple

from src.ingest.extractor import ReviewExtractor
from src.models.review import Review
from src.utils.csv_tokenizer import format_row, tokenize
import config.settings as settings

logger = logging.getLogger(__name__)

Fingerprint = Tuple[str, str, int]

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: Optional[str]) -> str:
    """Lower-case, trim and collapse whitespace runs."""
    return _WHITESPACE.sub(" ", (value or "").lower().strip())


def fingerprint(review: Review) -> Fingerprint:
    """
    Deduplication key for a review.

    Date is left out: the same review scraped twice carries a different
    relative timestamp ("2 days ago" vs "3 days ago").
    """
    return (normalize_text(review.author), normalize_text(review.content), review.rating)


def serialize_reviews(reviews: Iterable[Review]) -> str:
    """Serialize reviews to canonical CSV (author,date,content,rating,source)."""
    lines = [settings.CANONICAL_HEADER]
    for review in reviews:
        lines.append(format_row(cell.strip() for cell in review.to_row()))
    return "\n".join(lines)


def _has_data_rows(csv_text: str) -> bool:
    # Quoted cells may span lines, so count tokenized rows
    return len(tokenize(csv_text.strip())) > 1


class ReviewMerger:
    """
    Merges new review exports into existing canonical CSV text.
    """

    def __init__(self, extractor: Optional[ReviewExtractor] = None):
        """
        Initialize merger.

        Args:
            extractor: Extractor used for both sides of the merge
        """
        self.extractor = extractor or ReviewExtractor()

    def merge(self, existing_csv: Optional[str], new_csv: Optional[str]) -> str:
        """
        Merge new CSV content into existing CSV content.

        Args:
            existing_csv: Stored canonical CSV (may be empty)
            new_csv: Freshly imported export in any supported layout

        Returns:
            Canonical CSV text: existing reviews in their original order
            followed by newly appended ones. Existing text is returned
            unchanged when it cannot be parsed or the import is empty.
        """
        if not existing_csv:
            return new_csv or ""
        if not new_csv:
            return existing_csv

        existing_reviews = self.extractor.extract(existing_csv)

        # Existing data we can't read must not be overwritten
        if _has_data_rows(existing_csv) and not existing_reviews:
            logger.warning("Existing data has rows but no parsable reviews, keeping it unchanged")
            return existing_csv

        new_reviews = self.extractor.extract(new_csv)
        if not new_reviews:
            logger.info("Import contains no parsable reviews, nothing to merge")
            return existing_csv

        merged, updated, appended = self.merge_reviews(existing_reviews, new_reviews)
        logger.info(
            f"Merged {len(new_reviews)} imported reviews: "
            f"{updated} date updates, {appended} appended, {len(merged)} total"
        )
        return serialize_reviews(merged)

    def merge_reviews(
        self,
        existing: List[Review],
        incoming: List[Review]
    ) -> Tuple[List[Review], int, int]:
        """
        Record-level merge.

        Args:
            existing: Stored reviews; the list itself is not modified
            incoming: Imported reviews in source order

        Returns:
            (merged reviews, number of date updates, number appended)
        """
        merged = list(existing)
        index_by_key: Dict[Fingerprint, int] = {}
        for index, review in enumerate(merged):
            # First occurrence wins for duplicates already in storage
            index_by_key.setdefault(fingerprint(review), index)

        seen_new: Set[Fingerprint] = set()
        updated = 0
        appended = 0

        for review in incoming:
            key = fingerprint(review)
            if key in index_by_key:
                index = index_by_key[key]
                merged[index] = merged[index].with_date(review.date)
                updated += 1
            elif key not in seen_new:
                seen_new.add(key)
                merged.append(review)
                index_by_key[key] = len(merged) - 1
                appended += 1

        return merged, updated, appended
