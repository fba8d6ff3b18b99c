"""
Comment normalization.

Converts review comment payloads from external review APIs into
canonical CSV text, so API imports go through the same merge path as
file uploads.
"""

import logging
import math
from typing import Any, Dict, List

from src.ingest.extractor import parse_rating
from src.ingest.merger import serialize_reviews
from src.models.review import Review
import config.settings as settings

logger = logging.getLogger(__name__)

# Field aliases, checked in order
AUTHOR_FIELDS = ("author", "reviewer", "author_name", "user_name")
DATE_FIELDS = ("date", "created_at", "commented_at", "time")
CONTENT_FIELDS = ("content", "comment", "body", "review")
RATING_FIELDS = ("rating", "star", "score")
SOURCE_FIELDS = ("source", "platform")

COLLECTION_KEYS = ("data", "results", "comments", "items", "list")


def extract_comments(body: Any) -> List[Dict]:
    """
    Pull the comment list out of an API response body.

    Handles a bare list or an object wrapping it under a common key.
    Anything else yields an empty list.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in COLLECTION_KEYS:
            if isinstance(body.get(key), list):
                return body[key]
    return []


def _first_present(item: Dict, fields, default=None):
    for field in fields:
        value = item.get(field)
        if value is not None:
            return value
    return default


def _rating(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        rating = int(round(value))
        return rating if 0 <= rating <= settings.MAX_RATING else 0
    return parse_rating(str(value))


def normalize_comment(item: Dict) -> Review:
    """
    Map one API comment onto a Review.

    Args:
        item: Comment object with any of the supported field aliases

    Returns:
        Review with canonical defaults applied
    """
    author = str(_first_present(item, AUTHOR_FIELDS, "")).strip()
    source = str(_first_present(item, SOURCE_FIELDS, "")).strip()
    return Review(
        author=author or settings.DEFAULT_AUTHOR,
        date=str(_first_present(item, DATE_FIELDS, "")).strip(),
        content=str(_first_present(item, CONTENT_FIELDS, "")).strip(),
        rating=_rating(_first_present(item, RATING_FIELDS, 0)),
        source=source or settings.DEFAULT_SOURCE,
    )


def comments_to_csv(comments: List[Dict]) -> str:
    """
    Convert API comments to canonical CSV text.

    An empty list gives a header-only document.
    """
    if not comments:
        return settings.CANONICAL_HEADER + "\n"

    reviews = []
    for item in comments:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object comment: {item!r}")
            continue
        reviews.append(normalize_comment(item))

    logger.debug(f"Normalized {len(reviews)}/{len(comments)} API comments")
    return serialize_reviews(reviews)
