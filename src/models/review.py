"""
Review data model.

Represents one canonical review extracted from a source export.
"""

from dataclasses import dataclass, replace

import config.settings as settings


@dataclass(frozen=True)
class Review:
    """
    Canonical review record.
    Derived from csv text on every cycle, never persisted directly.
    """
    author: str  # Display name, "Anonymous" when blank
    date: str  # Raw date text as captured, not normalized
    content: str  # Free text, may be empty
    rating: int  # 0-5, 0 means no rating parsed
    source: str = settings.DEFAULT_SOURCE  # Platform label

    def __post_init__(self):
        # Validate rating
        if not (0 <= self.rating <= settings.MAX_RATING):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 0-{settings.MAX_RATING}")

    def with_date(self, date: str) -> "Review":
        """Copy of this review carrying a different date."""
        return replace(self, date=date)

    def to_row(self) -> list:
        return [self.author, self.date, self.content, str(self.rating), self.source]


# Design Rationale and Trade-offs:
#
# 1. Why keep the raw date string?
#    - Relative dates ("3 days ago") only mean something against a reference
#    - Re-serialized CSV keeps what the source export said
#    - Trade-off: Every time filter resolves dates again
#
# 2. Why 0 for an unparsed rating instead of None?
#    - The canonical CSV column is always an integer
#    - 0 is outside the 1-5 star scale, so it cannot be mistaken for a real rating
#    - Trade-off: Unrated reviews pull averages down
#
# 3. Why frozen?
#    - Merge refreshes dates through with_date and never mutates its inputs
#    - Trade-off: A copy per date update, negligible at export sizes
