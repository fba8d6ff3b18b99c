"""
Analysis request builder.

Prepares the payload handed to the hosted sentiment-analysis service.
The service itself lives outside this package; its response is opaque.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.ingest.time_filter import TimeWindowFilter, Window
from src.models.dataset import RawDataset
import config.settings as settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    """
    One dataset's reviews, already restricted to the selected window.

    context is "table" for a comparison batch and "item" for a
    single-location deep dive.
    """
    id: str
    name: str
    csv_text: str
    context: str = "item"

    def __post_init__(self):
        if self.context not in settings.ANALYSIS_CONTEXTS:
            raise ValueError(
                f"Invalid context: {self.context}. Must be one of {settings.ANALYSIS_CONTEXTS}"
            )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "csvContent": self.csv_text,
            "context": self.context,
        }


def build_analysis_request(
    dataset: RawDataset,
    window: Window,
    now: datetime,
    context: str = "item",
    time_filter: Optional[TimeWindowFilter] = None,
    max_chars: int = settings.MAX_ANALYSIS_CHARS
) -> AnalysisRequest:
    """
    Build the analysis payload for a dataset.

    Args:
        dataset: Stored dataset
        window: Trailing window ("all" or months)
        now: Reference instant
        context: "table" or "item"
        time_filter: Filter to use (default TimeWindowFilter())
        max_chars: Upper bound on csv text sent to the service

    Returns:
        AnalysisRequest with filtered, truncated csv text
    """
    time_filter = time_filter or TimeWindowFilter()
    filtered = time_filter.filter_trailing(dataset.csv_text, window, now)

    if len(filtered) > max_chars:
        logger.info(f"Truncating analysis input for {dataset.id} from {len(filtered)} to {max_chars} chars")
        filtered = filtered[:max_chars]

    return AnalysisRequest(id=dataset.id, name=dataset.name, csv_text=filtered, context=context)
