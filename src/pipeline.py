"""
Review Pipeline.

Coordinates storage with the merge, filter and statistics components.
"""

import logging
import threading
from datetime import datetime
from typing import Optional

from src.ingest.analysis import AnalysisRequest, build_analysis_request
from src.ingest.comments import comments_to_csv, extract_comments
from src.ingest.extractor import ReviewExtractor
from src.ingest.merger import ReviewMerger
from src.ingest.stats import MONTH_MODE, PeriodSummary, ReviewStats
from src.ingest.time_filter import TimeWindowFilter, Window
from src.models.dataset import RawDataset
from src.utils.dates import DateResolver
from src.utils.storage import StorageManager

logger = logging.getLogger(__name__)


class ReviewPipeline:
    """
    Entry point used by request handlers and the CLI.

    Coordinates:
    1. Load stored dataset → 2. Merge import → 3. Save merged csv
    plus time-filtered views and summaries over stored datasets.
    """

    def __init__(self, data_root: str):
        """
        Initialize review pipeline.

        Args:
            data_root: Root directory for data storage
        """
        self.storage = StorageManager(data_root)

        self.extractor = ReviewExtractor()
        self.time_filter = TimeWindowFilter(date_resolver=DateResolver())
        self.merger = ReviewMerger(extractor=self.extractor)
        self.stats = ReviewStats(extractor=self.extractor, time_filter=self.time_filter)

        # Read-merge-write must not interleave for the same store
        self._write_lock = threading.Lock()

        logger.info("Review pipeline initialized")

    def import_csv(self, dataset_id: str, name: str, new_csv: str) -> RawDataset:
        """
        Merge an imported export into a stored dataset and persist the result.

        Args:
            dataset_id: Dataset identifier
            name: Display name (used when the dataset is new)
            new_csv: Imported csv text in any supported layout

        Returns:
            The dataset as stored after the merge
        """
        with self._write_lock:
            existing = self.storage.load_dataset(dataset_id)
            if existing is None:
                existing = RawDataset(id=dataset_id, name=name)

            merged_csv = self.merger.merge(existing.csv_text, new_csv)
            if merged_csv == existing.csv_text and existing.csv_text:
                logger.info(f"Dataset {dataset_id} unchanged by import")
                return existing

            merged = existing.with_csv(merged_csv)
            self.storage.save_dataset(merged)

        logger.info(f"Imported into {dataset_id}: {len(self.extractor.extract(merged_csv))} reviews stored")
        return merged

    def import_comments(self, dataset_id: str, name: str, body) -> RawDataset:
        """Import an API comment payload into a stored dataset."""
        return self.import_csv(dataset_id, name, comments_to_csv(extract_comments(body)))

    def filtered_csv(self, dataset_id: str, window: Window, now: datetime) -> Optional[str]:
        dataset = self.storage.load_dataset(dataset_id)
        if dataset is None:
            return None
        return self.time_filter.filter_trailing(dataset.csv_text, window, now)

    def summarize(
        self,
        dataset_id: str,
        window: Window,
        now: datetime,
        mode: str = MONTH_MODE
    ) -> Optional[PeriodSummary]:
        dataset = self.storage.load_dataset(dataset_id)
        if dataset is None:
            logger.warning(f"Cannot summarize unknown dataset {dataset_id}")
            return None
        return self.stats.summarize(dataset.csv_text, window, now, mode=mode)

    def analysis_request(
        self,
        dataset_id: str,
        window: Window,
        now: datetime,
        context: str = "item"
    ) -> Optional[AnalysisRequest]:
        """Payload for the analysis service, or None for an unknown dataset."""
        dataset = self.storage.load_dataset(dataset_id)
        if dataset is None:
            return None
        return build_analysis_request(dataset, window, now, context=context, time_filter=self.time_filter)
