"""
Storage utility.

File I/O helpers for raw review datasets.
"""

import json
import os
import logging
from typing import Dict, List, Optional

from src.models.dataset import RawDataset

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O for review datasets.

    Handles:
    - Dataset csv text (data/datasets/<id>.csv)
    - Dataset display names (data/datasets/index.json)
    """

    def __init__(self, data_root: str):
        """
        Initialize storage manager.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = data_root
        self.datasets_dir = os.path.join(data_root, "datasets")
        self.index_path = os.path.join(self.datasets_dir, "index.json")

        # Create directories if they don't exist
        os.makedirs(self.datasets_dir, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={data_root}")

    def _csv_path(self, dataset_id: str) -> str:
        if not dataset_id or "/" in dataset_id or os.sep in dataset_id or dataset_id.startswith("."):
            raise ValueError(f"Invalid dataset id: {dataset_id!r}")
        return os.path.join(self.datasets_dir, f"{dataset_id}.csv")

    def _load_index(self) -> Dict[str, str]:
        if not os.path.exists(self.index_path):
            return {}

        try:
            with open(self.index_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load dataset index: {e}")
            return {}

    def _save_index(self, index: Dict[str, str]) -> None:
        with open(self.index_path, 'w', encoding='utf-8') as f:
            json.dump(index, f, indent=2, ensure_ascii=False)

    def save_dataset(self, dataset: RawDataset) -> None:
        """
        Save a dataset's csv text and display name.

        Args:
            dataset: Dataset to persist (replaces any stored csv text)
        """
        filepath = self._csv_path(dataset.id)

        try:
            # newline='' keeps CRLF inside quoted cells untouched
            with open(filepath, 'w', encoding='utf-8', newline='') as f:
                f.write(dataset.csv_text)

            index = self._load_index()
            index[dataset.id] = dataset.name
            self._save_index(index)
            logger.info(f"Saved dataset {dataset.id} to {filepath}")
        except OSError as e:
            logger.error(f"Failed to save dataset {dataset.id}: {e}")
            raise

    def load_dataset(self, dataset_id: str) -> Optional[RawDataset]:
        """
        Load a dataset.

        Args:
            dataset_id: Dataset identifier

        Returns:
            RawDataset, or None if it doesn't exist or can't be read
        """
        filepath = self._csv_path(dataset_id)

        if not os.path.exists(filepath):
            logger.debug(f"No dataset found for {dataset_id}")
            return None

        try:
            with open(filepath, 'r', encoding='utf-8', newline='') as f:
                csv_text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load dataset {dataset_id}: {e}")
            return None

        name = self._load_index().get(dataset_id, dataset_id)
        return RawDataset(id=dataset_id, name=name, csv_text=csv_text)

    def list_datasets(self) -> List[RawDataset]:
        """
        Load all stored datasets.

        Returns:
            Datasets sorted by id
        """
        datasets = []
        for filename in sorted(os.listdir(self.datasets_dir)):
            if filename.endswith('.csv'):
                dataset = self.load_dataset(filename[:-len('.csv')])
                if dataset:
                    datasets.append(dataset)
        return datasets
