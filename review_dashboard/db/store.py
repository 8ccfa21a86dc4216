"""
Record Store
Holds the canonical Review, Property and Trend collections.

Two backends share one interface:
  - FileRecordStore   : JSON file on disk, re-read on every access
  - MemoryRecordStore : private in-memory copy of the seed, reset on restart
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as SchemaValidationError

from review_dashboard.core.config import Settings
from review_dashboard.core.errors import StoreError
from review_dashboard.schemas.dataset import Dataset
from review_dashboard.schemas.review import Review

logger = logging.getLogger(__name__)

SEED_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "mock_data.json"


def _parse_dataset(raw: Union[str, bytes], source: str) -> Dataset:
    try:
        return Dataset.model_validate(json.loads(raw))
    except (json.JSONDecodeError, SchemaValidationError) as e:
        raise StoreError(f"Corrupt record data in {source}: {e}") from e


def load_seed_dataset(path: Optional[Union[str, Path]] = None) -> Dataset:
    """Load the bundled seed data (or the given JSON file)"""
    source = Path(path) if path else SEED_DATA_PATH
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as e:
        raise StoreError(f"Could not read record data from {source}: {e}") from e
    return _parse_dataset(raw, str(source))


class RecordStore(ABC):
    """Synchronous get-all / update-by-id provider"""

    @abstractmethod
    def get_all(self) -> Dataset:
        """Return the full current snapshot"""

    @abstractmethod
    def update_review(self, review_id: int, fields: Dict[str, Any]) -> None:
        """Merge fields into the review with a matching id. Unknown ids are ignored."""

    def get_review(self, review_id: int) -> Optional[Review]:
        for review in self.get_all().reviews:
            if review.id == review_id:
                return review
        return None


def _merge_review(dataset: Dataset, review_id: int, fields: Dict[str, Any]) -> bool:
    for index, review in enumerate(dataset.reviews):
        if review.id == review_id:
            dataset.reviews[index] = review.model_copy(update=fields)
            return True
    return False


class FileRecordStore(RecordStore):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dataset:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not read record file {self.path}: {e}") from e
        return _parse_dataset(raw, str(self.path))

    def _write(self, dataset: Dataset) -> None:
        payload = json.dumps(dataset.to_wire(), indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"Could not write record file {self.path}: {e}") from e

    def get_all(self) -> Dataset:
        return self._read()

    def update_review(self, review_id: int, fields: Dict[str, Any]) -> None:
        with self._lock:
            dataset = self._read()
            if not _merge_review(dataset, review_id, fields):
                logger.debug(f"update_review: no review with id {review_id}")
                return
            self._write(dataset)


class MemoryRecordStore(RecordStore):
    def __init__(self, seed: Dataset):
        self._seed = seed.model_copy(deep=True)
        self._data = seed.model_copy(deep=True)
        self._lock = threading.Lock()

    def get_all(self) -> Dataset:
        with self._lock:
            return self._data.model_copy(deep=True)

    def update_review(self, review_id: int, fields: Dict[str, Any]) -> None:
        with self._lock:
            if not _merge_review(self._data, review_id, fields):
                logger.debug(f"update_review: no review with id {review_id}")
                return
        logger.info(f"Review {review_id} updated in memory (resets on restart)")

    def reset(self) -> None:
        """Restore the seed snapshot"""
        with self._lock:
            self._data = self._seed.model_copy(deep=True)


def create_store(settings: Settings) -> RecordStore:
    """Build the record store selected by configuration"""
    backend = settings.resolved_storage_backend
    data_file = settings.DATA_FILE or SEED_DATA_PATH

    if backend == "file":
        logger.info(f"Using file record store: {data_file}")
        return FileRecordStore(data_file)
    if backend == "memory":
        logger.info("Using in-memory record store")
        return MemoryRecordStore(load_seed_dataset(data_file))

    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
