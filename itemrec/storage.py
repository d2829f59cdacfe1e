"""Stores receiving the constructed recommendation model data"""

import json
import logging
from pathlib import Path
from typing import Protocol

from .data.types import RankedRecommendation

logger = logging.getLogger(__name__)


class ModelDataStore(Protocol):
    """
    Write contract of a recommendation store.

    `insert` is called exactly once per processed prediction line, in file
    order, from a single thread.
    """

    def insert(self, record: RankedRecommendation) -> None:
        ...


class InMemoryStore:
    """Keeps inserted records in a list."""

    def __init__(self):
        self.records: list[RankedRecommendation] = []

    def insert(self, record: RankedRecommendation) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)


class JsonLinesStore:
    """
    Appends one JSON document per record to a file.

    The file is truncated when the store is opened, so re-running a job
    replaces the output of the previous run.

    Example:
        >>> with JsonLinesStore("out/itemrec_scores.jsonl") as store:
        ...     store.insert(record)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._file = None
        self.num_inserted = 0

    def open(self) -> "JsonLinesStore":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", encoding="utf-8")
        self.num_inserted = 0
        logger.info("Writing model data to %s", self.path)
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.info("Wrote %d records to %s", self.num_inserted, self.path)

    def insert(self, record: RankedRecommendation) -> None:
        if self._file is None:
            raise RuntimeError(f"Store {self.path} is not open")
        self._file.write(json.dumps(record.to_document(), ensure_ascii=False, allow_nan=False))
        self._file.write("\n")
        self.num_inserted += 1

    def __enter__(self) -> "JsonLinesStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

