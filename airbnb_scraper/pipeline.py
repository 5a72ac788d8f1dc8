"""Dedupe + batched CSV writer, and the matching CSV reader."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections import defaultdict
from dataclasses import asdict
from pathlib import Path

import pandas as pd

from airbnb_scraper.config import OUTPUT_DIR, STORAGE_QUEUE_LIMIT
from airbnb_scraper.models import field_names

logger = logging.getLogger(__name__)

# one lock per output file, so the header check and the append happen together
_path_locks: defaultdict[Path, threading.Lock] = defaultdict(threading.Lock)
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _path_locks_guard:
        return _path_locks[path.resolve()]


class DataPipeline:
    """Collects records, drops repeated keys and appends them to one CSV file.

    A single instance may be shared by many tasks of the same crawl; adds and
    flushes are serialized by an internal lock. Keys stay in ``names_seen`` for
    the whole life of the pipeline, so duplicates are caught across flushes.
    A flush that fails puts its records back in the queue, so none are lost.
    """

    def __init__(self, csv_filename: str, storage_queue_limit: int = STORAGE_QUEUE_LIMIT,
                 output_dir: Path | str = OUTPUT_DIR):
        self.names_seen: set[str] = set()
        self.storage_queue: list = []
        self.storage_queue_limit = storage_queue_limit
        self.csv_filename = csv_filename
        self.path = Path(output_dir) / csv_filename
        self._lock = asyncio.Lock()

    def is_duplicate(self, name: str) -> bool:
        if name in self.names_seen:
            logger.warning("Duplicate item found: %s. Item dropped.", name)
            return True
        self.names_seen.add(name)
        return False

    async def add_data(self, data) -> bool:
        """Queue a record unless its key was seen before. Returns True if queued."""
        async with self._lock:
            if self.is_duplicate(data.key):
                return False
            self.storage_queue.append(data)
            if len(self.storage_queue) >= self.storage_queue_limit:
                await self._save_to_csv()
            return True

    async def flush(self) -> int:
        """Write every queued record. Returns the number of rows written."""
        async with self._lock:
            return await self._save_to_csv()

    async def close_pipeline(self) -> None:
        async with self._lock:
            if self.storage_queue:
                await self._save_to_csv()

    async def _save_to_csv(self) -> int:
        # caller holds self._lock
        data_to_save = list(self.storage_queue)
        if not data_to_save:
            return 0
        self.storage_queue.clear()
        try:
            await asyncio.to_thread(self._append_rows, data_to_save)
        except Exception:
            # on cancellation the worker thread still writes the rows, so only
            # a failed write puts them back
            self.storage_queue[:0] = data_to_save
            raise
        logger.info("Saved %d rows to %s", len(data_to_save), self.path)
        return len(data_to_save)

    def _append_rows(self, records: list) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        columns = field_names(type(records[0]))
        df = pd.DataFrame([asdict(r) for r in records], columns=columns)
        with _lock_for(self.path):
            write_header = not self.path.exists()
            csv_data = df.to_csv(index=False, header=write_header, lineterminator="\n")
            with open(self.path, "a", encoding="utf-8", newline="") as f:
                f.write(csv_data + "\n")


def read_batch_file(path: Path | str) -> list[dict[str, str]]:
    """Read a CSV written by DataPipeline back as rows of plain strings."""
    if os.path.getsize(path) == 0:
        return []
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    return df.to_dict("records")
