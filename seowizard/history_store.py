"""Durable history of generated articles, one JSON file per record."""

import json
import os
import tempfile
import uuid
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from loguru import logger

from seowizard.models import ArticleRecord, now_millis
from seowizard.utils import sanitize_filename


class HistoryStore:
    """Stores article records keyed by id.

    Every write replaces a whole record file, so readers never observe a
    partially written record. Write failures are logged and the caller gets the
    store's current state back instead of an optimistic update.
    """

    def __init__(self, history_dir: Path):
        """Initialize the history store.

        Args:
            history_dir: Directory to store record files in
        """
        self.history_dir = Path(history_dir)
        self.history_dir.mkdir(parents=True, exist_ok=True)

    def _record_file(self, record_id: str) -> Path:
        return self.history_dir / f"{sanitize_filename(record_id)}.json"

    @staticmethod
    def new_id() -> str:
        return f"{now_millis()}-{uuid.uuid4().hex[:9]}"

    def list_records(self) -> List[ArticleRecord]:
        """All records, newest first.

        Returns:
            List of records sorted by created_at descending
        """
        records = []

        for record_file in self.history_dir.glob("*.json"):
            try:
                with open(record_file, encoding="utf-8") as f:
                    records.append(ArticleRecord.from_dict(json.load(f)))
            except Exception as e:
                logger.error(f"Error reading history record {record_file.name}: {e}")

        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def get(self, record_id: str) -> Optional[ArticleRecord]:
        record_file = self._record_file(record_id)
        if not record_file.exists():
            return None

        try:
            with open(record_file, encoding="utf-8") as f:
                return ArticleRecord.from_dict(json.load(f))
        except Exception as e:
            logger.error(f"Error reading history record {record_id}: {e}")
            return None

    def save(self, record: ArticleRecord) -> ArticleRecord:
        """Write a record, assigning an id if it has none.

        Args:
            record: Record to store; an existing id is overwritten in place

        Returns:
            The stored record (with its id)

        Raises:
            OSError: if the record file can't be written
        """
        if not record.id:
            record = replace(record, id=self.new_id())

        record_file = self._record_file(record.id)
        fd, tmp_path = tempfile.mkstemp(dir=self.history_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, record_file)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info(f"[Storage] Saved item: {record.keyword}")
        return record

    def upsert(self, record: ArticleRecord) -> List[ArticleRecord]:
        """Insert or replace a record.

        Returns:
            The full, updated list of records
        """
        try:
            self.save(record)
        except Exception as e:
            logger.error(f"Failed to save history record '{record.keyword}': {e}")
        return self.list_records()

    def delete(self, record_id: str) -> List[ArticleRecord]:
        """Delete a record if it exists.

        Returns:
            The full, updated list of records
        """
        record_file = self._record_file(record_id)
        try:
            if record_file.exists():
                record_file.unlink()
                logger.info(f"Deleted history record {record_id}")
        except Exception as e:
            logger.error(f"Failed to delete history record {record_id}: {e}")
        return self.list_records()

    def clear(self) -> List[ArticleRecord]:
        """Delete every record."""
        for record_file in self.history_dir.glob("*.json"):
            try:
                record_file.unlink()
            except Exception as e:
                logger.error(f"Failed to delete {record_file.name}: {e}")
        return self.list_records()
