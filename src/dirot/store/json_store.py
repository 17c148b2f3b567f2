"""JSON-file record store for local use and tests."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from dirot.errors import StoreError
from dirot.store.base import RecordStore, Row, parse_order


class JSONStore(RecordStore):
    """Simple JSON file-based store that mimics the hosted tables."""

    def __init__(self, storage_file: Path) -> None:
        """
        Initialize storage.

        Args:
            storage_file: Path to JSON storage file
        """
        self.storage_file = storage_file
        self.storage_file.parent.mkdir(parents=True, exist_ok=True)
        self._last_stamp: datetime | None = None
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Create storage file if it doesn't exist."""
        if not self.storage_file.exists():
            self._write_data({"tables": {}, "last_updated": datetime.now().isoformat()})

    def _read_data(self) -> dict[str, Any]:
        """Read data from storage file."""
        try:
            with open(self.storage_file, encoding="utf-8") as f:
                data: dict[str, Any] = json.load(f)
                return data
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read {self.storage_file}: {e}") from e

    def _write_data(self, data: dict[str, Any]) -> None:
        """Write data to storage file."""
        data["last_updated"] = datetime.now().isoformat()
        try:
            with open(self.storage_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StoreError(f"Could not write {self.storage_file}: {e}") from e

    def _now(self) -> str:
        """Timestamp that never goes backwards within this store instance."""
        now = datetime.now()
        if self._last_stamp is not None and now < self._last_stamp:
            now = self._last_stamp
        self._last_stamp = now
        return now.isoformat()

    def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
    ) -> list[Row]:
        rows: list[Row] = self._read_data()["tables"].get(table, [])
        if filters:
            rows = [
                row for row in rows if all(row.get(key) == value for key, value in filters.items())
            ]

        parsed = parse_order(order)
        if parsed:
            column, descending = parsed
            # Stable: rows with equal keys keep their insertion order
            rows = sorted(rows, key=lambda row: row.get(column) or "", reverse=descending)

        return [dict(row) for row in rows]

    def insert(self, table: str, row: Row) -> Row:
        data = self._read_data()
        stamp = self._now()
        record = {"id": str(uuid.uuid4()), "created_at": stamp, "updated_at": stamp, **row}
        data["tables"].setdefault(table, []).append(record)
        self._write_data(data)
        return dict(record)

    def update(self, table: str, record_id: str, patch: Row) -> Row:
        data = self._read_data()
        for row in data["tables"].get(table, []):
            if row.get("id") == record_id:
                row.update(patch)
                row["updated_at"] = self._now()
                self._write_data(data)
                return dict(row)
        raise StoreError(f"No row {record_id} in {table}")

    def delete(self, table: str, record_id: str) -> None:
        data = self._read_data()
        rows = data["tables"].get(table, [])
        data["tables"][table] = [row for row in rows if row.get("id") != record_id]
        self._write_data(data)

    def delete_all(self, table: str) -> None:
        data = self._read_data()
        data["tables"][table] = []
        self._write_data(data)

    def get_stats(self) -> dict[str, Any]:
        """
        Get storage statistics.

        Returns:
            Dictionary with row counts per table
        """
        data = self._read_data()
        return {
            "tables": {name: len(rows) for name, rows in data["tables"].items()},
            "last_updated": data.get("last_updated"),
        }


__all__ = ["JSONStore"]
