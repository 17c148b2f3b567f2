"""Tests for the JSON record store."""

from pathlib import Path

import pytest

from dirot.errors import StoreError
from dirot.store import APARTMENTS, SCANNED_APARTMENTS, JSONStore


class TestJSONStore:
    """Tests for JSONStore class."""

    def test_storage_initialization(self, tmp_path: Path) -> None:
        """Test storage file is created on initialization."""
        storage_file = tmp_path / "nested" / "test.json"
        store = JSONStore(storage_file=storage_file)

        assert storage_file.exists()
        assert store.storage_file == storage_file
        assert store.select(APARTMENTS) == []

    def test_insert_assigns_id_and_timestamps(self, temp_store: JSONStore) -> None:
        """Inserted rows get server-style fields."""
        row = temp_store.insert(APARTMENTS, {"title": "Studio"})

        assert row["id"]
        assert row["created_at"]
        assert row["updated_at"] == row["created_at"]
        assert row["title"] == "Studio"

    def test_select_with_filters(self, temp_store: JSONStore) -> None:
        """Equality filters narrow the result."""
        temp_store.insert(APARTMENTS, {"title": "A", "status": "spoke"})
        temp_store.insert(APARTMENTS, {"title": "B", "status": "no_answer"})

        rows = temp_store.select(APARTMENTS, filters={"status": "spoke"})

        assert [r["title"] for r in rows] == ["A"]

    def test_select_order_desc(self, temp_store: JSONStore) -> None:
        """Order clauses sort rows."""
        temp_store.insert(APARTMENTS, {"title": "A", "price": 3000})
        temp_store.insert(APARTMENTS, {"title": "B", "price": 5000})

        rows = temp_store.select(APARTMENTS, order="price.desc")

        assert [r["title"] for r in rows] == ["B", "A"]

    def test_get(self, temp_store: JSONStore) -> None:
        """Rows can be fetched by id."""
        row = temp_store.insert(APARTMENTS, {"title": "A"})

        assert temp_store.get(APARTMENTS, row["id"])["title"] == "A"
        assert temp_store.get(APARTMENTS, "missing") is None

    def test_update(self, temp_store: JSONStore) -> None:
        """Updates merge the patch into the row."""
        row = temp_store.insert(APARTMENTS, {"title": "A", "mor_rating": 0})

        updated = temp_store.update(APARTMENTS, row["id"], {"mor_rating": 4})

        assert updated["mor_rating"] == 4
        assert updated["title"] == "A"
        assert updated["updated_at"] >= row["updated_at"]

    def test_update_missing_row(self, temp_store: JSONStore) -> None:
        """Updating an unknown id fails."""
        with pytest.raises(StoreError):
            temp_store.update(APARTMENTS, "missing", {"title": "x"})

    def test_delete(self, temp_store: JSONStore) -> None:
        """Deleting removes only the given row."""
        a = temp_store.insert(APARTMENTS, {"title": "A"})
        temp_store.insert(APARTMENTS, {"title": "B"})

        temp_store.delete(APARTMENTS, a["id"])

        assert [r["title"] for r in temp_store.select(APARTMENTS)] == ["B"]

    def test_delete_all_is_per_table(self, temp_store: JSONStore) -> None:
        """Clearing one table leaves the others."""
        temp_store.insert(APARTMENTS, {"title": "A"})
        temp_store.insert(SCANNED_APARTMENTS, {"title": "S"})

        temp_store.delete_all(SCANNED_APARTMENTS)

        assert temp_store.select(SCANNED_APARTMENTS) == []
        assert len(temp_store.select(APARTMENTS)) == 1

    def test_persistence(self, tmp_path: Path) -> None:
        """Data survives a new store instance."""
        storage_file = tmp_path / "persist.json"
        JSONStore(storage_file).insert(APARTMENTS, {"title": "Kept"})

        rows = JSONStore(storage_file).select(APARTMENTS)

        assert rows[0]["title"] == "Kept"

    def test_returned_rows_are_copies(self, temp_store: JSONStore) -> None:
        """Mutating a returned row does not touch the store."""
        row = temp_store.insert(APARTMENTS, {"title": "A"})
        row["title"] = "Changed"

        assert temp_store.select(APARTMENTS)[0]["title"] == "A"

    def test_corrupt_file(self, tmp_path: Path) -> None:
        """Unreadable files raise StoreError."""
        storage_file = tmp_path / "broken.json"
        storage_file.write_text("{not json", encoding="utf-8")
        store = JSONStore(storage_file)

        with pytest.raises(StoreError):
            store.select(APARTMENTS)

    def test_get_stats(self, temp_store: JSONStore) -> None:
        """Test getting storage statistics."""
        temp_store.insert(APARTMENTS, {"title": "A"})
        temp_store.insert(APARTMENTS, {"title": "B"})

        stats = temp_store.get_stats()

        assert stats["tables"][APARTMENTS] == 2
        assert stats["last_updated"] is not None

    def test_context_manager(self, tmp_path: Path) -> None:
        """Stores can be used in a with block."""
        with JSONStore(tmp_path / "ctx.json") as store:
            store.insert(APARTMENTS, {"title": "A"})
