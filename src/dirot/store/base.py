"""Record store interface."""

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]

APARTMENTS = "apartments"
SCANNED_APARTMENTS = "scanned_apartments"
DELETED_APARTMENTS = "deleted_apartments"


def parse_order(order: str | None) -> tuple[str, bool] | None:
    """
    Parse a PostgREST-style order clause.

    Args:
        order: Clause like "created_at.desc" or "score"

    Returns:
        Tuple of (column, descending) or None
    """
    if not order:
        return None
    column, _, direction = order.partition(".")
    return column, direction.lower() == "desc"


class RecordStore(ABC):
    """Generic query/insert/update/delete client for the hosted tables."""

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
    ) -> list[Row]:
        """
        Fetch rows from a table.

        Args:
            table: Table name
            filters: Column equality filters
            order: Order clause, e.g. "created_at.desc"

        Returns:
            Matching rows

        Raises:
            StoreError: If the query fails
        """
        ...

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert one row and return it with server-assigned fields."""
        ...

    @abstractmethod
    def update(self, table: str, record_id: str, patch: Row) -> Row:
        """
        Apply a partial update to one row.

        Raises:
            StoreError: If the query fails or no row has this id
        """
        ...

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """Delete one row by id."""
        ...

    @abstractmethod
    def delete_all(self, table: str) -> None:
        """Delete every row of a table."""
        ...

    def get(self, table: str, record_id: str) -> Row | None:
        """Fetch one row by id, or None if it does not exist."""
        rows = self.select(table, filters={"id": record_id})
        return rows[0] if rows else None

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> "RecordStore":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit - cleanup resources."""
        self.close()
