"""PostgREST (Supabase) record store over httpx."""

import logging
from typing import Any

import httpx

from dirot.config import settings
from dirot.errors import StoreError
from dirot.store.base import RecordStore, Row

# PostgREST refuses unfiltered deletes; this filter matches every real row
_MATCH_ALL = "neq.00000000-0000-0000-0000-000000000000"

logger = logging.getLogger(__name__)


class RestStore(RecordStore):
    """Record store backed by the hosted PostgREST endpoint."""

    def __init__(self, base_url: str, api_key: str, timeout: float | None = None) -> None:
        """
        Initialize the REST client.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            timeout=timeout or settings.request_timeout,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        """Send one request and decode the JSON body, mapping failures to StoreError."""
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = self.client.request(
                method, self._table_url(table), params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("%s %s failed: %s", method, table, e.response.text)
            raise StoreError(
                f"{method} {table} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {table} failed: {e}") from e

        if not response.content:
            return None
        return response.json()

    def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
    ) -> list[Row]:
        params = {"select": "*"}
        if order:
            params["order"] = order
        for key, value in (filters or {}).items():
            params[key] = f"eq.{value}"
        rows: list[Row] = self._request("GET", table, params=params) or []
        return rows

    def insert(self, table: str, row: Row) -> Row:
        rows = self._request("POST", table, json=row, prefer="return=representation")
        if not rows:
            raise StoreError(f"Insert into {table} returned no row")
        inserted: Row = rows[0]
        return inserted

    def update(self, table: str, record_id: str, patch: Row) -> Row:
        rows = self._request(
            "PATCH",
            table,
            params={"id": f"eq.{record_id}"},
            json=patch,
            prefer="return=representation",
        )
        if not rows:
            raise StoreError(f"No row {record_id} in {table}")
        updated: Row = rows[0]
        return updated

    def delete(self, table: str, record_id: str) -> None:
        self._request("DELETE", table, params={"id": f"eq.{record_id}"})

    def delete_all(self, table: str) -> None:
        self._request("DELETE", table, params={"id": _MATCH_ALL})

    def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        self.client.close()


__all__ = ["RestStore"]
