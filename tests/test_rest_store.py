"""Tests for the PostgREST record store."""

import json
import re
from collections.abc import Generator

import httpx
import pytest
from pytest_httpx import HTTPXMock

from dirot.errors import StoreError
from dirot.store import APARTMENTS, SCANNED_APARTMENTS, RestStore

BASE = "https://project.supabase.co"
TABLE_URL = re.compile(rf"{re.escape(BASE)}/rest/v1/apartments(\?.*)?$")


@pytest.fixture
def rest_store() -> Generator[RestStore, None, None]:
    store = RestStore(BASE + "/", "anon-key", timeout=5)
    yield store
    store.close()


class TestRestStore:
    """Tests for RestStore class."""

    def test_select_sends_order_and_filters(
        self, httpx_mock: HTTPXMock, rest_store: RestStore
    ) -> None:
        """Select translates filters and order into query parameters."""
        httpx_mock.add_response(url=TABLE_URL, json=[{"id": "1", "title": "A"}])

        rows = rest_store.select(APARTMENTS, filters={"status": "spoke"}, order="created_at.desc")

        assert rows == [{"id": "1", "title": "A"}]
        request = httpx_mock.get_requests()[0]
        assert request.method == "GET"
        assert request.url.params["select"] == "*"
        assert request.url.params["order"] == "created_at.desc"
        assert request.url.params["status"] == "eq.spoke"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"

    def test_insert_returns_representation(
        self, httpx_mock: HTTPXMock, rest_store: RestStore
    ) -> None:
        """Insert asks for the stored row back."""
        httpx_mock.add_response(
            url=TABLE_URL, method="POST", status_code=201, json=[{"id": "new", "title": "A"}]
        )

        row = rest_store.insert(APARTMENTS, {"title": "A"})

        assert row["id"] == "new"
        request = httpx_mock.get_requests()[0]
        assert request.headers["Prefer"] == "return=representation"
        assert json.loads(request.content) == {"title": "A"}

    def test_update_filters_by_id(self, httpx_mock: HTTPXMock, rest_store: RestStore) -> None:
        """Update targets one row by id."""
        httpx_mock.add_response(
            url=TABLE_URL, method="PATCH", json=[{"id": "1", "mor_rating": 4}]
        )

        row = rest_store.update(APARTMENTS, "1", {"mor_rating": 4})

        assert row["mor_rating"] == 4
        request = httpx_mock.get_requests()[0]
        assert request.url.params["id"] == "eq.1"

    def test_update_missing_row(self, httpx_mock: HTTPXMock, rest_store: RestStore) -> None:
        """An empty representation means no such row."""
        httpx_mock.add_response(url=TABLE_URL, method="PATCH", json=[])

        with pytest.raises(StoreError):
            rest_store.update(APARTMENTS, "missing", {"mor_rating": 4})

    def test_delete(self, httpx_mock: HTTPXMock, rest_store: RestStore) -> None:
        """Delete sends an id filter."""
        httpx_mock.add_response(url=TABLE_URL, method="DELETE", status_code=204)

        rest_store.delete(APARTMENTS, "1")

        assert httpx_mock.get_requests()[0].url.params["id"] == "eq.1"

    def test_delete_all_uses_match_all_filter(
        self, httpx_mock: HTTPXMock, rest_store: RestStore
    ) -> None:
        """Unfiltered deletes are expressed with a filter matching every row."""
        httpx_mock.add_response(
            url=re.compile(rf"{re.escape(BASE)}/rest/v1/scanned_apartments\?.*"),
            method="DELETE",
            status_code=204,
        )

        rest_store.delete_all(SCANNED_APARTMENTS)

        params = httpx_mock.get_requests()[0].url.params
        assert params["id"].startswith("neq.")

    def test_http_error_maps_to_store_error(
        self, httpx_mock: HTTPXMock, rest_store: RestStore
    ) -> None:
        """HTTP failures surface as StoreError."""
        httpx_mock.add_response(url=TABLE_URL, status_code=500, text="boom")

        with pytest.raises(StoreError, match="500"):
            rest_store.select(APARTMENTS)

    def test_transport_error_maps_to_store_error(
        self, httpx_mock: HTTPXMock, rest_store: RestStore
    ) -> None:
        """Network failures surface as StoreError."""
        httpx_mock.add_exception(httpx.ConnectError("offline"), url=TABLE_URL)

        with pytest.raises(StoreError):
            rest_store.select(APARTMENTS)
