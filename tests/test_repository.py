"""Tests for the apartment repository."""

from datetime import date, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from dirot.auth import AccessAuthority
from dirot.errors import AuthError, StoreError, ValidationError
from dirot.models import PLACEHOLDER_IMAGE_URL
from dirot.notifications import Notifier
from dirot.repository import ApartmentRepository
from dirot.store import (
    APARTMENTS,
    DELETED_APARTMENTS,
    JSONStore,
    LocalBlobStorage,
    RecordStore,
    Row,
)

from conftest import SendRecorder


class FailingArchiveStore(JSONStore):
    """JSON store whose recycle-bin inserts always fail."""

    def insert(self, table: str, row: Row) -> Row:
        if table == DELETED_APARTMENTS:
            raise StoreError("archive unavailable")
        return super().insert(table, row)


class TestCreate:
    """Tests for adding apartments."""

    def test_create_stores_defaults(
        self, repository: ApartmentRepository, sample_draft: dict[str, Any]
    ) -> None:
        """New apartments start unrated with the placeholder image."""
        apartment = repository.create(sample_draft)

        assert apartment.id
        assert apartment.title == "3-room, Givatayim"
        assert apartment.mor_rating == 0
        assert apartment.gabi_rating == 0
        assert apartment.status == "not_spoke"
        assert apartment.image_url == PLACEHOLDER_IMAGE_URL
        assert apartment.couple_id == "couple-1"

    def test_create_sends_added_notification(
        self,
        repository: ApartmentRepository,
        notifier: Notifier,
        sender: SendRecorder,
        sample_draft: dict[str, Any],
    ) -> None:
        """Creation hands an "added" notification to the notifier."""
        repository.create(sample_draft)
        notifier.drain()

        assert len(sender.calls) == 1
        data, action, dry_run = sender.calls[0]
        assert action == "added"
        assert data["title"] == "3-room, Givatayim"
        assert dry_run is False

    def test_create_without_notification(
        self,
        repository: ApartmentRepository,
        notifier: Notifier,
        sender: SendRecorder,
        sample_draft: dict[str, Any],
    ) -> None:
        """Notifications can be suppressed."""
        repository.create(sample_draft, notify=False)
        notifier.drain()

        assert sender.calls == []

    def test_missing_title_never_reaches_store(self) -> None:
        """Invalid drafts are rejected before any store call."""
        store = MagicMock(spec=RecordStore)
        repository = ApartmentRepository(store, couple_id="c")

        with pytest.raises(ValidationError, match="title"):
            repository.create({"title": "", "price": 4000})

        store.insert.assert_not_called()

    def test_notification_failure_keeps_apartment(
        self, temp_store: JSONStore, sample_draft: dict[str, Any]
    ) -> None:
        """A failed email never fails the creation."""
        failing = SendRecorder(fail_with=RuntimeError("mail down"))
        failures: list[str] = []
        notifier = Notifier(send=failing)
        notifier.on_failure(lambda title, error: failures.append(title))
        repository = ApartmentRepository(temp_store, notifier=notifier, couple_id="c")

        apartment = repository.create(sample_draft)
        notifier.drain()
        notifier.shutdown()

        assert [a.id for a in repository.list()] == [apartment.id]
        assert failures == ["3-room, Givatayim"]


class TestList:
    """Tests for listing apartments."""

    def test_list_orders_by_combined_rating(self, repository: ApartmentRepository) -> None:
        """Best combined rating first."""
        a = repository.create({"title": "A"}, notify=False)
        b = repository.create({"title": "B"}, notify=False)
        c = repository.create({"title": "C"}, notify=False)
        repository.update(a.id, {"mor_rating": 3, "gabi_rating": 4})
        repository.update(b.id, {"mor_rating": 5, "gabi_rating": 5})

        ordered = repository.list()

        assert [apt.title for apt in ordered] == ["B", "A", "C"]
        assert [apt.combined_rating for apt in ordered] == [10, 7, 0]
        assert ordered[2].id == c.id

    def test_list_empty(self, repository: ApartmentRepository) -> None:
        """An empty store lists nothing."""
        assert repository.list() == []

    def test_malformed_row(self, temp_store: JSONStore) -> None:
        """Rows that do not validate surface as StoreError."""
        temp_store.insert(APARTMENTS, {"title": "Broken", "mor_rating": 42})
        repository = ApartmentRepository(temp_store, couple_id="c")

        with pytest.raises(StoreError, match="Malformed"):
            repository.list()

    def test_get_missing(self, repository: ApartmentRepository) -> None:
        """Unknown ids raise StoreError."""
        with pytest.raises(StoreError, match="not found"):
            repository.get("missing")


class TestUpdate:
    """Tests for partial updates."""

    def test_update_changes_only_given_fields(
        self, repository: ApartmentRepository, sample_draft: dict[str, Any]
    ) -> None:
        """Other fields are left untouched."""
        apartment = repository.create(sample_draft, notify=False)

        repository.update(apartment.id, {"status": "spoke", "spoke_with_mor": True})

        updated = repository.get(apartment.id)
        assert updated.status == "spoke"
        assert updated.spoke_with_mor is True
        assert updated.price == 5400

    def test_update_never_notifies(
        self,
        repository: ApartmentRepository,
        notifier: Notifier,
        sender: SendRecorder,
        sample_draft: dict[str, Any],
    ) -> None:
        """Updates are silent."""
        apartment = repository.create(sample_draft, notify=False)

        repository.update(apartment.id, {"note": "call back"})
        notifier.drain()

        assert sender.calls == []

    def test_invalid_rating(self, repository: ApartmentRepository) -> None:
        """Out-of-range ratings are rejected."""
        apartment = repository.create({"title": "A"}, notify=False)

        with pytest.raises(ValidationError):
            repository.update(apartment.id, {"mor_rating": 7})

        assert repository.get(apartment.id).mor_rating == 0

    def test_past_entry_date_never_reaches_store(self) -> None:
        """Edited entry dates in the past are rejected before any store call."""
        store = MagicMock(spec=RecordStore)
        repository = ApartmentRepository(store, couple_id="c")
        last_month = (date.today() - timedelta(days=30)).isoformat()

        with pytest.raises(ValidationError, match="entry_date"):
            repository.update("apt-1", {"entry_date": last_month})

        store.update.assert_not_called()

    def test_future_entry_date_accepted(self, repository: ApartmentRepository) -> None:
        """Edited entry dates from today on are stored."""
        apartment = repository.create({"title": "A"}, notify=False)
        next_month = date.today() + timedelta(days=30)

        repository.update(apartment.id, {"entry_date": next_month.isoformat()})

        assert repository.get(apartment.id).entry_date == next_month

    def test_empty_patch_skips_store(self) -> None:
        """Nothing to change means no store call."""
        store = MagicMock(spec=RecordStore)
        repository = ApartmentRepository(store, couple_id="c")

        repository.update("apt-1", {})

        store.update.assert_not_called()

    def test_missing_row(self, repository: ApartmentRepository) -> None:
        """Updating an unknown apartment fails."""
        with pytest.raises(StoreError):
            repository.update("missing", {"note": "x"})


class TestSoftDelete:
    """Tests for moving apartments to the recycle bin."""

    def test_soft_delete_archives_then_removes(
        self, repository: ApartmentRepository, sample_draft: dict[str, Any]
    ) -> None:
        """The archive copy carries the original fields."""
        apartment = repository.create(sample_draft, notify=False)

        repository.soft_delete(apartment.id)

        assert repository.list() == []
        deleted = repository.list_deleted()
        assert len(deleted) == 1
        assert deleted[0].original_id == apartment.id
        assert deleted[0].title == apartment.title
        assert deleted[0].price == 5400
        assert deleted[0].pets_allowed == "yes"
        assert deleted[0].couple_id == "couple-1"

    def test_failing_archive_keeps_original(self, tmp_path: Path) -> None:
        """If the archive insert fails the apartment stays in the list."""
        store = FailingArchiveStore(tmp_path / "store.json")
        repository = ApartmentRepository(store, couple_id="c")
        apartment = repository.create({"title": "Keep me"})

        with pytest.raises(StoreError, match="archive"):
            repository.soft_delete(apartment.id)

        assert [a.id for a in repository.list()] == [apartment.id]

    def test_malformed_archive_row(
        self, repository: ApartmentRepository, temp_store: JSONStore
    ) -> None:
        """Broken recycle-bin rows surface as StoreError."""
        temp_store.insert(DELETED_APARTMENTS, {"title": "No original id"})

        with pytest.raises(StoreError, match="Malformed archived apartment row"):
            repository.list_deleted()

    def test_soft_delete_missing(self, repository: ApartmentRepository) -> None:
        """Deleting an unknown id fails before touching the archive."""
        with pytest.raises(StoreError):
            repository.soft_delete("missing")

        assert repository.list_deleted() == []


class TestUploadImage:
    """Tests for image uploads."""

    def test_upload_bytes(self, repository: ApartmentRepository) -> None:
        """Bytes are stored in the first bucket."""
        url = repository.upload_image(b"jpegdata", "photo.JPG")

        assert url is not None
        assert "apartment-images" in url
        assert url.endswith(".jpg")

    def test_upload_path(self, repository: ApartmentRepository, tmp_path: Path) -> None:
        """Files are read from disk."""
        image = tmp_path / "photo.png"
        image.write_bytes(b"png")

        url = repository.upload_image(image)

        assert url is not None
        assert url.endswith(".png")

    def test_falls_back_to_next_bucket(self, temp_store: JSONStore, tmp_path: Path) -> None:
        """A missing bucket is skipped in favor of the next one."""
        blobs = LocalBlobStorage(tmp_path / "blobs", buckets=["images"])
        repository = ApartmentRepository(
            temp_store, blobs, buckets=["apartment-images", "images"], couple_id="c"
        )

        url = repository.upload_image(b"data", "a.jpg")

        assert url is not None
        assert "/images/apartment-images/" in url

    def test_every_bucket_fails(self, temp_store: JSONStore, tmp_path: Path) -> None:
        """Upload failure yields None."""
        blobs = LocalBlobStorage(tmp_path / "blobs", buckets=[])
        repository = ApartmentRepository(temp_store, blobs, buckets=["a", "b"], couple_id="c")

        assert repository.upload_image(b"data", "a.jpg") is None

    def test_no_blob_storage(self, temp_store: JSONStore) -> None:
        """Without storage there is nothing to upload to."""
        repository = ApartmentRepository(temp_store, couple_id="c")

        assert repository.upload_image(b"data", "a.jpg") is None

    def test_unreadable_file(self, repository: ApartmentRepository, tmp_path: Path) -> None:
        """Missing files yield None."""
        assert repository.upload_image(tmp_path / "missing.jpg") is None


class TestAccessGate:
    """Tests for the shared-password gate on mutating calls."""

    @pytest.fixture
    def authority(self) -> AccessAuthority:
        return AccessAuthority("open sesame")

    @pytest.fixture
    def gated(self, temp_store: JSONStore, authority: AccessAuthority) -> ApartmentRepository:
        return ApartmentRepository(temp_store, authority=authority, couple_id="c")

    def test_create_requires_token(self, gated: ApartmentRepository) -> None:
        """Mutations without a token are refused."""
        with pytest.raises(AuthError):
            gated.create({"title": "A"})

        assert gated.list() == []

    def test_forged_token(self, gated: ApartmentRepository) -> None:
        """Tokens not signed by the authority are refused."""
        with pytest.raises(AuthError):
            gated.create({"title": "A"}, token="123.abc.deadbeef")

    def test_valid_token(self, gated: ApartmentRepository, authority: AccessAuthority) -> None:
        """An issued token unlocks every mutation."""
        token = authority.issue("open sesame")

        apartment = gated.create({"title": "A"}, token=token)
        gated.update(apartment.id, {"mor_rating": 2}, token=token)
        gated.soft_delete(apartment.id, token=token)

        assert gated.list() == []
        assert len(gated.list_deleted()) == 1

    def test_reads_are_open(self, gated: ApartmentRepository) -> None:
        """Listing needs no token."""
        assert gated.list() == []
