"""Pytest configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from dirot.auth import AccessSession
from dirot.notifications import Notifier
from dirot.repository import ApartmentRepository
from dirot.session import LocalSessionState
from dirot.store import JSONStore, LocalBlobStorage


class SendRecorder:
    """Stands in for the email sender and remembers every call."""

    def __init__(self, fail_with: Exception | None = None, result: bool = True) -> None:
        self.calls: list[tuple[dict[str, Any], str, bool]] = []
        self.fail_with = fail_with
        self.result = result

    def __call__(self, data: dict[str, Any], action: str, dry_run: bool = False) -> bool:
        self.calls.append((data, action, dry_run))
        if self.fail_with is not None:
            raise self.fail_with
        return self.result


@pytest.fixture
def sample_draft() -> dict[str, Any]:
    """Form fields for a new apartment."""
    return {
        "title": "3-room, Givatayim",
        "description": "Bright apartment near the park",
        "price": 5400,
        "location": "Katznelson 12, Givatayim",
        "contact_name": "Avi",
        "contact_phone": "050-0000000",
        "apartment_link": "https://www.yad2.co.il/realestate/item/abc123",
        "square_meters": 70,
        "floor": 2,
        "pets_allowed": "yes",
    }


@pytest.fixture
def temp_store(tmp_path: Path) -> Generator[JSONStore, None, None]:
    """Create a temporary record store for testing."""
    store = JSONStore(storage_file=tmp_path / "test_dirot.json")
    yield store
    store.close()


@pytest.fixture
def blobs(tmp_path: Path) -> LocalBlobStorage:
    """Local blob storage accepting any bucket."""
    return LocalBlobStorage(tmp_path / "uploads")


@pytest.fixture
def sender() -> SendRecorder:
    """Email sender that always succeeds."""
    return SendRecorder()


@pytest.fixture
def notifier(sender: SendRecorder) -> Generator[Notifier, None, None]:
    """Notifier wired to the recording sender."""
    notifier = Notifier(send=sender)
    yield notifier
    notifier.shutdown()


@pytest.fixture
def repository(
    temp_store: JSONStore, blobs: LocalBlobStorage, notifier: Notifier
) -> ApartmentRepository:
    """Repository over the temporary store, without an access gate."""
    return ApartmentRepository(temp_store, blobs, notifier, couple_id="couple-1")


@pytest.fixture
def session_state(tmp_path: Path) -> LocalSessionState:
    """Session state in a temporary file."""
    return LocalSessionState(tmp_path / "session.json")


@pytest.fixture
def access_session(session_state: LocalSessionState) -> AccessSession:
    """Session without a password gate."""
    return AccessSession(session_state)

