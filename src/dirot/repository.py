"""Apartment repository: the only reader and writer of the apartments table."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dirot.auth import AccessAuthority
from dirot.config import settings
from dirot.errors import StoreError, UploadError, ValidationError
from dirot.lifecycle import sort_apartments
from dirot.models import Apartment, ApartmentDraft, ApartmentPatch, ArchivedApartment
from dirot.notifications import Notifier
from dirot.store import APARTMENTS, DELETED_APARTMENTS, BlobStorage, RecordStore

IMAGE_FOLDER = "apartment-images"

RowModel = TypeVar("RowModel", bound=BaseModel)

logger = logging.getLogger(__name__)


def _describe(error: PydanticValidationError) -> str:
    """One-line summary of a pydantic validation error."""
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "value"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


def to_draft(data: ApartmentDraft | dict[str, Any]) -> ApartmentDraft:
    """Validate form data into a draft, raising our ValidationError."""
    if isinstance(data, ApartmentDraft):
        return data
    try:
        return ApartmentDraft.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e


def to_patch(data: ApartmentPatch | dict[str, Any]) -> ApartmentPatch:
    """Validate a partial update, raising our ValidationError."""
    if isinstance(data, ApartmentPatch):
        return data
    try:
        return ApartmentPatch.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e


def load_row(model: type[RowModel], row: dict[str, Any], kind: str) -> RowModel:
    """Validate a stored row, raising StoreError when it is malformed."""
    try:
        return model.model_validate(row)
    except PydanticValidationError as e:
        raise StoreError(f"Malformed {kind} row {row.get('id')}: {_describe(e)}") from e


def _to_apartment(row: dict[str, Any]) -> Apartment:
    return load_row(Apartment, row, "apartment")


class ApartmentRepository:
    """Maps user actions onto record store operations."""

    def __init__(
        self,
        store: RecordStore,
        blobs: BlobStorage | None = None,
        notifier: Notifier | None = None,
        authority: AccessAuthority | None = None,
        buckets: list[str] | None = None,
        couple_id: str | None = None,
    ) -> None:
        """
        Initialize the repository.

        Args:
            store: Record store client
            blobs: Binary storage for images
            notifier: Sends "added" notifications; None disables them
            authority: Checks tokens on mutating calls; None disables the gate
            buckets: Buckets tried in order for uploads
            couple_id: Grouping key stamped on new apartments
        """
        self.store = store
        self.blobs = blobs
        self.notifier = notifier
        self.authority = authority
        self.buckets = buckets if buckets is not None else list(settings.storage_buckets)
        self.couple_id = couple_id if couple_id is not None else settings.couple_id

    def authorize(self, token: str | None) -> None:
        """Check an access token when an authority is configured."""
        if self.authority is not None:
            self.authority.verify(token)

    def list(self) -> list[Apartment]:
        """
        Fetch all apartments, best combined rating first.

        The store returns rows newest first; the combined-rating sort is applied
        here and keeps that order for ties.

        Raises:
            StoreError: If the query fails
        """
        rows = self.store.select(APARTMENTS, order="created_at.desc")
        return sort_apartments(_to_apartment(row) for row in rows)

    def get(self, apartment_id: str) -> Apartment:
        """
        Fetch one apartment.

        Raises:
            StoreError: If it does not exist or the query fails
        """
        row = self.store.get(APARTMENTS, apartment_id)
        if row is None:
            raise StoreError(f"Apartment {apartment_id} not found")
        return _to_apartment(row)

    def create(
        self,
        data: ApartmentDraft | dict[str, Any],
        *,
        token: str | None = None,
        notify: bool = True,
    ) -> Apartment:
        """
        Insert a new apartment.

        The "added" notification is handed to the notifier and not awaited; its
        failure never fails the creation.

        Args:
            data: Draft or raw form fields
            token: Access token
            notify: Whether to send the "added" notification

        Returns:
            The stored apartment

        Raises:
            ValidationError: If the draft is invalid (nothing is sent to the store)
            AuthError: If the token is rejected
            StoreError: If the insert fails
        """
        draft = to_draft(data)
        self.authorize(token)

        row = draft.model_dump(mode="json")
        if row.get("couple_id") is None:
            row["couple_id"] = self.couple_id

        apartment = _to_apartment(self.store.insert(APARTMENTS, row))
        logger.info("Added apartment %s (%s)", apartment.id, apartment.title)

        if notify and self.notifier is not None:
            self.notifier.notify(row, "added")
        return apartment

    def update(
        self,
        apartment_id: str,
        patch: ApartmentPatch | dict[str, Any],
        *,
        token: str | None = None,
    ) -> None:
        """
        Apply a partial update. Updates never send notifications.

        Raises:
            ValidationError: If the patch is invalid
            AuthError: If the token is rejected
            StoreError: If the update fails
        """
        changes = to_patch(patch).to_update()
        self.authorize(token)
        if not changes:
            return
        self.store.update(APARTMENTS, apartment_id, changes)
        logger.info("Updated apartment %s: %s", apartment_id, ", ".join(changes))

    def soft_delete(self, apartment_id: str, *, token: str | None = None) -> None:
        """
        Move an apartment to the recycle bin.

        Reads the row, inserts the archive copy, then deletes the original, in
        that order. If the archive insert fails the original is left in place.

        Raises:
            AuthError: If the token is rejected
            StoreError: If any step fails
        """
        self.authorize(token)
        apartment = self.get(apartment_id)
        archived = ArchivedApartment.from_apartment(apartment)
        self.store.insert(DELETED_APARTMENTS, archived.model_dump(mode="json"))
        self.store.delete(APARTMENTS, apartment_id)
        logger.info("Archived and deleted apartment %s", apartment_id)

    def list_deleted(self) -> list[ArchivedApartment]:
        """Recycle-bin contents, most recently deleted first."""
        rows = self.store.select(DELETED_APARTMENTS, order="deleted_at.desc")
        return [load_row(ArchivedApartment, row, "archived apartment") for row in rows]

    def upload_image(self, source: Path | bytes, filename: str | None = None) -> str | None:
        """
        Upload an image, trying each configured bucket in order.

        Args:
            source: File path or raw bytes
            filename: Original file name (used for the extension)

        Returns:
            Public URL, or None if every bucket failed
        """
        if self.blobs is None:
            logger.warning("No blob storage configured, keeping placeholder image")
            return None

        if isinstance(source, Path):
            filename = filename or source.name
            try:
                data = source.read_bytes()
            except OSError as e:
                logger.error("Could not read %s: %s", source, e)
                return None
        else:
            data = source

        ext = Path(filename or "image.jpg").suffix.lstrip(".").lower() or "jpg"
        path = f"{IMAGE_FOLDER}/{uuid.uuid4().hex}.{ext}"
        content_type = mimetypes.guess_type(f"x.{ext}")[0]

        last_error: UploadError | None = None
        for bucket in self.buckets:
            try:
                url = self.blobs.upload(bucket, path, data, content_type)
            except UploadError as e:
                logger.warning("Upload to bucket %s failed: %s", bucket, e)
                last_error = e
                continue
            logger.info("Uploaded image to %s", url)
            return url

        logger.error("Image upload failed on every bucket: %s", last_error)
        return None


__all__ = ["ApartmentRepository", "load_row", "to_draft", "to_patch"]
