"""Scan import pipeline: scanned candidates in, promoted apartments out."""

import logging
import re
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError as PydanticValidationError

from dirot.errors import ExternalServiceError, StoreError, ValidationError
from dirot.forms import generated_fb_url
from dirot.models import Apartment, ScannedApartment, ScannedListing, ScanParams, ScanSummary
from dirot.repository import ApartmentRepository, load_row
from dirot.scanners import BaseScanner, ScanBlockedError, get_scanner
from dirot.store import SCANNED_APARTMENTS, RecordStore

ScannerFactory = Callable[[], BaseScanner]

BLOCKED_MESSAGE = "Yad2 חסם את הסריקה (403). נסו שוב מאוחר יותר"
RATE_LIMITED_MESSAGE = "יותר מדי בקשות ל-Yad2 (429). המתינו כמה דקות ונסו שוב"
NO_LISTINGS_MESSAGE = "לא נמצאו דירות שמתאימות לקריטריונים"
GENERIC_MESSAGE = "לא ניתן לסרוק דירות כרגע"

_NO_LISTINGS_PATTERN = re.compile(r"no listings|לא נמצאו", re.IGNORECASE)

logger = logging.getLogger(__name__)


def translate_scan_error(error: BaseException | str) -> str:
    """
    Map a scanner failure onto a user-facing message.

    Known third-party signatures (403 blocking, 429 rate limiting, an empty
    result set) get a specific message; anything else gets a generic one.
    """
    if isinstance(error, ScanBlockedError):
        return BLOCKED_MESSAGE
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 403:
            return BLOCKED_MESSAGE
        if status == 429:
            return RATE_LIMITED_MESSAGE
        return GENERIC_MESSAGE

    text = str(error)
    if re.search(r"\b403\b", text):
        return BLOCKED_MESSAGE
    if re.search(r"\b429\b", text):
        return RATE_LIMITED_MESSAGE
    if _NO_LISTINGS_PATTERN.search(text):
        return NO_LISTINGS_MESSAGE
    return GENERIC_MESSAGE


def normalize_scanned(record: ScannedListing | dict[str, Any], index: int = 0) -> dict[str, Any]:
    """
    Bring a scraped record into the stored candidate shape.

    Missing fields are filled with None, `pets_allowed` falls back to "unknown"
    and a listing link is synthesized when the scraper gave none.

    Raises:
        ValidationError: If the record has no title or a malformed field
    """
    try:
        listing = (
            record
            if isinstance(record, ScannedListing)
            else ScannedListing.model_validate(record)
        )
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid scanned record: {e.error_count()} error(s)") from e

    row = listing.model_dump(mode="json")
    if not row.get("apartment_link"):
        row["apartment_link"] = f"https://www.yad2.co.il/item/{int(time.time() * 1000)}-{index}"
    return row


def load_scan_params(config_path: Path) -> ScanParams:
    """Load scan filters from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the filters are invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    try:
        return ScanParams(**(data or {}))
    except (PydanticValidationError, TypeError) as e:
        raise ValidationError(f"Invalid scan config in {config_path}: {e}") from e


class ScanImporter:
    """Runs scans and moves accepted candidates into the apartment list."""

    def __init__(
        self,
        store: RecordStore,
        repository: ApartmentRepository,
        scanner_factory: ScannerFactory = get_scanner,
    ) -> None:
        self.store = store
        self.repository = repository
        self.scanner_factory = scanner_factory

    def list_scanned(self) -> list[ScannedApartment]:
        """Stored candidates, newest first."""
        rows = self.store.select(SCANNED_APARTMENTS, order="created_at.desc")
        return [load_row(ScannedApartment, row, "scanned apartment") for row in rows]

    def scan(self, params: ScanParams | None = None) -> ScanSummary:
        """
        Run the scanner and store what it found.

        Raises:
            ExternalServiceError: With a localized message when scanning fails
                or finds nothing
            StoreError: If storing a candidate fails
        """
        params = params or ScanParams()
        logger.info(
            "Scanning %s listings in %s (max price %s)",
            params.property_type,
            ", ".join(params.areas),
            params.max_price,
        )

        try:
            with self.scanner_factory() as scanner:
                listings = scanner.scan(params)
        except (httpx.HTTPError, ScanBlockedError) as e:
            logger.error("Scan failed: %s", e)
            raise ExternalServiceError(translate_scan_error(e)) from e

        if not listings:
            raise ExternalServiceError(translate_scan_error("no listings found"))

        count = 0
        for index, listing in enumerate(listings):
            self.store.insert(SCANNED_APARTMENTS, normalize_scanned(listing, index))
            count += 1

        logger.info("Stored %d scanned apartments", count)
        return ScanSummary(count=count, message=f"נמצאו {count} דירות חדשות")

    def promote(self, scanned: ScannedApartment, *, token: str | None = None) -> Apartment:
        """
        Copy a candidate into the apartment list and drop it from the scan pool.

        The insert and the delete are separate calls. If the delete fails the
        apartment already exists, and promoting the same candidate again would
        add it a second time.

        Raises:
            AuthError: If the token is rejected
            StoreError: If either step fails
        """
        draft = {
            "title": scanned.title,
            "description": scanned.description,
            "price": scanned.price,
            "location": scanned.location,
            "image_url": scanned.image_url,
            "apartment_link": scanned.apartment_link,
            "contact_phone": scanned.contact_phone,
            "contact_name": scanned.contact_name,
            "square_meters": scanned.square_meters,
            "floor": scanned.floor,
            "pets_allowed": scanned.pets_allowed,
            "fb_url": scanned.apartment_link or generated_fb_url(),
            "status": "not_spoke",
            "mor_rating": 0,
            "gabi_rating": 0,
        }
        apartment = self.repository.create(draft, token=token, notify=False)

        try:
            self.store.delete(SCANNED_APARTMENTS, scanned.id)
        except StoreError:
            logger.warning(
                "Promoted %s as apartment %s but could not remove the scanned copy",
                scanned.id,
                apartment.id,
            )
            raise

        logger.info("Promoted scanned apartment %s to %s", scanned.id, apartment.id)
        return apartment

    def clear_all(self, *, token: str | None = None) -> None:
        """
        Delete every stored candidate.

        Raises:
            AuthError: If the token is rejected
            StoreError: If the delete fails
        """
        self.repository.authorize(token)
        self.store.delete_all(SCANNED_APARTMENTS)
        logger.info("Cleared scanned apartments")


__all__ = [
    "BLOCKED_MESSAGE",
    "GENERIC_MESSAGE",
    "NO_LISTINGS_MESSAGE",
    "RATE_LIMITED_MESSAGE",
    "ScanImporter",
    "load_scan_params",
    "normalize_scanned",
    "translate_scan_error",
]
