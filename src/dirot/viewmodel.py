"""View-models: cached lists plus user-facing notices around the repository."""

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from dirot.auth import AccessSession
from dirot.errors import AuthError, DirotError, ValidationError
from dirot.lifecycle import validate_rating
from dirot.models import (
    Apartment,
    ApartmentDraft,
    ApartmentPatch,
    Partner,
    ScannedApartment,
    ScanParams,
    Status,
)
from dirot.notifications import Notifier
from dirot.repository import ApartmentRepository
from dirot.scan_import import ScanImporter

Variant = Literal["default", "destructive"]

ERROR_TITLE = "שגיאה"
AUTH_REQUIRED = "נדרשת סיסמה כדי לערוך. התחברו ונסו שוב"

logger = logging.getLogger(__name__)


class Notice(BaseModel):
    """A transient message for the user."""

    title: str = Field(..., description="Short headline")
    description: str = Field(default="", description="Details")
    variant: Variant = Field(default="default", description="'destructive' for failures")


class _NoticeBoard:
    """Collects notices until the presentation layer takes them."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, title: str, description: str = "", variant: Variant = "default") -> None:
        self.notices.append(Notice(title=title, description=description, variant=variant))

    def fail(self, description: str, error: Exception, title: str = ERROR_TITLE) -> None:
        """Push a destructive notice for a failed operation."""
        if isinstance(error, AuthError):
            description = AUTH_REQUIRED
        elif isinstance(error, ValidationError):
            description = f"{description}: {error}"
        self.notify(title, description, "destructive")

    def take_notices(self) -> list[Notice]:
        """Return pending notices and clear them."""
        notices, self.notices = self.notices, []
        return notices


class ApartmentViewModel(_NoticeBoard):
    """
    Local, advisory cache of the apartment list.

    Every mutation goes through the repository and is followed by a full
    refresh; nothing is merged into the cache locally and nothing is retried.
    """

    def __init__(
        self,
        repository: ApartmentRepository,
        session: AccessSession,
        notifier: Notifier | None = None,
    ) -> None:
        super().__init__()
        self.repository = repository
        self.session = session
        self.apartments: list[Apartment] = []
        self.loading = True

        if notifier is not None:
            notifier.on_failure(self._notification_failed)

    def _notification_failed(self, title: str, error: BaseException | None) -> None:
        self.notify(
            "הדירה נשמרה",
            f"אבל שליחת המייל על '{title}' נכשלה",
            "destructive",
        )

    def refresh(self) -> bool:
        """Replace the cache with the current list; the cache survives a failure."""
        try:
            self.apartments = self.repository.list()
            return True
        except DirotError as e:
            logger.error("Error fetching apartments: %s", e)
            self.fail("לא ניתן לטעון את הדירות", e)
            return False
        finally:
            self.loading = False

    def get(self, apartment_id: str) -> Apartment | None:
        """Cached apartment by id."""
        return next((a for a in self.apartments if a.id == apartment_id), None)

    def add(self, data: ApartmentDraft | dict[str, Any]) -> bool:
        """Create an apartment; True tells the form it may reset itself."""
        try:
            self.repository.create(data, token=self.session.token)
        except DirotError as e:
            logger.error("Error adding apartment: %s", e)
            self.fail("לא ניתן להוסיף את הדירה", e)
            return False

        self.refresh()
        self.notify("הצלחה", "הדירה נוספה בהצלחה!")
        return True

    def update(self, apartment_id: str, patch: ApartmentPatch | dict[str, Any]) -> bool:
        """Apply a partial update."""
        try:
            self.repository.update(apartment_id, patch, token=self.session.token)
        except DirotError as e:
            logger.error("Error updating apartment %s: %s", apartment_id, e)
            self.fail("לא ניתן לעדכן את הדירה", e)
            return False

        self.refresh()
        self.notify("הדירה עודכנה", "הפרטים נשמרו בהצלחה")
        return True

    def remove(self, apartment_id: str) -> bool:
        """Move an apartment to the recycle bin."""
        try:
            self.repository.soft_delete(apartment_id, token=self.session.token)
        except DirotError as e:
            logger.error("Error deleting apartment %s: %s", apartment_id, e)
            self.fail("לא ניתן למחוק את הדירה", e)
            return False

        self.refresh()
        self.notify("הדירה נמחקה", "הדירה הוסרה מהרשימה")
        return True

    def _set_rating(self, apartment_id: str, partner: Partner, rating: int) -> bool:
        try:
            validate_rating(rating)
        except ValidationError as e:
            self.fail("לא ניתן לעדכן את הדירוג", e)
            return False
        return self.update(apartment_id, {f"{partner}_rating": rating})

    def set_mor_rating(self, apartment_id: str, rating: int) -> bool:
        return self._set_rating(apartment_id, "mor", rating)

    def set_gabi_rating(self, apartment_id: str, rating: int) -> bool:
        return self._set_rating(apartment_id, "gabi", rating)

    def set_mor_talked(self, apartment_id: str, talked: bool) -> bool:
        return self.update(apartment_id, {"spoke_with_mor": talked})

    def set_gabi_talked(self, apartment_id: str, talked: bool) -> bool:
        return self.update(apartment_id, {"spoke_with_gabi": talked})

    def set_status(self, apartment_id: str, status: Status) -> bool:
        return self.update(apartment_id, {"status": status})

    def set_note(self, apartment_id: str, note: str | None) -> bool:
        return self.update(apartment_id, {"note": note})

    def upload_image(self, source: Path | bytes, filename: str | None = None) -> str | None:
        """Upload an image; None means keep the placeholder."""
        url = self.repository.upload_image(source, filename)
        if url is None:
            self.notify(ERROR_TITLE, "לא ניתן להעלות את התמונה", "destructive")
        return url


class ScannedViewModel(_NoticeBoard):
    """Cache of scanned candidates with scan, like and clear actions."""

    def __init__(
        self,
        importer: ScanImporter,
        session: AccessSession,
        apartments: ApartmentViewModel | None = None,
    ) -> None:
        super().__init__()
        self.importer = importer
        self.session = session
        self.apartments = apartments
        self.scanned: list[ScannedApartment] = []
        self.loading = True

    def refresh(self) -> bool:
        """Replace the cache with the stored candidates."""
        try:
            self.scanned = self.importer.list_scanned()
            return True
        except DirotError as e:
            logger.error("Error fetching scanned apartments: %s", e)
            self.fail("לא ניתן לטעון את הדירות הסרוקות", e)
            return False
        finally:
            self.loading = False

    def like(self, scanned: ScannedApartment) -> bool:
        """Promote a candidate into the apartment list."""
        try:
            self.importer.promote(scanned, token=self.session.token)
        except DirotError as e:
            logger.error("Error moving apartment %s: %s", scanned.id, e)
            self.fail("לא ניתן להוסיף את הדירה", e)
            return False

        self.refresh()
        if self.apartments is not None:
            self.apartments.refresh()
        self.notify("הדירה נוספה!", "הדירה הועברה לרשימת הדירות הרגילה")
        return True

    def scan(self, params: ScanParams | None = None) -> int | None:
        """Run a scan; returns the number of new candidates, None on failure."""
        try:
            summary = self.importer.scan(params)
        except DirotError as e:
            logger.error("Scan error: %s", e)
            self.notify("שגיאה בסריקה", str(e), "destructive")
            return None

        self.refresh()
        self.notify("סריקה הושלמה בהצלחה!", summary.message)
        return summary.count

    def clear(self) -> bool:
        """Drop every stored candidate."""
        try:
            self.importer.clear_all(token=self.session.token)
        except DirotError as e:
            logger.error("Error clearing scanned apartments: %s", e)
            self.fail("לא ניתן למחוק את הדירות הסרוקות", e, title="שגיאה במחיקה")
            return False

        self.refresh()
        self.notify("נמחקו כל הדירות הסרוקות", "ניתן לסרוק דירות חדשות")
        return True


__all__ = ["ApartmentViewModel", "Notice", "ScannedViewModel"]
