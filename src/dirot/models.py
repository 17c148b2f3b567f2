"""Data models for apartments, scanned candidates and archive records."""

import re
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Status = Literal["spoke", "not_spoke", "no_answer"]
PetsPolicy = Literal["yes", "no", "unknown"]
Partner = Literal["mor", "gabi"]

PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1522708323590-d24dbb6b0267"
    "?auto=format&fit=crop&w=2070&q=80"
)

# Phrases meaning "right away" rather than a calendar date
RELATIVE_DATE_PATTERN = re.compile(
    r"מיידי|מידי|מידית|מיידית|כעת|עכשיו|תכף|בקרוב|גמיש|immediate|asap|now|flexible",
    re.IGNORECASE,
)
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d.%m.%Y", "%d-%m-%Y", "%d/%m/%y")

ARCHIVED_FIELDS = (
    "title",
    "description",
    "price",
    "location",
    "image_url",
    "apartment_link",
    "contact_phone",
    "contact_name",
    "square_meters",
    "floor",
    "pets_allowed",
    "couple_id",
)


def clean_entry_date(value: Any) -> date | None:
    """
    Normalize an entry date coming from a form or an AI analysis.

    Relative phrases ("מיידי", "immediately", ...) and unparseable text become None,
    so only real calendar dates are ever stored.

    Args:
        value: Raw value (date, datetime, string or None)

    Returns:
        Parsed date or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text or RELATIVE_DATE_PATTERN.search(text):
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text[:10], fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ApartmentFields(BaseModel):
    """Fields shared by stored apartments, drafts and patches."""

    description: str | None = Field(None, description="Free-text description")
    location: str | None = Field(None, description="Address or neighborhood")
    contact_name: str | None = Field(None, description="Landlord or agent name")
    contact_phone: str | None = Field(None, description="Landlord or agent phone")
    apartment_link: str | None = Field(None, description="External listing URL")
    fb_url: str | None = Field(None, description="Source post URL")
    price: float | None = Field(None, ge=0, description="Monthly rent in NIS")
    arnona: float | None = Field(None, ge=0, description="Monthly property tax in NIS")
    square_meters: float | None = Field(None, ge=0, description="Size in square meters")
    floor: float | None = Field(None, ge=0, description="Floor number")
    has_shelter: bool | None = Field(None, description="Whether there is a shelter (mamad)")
    note: str | None = Field(None, description="Shared free-text note")
    scheduled_visit_text: str | None = Field(None, description="When a visit is planned")
    couple_id: str | None = Field(None, description="Grouping key")

    @field_validator(
        "description",
        "location",
        "contact_name",
        "contact_phone",
        "apartment_link",
        "fb_url",
        "scheduled_visit_text",
        mode="before",
    )
    @classmethod
    def blank_strings_to_none(cls, v: Any) -> Any:
        """Treat empty form inputs as missing."""
        return _blank_to_none(v)

    @field_validator("price", "arnona", "square_meters", "floor", mode="before")
    @classmethod
    def blank_numbers_to_none(cls, v: Any) -> Any:
        """Treat empty numeric inputs as missing."""
        return _blank_to_none(v)


class Apartment(ApartmentFields):
    """A canonical apartment listing as stored in the `apartments` table."""

    id: str = Field(..., description="Server-assigned identifier")
    title: str = Field(..., min_length=1, description="Listing title")
    image_url: str = Field(default=PLACEHOLDER_IMAGE_URL, description="Main image URL")
    status: Status = Field(default="not_spoke", description="Contact status with landlord")
    pets_allowed: PetsPolicy = Field(default="unknown", description="Pets policy")
    entry_date: date | None = Field(None, description="Earliest move-in date")
    mor_rating: int = Field(default=0, ge=0, le=5, description="Mor's rating")
    gabi_rating: int = Field(default=0, ge=0, le=5, description="Gabi's rating")
    spoke_with_mor: bool = Field(default=False, description="Mor talked to the landlord")
    spoke_with_gabi: bool = Field(default=False, description="Gabi talked to the landlord")
    created_at: datetime = Field(..., description="Creation time (server-assigned)")
    updated_at: datetime = Field(..., description="Last update time (server-assigned)")

    # Stored rows may carry nulls for columns with application defaults
    @field_validator("mor_rating", "gabi_rating", mode="before")
    @classmethod
    def null_rating(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("spoke_with_mor", "spoke_with_gabi", mode="before")
    @classmethod
    def null_flag(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def null_status(cls, v: Any) -> Any:
        return "not_spoke" if v is None else v

    @field_validator("pets_allowed", mode="before")
    @classmethod
    def null_pets(cls, v: Any) -> Any:
        return "unknown" if v is None else v

    @field_validator("image_url", mode="before")
    @classmethod
    def placeholder_image(cls, v: Any) -> Any:
        return PLACEHOLDER_IMAGE_URL if _blank_to_none(v) is None else v

    @property
    def combined_rating(self) -> int:
        """Sum of both partners' ratings (the canonical sort key)."""
        return self.mor_rating + self.gabi_rating

    def rating_for(self, partner: Partner) -> int:
        """Rating given by one partner."""
        return self.mor_rating if partner == "mor" else self.gabi_rating

    def talked_for(self, partner: Partner) -> bool:
        """Whether one partner has talked to the landlord."""
        return self.spoke_with_mor if partner == "mor" else self.spoke_with_gabi


class ApartmentDraft(ApartmentFields):
    """A new apartment as submitted by a user, before the store assigns id and timestamps."""

    title: str = Field(..., min_length=1, description="Listing title")
    image_url: str = Field(default=PLACEHOLDER_IMAGE_URL)
    status: Status = Field(default="not_spoke")
    pets_allowed: PetsPolicy = Field(default="unknown")
    entry_date: date | None = Field(None)
    mor_rating: int = Field(default=0, ge=0, le=5)
    gabi_rating: int = Field(default=0, ge=0, le=5)
    spoke_with_mor: bool = Field(default=False)
    spoke_with_gabi: bool = Field(default=False)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        """Titles made of whitespace count as missing."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("image_url", mode="before")
    @classmethod
    def placeholder_image(cls, v: Any) -> Any:
        return PLACEHOLDER_IMAGE_URL if _blank_to_none(v) is None else v

    @field_validator("entry_date", mode="before")
    @classmethod
    def clean_date(cls, v: Any) -> date | None:
        return clean_entry_date(v)

    @field_validator("entry_date")
    @classmethod
    def not_in_past(cls, v: date | None) -> date | None:
        """User-supplied entry dates must be today or later."""
        if v is not None and v < date.today():
            raise ValueError("entry_date must be today or later")
        return v


class ApartmentPatch(ApartmentFields):
    """A partial update. Only fields that were explicitly set are sent to the store."""

    title: str | None = Field(None, min_length=1)
    image_url: str | None = Field(None)
    status: Status | None = Field(None)
    pets_allowed: PetsPolicy | None = Field(None)
    entry_date: date | None = Field(None)
    mor_rating: int | None = Field(None, ge=0, le=5)
    gabi_rating: int | None = Field(None, ge=0, le=5)
    spoke_with_mor: bool | None = Field(None)
    spoke_with_gabi: bool | None = Field(None)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("title", "status", "pets_allowed", "image_url")
    @classmethod
    def not_cleared(cls, v: Any) -> Any:
        """Required columns can be changed but never set to null."""
        if v is None:
            raise ValueError("field cannot be cleared")
        return v

    @field_validator("entry_date", mode="before")
    @classmethod
    def clean_date(cls, v: Any) -> date | None:
        return clean_entry_date(v)

    @field_validator("entry_date")
    @classmethod
    def not_in_past(cls, v: date | None) -> date | None:
        """Edited entry dates must be today or later, like new ones."""
        if v is not None and v < date.today():
            raise ValueError("entry_date must be today or later")
        return v

    def to_update(self) -> dict[str, Any]:
        """Serialize only the explicitly set fields."""
        return self.model_dump(mode="json", exclude_unset=True)


class ScannedListing(BaseModel):
    """A scraped candidate before it is persisted to `scanned_apartments`."""

    title: str = Field(..., min_length=1)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    location: str | None = None
    image_url: str | None = None
    apartment_link: str | None = None
    contact_phone: str | None = None
    contact_name: str | None = None
    square_meters: float | None = Field(None, ge=0)
    floor: float | None = Field(None, ge=0)
    pets_allowed: PetsPolicy = Field(default="unknown")

    @field_validator("pets_allowed", mode="before")
    @classmethod
    def unknown_pets(cls, v: Any) -> Any:
        return "unknown" if v not in ("yes", "no") else v


class ScannedApartment(ScannedListing):
    """A persisted scan candidate. Never edited: only promoted or discarded."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Server-assigned identifier")
    created_at: datetime = Field(..., description="When the candidate was stored")


class ArchivedApartment(BaseModel):
    """Recycle-bin copy written before an apartment is deleted."""

    original_id: str
    title: str
    description: str | None = None
    price: float | None = None
    location: str | None = None
    image_url: str | None = None
    apartment_link: str | None = None
    contact_phone: str | None = None
    contact_name: str | None = None
    square_meters: float | None = None
    floor: float | None = None
    pets_allowed: PetsPolicy = "unknown"
    couple_id: str | None = None
    deleted_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_apartment(cls, apartment: Apartment) -> "ArchivedApartment":
        """Copy the archived field set out of an apartment."""
        data = {name: getattr(apartment, name) for name in ARCHIVED_FIELDS}
        return cls(original_id=apartment.id, **data)


class ScanParams(BaseModel):
    """Filters passed to the listing scanner."""

    property_type: Literal["rent", "sale"] = Field(default="rent")
    max_price: int | None = Field(default=5600, ge=0)
    areas: list[str] = Field(default_factory=lambda: ["גבעתיים", "רמת גן"])
    min_rooms: float | None = Field(default=2, ge=0)
    max_rooms: float | None = Field(default=None, ge=0)


class ScanSummary(BaseModel):
    """Result of a scan run."""

    count: int = Field(..., description="Number of candidates stored")
    message: str = Field(..., description="Human readable summary")
