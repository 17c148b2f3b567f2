"""Tests for data models."""

from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from dirot.models import (
    PLACEHOLDER_IMAGE_URL,
    Apartment,
    ApartmentDraft,
    ApartmentPatch,
    ArchivedApartment,
    ScannedApartment,
    ScannedListing,
    ScanParams,
    clean_entry_date,
)


def make_apartment(**overrides: object) -> Apartment:
    data: dict[str, object] = {
        "id": "apt-1",
        "title": "Studio",
        "created_at": datetime(2025, 1, 1, 12, 0),
        "updated_at": datetime(2025, 1, 1, 12, 0),
    }
    data.update(overrides)
    return Apartment.model_validate(data)


class TestCleanEntryDate:
    """Tests for entry date normalization."""

    @pytest.mark.parametrize(
        "value",
        ["מיידי", "כניסה מידית", "עכשיו", "בקרוב", "immediately", "ASAP", "flexible", "", None],
    )
    def test_relative_phrases_become_none(self, value: str | None) -> None:
        """Relative phrases are discarded instead of stored."""
        assert clean_entry_date(value) is None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2030-08-01", date(2030, 8, 1)),
            ("01/08/2030", date(2030, 8, 1)),
            ("01.08.2030", date(2030, 8, 1)),
            ("2030-08-01T10:00:00", date(2030, 8, 1)),
            (date(2030, 8, 1), date(2030, 8, 1)),
            (datetime(2030, 8, 1, 9, 30), date(2030, 8, 1)),
        ],
    )
    def test_parses_calendar_dates(self, value: object, expected: date) -> None:
        """Common date formats are parsed."""
        assert clean_entry_date(value) == expected

    def test_garbage_becomes_none(self) -> None:
        """Unparseable text is dropped."""
        assert clean_entry_date("sometime in summer") is None


class TestApartment:
    """Tests for the stored Apartment model."""

    def test_defaults(self) -> None:
        """New rows get the documented defaults."""
        apt = make_apartment()

        assert apt.status == "not_spoke"
        assert apt.pets_allowed == "unknown"
        assert apt.mor_rating == 0
        assert apt.gabi_rating == 0
        assert apt.spoke_with_mor is False
        assert apt.spoke_with_gabi is False
        assert apt.image_url == PLACEHOLDER_IMAGE_URL

    def test_null_columns_read_as_defaults(self) -> None:
        """Stored nulls are read with application defaults."""
        apt = make_apartment(
            mor_rating=None,
            gabi_rating=None,
            spoke_with_mor=None,
            status=None,
            pets_allowed=None,
            image_url=None,
        )

        assert apt.mor_rating == 0
        assert apt.gabi_rating == 0
        assert apt.spoke_with_mor is False
        assert apt.status == "not_spoke"
        assert apt.pets_allowed == "unknown"
        assert apt.image_url == PLACEHOLDER_IMAGE_URL

    def test_combined_rating(self) -> None:
        """Combined rating is the plain sum, up to 10."""
        assert make_apartment(mor_rating=4, gabi_rating=5).combined_rating == 9
        assert make_apartment(mor_rating=5, gabi_rating=5).combined_rating == 10

    def test_partner_accessors(self) -> None:
        """Per-partner accessors pick the right columns."""
        apt = make_apartment(mor_rating=2, gabi_rating=4, spoke_with_gabi=True)

        assert apt.rating_for("mor") == 2
        assert apt.rating_for("gabi") == 4
        assert apt.talked_for("mor") is False
        assert apt.talked_for("gabi") is True

    @pytest.mark.parametrize("rating", [-1, 6])
    def test_rating_out_of_range(self, rating: int) -> None:
        """Ratings outside 0-5 are rejected."""
        with pytest.raises(ValidationError):
            make_apartment(mor_rating=rating)

    def test_unknown_status_rejected(self) -> None:
        """Status is a closed enumeration."""
        with pytest.raises(ValidationError):
            make_apartment(status="maybe")

    def test_negative_price_rejected(self) -> None:
        """Numbers must be non-negative."""
        with pytest.raises(ValidationError):
            make_apartment(price=-5)


class TestApartmentDraft:
    """Tests for new-apartment drafts."""

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title: str) -> None:
        """A title is required."""
        with pytest.raises(ValidationError):
            ApartmentDraft(title=title)

    def test_title_is_stripped(self) -> None:
        """Surrounding whitespace is removed."""
        assert ApartmentDraft(title="  Studio  ").title == "Studio"

    def test_relative_entry_date_stored_as_null(self) -> None:
        """The literal "מיידי" becomes null, not text."""
        draft = ApartmentDraft(title="Studio", entry_date="מיידי")

        assert draft.entry_date is None
        assert draft.model_dump(mode="json")["entry_date"] is None

    def test_past_entry_date_rejected(self) -> None:
        """User-supplied entry dates must be today or later."""
        yesterday = date.today() - timedelta(days=1)
        with pytest.raises(ValidationError):
            ApartmentDraft(title="Studio", entry_date=yesterday.isoformat())

    def test_today_entry_date_accepted(self) -> None:
        """Today counts as a valid entry date."""
        assert ApartmentDraft(title="Studio", entry_date=date.today()).entry_date == date.today()

    def test_blank_strings_become_none(self) -> None:
        """Empty form inputs are stored as missing."""
        draft = ApartmentDraft(title="Studio", location="", price="", image_url="")

        assert draft.location is None
        assert draft.price is None
        assert draft.image_url == PLACEHOLDER_IMAGE_URL


class TestApartmentPatch:
    """Tests for partial updates."""

    def test_only_set_fields_are_sent(self) -> None:
        """Unset fields never reach the store."""
        patch = ApartmentPatch(mor_rating=3)

        assert patch.to_update() == {"mor_rating": 3}

    def test_explicit_null_is_kept_for_optional_fields(self) -> None:
        """Optional fields can be cleared."""
        assert ApartmentPatch(note=None).to_update() == {"note": None}

    @pytest.mark.parametrize("field", ["title", "status", "pets_allowed", "image_url"])
    def test_required_columns_cannot_be_cleared(self, field: str) -> None:
        """Required columns reject null."""
        with pytest.raises(ValidationError):
            ApartmentPatch.model_validate({field: None})

    def test_invalid_rating_rejected(self) -> None:
        """Patches are validated like full rows."""
        with pytest.raises(ValidationError):
            ApartmentPatch(gabi_rating=9)

    def test_dates_serialize_as_iso(self) -> None:
        """Dates are sent as ISO strings."""
        assert ApartmentPatch(entry_date="2030-01-02").to_update() == {"entry_date": "2030-01-02"}


class TestScannedModels:
    """Tests for scanned candidates."""

    @pytest.mark.parametrize("value", [None, "maybe", "", "unknown"])
    def test_pets_default_to_unknown(self, value: str | None) -> None:
        """pets_allowed is never absent."""
        assert ScannedListing(title="Studio", pets_allowed=value).pets_allowed == "unknown"

    def test_pets_known_values_kept(self) -> None:
        """Known values pass through."""
        assert ScannedListing(title="Studio", pets_allowed="no").pets_allowed == "no"

    def test_scanned_apartment_is_immutable(self) -> None:
        """Scanned apartments are never edited in place."""
        scanned = ScannedApartment(id="s-1", title="Studio", created_at=datetime(2025, 1, 1))

        with pytest.raises(ValidationError):
            scanned.title = "Changed"  # type: ignore[misc]


class TestArchivedApartment:
    """Tests for recycle-bin records."""

    def test_from_apartment_copies_archived_fields(self) -> None:
        """Every archived field is copied from the original."""
        apt = make_apartment(
            description="desc",
            price=4000,
            location="Ramat Gan",
            apartment_link="https://example.com/1",
            contact_phone="050",
            contact_name="Dana",
            square_meters=55,
            floor=3,
            pets_allowed="yes",
            couple_id="couple-1",
            mor_rating=5,
        )

        archived = ArchivedApartment.from_apartment(apt)

        assert archived.original_id == "apt-1"
        assert archived.title == "Studio"
        assert archived.price == 4000
        assert archived.location == "Ramat Gan"
        assert archived.pets_allowed == "yes"
        assert archived.couple_id == "couple-1"
        assert archived.image_url == PLACEHOLDER_IMAGE_URL
        assert "mor_rating" not in archived.model_dump()


class TestScanParams:
    """Tests for scan filters."""

    def test_defaults(self) -> None:
        """Defaults match the usual search."""
        params = ScanParams()

        assert params.property_type == "rent"
        assert params.max_price == 5600
        assert params.areas == ["גבעתיים", "רמת גן"]
        assert params.min_rooms == 2
        assert params.max_rooms is None

    def test_property_type_is_closed(self) -> None:
        """Only rent and sale are supported."""
        with pytest.raises(ValidationError):
            ScanParams(property_type="lease")
