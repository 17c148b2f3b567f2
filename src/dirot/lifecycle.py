"""Rating and status rules shared by every view."""

from collections.abc import Iterable
from typing import Literal

from dirot.errors import ValidationError
from dirot.models import Apartment, Status

Tone = Literal["success", "warning", "danger", "neutral"]

MIN_RATING = 0
MAX_RATING = 5

STATUS_TONES: dict[str, Tone] = {
    "spoke": "success",
    "not_spoke": "warning",
    "no_answer": "danger",
}

# Map pins and list badges both derive their colors from the tone
TONE_HEX: dict[Tone, str] = {
    "success": "#10b981",
    "warning": "#f59e0b",
    "danger": "#ef4444",
    "neutral": "#6b7280",
}
TONE_STYLE: dict[Tone, str] = {
    "success": "green",
    "warning": "yellow",
    "danger": "red",
    "neutral": "dim",
}

STATUS_LABELS: dict[str, str] = {
    "spoke": "דיברנו",
    "not_spoke": "לא דיברנו",
    "no_answer": "אין מענה",
}
PETS_LABELS: dict[str, str] = {
    "yes": "מותר",
    "no": "אסור",
    "unknown": "לא ידוע",
}


def status_tone(status: Status | str | None) -> Tone:
    """Display tone for a status value."""
    return STATUS_TONES.get(status or "", "neutral")


def status_hex(status: Status | str | None) -> str:
    """Hex color used for map pins."""
    return TONE_HEX[status_tone(status)]


def status_style(status: Status | str | None) -> str:
    """Rich style used for list rendering."""
    return TONE_STYLE[status_tone(status)]


def status_label(status: Status | str | None) -> str:
    """Hebrew label for a status value."""
    return STATUS_LABELS.get(status or "", "-")


def validate_rating(value: int) -> int:
    """
    Check a partner rating.

    Args:
        value: Rating to check

    Returns:
        The rating unchanged

    Raises:
        ValidationError: If the rating is not an integer in [0, 5]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Rating must be an integer, got {value!r}")
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return value


def combined_rating(apartment: Apartment) -> int:
    """Sum of both partners' ratings."""
    return apartment.mor_rating + apartment.gabi_rating


def sort_apartments(apartments: Iterable[Apartment]) -> list[Apartment]:
    """
    Order apartments by combined rating, highest first.

    The sort is stable, so apartments with equal combined ratings keep the
    order they arrived in (newest first, as fetched from the store).
    """
    return sorted(apartments, key=combined_rating, reverse=True)


def render_stars(rating: int) -> str:
    """Render a 0-5 rating as filled and empty stars."""
    rating = max(MIN_RATING, min(MAX_RATING, rating))
    return "★" * rating + "☆" * (MAX_RATING - rating)


__all__ = [
    "MAX_RATING",
    "MIN_RATING",
    "STATUS_LABELS",
    "STATUS_TONES",
    "combined_rating",
    "render_stars",
    "sort_apartments",
    "status_hex",
    "status_label",
    "status_style",
    "status_tone",
    "validate_rating",
]
