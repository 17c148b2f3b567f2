"""Turning form input and image analyses into apartment drafts."""

import time
from datetime import date
from typing import Any

from dirot.models import PLACEHOLDER_IMAGE_URL, ApartmentDraft, clean_entry_date
from dirot.repository import to_draft

NUMERIC_FIELDS = ("price", "arnona", "square_meters", "floor")

DRAFT_FIELDS = frozenset(ApartmentDraft.model_fields)


def generated_fb_url() -> str:
    """Placeholder source URL for apartments that were not found on a post."""
    return f"https://facebook.com/generated-{int(time.time() * 1000)}"


def _to_number(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


def clean_analysis(data: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize the fields returned by an image analysis.

    Numbers arrive as strings or are missing; the entry date may be a phrase
    such as "מיידי". Unknown keys are dropped.

    Args:
        data: Raw analysis fields

    Returns:
        Fields safe to feed into an ApartmentDraft
    """
    cleaned = {key: value for key, value in data.items() if key in DRAFT_FIELDS}
    for field in NUMERIC_FIELDS:
        if field in cleaned:
            cleaned[field] = _to_number(cleaned[field])
    if "entry_date" in cleaned:
        cleaned["entry_date"] = clean_entry_date(cleaned["entry_date"])
    return cleaned


def draft_from_form(fields: dict[str, Any]) -> ApartmentDraft:
    """
    Build a draft from manually entered fields.

    Raises:
        ValidationError: If the title is missing or a field is malformed
    """
    data = {key: value for key, value in fields.items() if key in DRAFT_FIELDS}
    data.setdefault("fb_url", generated_fb_url())
    data.setdefault("image_url", PLACEHOLDER_IMAGE_URL)
    data["mor_rating"] = 0
    data["gabi_rating"] = 0
    return to_draft(data)


def draft_from_analysis(data: dict[str, Any], image_url: str) -> ApartmentDraft:
    """
    Build a quick-add draft from an image analysis.

    Dates the model read off an old listing are dropped instead of rejected.

    Raises:
        ValidationError: If the analysis produced no title
    """
    cleaned = clean_analysis(data)
    entry_date = cleaned.get("entry_date")
    if isinstance(entry_date, date) and entry_date < date.today():
        cleaned["entry_date"] = None
    cleaned["image_url"] = image_url or PLACEHOLDER_IMAGE_URL
    return draft_from_form(cleaned)


__all__ = [
    "clean_analysis",
    "clean_entry_date",
    "draft_from_analysis",
    "draft_from_form",
    "generated_fb_url",
]
