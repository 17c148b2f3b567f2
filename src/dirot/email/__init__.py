"""Email sending functionality."""

from __future__ import annotations

import html
import logging
from typing import Any, Literal

import resend  # type: ignore[import-untyped]

from dirot.config import settings
from dirot.lifecycle import status_label

Action = Literal["added", "updated"]

logger = logging.getLogger(__name__)

# Canned apartment used for "send a test email"
TEST_APARTMENT: dict[str, Any] = {
    "title": "דירה 3.5 חד׳ ברחוב מבוא פודים",
    "price": 3400,
    "square_meters": 65,
    "arnona": 400,
    "floor": 3,
    "location": "מבוא פודים, ירושלים",
    "entry_date": "2025-08-01",
    "contact_name": "אבי בעל־הבית",
    "contact_phone": "050-0000000",
    "description": "דירה מהממת עם נוף פתוח, מרוהטת חלקית, כניסה גמישה.",
    "note": "זו הערה שהתווספה לטסט.",
    "status": "not_spoke",
    "image_url": "",
}


def _action_header(action: Action) -> tuple[str, str]:
    """Return (emoji, text) for an action."""
    if action == "updated":
        return "✏️", "עודכנה דירה"
    return "🆕", "נוספה דירה חדשה"


def _get_html_styles() -> str:
    """Get CSS styles for email templates."""
    return """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            background: #f5f5f5;
            padding: 20px;
            margin: 0;
        }
        .container {
            max-width: 640px;
            margin: 0 auto;
            background: white;
            border-radius: 8px;
            padding: 30px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        h2 { color: #2c3e50; margin-bottom: 20px; }
        ul { font-size: 16px; padding-right: 20px; }
        li { margin-bottom: 6px; }
        .apartment-image { max-width: 360px; border-radius: 12px; margin-top: 8px; }
    """


def _value(data: dict[str, Any], key: str, suffix: str = "") -> str:
    """Escape a field for the email body, '-' when missing."""
    value = data.get(key)
    if value is None or value == "":
        return "-"
    return f"{html.escape(str(value))}{suffix}"


def generate_apartment_email_html(data: dict[str, Any], action: Action = "added") -> str:
    """
    Generate HTML email content for an added or updated apartment.

    Args:
        data: Apartment fields (missing fields render as '-')
        action: Whether the apartment was added or updated

    Returns:
        HTML string
    """
    emoji, text = _action_header(action)
    image_url = data.get("image_url")
    image_html = (
        f'<br/><img class="apartment-image" src="{html.escape(image_url)}" alt="" />'
        if image_url
        else "-"
    )
    status = data.get("status")

    return f"""<!DOCTYPE html>
<html dir="rtl">
<head>
    <meta charset="utf-8">
    <style>{_get_html_styles()}</style>
</head>
<body>
    <div class="container">
        <h2>{emoji} {text}</h2>
        <ul dir="rtl">
            <li><b>כותרת:</b> {_value(data, "title")}</li>
            <li><b>מחיר:</b> {_value(data, "price", " ₪")}</li>
            <li><b>שטח (מ"ר):</b> {_value(data, "square_meters")}</li>
            <li><b>ארנונה:</b> {_value(data, "arnona")}</li>
            <li><b>קומה:</b> {_value(data, "floor")}</li>
            <li><b>מיקום:</b> {_value(data, "location")}</li>
            <li><b>תאריך כניסה:</b> {_value(data, "entry_date")}</li>
            <li><b>סטטוס:</b> {status_label(status) if status else "-"}</li>
            <li><b>שם איש קשר:</b> {_value(data, "contact_name")}</li>
            <li><b>טלפון:</b> {_value(data, "contact_phone")}</li>
            <li><b>תיאור:</b> {_value(data, "description")}</li>
            <li><b>הערות:</b> {_value(data, "note")}</li>
            <li><b>תמונה:</b> {image_html}</li>
        </ul>
    </div>
</body>
</html>
"""


def email_subject(action: Action) -> str:
    """Subject line for an apartment notification."""
    if action == "updated":
        return "✏️ עודכנה דירה במערכת!"
    return "🆕 נוספה דירה במערכת!"


def send_apartment_email(
    data: dict[str, Any],
    action: Action = "added",
    dry_run: bool = False,
    test: bool = False,
) -> bool:
    """
    Send an apartment notification to every configured recipient.

    Args:
        data: Apartment fields
        action: "added" or "updated"
        dry_run: If True, only log what would be sent
        test: If True, send the canned test apartment instead of `data`

    Returns:
        True if the email was accepted by Resend

    Raises:
        ValueError: If no API key is configured
    """
    if test:
        data, action = TEST_APARTMENT, "added"

    recipients = settings.email_recipients
    if dry_run:
        logger.info("[DRY RUN] Would send '%s' email to %s", action, recipients)
        return True

    if not settings.resend_api_key:
        raise ValueError("No email account configured. Set RESEND_API_KEY + EMAIL_TO.")

    resend.api_key = settings.resend_api_key
    params = {
        "from": settings.email_from,
        "to": recipients,
        "subject": email_subject(action),
        "html": generate_apartment_email_html(data, action),
    }

    response = resend.Emails.send(params)
    logger.info("Email sent to %s (id: %s)", ", ".join(recipients), response.get("id", "N/A"))
    return True


__all__ = [
    "TEST_APARTMENT",
    "email_subject",
    "generate_apartment_email_html",
    "send_apartment_email",
]
