"""AI helpers: image analysis, apartment advice and apartment jokes.

Thin wrappers around the OpenAI chat completions endpoint.
"""

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import httpx
from pydantic import BaseModel, Field

from dirot.config import settings
from dirot.errors import ExternalServiceError
from dirot.models import Apartment

ANALYSIS_PROMPT = """נתח את התמונה הזו של דירה והחזר JSON עם הנתונים הבאים (רק אם הם מופיעים בתמונה):
{
  "title": "כותרת הדירה",
  "price": מחיר בשקלים (מספר),
  "location": "מיקום",
  "square_meters": מטר רבוע (מספר),
  "floor": קומה (מספר),
  "description": "תיאור הדירה",
  "contact_phone": "מספר טלפון",
  "contact_name": "שם איש קשר",
  "entry_date": "תאריך כניסה בפורמט YYYY-MM-DD",
  "arnona": מחיר ארנונה (מספר),
  "pets_allowed": "yes" או "no" או "unknown"
}
החזר רק JSON תקין ללא הסברים נוספים. אם נתון לא מופיע בתמונה, אל תכלול אותו ב-JSON."""

ADVICE_SYSTEM = "אתה עוזר להשוות דירות בישראל ומסביר בעברית אם דירה משתלמת או אי אפשר לדעת."
JOKE_SYSTEM = (
    "אתה סטנדאפיסט דירות ישראלי. כתוב בדיחה חד פעמית וקצרה על דירה לפי נתוני המשתמש. שפה: עברית."
)

ADVICE_FALLBACK = "לא הייתה תשובה מהבוט. נסה שוב."
JOKE_FALLBACK = "לא התקבלה בדיחה. נסה שוב מאוחר יותר."

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

logger = logging.getLogger(__name__)


class AnalysisResult(BaseModel):
    """Outcome of an image analysis: either extracted fields or an error."""

    data: dict[str, Any] | None = Field(None, description="Partial apartment fields")
    error: str | None = Field(None, description="Why the analysis failed")

    @property
    def ok(self) -> bool:
        return self.data is not None


class AdviceBundle(BaseModel):
    """Advice and joke fetched side by side; each may fail on its own."""

    advice: str | None = None
    advice_error: str | None = None
    joke: str | None = None
    joke_error: str | None = None


def _or(value: Any, fallback: str) -> str:
    return str(value) if value not in (None, "") else fallback


def _snapshot(apartment: Apartment | dict[str, Any]) -> dict[str, Any]:
    if isinstance(apartment, Apartment):
        return apartment.model_dump(mode="json")
    return dict(apartment)


def build_advice_prompt(apartment: Apartment | dict[str, Any]) -> str:
    """User prompt asking whether an apartment is worth it."""
    apt = _snapshot(apartment)
    shelter = apt.get("has_shelter")
    shelter_text = "יש" if shelter else "אין" if shelter is False else "לא צוין"
    return f"""בחר "האם הדירה שווה?" ותן המלצה קצרה (6-40 מילים) לפי הנתונים:
- מחיר: {_or(apt.get("price"), "לא צוין")}
- מיקום: {_or(apt.get("location"), "לא צויין")}
- שטח: {_or(apt.get("square_meters"), "לא צויין")}
- קומה: {_or(apt.get("floor"), "לא צויינה")}
- מקלט: {shelter_text}
- ארנונה: {_or(apt.get("arnona"), "לא צוינה")}
- הערות: {_or(apt.get("note"), "אין הערות")}
כתוב בעברית תשובה ברורה, קצרה ומועילה:"""


def build_joke_prompt(apartment: Apartment | dict[str, Any]) -> str:
    """User prompt asking for a short joke about an apartment."""
    apt = _snapshot(apartment)
    return f"""כתוב בדיחה קצרה (עד 25 מילים), שנונה ורלוונטית לדירה הזו. ציין ברמז נתון ייחודי (מחיר/חדרים/קומה/שטח/ארנונה/מיקום).
הדירה:
- מחיר: {_or(apt.get("price"), "לא צוין")}
- מיקום: {_or(apt.get("location"), "לא צויין")}
- שטח: {_or(apt.get("square_meters"), "לא צויין")}
- קומה: {_or(apt.get("floor"), "לא צויינה")}
- ארנונה: {_or(apt.get("arnona"), "לא צוינה")}
מותר גם להיות קצת פריך 🙂"""


def parse_json_content(content: str) -> dict[str, Any]:
    """
    Parse model output that should be a JSON object.

    Falls back to the outermost {...} block when the model wrapped the JSON
    in prose or a code fence.

    Raises:
        ValueError: If no JSON object can be recovered
    """
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(content)
        if not match:
            raise ValueError("Could not parse JSON from model response") from None
        try:
            parsed = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise ValueError("Could not parse JSON from model response") from e
    if not isinstance(parsed, dict):
        raise ValueError("Model response is not a JSON object")
    return parsed


class ApartmentAdvisor:
    """Client for the chat completions endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        vision_model: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the advisor.

        Args:
            api_key: OpenAI API key (defaults to settings)
            base_url: API base URL
            model: Model used for advice and jokes
            vision_model: Model used for image analysis
            client: HTTP client to reuse
        """
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model
        self.vision_model = vision_model or settings.openai_vision_model
        self.client = client or httpx.Client(timeout=settings.request_timeout)

    def _chat(self, payload: dict[str, Any]) -> str | None:
        """
        Post one chat completion request.

        Returns:
            Message content of the first choice, or None if it has none

        Raises:
            ExternalServiceError: If the key is missing or the request fails
        """
        if not self.api_key:
            raise ExternalServiceError("OpenAI API key not configured. Set OPENAI_API_KEY.")

        try:
            response = self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("OpenAI API error: %s - %s", status, e.response.text[:200])
            raise ExternalServiceError(f"OpenAI API error: {status}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("OpenAI request failed: %s", e)
            raise ExternalServiceError(f"OpenAI request failed: {e}") from e

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        return content.strip() if isinstance(content, str) and content.strip() else None

    def analyze_image(self, image_url: str) -> AnalysisResult:
        """
        Extract apartment fields from a listing screenshot.

        Never raises; failures are reported in the result.
        """
        if not image_url:
            return AnalysisResult(error="Image URL is required")

        payload = {
            "model": self.vision_model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
            "max_tokens": 500,
        }

        try:
            content = self._chat(payload)
            if content is None:
                raise ValueError("No content received from OpenAI")
            data = parse_json_content(content)
        except (ExternalServiceError, ValueError) as e:
            logger.warning("Image analysis failed for %s: %s", image_url, e)
            return AnalysisResult(error=str(e))

        logger.info("Image analysis found %d field(s)", len(data))
        return AnalysisResult(data=data)

    def advise(self, apartment: Apartment | dict[str, Any]) -> str:
        """
        Short "is it worth it?" recommendation in Hebrew.

        Raises:
            ExternalServiceError: If the request fails
        """
        content = self._chat(
            {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": ADVICE_SYSTEM},
                    {"role": "user", "content": build_advice_prompt(apartment)},
                ],
                "max_tokens": 100,
                "temperature": 0.3,
            }
        )
        return content or ADVICE_FALLBACK

    def joke(self, apartment: Apartment | dict[str, Any]) -> str:
        """
        Short joke about the apartment in Hebrew.

        Raises:
            ExternalServiceError: If the request fails
        """
        content = self._chat(
            {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": JOKE_SYSTEM},
                    {"role": "user", "content": build_joke_prompt(apartment)},
                ],
                "max_tokens": 100,
                "temperature": 0.85,
            }
        )
        return content or JOKE_FALLBACK

    def advise_and_joke(self, apartment: Apartment | dict[str, Any]) -> AdviceBundle:
        """Fetch advice and a joke concurrently; one failing does not block the other."""
        bundle = AdviceBundle()
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="advisor") as executor:
            advice_future = executor.submit(self.advise, apartment)
            joke_future = executor.submit(self.joke, apartment)

            try:
                bundle.advice = advice_future.result()
            except ExternalServiceError as e:
                bundle.advice_error = str(e)
            try:
                bundle.joke = joke_future.result()
            except ExternalServiceError as e:
                bundle.joke_error = str(e)
        return bundle

    def __enter__(self) -> "ApartmentAdvisor":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit - cleanup resources."""
        self.client.close()

    def close(self) -> None:
        """Close HTTP client."""
        self.client.close()


__all__ = [
    "ADVICE_FALLBACK",
    "JOKE_FALLBACK",
    "AdviceBundle",
    "AnalysisResult",
    "ApartmentAdvisor",
    "build_advice_prompt",
    "build_joke_prompt",
    "parse_json_content",
]
