"""Process-wide local session state persisted to a JSON file."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

# Every key the application keeps between runs
AUTH_TOKEN = "auth_token"
THEME_ID = "theme_id"
DEVICE_ID = "device_id"

KNOWN_KEYS = (AUTH_TOKEN, THEME_ID, DEVICE_ID)


class LocalSessionState:
    """
    Single owner of locally persisted session values.

    Created once at startup and passed to whoever needs it; components read and
    write through `get`/`set`/`reset` instead of touching the file themselves.
    """

    def __init__(self, state_file: Path) -> None:
        """
        Initialize session state.

        Args:
            state_file: Path to the JSON state file
        """
        self.state_file = state_file
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self._values: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.state_file.exists():
            return {}
        try:
            with open(self.state_file, encoding="utf-8") as f:
                data: dict[str, Any] = json.load(f)
        except json.JSONDecodeError:
            return {}
        return {key: value for key, value in data.get("values", {}).items() if key in KNOWN_KEYS}

    def _save(self) -> None:
        with open(self.state_file, "w", encoding="utf-8") as f:
            json.dump(
                {"values": self._values, "last_updated": datetime.now().isoformat()},
                f,
                indent=2,
                ensure_ascii=False,
            )

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in KNOWN_KEYS:
            raise KeyError(f"Unknown session key: {key}")

    def get(self, key: str, default: Any = None) -> Any:
        """Read a value."""
        self._check_key(key)
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Write a value and persist it."""
        self._check_key(key)
        self._values[key] = value
        self._save()

    def reset(self, key: str | None = None) -> None:
        """Forget one value, or all values when no key is given."""
        if key is None:
            self._values.clear()
        else:
            self._check_key(key)
            self._values.pop(key, None)
        self._save()

    @property
    def device_id(self) -> str:
        """Stable identifier of this installation, generated on first use."""
        device_id = self.get(DEVICE_ID)
        if not device_id:
            device_id = str(uuid.uuid4())
            self.set(DEVICE_ID, device_id)
        return str(device_id)


__all__ = ["AUTH_TOKEN", "DEVICE_ID", "KNOWN_KEYS", "THEME_ID", "LocalSessionState"]
