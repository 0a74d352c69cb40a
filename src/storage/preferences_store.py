from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from reminder_ai.models import Preferences

logger = logging.getLogger(__name__)

PREFERENCES_PATH = os.getenv("PREFERENCES_PATH", "data/preferences.json")

# field -> environment variable overriding the stored value
ENV_OVERRIDES: Dict[str, str] = {
    "api_url": "JAN_API_URL",
    "api_key": "JAN_API_KEY",
    "default_model": "JAN_MODEL",
    "temperature": "JAN_TEMPERATURE",
    "max_tokens": "JAN_MAX_TOKENS",
    "reminder_list": "REMINDER_LIST",
}


class PreferencesStore:
    def __init__(self, path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.path = Path(path or PREFERENCES_PATH)
        self._environ = os.environ if environ is None else environ

    def _read_file(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> Preferences:
        """
        Stored preferences with environment overrides applied. Falls back to
        defaults when the file is missing or invalid.
        """
        data = self._read_file()
        for field, var in ENV_OVERRIDES.items():
            value = self._environ.get(var)
            if value is not None and value.strip():
                data[field] = value

        try:
            return Preferences(**data)
        except ValidationError as e:
            logger.warning(f"Invalid preferences, using defaults: {e}")
            return Preferences()

    def save(self, prefs: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(prefs.model_dump(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
