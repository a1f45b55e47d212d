from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from memorymaze.core.config import preferences_file
from memorymaze.core.progress import write_json_atomic

logger = logging.getLogger(__name__)


@dataclass
class Preferences:
    dark_mode: bool = False
    sound_enabled: bool = True


class PreferencesStore:
    """Persists display preferences (theme, sound) as JSON.

    Kept apart from game progress so a reset never touches them.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or preferences_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> Preferences:
        prefs = Preferences()
        if not self._file_path.exists():
            return prefs
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load preferences from %s: %s", self._file_path, e)
            return prefs
        if not isinstance(payload, dict):
            logger.warning("Could not load preferences from %s: not a JSON object", self._file_path)
            return prefs

        for key in ("dark_mode", "sound_enabled"):
            value = payload.get(key, getattr(prefs, key))
            if isinstance(value, bool):
                setattr(prefs, key, value)
            else:
                logger.warning("Ignoring invalid %r in preferences: %r", key, value)
        return prefs

    def save(self, prefs: Preferences) -> None:
        try:
            write_json_atomic(self._file_path, asdict(prefs))
        except OSError as e:
            logger.warning("Could not save preferences to %s: %s", self._file_path, e)
