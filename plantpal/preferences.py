import os
import json
import logging
from typing import Optional

from plantpal import config

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


class ThemePreference:
    """
    The one persisted setting: light or dark.
    Load order is stored value, then the OS/browser preference, then light.
    Every change is written straight to disk.
    """

    def __init__(self, path: str = None):
        self.path = path or config.PREFERENCES_PATH

    def _read_stored(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                theme = json.load(f).get("theme")
        except (OSError, ValueError, AttributeError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return None
        return theme if theme in THEMES else None

    def load(self, os_preference: Optional[str] = None) -> str:
        stored = self._read_stored()
        if stored:
            return stored
        if os_preference in THEMES:
            return os_preference
        return DEFAULT_THEME

    def save(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"theme": theme}, f)
        return theme

    def toggle(self, current: str) -> str:
        return self.save("light" if current == "dark" else "dark")
