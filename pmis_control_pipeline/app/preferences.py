"""
User preferences.

Only the theme survives a restart: it is stored as a single {"theme": ...}
key-value pair in a small JSON file. The display profile (name, avatar) is
in-memory only.
"""

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .schemas import CamelModel

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


class UserProfile(CamelModel):
    name: str = "Project Manager"
    avatar: Optional[str] = None  # data URL


class ThemeUpdate(CamelModel):
    theme: Theme


class PreferencesState(CamelModel):
    theme: Theme
    profile: UserProfile


def system_prefers_dark() -> bool:
    """System-level preference probe, used when nothing has been stored yet."""
    return os.getenv("PMIS_PREFERS_DARK", "").strip().lower() in ("1", "true", "yes", "dark")


class PreferenceStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_stored(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return data.get(THEME_KEY)

    def load_theme(self, prefers_dark: Callable[[], bool] = system_prefers_dark) -> Theme:
        stored = self._read_stored()
        if stored is not None:
            try:
                return Theme(stored)
            except ValueError:
                logger.warning(f"Unknown stored theme {stored!r}; using system preference")
        return Theme.DARK if prefers_dark() else Theme.LIGHT

    def save_theme(self, theme: Theme) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({THEME_KEY: theme.value}, f)
        logger.info(f"Theme set to {theme.value}")


class Preferences:
    """
    Process-wide preferences: theme loaded once from the store on first use,
    written back only when it changes; profile kept in memory.
    """

    def __init__(self, store: PreferenceStore, prefers_dark: Callable[[], bool] = system_prefers_dark):
        self.store = store
        self._prefers_dark = prefers_dark
        self._theme: Optional[Theme] = None
        self.profile = UserProfile()

    @property
    def theme(self) -> Theme:
        if self._theme is None:
            self._theme = self.store.load_theme(self._prefers_dark)
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        if theme == self._theme:
            return
        self.store.save_theme(theme)
        self._theme = theme

    def update_profile(self, profile: UserProfile) -> None:
        self.profile = profile

    def snapshot(self) -> PreferencesState:
        return PreferencesState(theme=self.theme, profile=self.profile)
