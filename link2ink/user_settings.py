# -*- coding: utf-8 -*-
"""User settings manager for Link2Ink preferences.

Handles persistence of user preferences like theme, shortcut modifier and
history limit to a config file in the user's home directory.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from link2ink.logger_config import logger

SHORTCUT_MODIFIERS = ("alt", "ctrl", "meta")


class UserSettings:
    """Manages user preferences for Link2Ink.

    Settings are stored in ~/.config/link2ink/settings.json
    """

    DEFAULT_SETTINGS = {
        "theme": "dark",
        "shortcut_modifier": "alt",
        "show_intro": True,
        "history_limit": None,
        "storage_dir": None,
        "export_dir": None,
    }

    def __init__(self, config_dir: Optional[Path] = None):
        self._settings: Dict[str, Any] = {}
        self._config_dir = config_dir or Path.home() / ".config" / "link2ink"
        self._settings_file = self._config_dir / "settings.json"
        self._load()

    def _load(self) -> None:
        """Load settings from file or create with defaults."""
        if self._settings_file.exists():
            try:
                with open(self._settings_file, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("settings file must contain a JSON object")
                # Merge with defaults to ensure all keys exist
                self._settings = {**self.DEFAULT_SETTINGS, **loaded}
            except (ValueError, OSError) as e:
                logger.warning("Ignoring unreadable settings file {}: {}", self._settings_file, e)
                self._settings = self.DEFAULT_SETTINGS.copy()
                self._save()
        else:
            # First run - create with defaults
            self._settings = self.DEFAULT_SETTINGS.copy()
            self._save()

    def _save(self) -> None:
        """Save current settings to file."""
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(self._settings_file, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, indent=2)
        except OSError as e:
            # If we can't write, just keep settings in memory
            logger.warning("Could not save settings to {}: {}", self._settings_file, e)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value."""
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a setting value and persist to disk."""
        self._settings[key] = value
        self._save()

    @property
    def theme(self) -> str:
        return self._settings.get("theme", "dark")

    @theme.setter
    def theme(self, value: str) -> None:
        self._settings["theme"] = value
        self._save()

    @property
    def shortcut_modifier(self) -> str:
        """Modifier key for the Alt+1..3 style view shortcuts."""
        value = str(self._settings.get("shortcut_modifier") or "alt").lower()
        return value if value in SHORTCUT_MODIFIERS else "alt"

    @property
    def show_intro(self) -> bool:
        return bool(self._settings.get("show_intro", True))

    @property
    def history_limit(self) -> Optional[int]:
        """Maximum history items per category, or None for no cap."""
        value = self._settings.get("history_limit")
        if value is None:
            return None
        try:
            limit = int(value)
        except (TypeError, ValueError):
            return None
        return limit if limit > 0 else None

    @property
    def storage_dir(self) -> Path:
        value = self._settings.get("storage_dir")
        if value:
            return Path(value).expanduser()
        return self._config_dir / "storage"

    @property
    def export_dir(self) -> Path:
        """Where saved artifacts go (default: the current directory)."""
        value = self._settings.get("export_dir")
        if value:
            return Path(value).expanduser()
        return Path.cwd()

    def to_dict(self) -> Dict[str, Any]:
        """Return all settings as a dictionary."""
        return self._settings.copy()


# Global settings instance
_user_settings: Optional[UserSettings] = None


def get_user_settings() -> UserSettings:
    """Get the global user settings instance."""
    global _user_settings
    if _user_settings is None:
        _user_settings = UserSettings()
    return _user_settings
