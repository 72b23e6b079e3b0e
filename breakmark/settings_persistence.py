"""Settings persistence for the page break overlay.

Settings are stored as JSON in an OS-appropriate config directory and
survive application restarts. Stored values are merged over the defaults,
so older files keep working as new settings are added.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .page_config import OverlaySettings, validate_setting_value

logger = logging.getLogger(__name__)


class SettingsPersistence:
    """Loads and saves OverlaySettings.

    The raw JSON dictionary is cached in memory after the first read.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize settings persistence.

        Args:
            config_dir: Directory holding settings.json. Defaults to the
                platform user config directory.
        """
        self._config_dir = Path(config_dir) if config_dir else Path(
            platformdirs.user_config_dir("breakmark")
        )
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Any]] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_raw(self) -> Dict[str, Any]:
        """Load the stored settings dictionary.

        Returns:
            The stored dictionary, or an empty dict if the file is missing
            or unreadable.
        """
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, PermissionError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._settings_cache = {}
            return self._settings_cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return self._settings_cache

    def _save_raw(self, data: Dict[str, Any]) -> bool:
        """Write the settings dictionary atomically (temp file + rename)."""
        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix('.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            temp_file.replace(self._settings_file)
            self._settings_cache = data
            return True
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def load(self) -> OverlaySettings:
        """Load settings, falling back to defaults for anything missing or invalid."""
        return OverlaySettings.from_dict(self._load_raw())

    def save(self, settings: OverlaySettings) -> bool:
        """Save settings.

        Keys this version does not know about are preserved.

        Returns:
            True if the save succeeded, False otherwise.
        """
        data = dict(self._load_raw())
        data.update(settings.to_dict())
        return self._save_raw(data)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a single setting value before it is stored.

        Args:
            key: Setting key name.
            value: Setting value to validate.

        Returns:
            True if the value is valid. None means "not set" and is valid;
            unknown keys are accepted for forward compatibility.
        """
        if value is None:
            return True
        return validate_setting_value(key, value)

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance.

    Returns:
        The singleton SettingsPersistence instance.
    """
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
