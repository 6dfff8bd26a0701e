"""
Settings management for tasksh.

Preferences (default shell, model, system prompt, verbosity, logging) live
in a JSON file in the platform's configuration directory. The generation
pipeline never reads this file itself; the CLI turns these values into
explicit arguments.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from tasksh.generator.constants import DEFAULT_MODEL
from tasksh.utils import platform_utils

logger = logging.getLogger(__name__)

APP_DIR_NAME = "tasksh"
SETTINGS_FILE_NAME = "settings.json"


def default_config_dir() -> Path:
    """
    Return the per-user configuration directory.

    Windows uses %APPDATA%, macOS uses Application Support and everything
    else follows XDG_CONFIG_HOME with ~/.config as the fallback.
    """
    if platform_utils.is_windows():
        return Path(os.environ.get("APPDATA", "")) / APP_DIR_NAME

    if platform_utils.is_macos():
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / APP_DIR_NAME


def deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    """Merge source into target in place, descending into nested dicts."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            target[key] = value


class Settings:
    """
    JSON-backed settings store.

    Unknown keys found in the file are kept; missing keys fall back to
    DEFAULT_SETTINGS. The file is only written by save().
    """

    DEFAULT_SETTINGS = {
        "generation": {
            "model": DEFAULT_MODEL,
            "default_shell": "",
            "system_prompt": "",
        },
        "ui": {
            "verbose": False,
        },
        "advanced": {
            "debug_mode": False,
            "log_level": "WARNING",
            "log_file": "",
        },
    }

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize the settings store.

        Args:
            config_file (Optional[Union[str, Path]]): Explicit settings file.
                Defaults to settings.json in the platform config directory.
        """
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.config_dir = default_config_dir()
        self.config_file = (
            Path(config_file) if config_file else self.config_dir / SETTINGS_FILE_NAME
        )

        if self.config_file.exists():
            self.load()

    def load(self) -> bool:
        """
        Merge the settings file over the current values.

        Returns:
            bool: True if the file was read, False if it was unreadable.
        """
        try:
            loaded = json.loads(self.config_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Error loading settings from {self.config_file}: {e}")
            return False

        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring settings file {self.config_file}: not an object")
            return False

        deep_merge(self.settings, loaded)
        return True

    def save(self) -> bool:
        """
        Write the current settings to the settings file.

        Returns:
            bool: True if successful, False otherwise.
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(self.settings, indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.warning(f"Error saving settings to {self.config_file}: {e}")
            return False
        return True

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Return settings[section][key], or default when either is missing."""
        values = self.settings.get(section)
        if not isinstance(values, dict):
            return default
        return values.get(key, default)

    def set(self, section: str, key: str, value: Any) -> bool:
        """
        Set a value in memory, creating the section if needed.

        Call save() to persist it.
        """
        if not isinstance(self.settings.get(section), dict):
            self.settings[section] = {}
        self.settings[section][key] = value
        return True

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self.settings)

    def reset_to_defaults(self) -> None:
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

    def reset_section(self, section: str) -> bool:
        """
        Restore one section to its defaults.

        Args:
            section (str): Section name.

        Returns:
            bool: False if the section has no defaults.
        """
        if section not in self.DEFAULT_SETTINGS:
            return False
        self.settings[section] = copy.deepcopy(self.DEFAULT_SETTINGS[section])
        return True

    def get_log_file_path(self) -> Optional[Path]:
        """
        Resolve where log records should be written.

        Returns:
            Optional[Path]: The configured log file, tasksh.log in the config
            directory when debug mode is on, otherwise None.
        """
        log_file = self.get("advanced", "log_file", "")
        if log_file:
            return Path(log_file)
        if self.get("advanced", "debug_mode", False):
            return self.config_dir / "tasksh.log"
        return None


# Global settings instance
settings = Settings()
