"""User preferences stored in ``settings.json``, overridable from the environment."""

import copy
import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

from ..utils.logger import get_logger

load_dotenv(Path(__file__).resolve().parents[2] / ".env")

logger = get_logger(__name__)

TRUE_VALUES = ("true", "1", "yes", "on")


class SettingsManager:
    """
    Process-wide FlashDeck preferences.

    Resolution order for each key: environment variable, then the
    settings file, then ``DEFAULTS``. The merged result is written back
    so the file always lists every known key.

    Usage:
        prefs = SettingsManager()
        if prefs.get("CONFIRM_DELETE"):
            ...
        prefs.update(THEME_MODE="light", LOG_LEVEL="DEBUG")
    """

    _instance: Optional["SettingsManager"] = None
    _lock: Lock = Lock()

    DEFAULT_SETTINGS_FILE: str = "settings.json"

    DEFAULTS: Dict[str, Any] = {
        # Where the collection lives (read once at start-up)
        "STORAGE_BACKEND": "json",
        "STORAGE_FILE": "data/flashdeck_storage.json",
        "DB_FILE": "data/flashdeck.db",
        "EXPORT_DIR": "data/export",

        "THEME_MODE": "dark",
        "CONFIRM_DELETE": True,
        "LOG_LEVEL": "INFO",

        # Shared by the Flet card tile and the PNG export
        "CARD_STYLE": {
            "front_start": "#6366F1",
            "front_end": "#9333EA",
            "front_text": "#FFFFFF",
            "front_subtext": "#E0E7FF",
            "back_bg": "#FFFFFF",
            "back_label": "#6B7280",
            "back_text": "#1F2937",
            "badge_bg": "#FFFFFF",
        },
    }

    def __new__(cls, settings_file: Optional[str] = None) -> "SettingsManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._initialized = False
                    cls._instance = instance
        return cls._instance

    def __init__(self, settings_file: Optional[str] = None) -> None:
        """
        Args:
            settings_file: JSON file to use. Only the first construction
                in a process picks the file; later calls share it.
        """
        if self._initialized:
            return

        self._settings_file = Path(settings_file or self.DEFAULT_SETTINGS_FILE)
        self._values: Dict[str, Any] = {}
        self._write_lock = Lock()

        self._load()
        self._initialized = True

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    # ==================== Loading ====================

    def _read_file(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s, using defaults: %s", self._settings_file, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is not a JSON object", self._settings_file)
            return {}
        return data

    def _load(self) -> None:
        values = copy.deepcopy(self.DEFAULTS)
        values.update(self._read_file())

        for key in self.DEFAULTS:
            raw = os.environ.get(key)
            if raw is not None:
                values[key] = self._coerce(key, raw)

        self._values = values
        self._write()

    def _coerce(self, key: str, raw: str) -> Any:
        """Convert an environment string to the type of the default."""
        default = self.DEFAULTS[key]
        converters: Dict[type, Callable[[str], Any]] = {
            bool: lambda s: s.strip().lower() in TRUE_VALUES,
            int: int,
            float: float,
            dict: json.loads,
        }
        convert = converters.get(type(default))
        if convert is None:
            return raw

        try:
            value = convert(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r from environment: expected %s", key, raw, type(default).__name__)
            return copy.deepcopy(default)
        if not isinstance(value, type(default)):
            logger.warning("Ignoring %s from environment: expected %s", key, type(default).__name__)
            return copy.deepcopy(default)
        return value

    def _write(self) -> None:
        with self._write_lock:
            try:
                self._settings_file.parent.mkdir(parents=True, exist_ok=True)
                with open(self._settings_file, "w", encoding="utf-8") as f:
                    json.dump(self._values, f, indent=2, ensure_ascii=False)
            except OSError as e:
                logger.warning("Could not write %s: %s", self._settings_file, e)

    # ==================== Access ====================

    def get(self, key: str, default: Any = None) -> Any:
        """Value for ``key``; dicts and lists come back as deep copies."""
        value = self._values.get(key, default)
        return copy.deepcopy(value) if isinstance(value, (dict, list)) else value

    def set(self, key: str, value: Any, persist: bool = True) -> None:
        self._values[key] = value
        if persist:
            self._write()

    def update(self, **values: Any) -> None:
        """Change several keys and write the file once."""
        self._values.update(values)
        self._write()

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def get_card_style(self) -> Dict[str, str]:
        """CARD_STYLE with any missing colour taken from the defaults."""
        style = copy.deepcopy(self.DEFAULTS["CARD_STYLE"])
        stored = self._values.get("CARD_STYLE")
        if isinstance(stored, dict):
            style.update(stored)
        return style

    def reset(self, key: Optional[str] = None) -> None:
        """Restore one key, or everything when ``key`` is None."""
        if key is None:
            self._values = copy.deepcopy(self.DEFAULTS)
        elif key in self.DEFAULTS:
            self._values[key] = copy.deepcopy(self.DEFAULTS[key])
        self._write()

    def reload(self) -> None:
        self._load()

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the shared instance (tests use a fresh file each time)."""
        with cls._lock:
            cls._instance = None
