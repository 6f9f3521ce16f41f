"""Configuration loader for WAR ROOM (TOML file with environment overrides)."""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python <3.11
    import tomli as tomllib  # type: ignore


class ConfigLoader:
    """
    Handles configuration loading with priority resolution.

    Priority (highest → lowest):
    1. Command-line arguments (not handled here)
    2. Environment variables (WARROOM_*)
    3. Global config (~/.config/warroom/config.toml)
    4. Built-in defaults
    """

    ENV_PREFIX = "WARROOM_"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.global_dir = config_dir or self.get_global_config_dir()
        self.config: Dict[str, Any] = {}
        self._load_all()

    # ------------------------------------------------------------------ #
    # Public getters
    # ------------------------------------------------------------------ #
    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot-separated key."""
        keys = key.split(".")
        value: Any = self.config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set a value for this session only (not written back to disk)."""
        self._set_nested(self.config, key, value)

    @property
    def data_dir(self) -> Path:
        raw = self.get("storage.data_dir")
        return Path(raw).expanduser() if raw else self.global_dir

    @property
    def data_file(self) -> Path:
        return self.data_dir / str(self.get("storage.data_file", "data.json"))

    @property
    def backups_dir(self) -> Path:
        raw = Path(str(self.get("storage.backups_dir", "backups"))).expanduser()
        return raw if raw.is_absolute() else self.data_dir / raw

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def log_level(self) -> str:
        return str(self.get("general.log_level", "info")).lower()

    @property
    def undo_window(self) -> float:
        return float(self.get("undo.window_seconds", 6))

    @property
    def title_max_length(self) -> int:
        return int(self.get("ui.title_max_length", 40))

    @property
    def default_mode(self) -> str:
        return str(self.get("ui.default_mode", "overview")).lower()

    # ------------------------------------------------------------------ #
    # Load/merge helpers
    # ------------------------------------------------------------------ #
    def _load_all(self) -> None:
        """Load configuration file and apply overrides."""
        self.config = self._get_default_config()
        self._load_global_config()
        self._apply_env_overrides()

    def _load_global_config(self) -> None:
        config_file = self.global_dir / "config.toml"
        if config_file.exists():
            with open(config_file, "rb") as f:
                self._deep_merge(self.config, tomllib.load(f))
        else:
            self._create_default_config()

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides (WARROOM_SECTION_KEY)."""
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            section, _, name = key[len(self.ENV_PREFIX) :].lower().partition("_")
            if not name:
                continue
            self._set_nested(self.config, f"{section}.{name}", value)

    # ------------------------------------------------------------------ #
    # Static paths/helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def get_global_config_dir() -> Path:
        """Get platform-specific global config directory following XDG spec."""
        system = platform.system()
        if system == "Windows":
            base = Path(os.environ.get("APPDATA", "~\\AppData\\Roaming")).expanduser()
        elif system == "Darwin":
            xdg = os.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg) if xdg else Path.home() / ".config"
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
        return base / "warroom"

    # ------------------------------------------------------------------ #
    # Default content
    # ------------------------------------------------------------------ #
    def _create_default_config(self) -> None:
        self.global_dir.mkdir(parents=True, exist_ok=True)
        config_file = self.global_dir / "config.toml"
        with open(config_file, "w", encoding="utf-8") as f:
            f.write(self._get_default_config_toml())

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        return {
            "general": {
                "log_level": "info",
            },
            "storage": {
                "data_dir": "",
                "data_file": "data.json",
                "backups_dir": "backups",
            },
            "undo": {
                "window_seconds": 6,
            },
            "ui": {
                "title_max_length": 40,
                "default_mode": "overview",
            },
        }

    def _get_default_config_toml(self) -> str:
        """Default config TOML text for first-run creation."""
        default = self._get_default_config()
        return "\n".join(
            [
                "[general]",
                f'log_level = "{default["general"]["log_level"]}"',
                "",
                "[storage]",
                "# Empty means the config directory.",
                'data_dir = ""',
                f'data_file = "{default["storage"]["data_file"]}"',
                f'backups_dir = "{default["storage"]["backups_dir"]}"',
                "",
                "[undo]",
                f'window_seconds = {default["undo"]["window_seconds"]}',
                "",
                "[ui]",
                f'title_max_length = {default["ui"]["title_max_length"]}',
                f'default_mode = "{default["ui"]["default_mode"]}"',
                "",
            ]
        )

    # ------------------------------------------------------------------ #
    # Utility helpers
    # ------------------------------------------------------------------ #
    def _deep_merge(self, base: dict, override: dict) -> None:
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _set_nested(self, d: dict, path: str, value: Any) -> None:
        keys = path.split(".")
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value


# Short alias used by the CLI and app
Config = ConfigLoader

__all__ = ["ConfigLoader", "Config"]
