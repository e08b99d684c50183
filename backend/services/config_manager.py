"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Sections clients are allowed to change through the API
EDITABLE_SECTIONS = ("limits", "merge", "icon")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self):
        # 1st: environment variable
        config_dir = os.environ.get("IMAGE_TOOLKIT_CONFIG_DIR")

        # 2nd: ~/.image_toolkit
        if not config_dir:
            config_dir = os.path.expanduser("~/.image_toolkit")

        config_path = Path(config_dir)
        try:
            config_path.mkdir(parents=True, exist_ok=True)
            self._config_file = config_path / "config.json"
        except OSError as e:
            logger.warning("Cannot write to %s: %s", config_dir, e)
            self._config_file = None

        # Last resort: temp dir
        if not self._config_file:
            tmp_dir = Path(tempfile.gettempdir()) / "image_toolkit"
            tmp_dir.mkdir(parents=True, exist_ok=True)
            self._config_file = tmp_dir / "config.json"
            logger.info("Using temporary config path: %s", self._config_file)

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next access re-reads the environment"""
        cls._instance = None

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, layered over the defaults"""
        defaults = self._default_config()
        if not self._config_file.exists():
            return defaults

        try:
            with open(self._config_file, encoding="utf-8") as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading config: %s", e)
            return defaults

        if not isinstance(stored, dict):
            logger.error("Ignoring config file %s: top level is not an object", self._config_file)
            return defaults
        return _deep_merge(defaults, stored)

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "limits": {
                "max_file_size": 64 * 1024 * 1024,  # 64MB per upload
                "max_diff_characters": 1_000_000,
                "max_concurrent_operations": 3,
            },
            "merge": {
                "label_height": 40,
                "labels": {"before": "Before", "after": "After"},
                "grid_cell_max": 400,
            },
            "icon": {"size": 128},
            "server": {"host": "0.0.0.0", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return copy.deepcopy(self._config)

    def save_config(self, config: dict[str, Any]):
        """Merge ``config`` into the current settings and write them to disk"""
        self._config = _deep_merge(self._config, config)

        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, section: str, key: str, default=None):
        """Get a value from one config section"""
        return self._config.get(section, {}).get(key, default)
