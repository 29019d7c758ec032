# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import json
import logging
from pathlib import Path
from typing import Any, ClassVar

import tomllib
import yaml


DEFAULT_CONFIG: dict[str, Any] = {
    "server": {"host": "0.0.0.0", "port": 8788},
    "topics": {
        "input": "/image_raw",
        "output": "/image_processed",
        "queue_size": 10,  # per-subscriber depth, oldest frame dropped when full
        "max_frame_bytes": 64 * 1024 * 1024,  # largest accepted input message, 0 disables the limit
    },
    "control": {"service": "toggle_grayscale"},
    "convert": {
        "initial_mode": "color",  # "color" | "grayscale"
        # Chroma byte synthesized for 2-channel input in color mode.
        # 0 matches the reference output; 128 gives neutral gray.
        "chroma_fill": 0,
    },
    "log": {
        "level": "info",
        "metrics": True,
        "rate_ms": 5000,
    },
}


def load_config_file(path: str) -> dict[str, Any]:
    """Load configuration from a file (YAML, TOML, or JSON)."""
    logger = logging.getLogger("config")
    path_obj = Path(path)
    ext = path_obj.suffix.lower()

    if not path_obj.exists():
        logger.warning(f"Config file not found: {path}")
        return {}

    try:
        if ext in (".yaml", ".yml"):
            with path_obj.open(encoding="utf-8") as f:
                return yaml.safe_load(f) or {}

        elif ext == ".toml":
            with path_obj.open("rb") as f:
                return tomllib.load(f) or {}

        elif ext == ".json":
            with path_obj.open(encoding="utf-8") as f:
                return json.load(f) or {}

        else:
            logger.warning(f"Unknown config extension: {ext}")
            return {}

    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load {path}: {e}")
        return {}


def deep_update(dst: dict[str, Any], src: dict[str, Any]) -> dict[str, Any]:
    """Deep merge configuration dictionaries."""
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            deep_update(dst[k], v)
        else:
            dst[k] = v
    return dst


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration with defaults and optional file override."""
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))  # Deep copy

    if path:
        deep_update(cfg, load_config_file(path))

    return cfg


class Config:
    """Configuration singleton."""

    _instance: ClassVar["Config | None"] = None
    _config: ClassVar[dict[str, Any]] = load_config()

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def load(cls, path: str | None = None) -> None:
        """Load configuration from file."""
        cls._config = load_config(path)

    @classmethod
    def get(cls, key: str | None = None) -> Any:
        """Get configuration value by key path (e.g., 'topics.input')."""
        if key is None:
            return cls._config

        keys = key.split(".")
        value = cls._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                raise KeyError(f"Configuration key not found: {key}")

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by key path."""
        keys = key.split(".")
        target = self._config

        for k in keys[:-1]:
            if k not in target:
                target[k] = {}
            target = target[k]

        target[keys[-1]] = value

    def update(self, updates: dict[str, Any]) -> None:
        """Update configuration with dictionary."""
        deep_update(self._config, updates)

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access."""
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Allow dict-like assignment."""
        self.set(key, value)
