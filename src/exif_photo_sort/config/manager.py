"""Configuration manager."""

from __future__ import annotations

import copy
from functools import reduce
import json
from pathlib import Path
from typing import Any, Optional

from . import defaults
from .schema import validate_config


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Defaults, then the user's JSON file, then values passed to `set`."""

    def __init__(self, user_config_path: Optional[Path] = None) -> None:
        user_layer = self._read_user_file(user_config_path) if user_config_path else {}
        self._layers: list[dict[str, Any]] = [copy.deepcopy(defaults.DEFAULT_CONFIG), user_layer, {}]
        self._config = self._flatten()

    @staticmethod
    def _read_user_file(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"top level of {path} must be a JSON object, got {type(data).__name__}")
        return data

    def _flatten(self) -> dict[str, Any]:
        return reduce(_merge, self._layers, {})

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(".")
        node = self._layers[-1]
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value
        self._config = self._flatten()

    def validate_config(self) -> list[str]:
        return validate_config(self._config)
