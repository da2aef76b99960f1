"""Helpers for validating smarkant config files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from smarkant.config.loader import convert_keys, convert_to_camel
from smarkant.config.schema import Config


def load_json_file(path: Path) -> dict[str, Any]:
    """Load a JSON object from file."""
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must be a JSON object")
    return data


def normalize_config_data(data: dict[str, Any]) -> dict[str, Any]:
    """Validate config object and serialize into canonical camelCase output."""
    validated = Config.model_validate(convert_keys(data))
    return convert_to_camel(validated.model_dump())


def iter_paths(data: Any, prefix: tuple[Any, ...] = ()) -> list[tuple[Any, ...]]:
    """Iterate all nested key/index paths in dict/list data."""
    paths: list[tuple[Any, ...]] = []
    if isinstance(data, dict):
        for key, value in data.items():
            key_path = (*prefix, key)
            paths.append(key_path)
            paths.extend(iter_paths(value, key_path))
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            idx_path = (*prefix, idx)
            paths.append(idx_path)
            paths.extend(iter_paths(item, idx_path))
    return paths


def path_exists(data: Any, path: tuple[Any, ...]) -> bool:
    """Check whether a nested path exists in dict/list data."""
    current = data
    for part in path:
        if isinstance(part, int):
            if not isinstance(current, list) or part >= len(current):
                return False
            current = current[part]
            continue
        if not isinstance(current, dict) or part not in current:
            return False
        current = current[part]
    return True


def find_unknown_paths(source: dict[str, Any], normalized: dict[str, Any]) -> list[str]:
    """Find source paths dropped after schema normalization."""
    canonical_source = convert_to_camel(convert_keys(source))
    return [
        ".".join(str(p) for p in path)
        for path in iter_paths(canonical_source)
        if not path_exists(normalized, path)
    ]
