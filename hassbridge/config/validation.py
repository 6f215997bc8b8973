"""Checks behind `hassbridge config check`."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from hassbridge.config.loader import _migrate_config, convert_keys, convert_to_camel
from hassbridge.config.schema import Config
from hassbridge.protocol.version import parse_requirement


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a config file and bring keys from older layouts up to date."""
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must be a JSON object")
    return _migrate_config(data)


def validate_config_data(data: dict[str, Any]) -> tuple[Config, tuple[int, int], dict[str, Any]]:
    """Validate camelCase config data.

    Returns the model, the parsed proxySelected minimum version and the
    canonical camelCase form used to spot unknown keys. A malformed minimum
    version is rejected here rather than when the dispatch table is built.
    """
    config = Config.model_validate(convert_keys(data))
    gate = parse_requirement(config.gates.proxy_selected_min_version)
    return config, gate, convert_to_camel(config.model_dump())


def find_unknown_paths(
    source: dict[str, Any],
    canonical: dict[str, Any],
    prefix: str = "",
) -> list[str]:
    """Dotted paths present in `source` that the schema dropped, likely typos.

    Peer maps keep every device id, so only schema sections can report here.
    """
    unknown: list[str] = []
    for key, value in source.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if key not in canonical:
            unknown.append(path)
        elif isinstance(value, dict) and isinstance(canonical[key], dict):
            unknown.extend(find_unknown_paths(value, canonical[key], path))
    return unknown
