"""Configuration loading utilities."""

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger

from hassbridge.config.schema import Config
from hassbridge.utils.helpers import get_data_path

# Maps whose keys are identifiers rather than schema fields.
_OPAQUE_KEY_SECTIONS = {"peers"}


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return get_data_path() / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            data = _migrate_config(data)
            return Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file in camelCase form."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    # Older files kept the retry backoff at the root as "retryDelayMs".
    if isinstance(data, dict) and "retryDelayMs" in data:
        forwarding = data.setdefault("forwarding", {})
        if isinstance(forwarding, dict) and "retryDelaySeconds" not in forwarding:
            try:
                forwarding["retryDelaySeconds"] = float(data["retryDelayMs"]) / 1000.0
            except (TypeError, ValueError):
                pass
        data.pop("retryDelayMs")
    return data


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        output: dict[str, Any] = {}
        for key, value in data.items():
            name = camel_to_snake(key)
            if name in _OPAQUE_KEY_SECTIONS and isinstance(value, dict):
                output[name] = dict(value)
            else:
                output[name] = convert_keys(value)
        return output
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        output: dict[str, Any] = {}
        for key, value in data.items():
            name = snake_to_camel(key)
            if key in _OPAQUE_KEY_SECTIONS and isinstance(value, dict):
                output[name] = dict(value)
            else:
                output[name] = convert_to_camel(value)
        return output
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
