"""Configuration module for hassbridge."""

from hassbridge.config.loader import get_config_path, load_config
from hassbridge.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
