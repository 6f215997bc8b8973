"""Utility functions for hassbridge."""

from hassbridge.utils.helpers import ensure_dir, get_data_path, short_id, truncate_string

__all__ = ["ensure_dir", "get_data_path", "short_id", "truncate_string"]
