"""Peer protocol version extraction and compatibility checks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

VERSION_RECORD_KEY = "version"


def extract_record(records: Iterable[str] | None, key: str) -> str | None:
    """Return the value of the first `key=value` record whose key is exactly `key`."""
    if not records:
        return None
    for record in records:
        name, sep, value = str(record).partition("=")
        if sep and name == key:
            return value
    return None


def extract_version(
    records: Iterable[str] | None,
    *,
    key: str = VERSION_RECORD_KEY,
) -> str | None:
    """Peer protocol version advertised in discovery records."""
    return extract_record(records, key)


def parse_major_minor(version: str | None) -> tuple[int, int] | None:
    """Parse the leading `major.minor` of a dotted version, or None if unusable."""
    if not version:
        return None
    parts = str(version).split(".")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def parse_requirement(value: str | Sequence[int]) -> tuple[int, int]:
    """Parse a configured minimum version such as "2022.3" or (2022, 3)."""
    if isinstance(value, str):
        parsed = parse_major_minor(value)
        if parsed is None:
            raise ValueError(f"invalid minimum version: {value!r}")
        return parsed
    items = list(value)
    if len(items) != 2:
        raise ValueError(f"minimum version needs major and minor: {value!r}")
    return int(items[0]), int(items[1])


def is_supported(peer_version: str | None, required: Sequence[int]) -> bool:
    """Whether `peer_version` is at least `required` (major, minor); unknown versions fail."""
    parsed = parse_major_minor(peer_version)
    if parsed is None:
        return False
    major, minor = parsed
    required_major, required_minor = int(required[0]), int(required[1])
    if major != required_major:
        return major > required_major
    return minor >= required_minor
