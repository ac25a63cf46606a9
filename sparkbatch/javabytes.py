"""Parsing of JVM-style byte size strings such as ``512m`` or ``2g``."""

from __future__ import annotations

import re


def _build_units() -> dict[str, int]:
    units = {"b": 1}
    for power, letter in enumerate("kmgtp", start=1):
        size = 1 << (10 * power)
        units[letter] = size
        units[letter + "b"] = size
    return units


_UNITS = _build_units()
_SIZE_RE = re.compile(r"(?P<number>\d+)(?P<unit>[a-z]+)?", re.ASCII)
_LIMIT = 2**63 - 1


def byte_string_as_bytes(byte_string: str) -> int:
    """Convert a size like ``1k`` or ``64g`` to bytes; a suffix is required."""
    found = _SIZE_RE.fullmatch(byte_string.lower())
    if found:
        number = int(found["number"])
        if number > _LIMIT:
            raise ValueError(f"value out of range: {found['number']}")
        unit = found["unit"]
        if unit in _UNITS:
            return number * _UNITS[unit]
    raise ValueError(f"unable to parse byte string: {byte_string}")