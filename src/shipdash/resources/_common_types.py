"""Shared types and validation helpers for resources.

This module contains:
- Validation mode type (shared across all resources)
- Tag color normalization (used by tags)
- Order identifier normalization (used by shipments and the tag batch tool)
"""

from __future__ import annotations

import re
from typing import Literal, Sequence, Union

# --- Shared Validation Mode --- #
ValidationMode = Literal["off", "warn", "strict"]

OrderId = Union[str, int]


# --- Color Normalization --- #
def _normalize_color(value: object) -> str | None:
    """Normalize color inputs to a lowercase ``#rrggbb`` hex string.

    Parameters
    ----------
    value
        Color input. Supported forms:
        - ``None`` or the string ``"None"`` (case-insensitive)
        - Hex strings (``#RGB``, ``#RGBA``, ``#RRGGBB``, ``#RRGGBBAA``, ``#`` optional)
        - RGB/RGBA tuples or lists (ints 0-255 or floats 0-1, alpha is dropped)
        - Packed RGB integer (``0xRRGGBB``, ``0xAARRGGBB``)

    Returns
    -------
    str or None
        The hex color, or ``None`` when the input is ``None``.

    Raises
    ------
    ValueError
        If the input cannot be parsed as a color value.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() == "none":
            return None
        hex_match = re.match(r"^\s*#?([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})\s*$", value, flags=re.IGNORECASE)
        if hex_match:
            hex_value = hex_match.group(1).lower()
            if len(hex_value) in (3, 4):
                hex_value = "".join(ch * 2 for ch in hex_value)
            return "#" + hex_value[:6]
        raise ValueError(f"Unsupported string input {value!r}")

    if isinstance(value, bool):
        raise ValueError(f"Unsupported input type {type(value)}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Negative packed int {value!r}")
        return _hex_from_rgb(((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF))

    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        rgb_values = value[:3]
        if all(isinstance(channel, (int, float)) and not isinstance(channel, bool) for channel in rgb_values):
            rgb = []
            for channel in rgb_values:
                channel_value = float(channel)
                if isinstance(channel, float) and channel_value <= 1:
                    channel_value *= 255
                rgb.append(int(max(0, min(255, round(channel_value)))))
            return _hex_from_rgb((rgb[0], rgb[1], rgb[2]))
        raise ValueError(f"Invalid RGB tuple values {value!r}")

    raise ValueError(f"Unsupported input type {type(value)}")


def _hex_from_rgb(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


# --- Order ID Normalization --- #
def _normalize_order_id(value: object) -> OrderId | None:
    """Return a usable order identifier, or ``None`` when invalid.

    Integers must be positive (bools are rejected); strings are stripped and must
    not be empty.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 1 else None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _normalize_order_ids(ids: object) -> list[OrderId] | None:
    """Normalize a sequence of order identifiers, preserving order and duplicates.

    Parameters
    ----------
    ids
        Sequence of string or integer identifiers.

    Returns
    -------
    list | None
        Normalized identifiers, or None if:
        - Input is not a sequence (or is str/bytes)
        - The sequence is empty
        - Any element is not a valid identifier

    Notes
    -----
    Duplicates are kept: every input id produces exactly one outcome in a batch.
    """
    if not isinstance(ids, Sequence) or isinstance(ids, (str, bytes)):
        return None
    if not ids:
        return None

    normalized: list[OrderId] = []
    for value in ids:
        order_id = _normalize_order_id(value)
        if order_id is None:
            return None
        normalized.append(order_id)
    return normalized


__all__ = ["OrderId", "ValidationMode"]
