"""Text helpers shared by the tool renderers."""

import math
from datetime import date

from memory_box.errors import InvalidParamsError

MEMORY_TYPES = (
    "TECHNICAL",
    "DECISION",
    "SOLUTION",
    "CONCEPT",
    "REFERENCE",
    "APPLICATION",
    "FACT",
)

_BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_bytes(num_bytes: int | float, decimals: int = 2) -> str:
    """Render a byte count on a 1024-based scale, e.g. ``1536 -> "1.5 KB"``."""
    if not num_bytes:
        return "0 Bytes"

    decimals = max(decimals, 0)
    value = float(num_bytes)
    index = 0
    while abs(value) >= 1024 and index < len(_BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    value = round(value, decimals)
    # 1.50 -> "1.5", 1.0 -> "1"
    rendered = f"{value:.{decimals}f}".rstrip("0").rstrip(".") if decimals else f"{value:.0f}"
    return f"{rendered} {_BYTE_UNITS[index]}"


def normalize_memory_type(memory_type: str) -> str:
    """Upper-case and validate a memory type.

    Raises:
        InvalidParamsError: if the type is not one of MEMORY_TYPES.
    """
    normalized = memory_type.strip().upper()
    if normalized not in MEMORY_TYPES:
        msg = f"Invalid memory type: {memory_type}. Must be one of: {', '.join(MEMORY_TYPES)}"
        raise InvalidParamsError(msg)
    return normalized


def format_memory(text: str, memory_type: str = "TECHNICAL", today: date | None = None) -> str:
    """Stamp *text* with today's date using the memory formatting conventions.

    ``FACT`` memories read ``FACT: <text> as mentioned on YYYY-MM-DD.``;
    every other type reads ``YYYY-MM-DD: <Type> - <text>``.
    """
    normalized = normalize_memory_type(memory_type)
    stamp = (today or date.today()).isoformat()

    if normalized == "FACT":
        return f"FACT: {text} as mentioned on {stamp}."
    return f"{stamp}: {normalized.capitalize()} - {text}"


def format_similarity(similarity: float | None) -> str:
    """Percentage annotation for a similarity score, or "" when absent."""
    if not similarity:
        return ""
    # Halves round up: 0.625 -> 63%
    return f"({math.floor(similarity * 100 + 0.5)}% match)"
