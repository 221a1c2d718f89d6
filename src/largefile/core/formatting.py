"""Summary formatting utilities for consistent terminal and log output.

Design principles:
- Every summary fits on one line (~80 chars max)
- Paths compressed for deep nesting
- Grammatically correct (1 match vs 2 matches)
"""

from __future__ import annotations

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(size: int) -> str:
    """Format a byte count with binary units and two decimals.

    Examples:
        512 -> "512.00 B"
        1536 -> "1.50 KB"
        10 * 1024**3 -> "10.00 GB"
    """
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {_SIZE_UNITS[unit]}"


def compress_path(path: str, max_len: int = 30) -> str:
    """Compress path to fit within max_len.

    Examples:
        data/exports/2024/quarterly/report.csv -> data/.../report.csv
        short/path.log -> short/path.log (unchanged)
    """
    if len(path) <= max_len:
        return path

    parts = path.split("/")
    if len(parts) <= 2:
        return path

    compressed = f"{parts[0]}/.../{parts[-1]}"
    if len(compressed) <= max_len:
        return compressed

    return parts[-1]


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "match")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 chunk" or "3 chunks"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"
