"""Summary formatting utilities for consistent terminal output.

Design principles:
- Progress labels fit on one line
- Paths compressed for deep nesting
"""

from __future__ import annotations


def compress_path(path: str, max_len: int = 30) -> str:
    """Compress path to fit within max_len.

    Examples:
        build/libs/app/jars/app-1.0.jar -> build/.../app-1.0.jar
        short/app.jar -> short/app.jar (unchanged)
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


def count_label(count: int, noun: str, *, optional: bool = False) -> str | None:
    """Render ``"<count> <noun>"`` for summary lines.

    Optional parts render as None when the count is zero so callers can drop
    them from the summary.
    """
    if optional and count == 0:
        return None
    return f"{count} {noun}"
