"""Upload acceptance policy — file type and size checks."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_MAX_UPLOAD_MB = 4
DEFAULT_ALLOWED_EXTENSIONS: frozenset[str] = frozenset({"txt", "md"})


def get_file_extension(filename: str) -> str:
    """Return the lower-cased extension of *filename* without the dot.

    ``"notes.MD"`` → ``"md"``; names without a dot yield ``""``.
    """
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def validate_file_size(size: int, max_size_mb: int = DEFAULT_MAX_UPLOAD_MB) -> bool:
    """Return ``True`` when *size* (bytes) is within *max_size_mb* MiB."""
    return size <= max_size_mb * 1024 * 1024


def validate_file_type(filename: str, allowed: Iterable[str] | None = None) -> bool:
    """Return ``True`` when the extension of *filename* is accepted."""
    allowed_set = set(allowed) if allowed is not None else DEFAULT_ALLOWED_EXTENSIONS
    return get_file_extension(filename) in allowed_set
