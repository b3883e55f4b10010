"""Text chunking strategies.

Two strategies split a document into overlapping character windows:

* :func:`chunk_text` — fixed-width windows advanced by a constant step of
  ``chunk_size - overlap``.  Size-exact, no trimming; suited to text with
  no natural punctuation (code, logs).
* :func:`chunk_text_smart` — boundary-aware windows whose cut point is
  moved back to the latest sentence or paragraph break found in the last
  20 % of the window.  The next window starts ``overlap`` characters
  before the *adjusted* cut.

Both are pure functions: no I/O, no shared state, chunks returned in
left-to-right document order.
"""

from __future__ import annotations

import math

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200

# Fraction of the window, measured back from the naive cut, searched for a boundary.
BOUNDARY_SEARCH_RATIO = 0.2

BOUNDARY_MARKERS: tuple[str, ...] = (". ", ".\n", "! ", "!\n", "? ", "?\n", "\n\n")


def _check_params(chunk_size: int, overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size ({chunk_size}) must be > 0")
    if overlap < 0:
        raise ValueError(f"overlap ({overlap}) must be >= 0")
    if overlap >= chunk_size:
        raise ValueError(f"overlap ({overlap}) must be < chunk_size ({chunk_size})")


def fixed_width_spans(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[tuple[int, int]]:
    """Return the half-open ``(start, end)`` ranges used by :func:`chunk_text`.

    Raises
    ------
    ValueError
        If ``chunk_size <= 0``, ``overlap < 0`` or ``overlap >= chunk_size``
        (the window would never move forward).
    """
    _check_params(chunk_size, overlap)

    if not text or not text.strip():
        return []

    length = len(text)
    if length <= chunk_size:
        return [(0, length)]

    step = chunk_size - overlap
    spans: list[tuple[int, int]] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        spans.append((start, end))
        if end == length:
            break
        start += step
    return spans


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split *text* into fixed-width, overlapping chunks.

    Parameters
    ----------
    text:
        Document text.
    chunk_size:
        Number of characters per chunk (the last one may be shorter).
    overlap:
        Number of characters shared by consecutive chunks.

    Returns
    -------
    list[str]
        Untrimmed chunks; empty for empty or whitespace-only text.
    """
    return [text[start:end] for start, end in fixed_width_spans(text, chunk_size, overlap)]


def _find_boundary(text: str, window_start: int, window_end: int) -> int | None:
    """Return the offset just after the rightmost boundary marker in the window."""
    window = text[window_start:window_end]
    best = -1
    for marker in BOUNDARY_MARKERS:
        pos = window.rfind(marker)
        if pos != -1:
            best = max(best, pos + len(marker))
    if best == -1:
        return None
    return window_start + best


def boundary_aware_spans(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[tuple[int, int]]:
    """Return the untrimmed ``(start, end)`` ranges used by :func:`chunk_text_smart`.

    Each cut except the last is moved to the latest boundary marker inside
    the final ``floor(chunk_size * 0.2)`` characters of the window.  The
    cursor always advances by at least one character, even when a boundary
    cut leaves a window no wider than *overlap*.
    """
    _check_params(chunk_size, overlap)

    if not text or not text.strip():
        return []

    length = len(text)
    if length <= chunk_size:
        return [(0, length)]

    search_width = math.floor(chunk_size * BOUNDARY_SEARCH_RATIO)
    spans: list[tuple[int, int]] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)

        if end < length:
            boundary = _find_boundary(text, end - search_width, end)
            if boundary is not None:
                end = boundary

        spans.append((start, end))
        if end == length:
            break

        start = max(end - overlap, start + 1)
    return spans


def chunk_text_smart(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split *text* into overlapping chunks that prefer sentence boundaries.

    Chunks are stripped of surrounding whitespace; windows that strip to
    nothing are skipped, so no empty string is ever returned.

    Parameters
    ----------
    text:
        Document text.
    chunk_size:
        Target maximum number of characters per chunk.
    overlap:
        Number of characters the next window reaches back before the cut.

    Returns
    -------
    list[str]
        Trimmed, non-empty chunks in document order.
    """
    chunks: list[str] = []
    for start, end in boundary_aware_spans(text, chunk_size, overlap):
        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)
    return chunks
