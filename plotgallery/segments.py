"""Split free-form path and label strings into clean display segments."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable
from urllib.parse import unquote

logger = logging.getLogger(__name__)

TAG_SEPARATORS = re.compile(r"/|•|\|")
LEADING_NOISE = re.compile(r"^[\s-]+")
MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def split_path_segments(value: str | None) -> list[str]:
    """Break a path into ordered segments on ``/``, ``\\`` and ``:``.

    Each segment is percent-decoded; a segment that cannot be decoded is kept
    as its raw trimmed text.
    """
    if not value:
        return []
    normalized = str(value).replace("\\", "/")
    segments: list[str] = []
    for piece in normalized.split("/"):
        for part in piece.split(":"):
            decoded = _decode_segment(part.strip())
            if decoded:
                segments.append(decoded)
    return segments


def clean_segments(values: Iterable[Any] | None) -> list[str]:
    """Stringify and trim each entry, dropping ``None`` and blanks."""
    if values is None:
        return []
    cleaned: list[str] = []
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            cleaned.append(text)
    return cleaned


def coerce_to_segments(value: Any) -> list[str]:
    """Normalize a tag source (list or delimited string) into segments."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return clean_segments(value)
    pieces = TAG_SEPARATORS.split(str(value))
    return clean_segments(LEADING_NOISE.sub("", piece) for piece in pieces)


def has_malformed_escape(value: str | None) -> bool:
    """Return True when any segment of ``value`` would fail percent-decoding."""
    if not value:
        return False
    normalized = str(value).replace("\\", "/")
    for piece in normalized.split("/"):
        for part in piece.split(":"):
            text = part.strip()
            if text and _try_decode(text) is None:
                return True
    return False


def _decode_segment(text: str) -> str:
    decoded = _try_decode(text)
    if decoded is None:
        logger.debug("Keeping undecodable path segment %r as-is", text)
        return text
    return decoded


def _try_decode(text: str) -> str | None:
    if "%" not in text:
        return text
    if MALFORMED_ESCAPE.search(text):
        return None
    try:
        return unquote(text, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        return None
