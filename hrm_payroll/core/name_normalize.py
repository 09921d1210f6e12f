from __future__ import annotations

import unicodedata


def normalize(name: str) -> str:
    normalized = unicodedata.normalize("NFKC", name or "").strip().lower()
    return "".join(normalized.split())


def contains(haystack: str, needle: str) -> bool:
    """Whitespace- and case-insensitive substring match used by listing search."""

    term = normalize(needle)
    return not term or term in normalize(haystack)
