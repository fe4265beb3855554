"""Text processing helpers."""

from __future__ import annotations

import re

WHITESPACE_RE = re.compile(r"\s+")
# \w is unicode-aware, so accented letters and ñ survive.
PUNCT_RE = re.compile(r"[^\w\s]")


def normalize(text: str) -> str:
    """Collapse whitespace and strip."""
    return WHITESPACE_RE.sub(" ", text).strip()


def tokenize(text: str, min_length: int = 3) -> list[str]:
    """Lowercase, blank out punctuation, split, keep tokens of ``min_length``+ chars."""
    cleaned = PUNCT_RE.sub(" ", text.lower())
    return [token for token in cleaned.split() if len(token) >= min_length]


def preview(text: str, limit: int = 200) -> str:
    """Truncated preview with a trailing ellipsis."""
    return text[:limit] + "..."
