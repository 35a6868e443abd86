"""Text helpers for turning filenames into display strings and ids."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Tuple

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return " ".join(text.split())


def transliterate(text: str) -> str:
    """Fold accented characters to their closest ASCII form.

    ``"Köln"`` becomes ``"Koln"``; characters without an ASCII
    decomposition are dropped.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    return decomposed.encode("ascii", "ignore").decode("ascii")


def slugify(text: str) -> str:
    """Lowercase ``text`` and join its alphanumeric runs with single hyphens."""
    folded = transliterate(text.casefold()).lower()
    return _NON_SLUG_RUN.sub("-", folded).strip("-")


def unique_words(words: Iterable[str], *, min_length: int = 3) -> Tuple[str, ...]:
    """Return words of at least ``min_length`` characters, first occurrence wins."""
    seen: set[str] = set()
    result = []
    for word in words:
        if len(word) < min_length or word in seen:
            continue
        seen.add(word)
        result.append(word)
    return tuple(result)
