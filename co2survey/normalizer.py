# co2survey/normalizer.py
"""Canonicalization of free-text survey answers.

Survey exports arrive with mixed case, umlauts, typographic dashes and
stray punctuation. Everything that is matched against a mapping table goes
through ``normalize_text`` or ``normalize_enum`` first.
"""
import math
import re
import unicodedata
from typing import Any, Optional

_DASHES = re.compile(r"[–—]")
_WHITESPACE = re.compile(r"\s+")
_ENUM_PUNCTUATION = re.compile(r"[.,;:!?()]")


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(value: Any) -> str:
    """Case-fold, strip diacritics, unify dashes and collapse whitespace.

    ``None`` yields an empty string.
    """
    if value is None:
        return ""
    text = _strip_diacritics(str(value))
    text = _DASHES.sub("-", text)
    text = text.lower()
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def normalize_enum(value: Any) -> str:
    """``normalize_text`` plus removal of ``. , ; : ! ? ( )``.

    Hyphens survive so ranges like "10-20" stay intact.
    """
    return _ENUM_PUNCTUATION.sub("", normalize_text(value)).strip()


def to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def to_number(value: Any) -> Optional[float]:
    """Parse a number leniently; decimal comma is accepted, garbage gives None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = to_text(value)
    if text is None:
        return None
    try:
        parsed = float(text.replace(",", ".", 1))
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None
