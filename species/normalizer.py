"""Name folding used for every species-name comparison."""
from __future__ import annotations

import re
import unicodedata
from typing import Optional

# German digraph folding; other diacritics fall back to their base letter.
_DIGRAPHS = {
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "ß": "ss",
}

_NON_KEY_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_TITLE_SPLIT = re.compile(r"[\s_-]+")
_LETTERS_ONLY = re.compile(r"^[A-Za-z]+$")


def normalize_name(raw: Optional[str]) -> str:
    """Fold a name into its lookup key.

    Lowercases, maps umlauts and sharp s to digraphs, strips the remaining
    diacritics, turns any other non ``[a-z0-9]`` character into a space and
    collapses whitespace. Idempotent.

    Examples:
        - "Döbel" -> "doebel"
        - "Regenbogen-Forelle" -> "regenbogen forelle"
        - "  Esox   LUCIUS " -> "esox lucius"
    """
    if not raw:
        return ""
    text = str(raw).lower()
    for char, replacement in _DIGRAPHS.items():
        text = text.replace(char, replacement)
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _NON_KEY_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def title_case(label: Optional[str]) -> str:
    """Readable label for an unrecognized name: "sea_TROUT" -> "Sea Trout"."""
    if not label:
        return ""
    words = [w for w in _TITLE_SPLIT.split(str(label).strip().lower()) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


def looks_like_scientific(label: Optional[str]) -> bool:
    """Crude binomial check: exactly two whitespace separated, letter-only tokens."""
    if not label:
        return False
    parts = str(label).split()
    return len(parts) == 2 and all(_LETTERS_ONLY.match(p) for p in parts)
