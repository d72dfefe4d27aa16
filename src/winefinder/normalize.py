from __future__ import annotations
import re
import unicodedata
from typing import Set

from . import config as CFG

# /* ~~~ strict variant: only these separators collapse to a space ~~~ */
_STRICT_SEPARATORS = re.compile(r"[|\-–—_,.()/]+")
_SPACES = re.compile(r"\s+")


def _is_separator(ch: str) -> bool:
    """Punctuation, symbols and whitespace all act as word separators (permissive variant)."""
    if ch.isspace():
        return True
    return unicodedata.category(ch)[0] in ("P", "S")


def strip_diacritics(s: str | None) -> str:
    """Decompose to NFD and drop combining marks. None/empty -> ''."""
    if not s:
        return ""
    decomposed = unicodedata.normalize("NFD", str(s))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(s: str | None, *, permissive: bool | None = None) -> str:
    """
    Canonical comparable form of a display name:
      * case folded, diacritics stripped
      * separator runs collapsed to one space, ends trimmed
    Idempotent: normalize(normalize(x)) == normalize(x).
    """
    if permissive is None:
        permissive = CFG.PERMISSIVE
    # fold first: casefold() can itself emit combining marks (e.g. 'İ')
    text = strip_diacritics(str(s or "").casefold())
    if permissive:
        text = "".join(" " if _is_separator(ch) else ch for ch in text)
    else:
        text = _STRICT_SEPARATORS.sub(" ", text)
    return _SPACES.sub(" ", text).strip()


def tokenize(s: str | None, *, permissive: bool | None = None) -> Set[str]:
    """Distinct whitespace tokens of normalize(s), shorter ones than MIN_TOKEN_LEN dropped."""
    return {t for t in normalize(s, permissive=permissive).split(" ") if len(t) >= CFG.MIN_TOKEN_LEN}
