"""
Wine catalog name resolution.

Normalizes free-text wine names (case, accents, punctuation), indexes a
catalog by name and resolves a query, optionally within one category, to the
single best-matching entry plus up to three alternates listed on it.

Example Usage:
    from winefinder import Engine

    eng = Engine()
    eng.load("Wines_2025.xlsx")
    hit = eng.lookup("vassaltis santorini", category="White")
    if hit.wine:
        print(hit.wine.name, hit.wine.price)
"""

# src/winefinder/__init__.py
from .engine import Engine
from .index import NameIndex, build_index
from .loader import load_catalog
from .models import Alternate, Catalog, Lookup, MatchResult, Record, Wine
from .normalize import normalize, strip_diacritics, tokenize
from .search import find_best, resolve_alternates, similarity

__version__ = "1.0.0"
__all__ = [
    "Engine", "NameIndex", "build_index", "load_catalog",
    "Alternate", "Catalog", "Lookup", "MatchResult", "Record", "Wine",
    "normalize", "strip_diacritics", "tokenize",
    "find_best", "resolve_alternates", "similarity",
]
