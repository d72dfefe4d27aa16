from __future__ import annotations
import os
from typing import Dict, Tuple

# Selection tuning
DEFAULT_THRESHOLD: float = 0.45
MIN_TOKEN_LEN: int = 2

# Similarity bonuses (added on top of the Jaccard coefficient)
PREFIX_BONUS: float = 0.25
SUBSTRING_BONUS: float = 0.15
MAX_SCORE: float = 1.0

# /* ~~~ nudge for prefix relationships during best-match selection ~~~ */
PREFIX_NUDGE: float = 0.05

# Normalization mode:
#   True  -> any Unicode punctuation/symbol collapses to a space, substring bonus on
#   False -> only | - – — _ , . ( ) / collapse, no substring bonus
PERMISSIVE: bool = True

# Canonical field names the engine works with
NAME_FIELD: str = "name"
CATEGORY_FIELD: str = "category"
ALT_FIELDS: Tuple[str, ...] = ("alt1", "alt2", "alt3")
MAX_ALTERNATES: int = 3

# /* ~~~ canonical field -> accepted spreadsheet headers, first match wins ~~~ */
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "category":   ("Κατηγορία", "Category", "Type"),
    "name":       ("Όνομα", "Name", "Wine", "Wine Name"),
    "price":      ("Τιμή", "Price"),
    "alt1":       ("Αντιπρόταση 1", "Alternative 1", "Alt1", "Alt 1"),
    "alt2":       ("Αντιπρόταση 2", "Alternative 2", "Alt2", "Alt 2"),
    "alt3":       ("Αντιπρόταση 3", "Alternative 3", "Alt3", "Alt 3"),
    "variety":    ("Ποικιλία", "Variety", "Grape"),
    "region":     ("Περιοχή", "Region"),
    "abv":        ("Αλκοόλ", "ABV", "Alcohol"),
    "dryness":    ("Ξηρότητα", "Dryness"),
    "minerality": ("Ορυκτότητα", "Minerality"),
    "acidity":    ("Οξύτητα", "Acidity"),
    "body":       ("Σώμα", "Body"),
    "notes":      ("Σχόλια", "Notes", "Comments"),
}

# Spreadsheet sheet holding the catalog (falls back to the first sheet)
PREFERRED_SHEET: str = "Alternatives"
CATALOG_EXTS = (".csv", ".xlsx", ".xlsm")

# Category sentinels
ALL_CATEGORIES: str = "All"
ALL_CATEGORIES_ALIASES = ("All", "Όλες")
UNKNOWN_CATEGORY: str = "Unknown"

# Progress logging (set WINEFINDER_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("WINEFINDER_VERBOSE") == "1"
