# src/e2e/test_normalize.py

import pytest

from winefinder.normalize import normalize, strip_diacritics, tokenize


def test_diacritics_case_and_dash_style_collapse_to_same_key():
    assert normalize("Vassáltis – Santorini") == normalize("vassaltis santorini")
    assert normalize("Vassáltis – Santorini") == "vassaltis santorini"


@pytest.mark.parametrize("raw", [
    "Vassáltis – Santorini",
    "  Ktíma  Gerovassilíou | Malagousiá (2022) ",
    "Château Musar / Rouge",
    "Κτήμα Άλφα — Ξινόμαυρο",
    "Kir-Yianni_Ramnista,  Naoussa.",
    "",
])
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once
    assert normalize(raw, permissive=False) == normalize(normalize(raw, permissive=False), permissive=False)


def test_greek_accents_and_final_sigma():
    assert normalize("ΣΑΝΤΟΡΊΝΗ") == normalize("Σαντορίνη") == "σαντορινη"
    assert normalize("Ασύρτικος") == normalize("ασυρτικοσ")


def test_strip_diacritics_handles_missing_input():
    assert strip_diacritics(None) == ""
    assert strip_diacritics("") == ""
    assert strip_diacritics("Rosé") == "Rose"


def test_strict_variant_only_collapses_listed_separators():
    assert normalize("Rosé: Pink!", permissive=False) == "rose: pink!"
    assert normalize("Rosé: Pink!") == "rose pink"
    assert normalize("a|b-c–d—e_f,g.h(i)j/k", permissive=False) == "a b c d e f g h i j k"


def test_tokenize_drops_short_tokens_and_duplicates():
    assert tokenize("Le Petit & Le Grand d'Or") == {"le", "petit", "grand", "or"}
    assert tokenize("a b c") == set()
    assert tokenize(None) == set()
