# src/e2e/test_find_best.py

import pytest

from winefinder.index import build_index
from winefinder.models import freeze_record
from winefinder.search import find_best, resolve_alternates


def _records(*rows):
    return [freeze_record(r) for r in rows]


def test_exact_name_beats_longer_partial_match():
    recs = _records({"name": "Assyrtiko Reserve"}, {"name": "Assyrtiko"})
    res = find_best(build_index(recs), "Assyrtiko")
    assert res.found
    assert res.record is recs[1]
    assert res.score == 1.0  # reported score is clamped


def test_empty_query_is_no_match():
    idx = build_index(_records({"name": "Assyrtiko"}))
    for q in ("", "   ", " -- / ", None):
        res = find_best(idx, q)
        assert not res.found and res.score == 0.0


def test_empty_catalog_never_matches():
    res = find_best(build_index([]), "Assyrtiko")
    assert not res.found and res.score == 0.0


def test_records_without_a_name_are_not_indexed():
    recs = _records({"name": ""}, {"name": " – "}, {"category": "Red"}, {"name": "Moschofilero"})
    idx = build_index(recs)
    assert len(idx) == 1
    assert all(e.key for e in idx)


def test_missing_index_is_a_programming_error():
    with pytest.raises(RuntimeError):
        find_best(None, "Assyrtiko")


def test_category_scope_excludes_other_categories():
    recs = _records(
        {"name": "Xinomavro Naoussa", "category": "Red"},
        {"name": "Xinomavro Naoussa", "category": "White"},
    )
    idx = build_index(recs)
    assert find_best(idx, "Xinomavro Naoussa").record is recs[0]
    assert find_best(idx, "Xinomavro Naoussa", category="White").record is recs[1]
    assert find_best(idx, "xinomavro naoussa", category="  WHITE ").record is recs[1]
    assert not find_best(idx, "Xinomavro Naoussa", category="Rosé").found


def test_all_and_unknown_category_labels():
    recs = _records(
        {"name": "Mystery Blend", "category": ""},
        {"name": "Mystery Blend", "category": "Red"},
    )
    idx = build_index(recs)
    assert find_best(idx, "Mystery Blend", category="All").record is recs[0]
    assert find_best(idx, "Mystery Blend", category="Όλες").record is recs[0]
    assert find_best(idx, "Mystery Blend", category="Unknown").record is recs[0]
    assert find_best(idx, "Mystery Blend", category="red").record is recs[1]


def test_unknown_label_matches_literal_and_blank_categories():
    recs = _records(
        {"name": "Mystery Blend", "category": "Unknown"},
        {"name": "Mystery Blend", "category": ""},
        {"name": "Mystery Blend", "category": "Red"},
    )
    idx = build_index(recs)
    assert [e.record for e in idx.scoped("Unknown")] == recs[:2]
    assert find_best(idx, "Mystery Blend", category="unknown").record is recs[0]

    literal_only = build_index(_records({"name": "Orange Skin Contact", "category": "Unknown"}))
    assert find_best(literal_only, "Orange Skin Contact", category="Unknown").found
    blank_only = build_index(_records({"name": "Orange Skin Contact", "category": ""}))
    assert find_best(blank_only, "Orange Skin Contact", category="Unknown").found


def _names_with_overlap(own_catalog: int, own_query: int):
    shared = ["sa", "sb", "sc", "sd", "se", "sf", "sg", "sh", "si"]
    name = " ".join([f"k{i}" for i in range(own_catalog)] + shared)
    query = " ".join([f"q{i}" for i in range(own_query)] + shared)
    return name, query


def test_threshold_boundary_is_inclusive():
    # 9 shared / (14 + 15 - 9) = 0.45 exactly, no prefix or substring relation
    name, query = _names_with_overlap(5, 6)
    res = find_best(build_index(_records({"name": name})), query)
    assert res.found
    assert res.score == pytest.approx(0.45)


def test_just_below_threshold_is_no_match_but_reports_best_score():
    # 9 / (14 + 16 - 9) = 0.4286
    name, query = _names_with_overlap(5, 7)
    res = find_best(build_index(_records({"name": name})), query)
    assert not res.found
    assert res.score == pytest.approx(9 / 21)


def test_explicit_threshold_equal_to_score_selects():
    idx = build_index(_records({"name": "Kir-Yianni Ramnista"}))
    score = find_best(idx, "ramnista", threshold=0.0).score
    assert find_best(idx, "ramnista", threshold=score).found
    assert not find_best(idx, "ramnista", threshold=score + 1e-6).found


def test_single_letter_query_only_gets_prefix_nudge():
    idx = build_index(_records({"name": "Xinomavro"}))
    res = find_best(idx, "x")
    assert not res.found
    assert res.score == pytest.approx(0.05)
    assert find_best(idx, "x", threshold=0.05).found


def test_duplicate_names_first_in_collection_wins_every_time():
    recs = _records(
        {"name": "Ktima Gerovassiliou Malagousia", "price": "31"},
        {"name": "KTIMA GEROVASSILIOU – Malagousia", "price": "29"},
    )
    idx = build_index(recs)
    for _ in range(5):
        assert find_best(idx, "gerovassiliou malagousia").record is recs[0]


def test_strict_index_has_no_substring_bonus():
    recs = _records({"name": "Kir-Yianni Ramnista"})
    assert find_best(build_index(recs), "Ramnista").found
    assert not find_best(build_index(recs, permissive=False), "Ramnista").found


def test_unresolved_alternate_does_not_affect_the_others():
    recs = _records(
        {"name": "Santo Assyrtiko", "category": "White",
         "alt1": "Gaia Thalassitis", "alt2": "Domaine Imaginaire", "alt3": "Hatzidakis Nihteri"},
        {"name": "Gaia Thalassitis Santorini", "category": "Red"},
        {"name": "Hatzidakis Nihteri", "category": "White"},
    )
    idx = build_index(recs)
    alts = resolve_alternates(idx, recs[0])
    assert [a.name for a in alts] == ["Gaia Thalassitis", "Domaine Imaginaire", "Hatzidakis Nihteri"]
    assert alts[0].result.record is recs[1]   # resolved outside the selected record's category
    assert not alts[1].result.found
    assert alts[2].result.record is recs[2]


def test_blank_alternate_fields_are_skipped():
    recs = _records({"name": "Santo Assyrtiko", "alt1": "", "alt2": "Santo Assyrtiko", "alt3": "  "})
    alts = resolve_alternates(build_index(recs), recs[0])
    assert [a.name for a in alts] == ["Santo Assyrtiko"]
    assert alts[0].result.record is recs[0]
