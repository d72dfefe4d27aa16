from __future__ import annotations
import logging
from functools import reduce
from typing import Iterable, List, Optional, Tuple

from . import config as CFG
from .index import NameIndex
from .models import NO_MATCH, Alternate, MatchResult, Record, field_text
from .normalize import normalize, tokenize

log = logging.getLogger(__name__)

# (raw score, record) accumulator for the selection fold
_Best = Tuple[float, Optional[Record]]


def _is_prefix_pair(a: str, b: str) -> bool:
    return a.startswith(b) or b.startswith(a)


def similarity(a: str, b: str, *, permissive: Optional[bool] = None) -> float:
    """
    Heuristic name similarity in [0, 1] between two raw strings.

      jaccard(tokens(a), tokens(b))
      + PREFIX_BONUS     if one normalized form is a prefix of the other
      + SUBSTRING_BONUS  if one contains the other and the prefix bonus did not fire
                         (permissive mode only)
      clamped to MAX_SCORE.

    Both bonus checks run in both directions, so similarity(a, b) == similarity(b, a).
    Either side without tokens scores 0.
    """
    if permissive is None:
        permissive = CFG.PERMISSIVE
    A = tokenize(a, permissive=permissive)
    B = tokenize(b, permissive=permissive)
    if not A or not B:
        return 0.0
    inter = len(A & B)
    score = inter / (len(A) + len(B) - inter)

    na = normalize(a, permissive=permissive)
    nb = normalize(b, permissive=permissive)
    if _is_prefix_pair(na, nb):
        score += CFG.PREFIX_BONUS
    elif permissive and (na in nb or nb in na):
        score += CFG.SUBSTRING_BONUS
    return min(CFG.MAX_SCORE, score)


def score_entry(key: str, target: str, *, permissive: Optional[bool] = None) -> float:
    """Selection score of an index key against a normalized query (may exceed 1 by PREFIX_NUDGE)."""
    sc = similarity(key, target, permissive=permissive)
    if _is_prefix_pair(key, target):
        sc += CFG.PREFIX_NUDGE
    return sc


def _choose_better(cur: _Best, cand: _Best) -> _Best:
    """Strictly higher score wins; on ties the earlier entry stays."""
    return cand if cand[0] > cur[0] else cur


def _clamp(score: float) -> float:
    return max(0.0, min(CFG.MAX_SCORE, score))


def find_best(
    index: NameIndex,
    query: str,
    threshold: float = CFG.DEFAULT_THRESHOLD,
    *,
    category: Optional[str] = None,
) -> MatchResult:
    """
    Best-scoring record for `query`, optionally scoped to one category.
    Returns a MatchResult with record=None when nothing reaches `threshold`;
    its score is then the best one observed.
    """
    if index is None:
        raise RuntimeError("find_best() called without an index. Build one first.")

    target = normalize(query, permissive=index.permissive)
    if not target:
        return NO_MATCH

    entries = index.scoped(category)
    scored = ((score_entry(e.key, target, permissive=index.permissive), e.record) for e in entries)
    best_score, best_record = reduce(_choose_better, scored, (0.0, None))

    log.debug("find_best q=%r category=%r scanned=%d best=%.3f",
              query, category, len(entries), best_score)

    if best_record is not None and best_score >= threshold:
        return MatchResult(record=best_record, score=_clamp(best_score))
    return MatchResult(record=None, score=_clamp(best_score))


def alternate_names(record: Record, alt_fields: Iterable[str] = CFG.ALT_FIELDS) -> List[str]:
    """Non-empty alternate names on `record`, in field order, at most MAX_ALTERNATES."""
    names = [field_text(record, f) for f in alt_fields]
    return [n for n in names if n][:CFG.MAX_ALTERNATES]


def resolve_alternates(
    index: NameIndex,
    record: Record,
    alt_fields: Iterable[str] = CFG.ALT_FIELDS,
    threshold: float = CFG.DEFAULT_THRESHOLD,
) -> List[Alternate]:
    """
    Resolve each alternate name independently against the full (unscoped) index.
    An unresolved alternate is a normal outcome: its result has record=None.
    """
    return [Alternate(name=n, result=find_best(index, n, threshold)) for n in alternate_names(record, alt_fields)]
