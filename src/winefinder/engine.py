# winefinder/engine.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from . import config as CFG
from .models import Lookup, Record, Wine, field_text
from .loader import load_catalog
from .index import NameIndex, build_index
from .normalize import normalize
from .search import find_best, resolve_alternates

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - the record collection (from load_catalog or handed in directly),
      - the name index (NameIndex),
      - best-match selection and alternate resolution (search.find_best).

    Public API (used by CLI/Flask):
      * build(records, ...): index a record collection and swap it in
      * load(path, ...):     read a CSV/XLSX catalog, then build()
      * find(query, category): best matching record or no match
      * lookup(query, category): selected wine plus resolved alternates
      * categories(), names(): values for the UI selectors
      * shutdown():          drop index and records
    """

    # ------------- lifecycle -------------

    def __init__(self) -> None:
        self.index: Optional[NameIndex] = None   # also owns the record list; swapped as one reference
        self.source: str = ""
        self.threshold: float = CFG.DEFAULT_THRESHOLD
        self.alt_fields: Sequence[str] = CFG.ALT_FIELDS
        self.permissive: Optional[bool] = None   # None -> CFG.PERMISSIVE

    # /* ~~~ Index a record collection; readers keep the old index until the swap ~~~ */
    def build(
        self,
        records: Iterable[Record],
        *,
        name_field: str = CFG.NAME_FIELD,
        category_field: Optional[str] = CFG.CATEGORY_FIELD,
        alt_fields: Optional[Sequence[str]] = None,
        threshold: Optional[float] = None,
        permissive: Optional[bool] = None,
        source: str = "",
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)

        if permissive is None:
            permissive = self.permissive
        idx = build_index(records, name_field, category_field=category_field, permissive=permissive)

        # Commit engine state; the index goes last
        self.source = source
        if alt_fields is not None:
            self.alt_fields = tuple(alt_fields)
        if threshold is not None:
            self.threshold = float(threshold)
        self.permissive = idx.permissive
        self.index = idx
        log.info("Engine build() complete: records=%d indexed=%d source=%s",
                 len(idx.records), len(idx), source or "<memory>")

    # /* ~~~ Read a catalog file and index it ~~~ */
    def load(self, path: str, *, sheet: Optional[str] = None, verbose: bool = False, **build_kw) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
        log.info("Loading catalog from %s", path)
        catalog = load_catalog(path, sheet=sheet, verbose=verbose)
        self.build(catalog.records, source=catalog.source, verbose=verbose, **build_kw)

    # ------------- query -------------

    @property
    def records(self) -> List[Record]:
        """Current record collection (empty before build)."""
        idx = self.index
        return idx.records if idx is not None else []

    def find(self, query: str, category: Optional[str] = None, *, threshold: Optional[float] = None):
        idx = self._require_index()
        return find_best(idx, query, self.threshold if threshold is None else threshold, category=category)

    def alternates(self, record: Record):
        idx = self._require_index()
        return resolve_alternates(idx, record, self.alt_fields, self.threshold)

    # /* ~~~ Selected wine + its alternates, ready for display ~~~ */
    def lookup(self, query: str, category: Optional[str] = None) -> Lookup:
        idx = self._require_index()   # one index for the selection and its alternates
        result = find_best(idx, query, self.threshold, category=category)
        if result.record is None:
            return Lookup(query=query, category=category, result=result, wine=None)
        alts = [
            (a, Wine.from_record(a.result.record) if a.result.record is not None else None)
            for a in resolve_alternates(idx, result.record, self.alt_fields, self.threshold)
        ]
        return Lookup(
            query=query,
            category=category,
            result=result,
            wine=Wine.from_record(result.record, alt_fields=tuple(self.alt_fields)),
            alternates=alts,
        )

    def categories(self) -> List[str]:
        """ALL_CATEGORIES first, then distinct categories in first-seen order."""
        idx = self._require_index()
        seen: dict[str, str] = {}
        for r in idx.records:
            label = field_text(r, idx.category_field) if idx.category_field else ""
            label = label or CFG.UNKNOWN_CATEGORY
            seen.setdefault(normalize(label), label)
        return [CFG.ALL_CATEGORIES, *seen.values()]

    def names(self) -> List[str]:
        """Distinct non-empty names, sorted by normalized form."""
        idx = self._require_index()
        distinct = {field_text(e.record, idx.name_field) for e in idx}
        return sorted((n for n in distinct if n), key=lambda n: (normalize(n), n))

    # ------------- teardown -------------

    def shutdown(self) -> None:
        self.index = None
        log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _require_index(self) -> NameIndex:
        if self.index is None:
            raise RuntimeError("Engine not initialized. Call build() or load() first.")
        return self.index
