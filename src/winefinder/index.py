from __future__ import annotations
import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from . import config as CFG
from .models import IndexEntry, Record, field_text
from .normalize import normalize

log = logging.getLogger(__name__)


def is_all_categories(category: Optional[str]) -> bool:
    """None, '' and the 'All' sentinels mean: do not scope."""
    if category is None:
        return True
    key = normalize(category)
    return not key or key in {normalize(a) for a in CFG.ALL_CATEGORIES_ALIASES}


class NameIndex:
    """
    Ordered (normalized name, record) entries over a record collection.
    Holds references to the records, never copies of them.
    Rebuilt from scratch whenever the collection changes; no incremental updates.
    """
    def __init__(
        self,
        *,
        name_field: str = CFG.NAME_FIELD,
        category_field: Optional[str] = CFG.CATEGORY_FIELD,
        permissive: Optional[bool] = None,
    ) -> None:
        self.name_field = name_field
        self.category_field = category_field
        self.permissive = CFG.PERMISSIVE if permissive is None else permissive
        self.entries: List[IndexEntry] = []
        self._category_keys: List[str] = []   # parallel to entries
        self.records: List[Record] = []       # whole collection, indexed or not

    # ---- Build ----
    def build(self, records: Iterable[Record]) -> "NameIndex":
        records = list(records)
        entries: List[IndexEntry] = []
        cat_keys: List[str] = []
        skipped = 0
        for r in records:
            key = normalize(r.get(self.name_field, ""), permissive=self.permissive)
            if not key:
                skipped += 1
                continue
            entries.append(IndexEntry(key=key, record=r))
            cat_keys.append(self._category_key(r))
        self.entries = entries
        self._category_keys = cat_keys
        self.records = records
        log.info("Name index built: entries=%d skipped=%d", len(entries), skipped)
        return self

    # ---- Query ----
    def scoped(self, category: Optional[str]) -> Sequence[IndexEntry]:
        """
        Entries whose category equals `category` (normalization-insensitive).
        The UNKNOWN_CATEGORY label also selects entries with a blank category.
        """
        if is_all_categories(category) or not self.category_field:
            return self.entries
        wanted = normalize(category, permissive=self.permissive)
        accepted = {wanted}
        if wanted == normalize(CFG.UNKNOWN_CATEGORY, permissive=self.permissive):
            accepted.add("")
        return [e for e, c in zip(self.entries, self._category_keys) if c in accepted]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.entries)

    # ---- internals ----
    def _category_key(self, record: Record) -> str:
        if not self.category_field:
            return ""
        return normalize(field_text(record, self.category_field), permissive=self.permissive)


def build_index(
    records: Iterable[Record],
    name_field: str = CFG.NAME_FIELD,
    *,
    category_field: Optional[str] = CFG.CATEGORY_FIELD,
    permissive: Optional[bool] = None,
) -> NameIndex:
    """Build a fresh NameIndex over `records`, preserving input order."""
    return NameIndex(name_field=name_field, category_field=category_field, permissive=permissive).build(records)
