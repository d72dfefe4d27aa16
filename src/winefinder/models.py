from __future__ import annotations
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from . import config as CFG

# One catalog row: field name -> field value (read-only)
Record = Mapping[str, str]


def freeze_record(row: Mapping[str, object]) -> Record:
    """Copy a row into a read-only str -> str mapping. None becomes ''."""
    return MappingProxyType({str(k): "" if v is None else str(v) for k, v in row.items()})


def field_text(record: Record, name: str) -> str:
    """Trimmed text of a field; missing fields read as ''."""
    return str(record.get(name, "") or "").strip()


@dataclass(frozen=True)
class IndexEntry:
    key: str          # normalized name, never empty
    record: Record


@dataclass(frozen=True)
class MatchResult:
    record: Optional[Record]
    score: float      # clamped to [0, 1]

    @property
    def found(self) -> bool:
        return self.record is not None


NO_MATCH = MatchResult(record=None, score=0.0)


@dataclass(frozen=True)
class Alternate:
    name: str             # alternate name as written on the selected record
    result: MatchResult


# (label, canonical field) in display order
WINE_ATTRIBUTES: Tuple[Tuple[str, str], ...] = (
    ("Variety", "variety"),
    ("Region", "region"),
    ("ABV", "abv"),
    ("Dryness", "dryness"),
    ("Minerality", "minerality"),
    ("Acidity", "acidity"),
    ("Body", "body"),
)


@dataclass(frozen=True)
class Wine:
    """Display view over a catalog record."""
    name: str
    category: str = ""
    price: str = ""
    variety: str = ""
    region: str = ""
    abv: str = ""
    dryness: str = ""
    minerality: str = ""
    acidity: str = ""
    body: str = ""
    notes: str = ""
    alts: Tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: Record, *, alt_fields: Tuple[str, ...] = CFG.ALT_FIELDS) -> "Wine":
        alts = tuple(a for a in (field_text(record, f) for f in alt_fields) if a)
        return cls(
            name=field_text(record, CFG.NAME_FIELD),
            category=field_text(record, CFG.CATEGORY_FIELD),
            price=field_text(record, "price"),
            variety=field_text(record, "variety"),
            region=field_text(record, "region"),
            abv=field_text(record, "abv"),
            dryness=field_text(record, "dryness"),
            minerality=field_text(record, "minerality"),
            acidity=field_text(record, "acidity"),
            body=field_text(record, "body"),
            notes=field_text(record, "notes"),
            alts=alts[:CFG.MAX_ALTERNATES],
        )

    def attributes(self) -> List[Tuple[str, str]]:
        """Non-empty (label, value) pairs, display order."""
        return [(label, getattr(self, attr)) for label, attr in WINE_ATTRIBUTES if getattr(self, attr)]


@dataclass(frozen=True)
class Lookup:
    query: str
    category: Optional[str]
    result: MatchResult
    wine: Optional[Wine]
    alternates: List[Tuple[Alternate, Optional[Wine]]] = field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON-ready view (used by the CLI --json output and the web API)."""
        return {
            "query": self.query,
            "category": self.category,
            "found": self.result.found,
            "score": round(self.result.score, 4),
            "wine": _wine_dict(self.wine),
            "alternates": [
                {"name": a.name, "found": a.result.found, "score": round(a.result.score, 4),
                 "wine": _wine_dict(w)}
                for a, w in self.alternates
            ],
        }


def _wine_dict(w: Optional[Wine]) -> Optional[dict]:
    if w is None:
        return None
    d = asdict(w)
    d["alts"] = list(w.alts)
    d["attributes"] = [[label, value] for label, value in w.attributes()]
    return d


@dataclass
class Catalog:
    records: List[Record]
    source: str = ""                                    # file path or label
    columns: Mapping[str, str] = field(default_factory=dict)  # header -> canonical field
