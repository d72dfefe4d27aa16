"""Module-level API for the wine finder (one shared engine per process)."""
from __future__ import annotations
import time
from typing import Optional

from winefinder.engine import Engine
from winefinder.models import Lookup

_engine: Engine | None = None


def initialize(catalog: str,
               sheet: str | None = None,
               threshold: float | None = None,
               permissive: bool | None = None,
               verbose: bool = False) -> Engine:
    """
    Load `catalog` (CSV/XLSX) and index it. Calling again reloads:
    the new index replaces the old one only once it is fully built.
    """
    global _engine
    t0 = time.perf_counter()
    eng = _engine or Engine()
    eng.load(catalog, sheet=sheet, threshold=threshold, permissive=permissive, verbose=verbose)
    _engine = eng
    if verbose:
        print(f"[ready] {len(eng.records):,} wines from {catalog} in {time.perf_counter() - t0:.2f}s")
    return eng


def lookup(query: str, category: Optional[str] = None) -> Lookup:
    """Selected wine plus alternates for `query`."""
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call initialize(...) first.")
    return _engine.lookup(query, category)
