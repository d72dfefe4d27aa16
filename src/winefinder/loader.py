from __future__ import annotations
import csv
import logging
import os
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import openpyxl

from . import config as CFG
from .models import Catalog, Record, freeze_record
from .normalize import normalize

log = logging.getLogger(__name__)


def resolve_columns(
    headers: Iterable[str],
    aliases: Mapping[str, Sequence[str]] = CFG.FIELD_ALIASES,
) -> Dict[str, str]:
    """
    Map spreadsheet headers to canonical field names.
    For each canonical field the first alias present among the headers wins;
    headers compare via normalize() so case/accents/punctuation do not matter.
    Each header is claimed by at most one field.
    """
    by_key: Dict[str, str] = {}
    for h in headers:
        key = normalize(h)
        if key and key not in by_key:
            by_key[key] = h

    mapping: Dict[str, str] = {}
    for field_name, names in aliases.items():
        for alias in (field_name, *names):
            header = by_key.get(normalize(alias))
            if header is not None and header not in mapping:
                mapping[header] = field_name
                break
    return mapping


def _cell_text(value: object) -> str:
    """Spreadsheet cell -> trimmed text. Integral floats drop their '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def shape_records(rows: Iterable[Mapping[str, object]], columns: Mapping[str, str]) -> List[Record]:
    """
    Rename columns to canonical names and freeze each row.
    Unmapped columns are kept under their original header; blank rows are dropped.
    """
    records: List[Record] = []
    for row in rows:
        shaped = {columns.get(h, h): _cell_text(v) for h, v in row.items() if h}
        if not any(shaped.values()):
            continue
        records.append(freeze_record(shaped))
    return records


def _read_csv(path: str) -> Tuple[List[str], List[Dict[str, object]]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        rows = [dict(r) for r in reader]
        headers = [h for h in (reader.fieldnames or []) if h]
    return headers, rows


def _read_xlsx(path: str, sheet: Optional[str]) -> Tuple[List[str], List[Dict[str, object]]]:
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        if sheet is not None:
            if sheet not in wb.sheetnames:
                raise ValueError(f"{path}: no sheet named {sheet!r} (have {wb.sheetnames})")
            ws = wb[sheet]
        elif CFG.PREFERRED_SHEET in wb.sheetnames:
            ws = wb[CFG.PREFERRED_SHEET]
        else:
            ws = wb[wb.sheetnames[0]]
        log.info("Reading sheet %r from %s", ws.title, path)

        it = ws.iter_rows(values_only=True)
        first = next(it, None)
        if first is None:
            return [], []
        headers = [_cell_text(h) for h in first]
        rows: List[Dict[str, object]] = []
        for values in it:
            # short rows: missing trailing cells read as empty
            rows.append({h: (values[i] if i < len(values) else None) for i, h in enumerate(headers) if h})
        return [h for h in headers if h], rows
    finally:
        wb.close()


def load_catalog(path: str, *, sheet: Optional[str] = None, verbose: bool = False) -> Catalog:
    """
    Read a CSV or Excel catalog into flat records keyed by canonical field names.
    For workbooks the `sheet` argument wins, then PREFERRED_SHEET, then the first sheet.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    ext = os.path.splitext(path)[1].lower()
    if ext not in CFG.CATALOG_EXTS:
        raise ValueError(f"Unsupported catalog format {ext!r}; expected one of {CFG.CATALOG_EXTS}")

    if ext == ".csv":
        headers, rows = _read_csv(path)
    else:
        headers, rows = _read_xlsx(path, sheet)

    columns = resolve_columns(headers)
    if headers and CFG.NAME_FIELD not in columns.values():
        raise ValueError(f"{path}: no column usable as the wine name (headers: {headers})")
    for required in (CFG.CATEGORY_FIELD, *CFG.ALT_FIELDS):
        if headers and required not in columns.values():
            log.warning("Catalog %s has no %r column", path, required)

    records = shape_records(rows, columns)
    if not records:
        log.warning("Catalog %s has no rows", path)
    if verbose or CFG.VERBOSE:
        print(f"[loaded] {path}: rows={len(records):,} columns={len(columns)}")
    return Catalog(records=records, source=path, columns=columns)
