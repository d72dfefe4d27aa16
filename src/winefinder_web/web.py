from __future__ import annotations
import argparse
import csv
import logging
import os
import tempfile
from zipfile import BadZipFile
from flask import Flask, request, jsonify, Response
from openpyxl.utils.exceptions import InvalidFileException
from winefinder.engine import Engine
from winefinder.config import CATALOG_EXTS, DEFAULT_THRESHOLD

log = logging.getLogger(__name__)

app = Flask(__name__)
_engine: Engine | None = None

# show the catalog upload control in the UI
SHOW_UPLOAD = False
# workbook sheet used for the startup catalog and for uploads (None: Alternatives, else first)
SHEET: str | None = None


def _not_ready():
    return jsonify({"ok": False, "error": "catalog not loaded"}), 503

# ---------- API ----------
@app.get("/api/search")
def api_search():
    if _engine is None or _engine.index is None:
        return _not_ready()
    q = request.args.get("q", "", type=str)
    cat = request.args.get("category", None, type=str)
    return jsonify(_engine.lookup(q, cat).to_dict())

@app.get("/api/categories")
def api_categories():
    if _engine is None or _engine.index is None:
        return _not_ready()
    return jsonify(_engine.categories())

@app.get("/api/names")
def api_names():
    if _engine is None or _engine.index is None:
        return _not_ready()
    return jsonify(_engine.names())

@app.get("/health")
def health():
    idx = _engine.index if _engine is not None else None
    return jsonify({"ok": True, "ready": idx is not None, "records": len(idx.records) if idx is not None else 0})

# /* ~~~ Replace the catalog: full rebuild, swapped in once complete ~~~ */
@app.post("/api/catalog")
def api_catalog():
    global _engine
    f = request.files.get("file")
    if f is None or not f.filename:
        return jsonify({"ok": False, "error": "no file uploaded"}), 400
    ext = os.path.splitext(f.filename)[1].lower()
    if ext not in CATALOG_EXTS:
        return jsonify({"ok": False, "error": f"unsupported file type {ext!r}"}), 400

    fd, tmp = tempfile.mkstemp(suffix=ext)
    os.close(fd)
    try:
        f.save(tmp)
        eng = _engine or Engine()
        eng.load(tmp, sheet=SHEET)
    except (ValueError, csv.Error, BadZipFile, InvalidFileException, KeyError, TypeError) as e:
        log.warning("Rejected catalog upload %s: %s", f.filename, e)
        return jsonify({"ok": False, "error": str(e)}), 400
    finally:
        os.remove(tmp)
    eng.source = f.filename
    _engine = eng
    log.info("Catalog replaced from upload %s: %d records", f.filename, len(eng.records))
    return jsonify({"ok": True, "records": len(eng.records), "source": f.filename})

# ---------- UI ----------
@app.get("/")
def home():
    # Single page: CSS variables + minimal JS, no external deps.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Wine Finder</title>
<style>
:root{
  --bg:#fdf6f7;
  --panel:#ffffff;
  --ink:#2b1a1f;
  --muted:#7c6a70;
  --accent:#9f1239;
  --border:#f0d9de;
  --soft:#fff7f8;
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
}
.container{ max-width:980px; margin:24px auto; padding:0 16px; }
.card{
  background:var(--panel); border:1px solid var(--border);
  border-radius:16px; padding:18px; margin-top:16px;
}
h1{ font-size:22px; margin:0 0 4px 0; color:var(--accent) }
.row{ display:flex; gap:12px; flex-wrap:wrap; align-items:flex-start }
.col{ flex:1; min-width:220px }
.input{
  width:100%; padding:10px 12px; border-radius:10px; border:1px solid var(--border);
  background:#fff; color:var(--ink); font-size:15px;
}
.btn{
  padding:10px 14px; border-radius:10px; border:1px solid var(--accent);
  background:var(--accent); color:#fff; cursor:pointer;
}
.muted{ color:var(--muted) }
.kv{ display:flex; justify-content:space-between; gap:12px; padding:2px 0 }
.label{ font-weight:600; color:var(--accent) }
.badge{ display:inline-block; padding:2px 8px; margin:4px 4px 0 0; border-radius:999px; background:var(--soft); border:1px solid var(--border) }
.hidden{ display:none }
footer{ margin:26px 0 6px 0; color:var(--muted); font-size:12px; text-align:center; }
</style>
</head>
<body>
  <div class="container">
    <h1>Wine Finder</h1>
    <div class="muted">Wine lookup, characteristics &amp; alternatives.</div>
    <div class="card">
      <div class="row">
        <div class="col __UPLOAD_CLASS__">
          <label>Catalog file</label>
          <input id="file" class="input" type="file" accept=".xlsx,.xlsm,.csv" />
        </div>
        <div class="col">
          <label>Category</label>
          <select id="cat" class="input"></select>
        </div>
        <div class="col">
          <label>Wine name</label>
          <div style="display:flex;gap:8px">
            <input id="q" class="input" list="wines" placeholder="e.g. Vassaltis Santorini…" autocomplete="off" />
            <datalist id="wines"></datalist>
            <button id="go" class="btn">Search</button>
          </div>
        </div>
      </div>
      <div id="status" class="muted" style="margin-top:8px">Loading catalog…</div>
    </div>
    <div id="out"></div>
    <footer>Wine Finder</footer>
  </div>

<script>
const $ = (sel) => document.querySelector(sel);
const esc = (s) => String(s ?? "").replace(/[&<>"]/g, c => ({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;"}[c]));

function kv(attrs){
  return (attrs || []).map(([k,v]) => `<div class="kv"><span class="muted">${esc(k)}</span><b>${esc(v)}</b></div>`).join("");
}

async function loadMeta(){
  const [cats, names] = await Promise.all([
    fetch("/api/categories").then(r => r.ok ? r.json() : []),
    fetch("/api/names").then(r => r.ok ? r.json() : []),
  ]);
  $("#cat").innerHTML = cats.map(c => `<option>${esc(c)}</option>`).join("");
  $("#wines").innerHTML = names.map(n => `<option value="${esc(n)}"></option>`).join("");
  $("#status").textContent = names.length ? `${names.length} wines loaded.` : "No catalog loaded.";
}

function render(data){
  if(!data.found){
    $("#out").innerHTML = data.query ? `<div class="card muted">No wine found for “${esc(data.query)}”.</div>` : "";
    return;
  }
  const w = data.wine;
  const alts = data.alternates.map(a => a.found
    ? `<div class="card col"><div class="kv"><b>${esc(a.name)}</b><span class="muted">${esc(a.wine.price)}</span></div>${kv(a.wine.attributes)}</div>`
    : `<div class="card col"><b>${esc(a.name)}</b><div class="muted">No details found in the catalog.</div></div>`
  ).join("");
  $("#out").innerHTML = `
    <div class="card">
      <div class="kv"><h3 style="margin:0">${esc(w.name)}</h3><span class="muted">${esc(w.price)}</span></div>
      <div class="row">
        <div class="card col"><div class="label">Characteristics</div>${kv(w.attributes)}
          ${w.notes ? `<div class="muted" style="margin-top:8px"><b>Notes:</b> ${esc(w.notes)}</div>` : ""}</div>
        <div class="card col" style="background:var(--soft)"><div class="label">Main alternative</div>
          ${w.alts.length ? `<b>${esc(w.alts[0])}</b>` : "<div class='muted'>—</div>"}
          <div>${w.alts.slice(1).map(a => `<span class="badge">${esc(a)}</span>`).join("")}</div></div>
      </div>
      ${alts ? `<div class="label" style="margin-top:12px">Alternatives in detail</div><div class="row">${alts}</div>` : ""}
    </div>`;
}

async function search(){
  const q = $("#q").value.trim();
  const cat = $("#cat").value;
  const resp = await fetch(`/api/search?q=${encodeURIComponent(q)}&category=${encodeURIComponent(cat)}`);
  if(!resp.ok){ $("#status").textContent = `Error: HTTP ${resp.status}`; return; }
  render(await resp.json());
}

$("#go").addEventListener("click", search);
$("#q").addEventListener("keydown", (ev) => { if(ev.key === "Enter") search(); });
$("#file").addEventListener("change", async (ev) => {
  const f = ev.target.files[0];
  if(!f) return;
  const body = new FormData(); body.append("file", f);
  const resp = await fetch("/api/catalog", {method:"POST", body});
  const data = await resp.json();
  $("#status").textContent = data.ok ? `Loaded ${data.records} rows from ${data.source}.` : `Failed to read file: ${data.error}`;
  if(data.ok) loadMeta();
});
loadMeta();
</script>
</body>
</html>
"""
    html = html.replace("__UPLOAD_CLASS__", "" if SHOW_UPLOAD else "hidden")
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of Engine")
    ap.add_argument("--catalog", required=True, help="CSV or XLSX wine catalog")
    ap.add_argument("--sheet", default=None)
    ap.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD)
    ap.add_argument("--strict", action="store_true")
    ap.add_argument("--upload", action="store_true", help="Show the catalog upload control")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine, SHOW_UPLOAD, SHEET
    SHOW_UPLOAD = args.upload
    SHEET = args.sheet
    _engine = Engine()
    _engine.load(args.catalog, sheet=args.sheet, threshold=args.threshold,
                 permissive=not args.strict, verbose=args.verbose)

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
