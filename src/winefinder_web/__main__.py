from __future__ import annotations
import argparse, json
from winefinder import Engine
from winefinder.config import DEFAULT_THRESHOLD
from winefinder.models import Lookup


def _print_lookup(res: Lookup) -> None:
    if res.wine is None:
        print(f"(no match)  best score {res.result.score:.2f}")
        return
    w = res.wine
    print(f"{w.name}  [{w.category or '-'}]  {w.price}  score={res.result.score:.2f}")
    for label, value in w.attributes():
        print(f"  {label:<11} {value}")
    if w.notes:
        print(f"  Notes:      {w.notes}")
    if not res.alternates:
        return
    print("Alternatives:")
    for i, (alt, aw) in enumerate(res.alternates, 1):
        if aw is None:
            print(f"{i}. {alt.name}  (no details found)")
            continue
        print(f"{i}. {alt.name}  {aw.price}  score={alt.result.score:.2f}")
        for label, value in aw.attributes():
            print(f"     {label:<11} {value}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Wine finder CLI (Engine-backed)")
    p.add_argument("--catalog", required=True, help="CSV or XLSX wine catalog")
    p.add_argument("--sheet", default=None, help="Workbook sheet (default: Alternatives, else first)")
    p.add_argument("--q", default=None, help="Single query to run once")
    p.add_argument("--category", default=None, help="Restrict the main lookup to one category")
    p.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD, help="Minimum accepted score")
    p.add_argument("--strict", action="store_true", help="Strict punctuation handling, no substring bonus")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--categories", action="store_true", help="List categories and exit")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    eng = Engine()
    try:
        eng.load(
            args.catalog,
            sheet=args.sheet,
            threshold=args.threshold,
            permissive=not args.strict,
            verbose=args.verbose,
        )

        if args.categories:
            cats = eng.categories()
            print(json.dumps(cats, ensure_ascii=False) if args.json else "\n".join(cats))
            return 0

        def run_query(q: str):
            res = eng.lookup(q, args.category)
            if args.json:
                print(json.dumps(res.to_dict(), ensure_ascii=False, indent=2))
            else:
                _print_lookup(res)

        if args.q:
            run_query(args.q)

        if args.repl:
            print("Type a wine name (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                run_query(q)

        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
