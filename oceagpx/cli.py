"""Command line front end.

    oceagpx records
    oceagpx export 12 13 [--merged] [--out DIR]
    oceagpx preview 12 13 [--html preview.html]
    oceagpx preview --gpx exported.gpx
"""

import argparse
from dataclasses import asdict
import sys
from pathlib import Path

import pandas as pd

from oceagpx import build_map, export
from oceagpx.config import load_config
from oceagpx.db import load_records


def _cmd_records(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    records = load_records(Path(cfg["paths"]["db_path"]))
    if not records:
        print("[records] no records")
        return 0
    df = pd.DataFrame([asdict(r) for r in records])
    with pd.option_context("display.max_rows", None, "display.width", 200):
        print(df.to_string(index=False))
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    results = export.run(args.record_ids, args.config, merged=args.merged, output_dir=args.out)
    if not results:
        print("[export] nothing exported")
        return 1
    return 0 if all(r.success for r in results) else 1


def _cmd_preview(args: argparse.Namespace) -> int:
    if not args.record_ids and not args.gpx:
        raise ValueError("give record ids or --gpx")
    build_map.run(args.record_ids, args.config, out_path=args.html, gpx_path=args.gpx)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oceagpx", description="Navigation log -> GPX")
    parser.add_argument("--config", default="config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("records", help="list records in the database")
    p.set_defaults(func=_cmd_records)

    p = sub.add_parser("export", help="export records as GPX")
    p.add_argument("record_ids", nargs="+", type=int)
    p.add_argument("--merged", action="store_true", help="write all records into one file")
    p.add_argument("--out", help="output directory (default: paths.output_dir)")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("preview", help="render records on a map")
    p.add_argument("record_ids", nargs="*", type=int)
    p.add_argument("--gpx", help="preview an existing GPX file instead")
    p.add_argument("--html", help="output html (default: paths.preview_html)")
    p.set_defaults(func=_cmd_preview)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"[{args.command}] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
