"""Build the Superstition Index page.

Usage:
  python scripts/make_viz.py                     # comparison variant -> site/index.html
  python scripts/make_viz.py --variant debug     # single CSV, year selector -> site/debug.html
  python scripts/make_viz.py --data-root https://example.org/extracted --year 2021

Inputs (relative to the data root):
  {Country}/{Continent}_{Country}.xlsx
  {Country}/{Country}_Superstition_Index.csv
  superstition_idx_korea.csv               (debug variant)

Countries whose files are missing or unreadable are drawn with value 0.
"""
import argparse
import logging
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from superstition.config_loader import VARIANTS, load_config
from superstition.page import render_site


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Render the Superstition Index comparison page.")
    ap.add_argument("--variant", choices=VARIANTS, default=None, help="Pipeline variant (default from config)")
    ap.add_argument("--data-root", default=None, help="Directory or http(s) URL holding the input files")
    ap.add_argument("--year", type=int, default=None, help="Year used to rank and size the markers")
    ap.add_argument("--out", default=None, help="Output HTML path")
    ap.add_argument("--width", type=float, default=None, help="Canvas width")
    ap.add_argument("--height", type=float, default=None, help="Canvas height")
    ap.add_argument("--log-level", default="INFO", help="Logging level")
    return ap.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
    cfg = load_config(args.variant)
    if args.data_root:
        cfg["data_root"] = args.data_root
    if args.year is not None:
        cfg["year"] = args.year
    if args.out:
        cfg["output"] = args.out
    canvas = dict(cfg.get("canvas") or {})
    if args.width:
        canvas["width"] = args.width
    if args.height:
        canvas["height"] = args.height
    cfg["canvas"] = canvas
    return cfg


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = build_config(args)
    except ValueError as e:
        print(f"[error] {e}")
        return 2
    try:
        out = render_site(cfg)
    except Exception:
        logging.getLogger("make_viz").exception("Data load error")
        return 1
    print(f"Wrote {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
