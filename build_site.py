#!/usr/bin/env python3
"""
build_site.py

Render every Zig source file below a directory into a static site:

  SOURCE/array_list.zig  ->  OUT/array_list.zig.html
  SOURCE/fmt/parse.zig   ->  OUT/fmt/parse.zig.html
  static/styles.css      ->  OUT/styles.css

Pages use their path relative to SOURCE as the logical path, so links to
the stylesheet, the index page and imported files resolve inside OUT.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator
import argparse
import shutil
import sys

from config_loader import ListingConfig, load_config_or_default
from helper import print_event_gray
from zig_reader import html_page_name, logical_path_for
from zig_to_html import zig_to_html

STATIC_DIR = Path(__file__).resolve().parent / "static"
DEFAULT_STYLESHEET = STATIC_DIR / "styles.css"


def iter_source_files(source_dir: Path, cfg: ListingConfig) -> Iterator[Path]:
    """Yield source files below `source_dir` in sorted order, skipping hidden dirs."""
    for p in sorted(source_dir.glob(f"**/*{cfg.source_suffix}")):
        if any(seg.startswith(".") for seg in p.relative_to(source_dir).parts):
            continue
        if p.is_file():
            yield p


def copy_stylesheet(output_dir: Path, cfg: ListingConfig, *, stylesheet: Path = DEFAULT_STYLESHEET) -> Path:
    target = output_dir / cfg.stylesheet
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(stylesheet, target)
    return target


def build_site(
    source_dir: Path,
    output_dir: Path,
    cfg: ListingConfig,
    *,
    verbose: bool = False,
) -> list[Path]:
    """
    Render all source files of `source_dir` into `output_dir`.

    Returns the written page paths in the order they were rendered.
    """
    source_dir = source_dir.resolve()
    output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for source in iter_source_files(source_dir, cfg):
        logical_path = logical_path_for(source, source_dir)
        page = output_dir / html_page_name(logical_path)
        page.parent.mkdir(parents=True, exist_ok=True)

        with page.open("w", encoding="utf-8") as out:
            zig_to_html(source, logical_path, cfg, out)

        if verbose:
            print_event_gray(f"{logical_path} -> {page}")
        written.append(page)

    copy_stylesheet(output_dir, cfg)
    return written


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build_site.py",
        description="Render a tree of Zig sources into annotated HTML listings.",
    )
    parser.add_argument("source_dir", help="Directory containing the Zig sources")
    parser.add_argument("-o", "--output", default="site", help="Output directory (default: site)")
    parser.add_argument("-c", "--config", default=None, help="Config YAML file (default: built-in)")
    parser.add_argument("-v", "--verbose", action="store_true", help="List rendered pages on stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        cfg = load_config_or_default(Path(args.config) if args.config else None)
    except (OSError, TypeError, ValueError) as e:
        print(f"[build_site] Failed to load config: {e}", file=sys.stderr)
        return 2

    source_dir = Path(args.source_dir).expanduser()
    if not source_dir.is_dir():
        print(f"[build_site] Not a directory: {source_dir}", file=sys.stderr)
        return 2

    try:
        pages = build_site(source_dir, Path(args.output), cfg, verbose=args.verbose)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[build_site] Error while rendering: {e}", file=sys.stderr)
        return 1

    print(f"[build_site] Wrote {len(pages)} page(s) to {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
