#!/usr/bin/env python3
from __future__ import annotations
from pathlib import Path

from dataclasses import dataclass, field
from urllib.parse import quote
import html as _html

from flask import Flask, Response, abort, render_template_string, send_file

from build_site import DEFAULT_STYLESHEET
from config_loader import load_config_or_default
from zig_reader import html_page_name
from zig_to_html import render_listing_document

BASE_DIR = Path.cwd()
CONFIG_PATH = BASE_DIR / "config.yml"
SOURCE_DIR = BASE_DIR / "src"

app = Flask(__name__)
cfg = load_config_or_default(CONFIG_PATH if CONFIG_PATH.is_file() else None)


INDEX_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="stylesheet" href="{{ stylesheet }}">
</head>
<body>
  <h1>{{ page_title }}</h1>
  <div class="file-tree">
    {{ file_tree|safe }}
  </div>
</body>
</html>
"""

@dataclass
class FileTreeNode:
    dirs: dict[str, "FileTreeNode"] = field(default_factory=dict)
    files: list[str] = field(default_factory=list)

def _insert_path(root: FileTreeNode, rel_parts: tuple[str, ...]) -> None:
    node = root
    for part in rel_parts[:-1]:
        node = node.dirs.setdefault(part, FileTreeNode())
    node.files.append(rel_parts[-1])

def build_source_tree(source_dir: Path) -> FileTreeNode:
    root = FileTreeNode()
    if not source_dir.exists():
        return root

    for p in sorted(source_dir.glob(f"**/*{cfg.source_suffix}")):
        # skip hidden dirs
        if any(seg.startswith(".") for seg in p.relative_to(source_dir).parts):
            continue
        _insert_path(root, p.relative_to(source_dir).parts)
    return root

def render_tree_html(node: FileTreeNode, *, prefix: str) -> str:
    """
    prefix: path inside the source dir (e.g. '' or 'fmt')
    """
    out: list[str] = []

    # directories
    for dirname in sorted(node.dirs.keys()):
        child = node.dirs[dirname]
        child_prefix = f"{prefix}/{dirname}".strip("/")
        out.append('<details class="fm-dir" open>')
        out.append(f"<summary>{_html.escape(dirname)}/</summary>")
        out.append('<div class="fm-children">')
        out.append(render_tree_html(child, prefix=child_prefix))
        out.append("</div></details>")

    # files
    for fname in sorted(node.files):
        rel = f"{prefix}/{fname}".strip("/")
        href = "/" + quote(html_page_name(rel))
        out.append(f'<div class="fm-file"><a href="{href}">{_html.escape(fname)}</a></div>')

    return "".join(out)


def _resolve_source(rel: str) -> Path:
    """Map a page's source path to a file inside SOURCE_DIR or abort with 404."""
    source_root = SOURCE_DIR.resolve()
    source_path = (source_root / rel).resolve()
    try:
        source_path.relative_to(source_root)
    except ValueError:
        abort(404)

    if not source_path.is_file() or source_path.suffix != cfg.source_suffix:
        abort(404)
    if any(seg.startswith(".") for seg in source_path.relative_to(source_root).parts):
        abort(404)
    return source_path


@app.route("/")
def index():
    tree = build_source_tree(SOURCE_DIR)
    return render_template_string(
        INDEX_TEMPLATE,
        page_title=cfg.site_title,
        stylesheet="/" + cfg.stylesheet,
        file_tree=render_tree_html(tree, prefix=""),
    )


@app.route("/<path:page>")
def view_page(page: str):
    if page == cfg.stylesheet:
        return send_file(DEFAULT_STYLESHEET, mimetype="text/css")

    if not page.endswith(".html"):
        abort(404)

    rel = page[: -len(".html")]
    source_path = _resolve_source(rel)

    document = render_listing_document(source_path, rel, cfg)
    return Response(document, mimetype="text/html")


if __name__ == "__main__":
    # Run in dev mode
    app.run(debug=False)
