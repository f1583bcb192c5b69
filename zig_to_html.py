#!/usr/bin/env python3
"""
zig_to_html.py

Render one Zig source file as an annotated listing: a two-column table
where documentation comments sit next to the code they describe.

Built on:
- config_loader.load_config() for regex + site settings
- zig_reader.read_source_lines() for line-by-line input
- zig_parser.parse_zig_line() for line classification

Output is written to the stream as each line is classified; nothing that
has been written is revisited.
"""
from __future__ import annotations
from config_loader import ListingConfig, load_config_or_default
from pathlib import Path
from typing import Callable, Iterable, Optional, TextIO
import argparse
import html
import io
import sys

from helper import format_event, print_event_gray
from zig_parser import ListingEvent, ListingState, parse_zig_line
from zig_reader import html_page_name, read_source_lines, root_relative_prefix, safe_input_path

# CSS modifier put on the doc cell when a declaration closes an open chunk
CHUNK_CLASS_FOR_KIND = {
    "value": "value",
    "function": "",
    "method": "method",
}

EventHook = Callable[[int, ListingEvent], None]


def escape_html(text: str) -> str:
    """Escape text for HTML output."""
    return html.escape(text, quote=True)


def _maybe_escape(text: str, cfg: ListingConfig) -> str:
    return escape_html(text) if cfg.escape_html else text


def open_html_document(logical_path: str, cfg: ListingConfig) -> str:
    """
    Return the HTML prolog and the first documentation cell with the
    page heading.
    """
    root = root_relative_prefix(logical_path)
    safe_path = escape_html(logical_path)

    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\">\n"
        "<head>\n"
        "    <meta charset=\"utf-8\">\n"
        "    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">\n"
        f"    <title>{safe_path} - {escape_html(cfg.site_title)}</title>\n"
        f"    <link rel=\"stylesheet\" href=\"{root}{escape_html(cfg.stylesheet)}\">\n"
        "</head>\n"
        "<body>\n"
        "\n"
        "<table><tbody>\n"
        "<tr><td class=\"doc\">\n"
        "<h1>\n"
        f"  <a href=\"{root}{escape_html(cfg.index_page)}\">std</a> /\n"
        f"  {safe_path}\n"
        "</h1>\n"
    )


def close_html_document() -> str:
    """Return the HTML epilog."""
    return (
        "</td></tr>\n"
        "</tbody></table>\n"
        "</body>\n"
        "</html>\n"
    )


def new_chunk(extra_class: str = "") -> str:
    """End the current row and open the doc cell of a new one."""
    css_class = f"doc {extra_class}" if extra_class else "doc"
    return f"</td></tr>\n<tr><td class=\"{css_class}\">\n"


def open_code_cell() -> str:
    """End the doc cell and open the code cell of the same row."""
    return "</td>\n<td class=\"code\">\n"


def render_doc_paragraph(doc: Optional[str], cfg: ListingConfig) -> str:
    if doc is None:
        return ""
    return f"<p>{_maybe_escape(doc, cfg)}</p>\n"


def render_declaration(event: ListingEvent, cfg: ListingConfig) -> str:
    """
    Heading for a declaration, plus import link and flushed documentation.

    Top-level functions get a '()' suffix, constants and methods do not.
    """
    kind = event.data["kind"]
    name = event.data["name"]
    out: list[str] = []

    if event.data.get("close_chunk"):
        out.append(new_chunk(CHUNK_CLASS_FOR_KIND.get(kind, "")))

    heading = f"{name}()" if kind == "function" else name
    out.append(f"<h2>{escape_html(heading)}</h2>\n")

    target = event.data.get("import")
    if target:
        href = escape_html(html_page_name(target))
        out.append(f"<a href=\"{href}\">{escape_html(target)}</a>\n")

    out.append(render_doc_paragraph(event.data.get("doc"), cfg))
    return "".join(out)


def render_event(event: ListingEvent, cfg: ListingConfig) -> str:
    """Map one parser event to its HTML fragment."""
    if event.type == "declaration":
        return render_declaration(event, cfg)

    if event.type == "code_begin":
        return render_doc_paragraph(event.data.get("doc"), cfg) + open_code_cell()

    if event.type == "code_line":
        return _maybe_escape(event.data["line"], cfg) + "\n"

    # doc comments only feed the pending documentation
    return ""


def render_listing(
    lines: Iterable[str],
    logical_path: str,
    cfg: ListingConfig,
    out: TextIO,
    *,
    on_event: Optional[EventHook] = None,
) -> ListingState:
    """
    Stream a complete listing document for `lines` to `out`.

    Returns the final parser state; any documentation still pending at the
    end of the input is not written.
    """
    state = ListingState()
    out.write(open_html_document(logical_path, cfg))

    for line in lines:
        state, events = parse_zig_line(line, cfg, state)
        for event in events:
            if on_event is not None:
                on_event(state.line_number, event)
            out.write(render_event(event, cfg))

    out.write(close_html_document())
    return state


def render_listing_document(
    input_path: Path,
    logical_path: str,
    cfg: ListingConfig,
) -> str:
    """Render a source file into a complete HTML document string."""
    buffer = io.StringIO()
    render_listing(read_source_lines(input_path), logical_path, cfg, buffer)
    return buffer.getvalue()


def zig_to_html(
    input_path: Path,
    logical_path: str,
    cfg: ListingConfig,
    out: TextIO,
    *,
    on_event: Optional[EventHook] = None,
) -> ListingState:
    """
    Render a source file and write the listing to `out`.
    """
    return render_listing(
        read_source_lines(input_path),
        logical_path,
        cfg,
        out,
        on_event=on_event,
    )


def _trace_event(line_number: int, event: ListingEvent) -> None:
    print_event_gray(format_event(line_number, event))


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zig_to_html.py",
        description="Render a Zig source file as an annotated HTML listing.",
    )
    parser.add_argument("input", help="Zig source file to render")
    parser.add_argument(
        "logical_path",
        help="Path used for the page title and relative links, e.g. 'fmt/parse.zig'",
    )
    parser.add_argument("-o", "--output", default=None, help="Output HTML file (default: stdout)")
    parser.add_argument("-c", "--config", default=None, help="Config YAML file (default: built-in)")
    parser.add_argument("--debug", action="store_true", help="Trace parser events to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        cfg = load_config_or_default(Path(args.config) if args.config else None)
    except (OSError, TypeError, ValueError) as e:
        print(f"[zig_to_html] Failed to load config: {e}", file=sys.stderr)
        return 2

    try:
        input_path = safe_input_path(args.input)
    except (OSError, ValueError) as e:
        print(f"[zig_to_html] Invalid input path: {e}", file=sys.stderr)
        return 2

    on_event = _trace_event if args.debug else None

    try:
        if args.output:
            document = io.StringIO()
            zig_to_html(input_path, args.logical_path, cfg, document, on_event=on_event)
            Path(args.output).write_text(document.getvalue(), encoding="utf-8")
        else:
            zig_to_html(input_path, args.logical_path, cfg, sys.stdout, on_event=on_event)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[zig_to_html] Error while reading: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
