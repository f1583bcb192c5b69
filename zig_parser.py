#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Optional, Any

from config_loader import ListingConfig

# Text contributed by a blank documentation line
DOC_PARAGRAPH_BREAK = "<br><br>"


@dataclass
class ListingEvent:
    """
    A structured event emitted by the line classifier.

    type:
      - "doc_comment"   data: text
      - "declaration"   data: kind ("value" | "function" | "method"), name,
                              close_chunk, import, doc
      - "code_begin"    data: doc
      - "code_line"     data: line
    """
    type: str
    data: dict[str, Any]


@dataclass
class ListingState:
    """
    Mutable state for a single pass over one source file.

    Tracks:
    - pending documentation text not yet attached to a heading or code cell
    - whether a code cell is currently open
    """
    pending_doc: Optional[str] = None
    is_in_code_block: bool = False
    line_number: int = 0

    def append_doc(self, text: str) -> None:
        if self.pending_doc is None:
            self.pending_doc = text
        else:
            self.pending_doc += "\n" + text

    def take_pending_doc(self) -> Optional[str]:
        """Return the pending documentation and clear it."""
        doc = self.pending_doc
        self.pending_doc = None
        return doc


def _handle_doc_comment_if_present(
    line: str,
    cfg: ListingConfig,
    state: ListingState,
) -> Optional[ListingEvent]:
    """
    Collect '///' and '//!' lines into the pending documentation.

    The text is everything after the marker. A blank comment contributes a
    paragraph break instead of an empty string.
    """
    match = cfg.doc_comment_re.match(line)
    if not match:
        return None

    text = line[match.end():]
    if text.strip() == "":
        text = DOC_PARAGRAPH_BREAK

    state.append_doc(text)
    return ListingEvent(type="doc_comment", data={"text": text})


def _handle_declaration_if_present(
    line: str,
    kind: str,
    match: Optional[re.Match],
    cfg: ListingConfig,
    state: ListingState,
) -> Optional[ListingEvent]:
    if not match:
        return None

    import_target = None
    if kind == "value":
        import_match = cfg.import_re.search(line)
        if import_match:
            import_target = import_match.group("path")

    close_chunk = state.is_in_code_block
    doc = state.take_pending_doc()

    # the next plain line reopens a code cell
    state.is_in_code_block = False

    return ListingEvent(
        type="declaration",
        data={
            "kind": kind,
            "name": match.group("name"),
            "close_chunk": close_chunk,
            "import": import_target,
            "doc": doc,
        },
    )


def _handle_pub_const_if_present(
    line: str,
    cfg: ListingConfig,
    state: ListingState,
) -> Optional[ListingEvent]:
    return _handle_declaration_if_present(
        line, "value", cfg.pub_const_re.match(line), cfg, state
    )


def _handle_pub_fn_if_present(
    line: str,
    cfg: ListingConfig,
    state: ListingState,
) -> Optional[ListingEvent]:
    return _handle_declaration_if_present(
        line, "function", cfg.pub_fn_re.match(line), cfg, state
    )


def _handle_method_fn_if_present(
    line: str,
    cfg: ListingConfig,
    state: ListingState,
) -> Optional[ListingEvent]:
    """Indented 'pub fn' inside a struct/enum body."""
    return _handle_declaration_if_present(
        line, "method", cfg.method_fn_re.match(line), cfg, state
    )


def _handle_code_line(
    line: str,
    state: ListingState,
) -> list[ListingEvent]:
    events: list[ListingEvent] = []

    if not state.is_in_code_block:
        state.is_in_code_block = True
        events.append(
            ListingEvent(type="code_begin", data={"doc": state.take_pending_doc()})
        )

    events.append(ListingEvent(type="code_line", data={"line": line}))
    return events


def parse_zig_line(
    line: str,
    cfg: ListingConfig,
    state: ListingState,
) -> tuple[ListingState, list[ListingEvent]]:
    """
    Classify one source line and update `state`.

    Rules run in a fixed order and every matching rule fires, except the
    doc comment rule which consumes the line. Declarations reset the code
    block flag, so the line that declared them opens a fresh code cell.
    """
    events: list[ListingEvent] = []
    state.line_number += 1

    doc_event = _handle_doc_comment_if_present(line, cfg, state)
    if doc_event:
        events.append(doc_event)
        return state, events

    const_event = _handle_pub_const_if_present(line, cfg, state)
    if const_event:
        events.append(const_event)

    fn_event = _handle_pub_fn_if_present(line, cfg, state)
    if fn_event:
        events.append(fn_event)

    method_event = _handle_method_fn_if_present(line, cfg, state)
    if method_event:
        events.append(method_event)

    events.extend(_handle_code_line(line, state))

    return state, events
