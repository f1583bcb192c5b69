from __future__ import annotations

import sys
from typing import TextIO

from zig_parser import ListingEvent


def print_event_gray(text: str, *, file: TextIO | None = None) -> None:
    """
    Print event/debug output in gray using ANSI escape codes.

    Goes to stderr by default so it never mixes with a document on stdout.
    """
    GRAY = "\033[90m"
    RESET = "\033[0m"
    print(f"{GRAY}{text}{RESET}", file=file or sys.stderr)


def format_event(line_number: int, event: ListingEvent) -> str:
    """One-line trace of a parser event: '12 declaration {...}'."""
    return f"{line_number:5d} {event.type} {event.data!r}"
