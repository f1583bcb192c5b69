from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterator


def safe_input_path(raw: str, *, root: Path | None = None) -> Path:
    """
    Parse and validate a user-supplied path.

    Goals:
    - reject obvious malformed inputs (NUL, empty)
    - keep the file inside `root` when one is given
    - return an absolute path to an existing regular file
    """
    if not raw or raw.strip() == "":
        raise ValueError("Empty input path.")

    if "\x00" in raw:
        raise ValueError("NUL byte in path is not allowed.")

    resolved = Path(raw).expanduser().resolve(strict=False)

    if root is not None:
        root_resolved = root.resolve(strict=True)
        try:
            resolved.relative_to(root_resolved)
        except ValueError as e:
            raise ValueError(f"Input path must be within root: {root_resolved}") from e

    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise IsADirectoryError(f"Not a file: {resolved}")

    return resolved


def read_source_lines(path: Path) -> Iterator[str]:
    """
    Iterate over a source file line-by-line.

    Lines are split on newlines only and just that newline is removed;
    carriage returns and indentation are kept as-is. Undecodable bytes
    become U+FFFD.
    """
    with Path(path).open(encoding="utf-8", errors="replace", newline="") as f:
        for raw_line in f:
            yield raw_line.rstrip("\n")


def root_relative_prefix(logical_path: str) -> str:
    """
    One '../' per '/' in the logical path.

    'fmt/parse.zig' -> '../', 'array_list.zig' -> ''
    """
    return "../" * logical_path.count("/")


def html_page_name(source_path: str) -> str:
    """'foo.zig' -> 'foo.zig.html'"""
    return f"{source_path}.html"


def logical_path_for(source: Path, source_dir: Path) -> str:
    """Posix path of `source` relative to `source_dir`, used as the page name."""
    return str(PurePosixPath(*source.relative_to(source_dir).parts))
