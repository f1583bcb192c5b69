# config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any
import re

try:
    import yaml  # PyYAML
except ImportError as e:
    raise SystemExit(
        "Missing dependency: PyYAML\n"
        "Install with: python -m pip install pyyaml"
    ) from e


class ListingConfig:
    """
    Immutable-ish container for listing renderer configuration.
    """

    def __init__(
        self,
        *,
        site_title: str,
        index_page: str,
        stylesheet: str,
        source_suffix: str,
        escape_html: bool,
        doc_comment_re: re.Pattern,
        pub_const_re: re.Pattern,
        pub_fn_re: re.Pattern,
        method_fn_re: re.Pattern,
        import_re: re.Pattern,
    ):
        self.site_title = site_title
        self.index_page = index_page
        self.stylesheet = stylesheet
        self.source_suffix = source_suffix
        self.escape_html = escape_html
        self.doc_comment_re = doc_comment_re
        self.pub_const_re = pub_const_re
        self.pub_fn_re = pub_fn_re
        self.method_fn_re = method_fn_re
        self.import_re = import_re


# ---------------- Defaults ---------------------------------------------------

DEFAULT_CONFIG = ListingConfig(
    site_title="Zig standard library",
    index_page="std.zig.html",
    stylesheet="styles.css",
    source_suffix=".zig",
    escape_html=False,
    doc_comment_re=re.compile(r"^/{2}[!/]"),
    pub_const_re=re.compile(r"^pub const (?P<name>\w+)"),
    pub_fn_re=re.compile(r"^pub( inline)? fn (?P<name>\w+)"),
    method_fn_re=re.compile(r"^\s+pub( inline)? fn (?P<name>\w+)"),
    import_re=re.compile(r'@import\("(?P<path>[^"]*\.zig)"\)'),
)

# Named groups each pattern has to provide
REQUIRED_GROUPS = {
    "pub_const_re": "name",
    "pub_fn_re": "name",
    "method_fn_re": "name",
    "import_re": "path",
}

# ---------------- Loader -----------------------------------------------------


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise TypeError(f"{name} must be a non-empty string")
    return value


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be true or false")
    return value


def _compile_pattern(regex: dict[str, Any], key: str) -> re.Pattern:
    default: re.Pattern = getattr(DEFAULT_CONFIG, key)
    pattern = re.compile(_as_str(regex.get(key, default.pattern), f"regex.{key}"))

    group = REQUIRED_GROUPS.get(key)
    if group and group not in pattern.groupindex:
        raise ValueError(f"regex.{key} must define a named group '{group}'")
    return pattern


def load_config(path: Path) -> ListingConfig:
    """
    Load YAML config and return a ListingConfig instance.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    regex = raw.get("regex", {}) or {}
    if not isinstance(regex, dict):
        raise TypeError("regex must be a mapping")

    suffix = _as_str(raw.get("source_suffix", DEFAULT_CONFIG.source_suffix), "source_suffix")
    if not suffix.startswith("."):
        suffix = "." + suffix

    return ListingConfig(
        site_title=_as_str(raw.get("site_title", DEFAULT_CONFIG.site_title), "site_title"),
        index_page=_as_str(raw.get("index_page", DEFAULT_CONFIG.index_page), "index_page"),
        stylesheet=_as_str(raw.get("stylesheet", DEFAULT_CONFIG.stylesheet), "stylesheet"),
        source_suffix=suffix,
        escape_html=_as_bool(raw.get("escape_html", DEFAULT_CONFIG.escape_html), "escape_html"),
        doc_comment_re=_compile_pattern(regex, "doc_comment_re"),
        pub_const_re=_compile_pattern(regex, "pub_const_re"),
        pub_fn_re=_compile_pattern(regex, "pub_fn_re"),
        method_fn_re=_compile_pattern(regex, "method_fn_re"),
        import_re=_compile_pattern(regex, "import_re"),
    )


def load_config_or_default(path: Path | None) -> ListingConfig:
    """Load `path` when given, otherwise fall back to DEFAULT_CONFIG."""
    if path is None:
        return DEFAULT_CONFIG
    return load_config(path)
