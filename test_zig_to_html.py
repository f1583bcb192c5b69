# test_zig_to_html.py
#
# Run:
#   python -m unittest -v

import contextlib
import io
import re
import tempfile
import unittest
from pathlib import Path

import zig_to_html as m
from config_loader import DEFAULT_CONFIG, ListingConfig
from zig_parser import ListingEvent


def render(lines, logical_path="array_list.zig", cfg=DEFAULT_CONFIG):
    out = io.StringIO()
    m.render_listing(lines, logical_path, cfg, out)
    return out.getvalue()


def body_of(document):
    """Everything between the page heading and the closing block."""
    start = document.index("</h1>\n") + len("</h1>\n")
    end = document.rindex(m.close_html_document())
    return document[start:end]


def code_cells(document):
    return re.findall(r'<td class="code">\n(.*?)(?=</td>)', document, re.DOTALL)


def escaping_config():
    cfg = ListingConfig(**vars(DEFAULT_CONFIG))
    cfg.escape_html = True
    return cfg


class TestBoilerplate(unittest.TestCase):
    def test_title_and_stylesheet_at_root(self):
        doc = render([], "std.zig")
        self.assertTrue(doc.startswith("<!DOCTYPE html>\n"))
        self.assertIn("<title>std.zig - Zig standard library</title>", doc)
        self.assertIn('<link rel="stylesheet" href="styles.css">', doc)
        self.assertIn('<a href="std.zig.html">std</a> /', doc)

    def test_nested_logical_path_prefix(self):
        doc = render([], "fmt/parse/float.zig")
        self.assertIn('href="../../styles.css"', doc)
        self.assertIn('<a href="../../std.zig.html">std</a>', doc)
        self.assertIn("  fmt/parse/float.zig\n</h1>", doc)

    def test_empty_file_is_header_and_footer(self):
        doc = render([])
        self.assertEqual(doc, m.open_html_document("array_list.zig", DEFAULT_CONFIG) + m.close_html_document())
        self.assertTrue(doc.endswith("</td></tr>\n</tbody></table>\n</body>\n</html>\n"))

    def test_site_title_from_config(self):
        cfg = ListingConfig(**vars(DEFAULT_CONFIG))
        cfg.site_title = "My lib"
        self.assertIn("<title>a.zig - My lib</title>", render([], "a.zig", cfg))


class TestFragments(unittest.TestCase):
    def test_new_chunk_without_class(self):
        self.assertEqual(m.new_chunk(), '</td></tr>\n<tr><td class="doc">\n')

    def test_new_chunk_with_class(self):
        self.assertEqual(m.new_chunk("method"), '</td></tr>\n<tr><td class="doc method">\n')

    def test_open_code_cell(self):
        self.assertEqual(m.open_code_cell(), '</td>\n<td class="code">\n')

    def test_doc_comment_event_renders_nothing(self):
        event = ListingEvent(type="doc_comment", data={"text": " hi"})
        self.assertEqual(m.render_event(event, DEFAULT_CONFIG), "")


class TestListing(unittest.TestCase):
    def test_doc_then_function(self):
        body = body_of(render(["/// Hello", "pub fn foo() void {", "}"]))
        self.assertEqual(
            body,
            "<h2>foo()</h2>\n"
            "<p> Hello</p>\n"
            '</td>\n<td class="code">\n'
            "pub fn foo() void {\n"
            "}\n",
        )

    def test_const_import_link(self):
        body = body_of(render(['pub const Foo = @import("foo.zig");']))
        self.assertIn('<h2>Foo</h2>\n<a href="foo.zig.html">foo.zig</a>\n', body)

    def test_nested_import_link(self):
        body = body_of(render(['pub const parse = @import("fmt/parse.zig");']))
        self.assertIn('<a href="fmt/parse.zig.html">fmt/parse.zig</a>', body)

    def test_method_after_open_code(self):
        body = body_of(render(["const S = struct {", "    pub fn bar() void {", "    }", "};"]))
        self.assertEqual(
            body,
            '</td>\n<td class="code">\n'
            "const S = struct {\n"
            '</td></tr>\n<tr><td class="doc method">\n'
            "<h2>bar</h2>\n"
            '</td>\n<td class="code">\n'
            "    pub fn bar() void {\n"
            "    }\n"
            "};\n",
        )

    def test_const_after_open_code_uses_value_class(self):
        body = body_of(render(["const a = 1;", "pub const b = 2;"]))
        self.assertIn('<tr><td class="doc value">\n<h2>b</h2>\n', body)

    def test_function_after_open_code_has_plain_class(self):
        body = body_of(render(["const a = 1;", "pub fn b() void {}"]))
        self.assertIn('<tr><td class="doc">\n<h2>b()</h2>\n', body)

    def test_module_doc_flushed_before_first_code(self):
        body = body_of(render(["//! Module", "//!", "//! More", 'const std = @import("std");']))
        self.assertEqual(
            body,
            "<p> Module\n<br><br>\n More</p>\n"
            '</td>\n<td class="code">\n'
            'const std = @import("std");\n',
        )

    def test_trailing_doc_is_dropped(self):
        doc = render(["x", "/// never attached"])
        self.assertNotIn("never attached", doc)

    def test_code_is_written_verbatim_by_default(self):
        body = body_of(render(["const a = b < c and d > e;"]))
        self.assertIn("const a = b < c and d > e;\n", body)

    def test_escape_html_option(self):
        cfg = escaping_config()
        body = body_of(render(["/// a < b", "const a = b < c;"], cfg=cfg))
        self.assertIn("<p> a &lt; b</p>", body)
        self.assertIn("const a = b &lt; c;\n", body)

    def test_code_cells_hold_every_non_doc_line(self):
        lines = [
            "//! Top level docs",
            'const std = @import("std");',
            "",
            "/// A list.",
            "pub fn ArrayList(comptime T: type) type {",
            "    return struct {",
            "        /// Append an item.",
            "        pub fn append(self: *Self, item: T) !void {",
            "            _ = item;",
            "        }",
            "    };",
            "}",
            "///",
            'pub const Foo = @import("foo.zig");',
            "pub inline fn fast() void {}",
        ]
        doc = render(lines)
        emitted = "".join(code_cells(doc)).splitlines()
        expected = [line for line in lines if not re.match(r"^//[!/]", line)]
        self.assertEqual(emitted, expected)
        for line in lines:
            if re.match(r"^//[!/]", line):
                self.assertNotIn(line, emitted)

    def test_on_event_hook_sees_every_event(self):
        seen = []
        m.render_listing(
            ["/// a", "pub fn f() void {}"],
            "x.zig",
            DEFAULT_CONFIG,
            io.StringIO(),
            on_event=lambda n, e: seen.append((n, e.type)),
        )
        self.assertEqual(
            seen,
            [(1, "doc_comment"), (2, "declaration"), (2, "code_begin"), (2, "code_line")],
        )


class TestMain(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def write(self, rel: str, content: str) -> Path:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    def test_main_writes_document_to_stdout(self):
        src = self.write("mem.zig", "/// Copy\npub fn copy() void {}\n")
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = m.main([str(src), "mem.zig"])
        self.assertEqual(status, 0)
        self.assertIn("<h2>copy()</h2>", stdout.getvalue())
        self.assertIn("<title>mem.zig - Zig standard library</title>", stdout.getvalue())

    def test_main_writes_output_file(self):
        src = self.write("mem.zig", "const a = 1;\n")
        out = self.root / "out" / "mem.zig.html"
        out.parent.mkdir()
        status = m.main([str(src), "mem/mem.zig", "-o", str(out)])
        self.assertEqual(status, 0)
        self.assertIn('href="../styles.css"', out.read_text(encoding="utf-8"))

    def test_main_bare_cr_line_is_one_code_line(self):
        src = self.root / "cr.zig"
        src.write_bytes(b"const a = 1;\r\n// note\rpub fn x() void {}\n")
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = m.main([str(src), "cr.zig"])
        self.assertEqual(status, 0)
        doc = stdout.getvalue()
        self.assertNotIn("<h2>x()</h2>", doc)
        self.assertEqual(
            code_cells(doc),
            ["const a = 1;\r\n// note\rpub fn x() void {}\n"],
        )

    def test_main_invalid_utf8_keeps_rendering(self):
        src = self.root / "latin1.zig"
        src.write_bytes(b"const a = 1;\n// caf\xe9\nconst b = 2;\n")
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = m.main([str(src), "latin1.zig"])
        self.assertEqual(status, 0)
        doc = stdout.getvalue()
        self.assertEqual(
            code_cells(doc),
            ["const a = 1;\n// caf�\nconst b = 2;\n"],
        )
        self.assertTrue(doc.endswith(m.close_html_document()))

    def test_main_missing_file_is_fatal(self):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = m.main([str(self.root / "missing.zig"), "missing.zig"])
        self.assertEqual(status, 2)
        self.assertEqual(stdout.getvalue(), "")
        self.assertIn("[zig_to_html]", stderr.getvalue())

    def test_main_bad_config(self):
        src = self.write("a.zig", "")
        cfg = self.write("config.yml", "- not\n- a mapping\n")
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            status = m.main([str(src), "a.zig", "-c", str(cfg)])
        self.assertEqual(status, 2)
        self.assertIn("Failed to load config", stderr.getvalue())

    def test_main_debug_traces_to_stderr(self):
        src = self.write("a.zig", "pub const x = 1;\n")
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = m.main([str(src), "a.zig", "--debug"])
        self.assertEqual(status, 0)
        self.assertIn("declaration", stderr.getvalue())
        self.assertNotIn("\033[90m", stdout.getvalue())


if __name__ == "__main__":
    unittest.main(verbosity=2)
