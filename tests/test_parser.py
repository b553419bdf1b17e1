"""Tests for the .rc parser and string models."""

import codecs
import tempfile
from pathlib import Path

import pytest

from rcstrings.strings import RcFileContent, RcParser, StringEntry, escape_value, unescape_value
from rcstrings.strings.textfile import TextFile, read_text_file, split_text

RC_CONTENT = '''// Microsoft Visual C++ generated resource script.
//
#include "resource.h"

#define APSTUDIO_READONLY_SYMBOLS
#include "winres.h"
#undef APSTUDIO_READONLY_SYMBOLS

STRINGTABLE
BEGIN
    IDS_APP_TITLE           "My App"
    // A comment inside the table
    IDS_HELLO               "Hello, ""World"""
    IDS_LONG
                            "Wrapped value"
    IDS_FOREIGN             "Elsewhere" // 300
END

IDD_ABOUT DIALOGEX 0, 0, 170, 62
BEGIN
    LTEXT           "About",IDC_STATIC,42,14,114,8
END
'''

HEADER_CONTENT = '''//{{NO_DEPENDENCIES}}
// Microsoft Visual C++ generated include file.
//
#define IDS_APP_TITLE                   101
#define IDS_HELLO                       102
#define IDS_LONG                        103
#define IDD_ABOUT                       104
'''


class TestStringEntry:
    """Tests for StringEntry dataclass."""

    def test_basic_entry(self):
        """Test basic entry creation."""
        entry = StringEntry(name="IDS_A", id=1, value="Hi")
        assert entry.name == "IDS_A"
        assert entry.id == 1
        assert entry.symbol == ""
        assert entry.is_foreign

    def test_entry_with_symbol(self):
        """Test an entry defined in the companion header."""
        entry = StringEntry(name="IDS_A", id=1, value="Hi", symbol="IDS_A")
        assert not entry.is_foreign

    def test_to_rc_format(self):
        """Test STRINGTABLE line formatting."""
        line = StringEntry("IDS_A", 1, "Hi", symbol="IDS_A").to_rc_format()
        assert line.startswith("    IDS_A ")
        assert line.endswith('"Hi"')
        assert line.index('"') == 28

    def test_to_rc_format_foreign(self):
        """Test foreign entries keep their id in a comment."""
        line = StringEntry("IDS_B", 300, "Elsewhere").to_rc_format()
        assert line.endswith('"Elsewhere" // 300')

    def test_escape_sequences(self):
        """Test escape sequence handling."""
        escaped = escape_value('Line1\nLine2\t"quoted"\\back')
        assert escaped == 'Line1\\nLine2\\t""quoted""\\\\back'

    def test_unescape_sequences(self):
        """Test unescaping."""
        assert unescape_value('Hello\\nWorld\\t""test""\\\\') == 'Hello\nWorld\t"test"\\'

    def test_unescape_keeps_unknown_sequences(self):
        assert unescape_value('100\\%') == '100\\%'


class TestRcParser:
    """Tests for RcParser."""

    @pytest.fixture
    def parser(self):
        """Create parser instance."""
        return RcParser()

    def test_parse_entries(self, parser):
        """Test the raw entries of the first STRINGTABLE."""
        entries = parser.parse_entries(RC_CONTENT)
        assert [e.name for e in entries] == ["IDS_APP_TITLE", "IDS_HELLO", "IDS_LONG", "IDS_FOREIGN"]
        assert entries[0].value == "My App"
        assert entries[1].value == 'Hello, ""World""'
        assert entries[2].value == "Wrapped value"
        assert entries[3].inline_id == 300
        assert entries[0].inline_id is None

    def test_parse_with_header(self, parser):
        """Test ids come from the companion header."""
        content = parser.parse(RC_CONTENT, HEADER_CONTENT)
        assert len(content) == 4
        title = content.get_by_name("IDS_APP_TITLE")
        assert title.id == 101
        assert title.symbol == "IDS_APP_TITLE"
        assert content.get_by_name("IDS_LONG").id == 103

    def test_inline_id_is_foreign(self, parser):
        """Test an id from a trailing comment marks a foreign entry."""
        content = parser.parse(RC_CONTENT, HEADER_CONTENT)
        foreign = content.get_by_name("IDS_FOREIGN")
        assert foreign.id == 300
        assert content.is_name_with_empty_fields("IDS_FOREIGN")
        assert not content.is_name_with_empty_fields("IDS_HELLO")

    def test_sibling_header_wins_over_comment(self, parser):
        """Test sibling header defines are used before inline ids."""
        content = parser.parse(RC_CONTENT, HEADER_CONTENT, ["#define IDS_FOREIGN 555\n"])
        assert content.get_by_name("IDS_FOREIGN").id == 555
        assert content.get_by_name("IDS_FOREIGN").is_foreign

    def test_parse_without_header(self, parser):
        """Test entries without any id are kept apart."""
        content = parser.parse(RC_CONTENT)
        assert len(content) == 1
        assert [name for name, _ in content.unresolved] == ["IDS_APP_TITLE", "IDS_HELLO", "IDS_LONG"]

    def test_numeric_names(self, parser):
        """Test entries identified by a number."""
        rc = 'STRINGTABLE\nBEGIN\n    200, "Numeric"\nEND\n'
        content = parser.parse(rc)
        entry = content.get_by_name("200")
        assert entry.id == 200
        assert entry.is_foreign

    def test_duplicate_ids_are_unresolved(self, parser):
        """Test a second entry with a taken id is kept without id."""
        rc = 'STRINGTABLE\nBEGIN\n    IDS_A "a"\n    IDS_B "b"\nEND\n'
        header = "#define IDS_A 1\n#define IDS_B 1\n"
        content = parser.parse(rc, header)
        assert content.get_by_name("IDS_A").id == 1
        assert content.get_by_name("IDS_B") is None
        assert content.unresolved == [("IDS_B", "b")]

    def test_no_string_table(self, parser):
        """Test a file without STRINGTABLE."""
        assert parser.parse_entries('#include "resource.h"\n') == []

    def test_begin_on_table_line(self, parser):
        """Test STRINGTABLE and BEGIN on one line."""
        rc = 'STRINGTABLE DISCARDABLE BEGIN\n    IDS_A "a"\nEND\n'
        assert [e.name for e in parser.parse_entries(rc)] == ["IDS_A"]

    def test_braces(self, parser):
        """Test blocks delimited with braces."""
        rc = 'STRINGTABLE\n{\n    IDS_A, "a"\n}\n'
        assert [e.name for e in parser.parse_entries(rc)] == ["IDS_A"]

    def test_parse_defines(self, parser):
        """Test #define extraction."""
        defines = parser.parse_defines(HEADER_CONTENT)
        assert defines == {
            "IDS_APP_TITLE": 101,
            "IDS_HELLO": 102,
            "IDS_LONG": 103,
            "IDD_ABOUT": 104,
        }

    def test_include_names(self, parser):
        """Test quoted includes are listed."""
        rc = RC_CONTENT + '#include <afxres.h>\n'
        assert parser.include_names(rc) == ["resource.h", "winres.h"]

    def test_render_replaces_table_body(self, parser):
        """Test the STRINGTABLE body is rewritten in id order."""
        content = parser.parse(RC_CONTENT, HEADER_CONTENT)
        content.add_resource("Added", "IDS_ADDED", 105)

        rendered = parser.render(split_text(RC_CONTENT), content)
        lines = rendered.lines
        begin = lines.index("STRINGTABLE") + 1
        body = lines[begin + 1:lines.index("END")]

        assert [line.split()[0] for line in body] == [
            "IDS_APP_TITLE", "IDS_HELLO", "IDS_LONG", "IDS_ADDED", "IDS_FOREIGN"
        ]
        assert body[-1].endswith("// 300")
        # Everything outside the table is kept
        assert lines[:begin] == split_text(RC_CONTENT).lines[:begin]
        assert '    LTEXT           "About",IDC_STATIC,42,14,114,8' in lines

    def test_render_roundtrip(self, parser):
        """Test a rendered file parses back to the same model."""
        content = parser.parse(RC_CONTENT, HEADER_CONTENT)
        rendered = parser.render(split_text(RC_CONTENT), content)
        reparsed = parser.parse(rendered.text, HEADER_CONTENT)

        assert len(reparsed) == len(content)
        for entry in content.entries():
            other = reparsed.get_by_name(entry.name)
            assert (other.id, other.value, other.symbol) == (entry.id, entry.value, entry.symbol)

    def test_render_unresolved_last(self, parser):
        """Test entries without id are written after the others."""
        content = parser.parse(RC_CONTENT)
        body = parser.format(content)
        assert body[0].split()[0] == "IDS_FOREIGN"
        assert body[1:] == [
            '    IDS_APP_TITLE "My App"',
            '    IDS_HELLO "Hello, ""World"""',
            '    IDS_LONG "Wrapped value"',
        ]

    def test_render_without_table(self, parser):
        """Test a STRINGTABLE is appended when missing."""
        content = RcFileContent()
        content.add_resource("a", "IDS_A", 1)
        rendered = parser.render(split_text('#include "resource.h"\n'), content)
        assert rendered.lines[-3:] == ["BEGIN", rendered.lines[-2], "END"]
        assert "STRINGTABLE" in rendered.lines
        assert rendered.lines[-2].strip().startswith("IDS_A")

    def test_file_io_utf16_crlf(self, parser):
        """Test encoding and newlines are kept when writing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "app.rc"
            text = RC_CONTENT.replace("\n", "\r\n")
            path.write_bytes(text.encode("utf-16"))

            header = Path(tmpdir) / "resource.h"
            header.write_text(HEADER_CONTENT, encoding="utf-8")

            content = parser.parse_file(path, header)
            content.update_value("IDS_HELLO", "Bonjour")
            parser.write(content, path)

            raw = path.read_bytes()
            assert raw.startswith(codecs.BOM_UTF16_LE) or raw.startswith(codecs.BOM_UTF16_BE)
            document = read_text_file(path)
            assert document.encoding == "utf-16"
            assert document.newline == "\r\n"
            assert parser.parse_file(path, header).get_by_name("IDS_HELLO").value == "Bonjour"

    def test_read_sources(self, parser):
        """Test missing headers are left out of the sources."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "app.rc"
            path.write_text(RC_CONTENT, encoding="utf-8")
            sibling = Path(tmpdir) / "shared.h"
            sibling.write_text("#define IDS_FOREIGN 555\n", encoding="utf-8")

            rc_text, header_text, siblings = parser.read_sources(
                path, Path(tmpdir) / "resource.h", [sibling, Path(tmpdir) / "gone.h"]
            )

            assert rc_text == RC_CONTENT
            assert header_text is None
            assert siblings == ["#define IDS_FOREIGN 555\n"]

    def test_parse_file_missing_header(self, parser):
        """Test a missing companion header is treated as empty."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "app.rc"
            path.write_text(RC_CONTENT, encoding="utf-8")
            content = parser.parse_file(path, Path(tmpdir) / "resource.h")
            assert len(content.unresolved) == 3


class TestTextFile:
    """Tests for newline handling."""

    def test_split_keeps_trailing_state(self):
        assert split_text("a\nb").trailing_newline is False
        assert split_text("a\nb\n").lines == ["a", "b"]

    def test_empty_text(self):
        document = split_text("")
        assert document.lines == []
        assert document.text == ""

    def test_crlf(self):
        document = split_text("a\r\nb\r\n")
        assert document.lines == ["a", "b"]
        assert document.text == "a\r\nb\r\n"

    def test_text_roundtrip(self):
        document = TextFile(lines=["x", ""], newline="\n", trailing_newline=True)
        assert document.text == "x\n\n"

    def test_mixed_newlines(self):
        """Test LF lines inside a CRLF file are split too."""
        document = split_text("#define IDS_A 1\r\n#define IDS_B 2\n#define IDS_C 3\r\n")
        assert document.lines == ["#define IDS_A 1", "#define IDS_B 2", "#define IDS_C 3"]
        assert document.newline == "\r\n"
        assert document.trailing_newline

    def test_mostly_lf(self):
        document = split_text("a\nb\nc\r\nd")
        assert document.lines == ["a", "b", "c", "d"]
        assert document.newline == "\n"
        assert not document.trailing_newline

    def test_mixed_newlines_defines(self):
        """Test every define of a mixed newline header is found."""
        header = "#define IDS_A 1\r\n#define IDS_B 2\n#define IDS_C 3\r\n"
        assert RcParser().parse_defines(header) == {"IDS_A": 1, "IDS_B": 2, "IDS_C": 3}
