"""Unit tests for the keysymdef.h table generator"""

from pathlib import Path

import pytest

from rtpad.keysyms import KEYSYMS_BY_CODEPOINT, UNICODE_KEYSYM_OFFSET, keysym_forCodepoint
from rtpad.keysyms.generator import (
    KEYSYMDEF_HEADER,
    OVERRIDE_KEYSYMS,
    keysymLine_parse,
    keysymTable_build,
    keysymTable_generate,
    keysymTable_render,
    main,
)

HEADER_LINES = [
    "/* keysymdef.h excerpt */\n",
    "#ifdef XK_MISCELLANY\n",
    "#define XK_BackSpace                     0xff08  /* Back space, back char */\n",
    "#define XK_Tab                           0xff09\n",
    "#define XK_Escape                        0xff1b\n",
    "#define XK_Home                          0xff50\n",
    "#endif /* XK_MISCELLANY */\n",
    "#define XK_space                         0x0020  /* U+0020 SPACE */\n",
    "#define XK_A                             0x0041  /* U+0041 LATIN CAPITAL LETTER A */\n",
    "#define XK_a                             0x0061  /* U+0061 LATIN SMALL LETTER A */\n",
    "#define XK_ydiaeresis                    0x00ff  /* U+00FF LATIN SMALL LETTER Y WITH DIAERESIS */\n",
    "#define XK_Aogonek                       0x01a1  /* U+0104 LATIN CAPITAL LETTER A WITH OGONEK */\n",
    "#define XK_KP_Space                      0xff80  /*<U+0020 SPACE>*/\n",
    "#define XK_quoteright                    0x0027  /* deprecated */\n",
]


class TestKeysymLineParse:
    """Test the header line grammar"""

    def test_annotated_line(self):
        """Test U+ annotation is extracted"""
        assert keysymLine_parse(HEADER_LINES[8]) == ("XK_A", 0x41, 0x41)

    def test_unannotated_line(self):
        """Test definition without comment has no code point"""
        assert keysymLine_parse(HEADER_LINES[3]) == ("XK_Tab", 0xFF09, None)

    def test_comment_without_annotation(self):
        """Test comment without leading U+ has no code point"""
        assert keysymLine_parse(HEADER_LINES[2]) == ("XK_BackSpace", 0xFF08, None)

    def test_annotation_must_lead_comment(self):
        """Test U+ not at the start of the comment is ignored"""
        assert keysymLine_parse(HEADER_LINES[12]) == ("XK_KP_Space", 0xFF80, None)

    def test_non_define_lines_skipped(self):
        """Test malformed and unrelated lines do not parse"""
        assert keysymLine_parse(HEADER_LINES[0]) is None
        assert keysymLine_parse(HEADER_LINES[1]) is None
        assert keysymLine_parse("#define XK_Bad 0xZZ\n") is None
        assert keysymLine_parse("#define XK_Upper 0xFF08\n") is None
        assert keysymLine_parse("") is None


class TestKeysymTableBuild:
    """Test table construction rules"""

    def test_header_excerpt(self):
        """Test overrides and annotations both contribute"""
        table = keysymTable_build(HEADER_LINES)

        assert table == {
            0x08: 0xFF08,
            0x09: 0xFF09,
            0x1B: 0xFF1B,
            0x20: 0x20,
            0x41: 0x41,
            0x61: 0x61,
            0xFF: 0xFF,
        }

    def test_first_line_wins_on_collision(self):
        """Test a later line for the same code point is dropped"""
        lines = [
            "#define XK_first                       0x1001  /* U+0041 FIRST */\n",
            "#define XK_second                      0x1002  /* U+0041 SECOND */\n",
        ]
        assert keysymTable_build(lines) == {0x41: 0x1001}
        assert keysymTable_build(list(reversed(lines))) == {0x41: 0x1002}

    def test_override_wins_over_annotation(self):
        """Test override code point replaces the header annotation"""
        lines = ["#define XK_Return                      0xff0d  /* U+0041 BOGUS */\n"]
        assert keysymTable_build(lines) == {0x0D: 0xFF0D}

    def test_override_collides_with_annotation(self):
        """Test first-wins also applies between override and annotation"""
        lines = [
            "#define XK_ctrl_h                      0x1008  /* U+0008 BACKSPACE */\n",
            "#define XK_BackSpace                   0xff08\n",
        ]
        assert keysymTable_build(lines) == {0x08: 0x1008}

    def test_codepoints_above_bound_dropped(self):
        """Test code points above 0xFF never appear"""
        table = keysymTable_build(HEADER_LINES)
        assert 0x0104 not in table
        assert all(codepoint <= 0xFF for codepoint in table)

    def test_explicit_configuration(self):
        """Test overrides and bound are parameters, not hidden constants"""
        lines = [
            "#define XK_Home                        0xff50\n",
            "#define XK_Aogonek                     0x01a1  /* U+0104 A WITH OGONEK */\n",
        ]
        table = keysymTable_build(lines, overrides={"XK_Home": 0x02}, max_codepoint=0x1FF)
        assert table == {0x02: 0xFF50, 0x0104: 0x01A1}

    def test_default_overrides_are_control_characters(self):
        """Test override table covers the unannotated control keys"""
        assert OVERRIDE_KEYSYMS["XK_BackSpace"] == 0x08
        assert OVERRIDE_KEYSYMS["XK_Escape"] == 0x1B
        assert all(codepoint < 0x20 for codepoint in OVERRIDE_KEYSYMS.values())


class TestKeysymTableRender:
    """Test generated module output"""

    def test_sorted_ascending(self):
        """Test entries are emitted in ascending code point order"""
        content = keysymTable_render({0x61: 0x61, 0x08: 0xFF08, 0x20: 0x20})
        entry_lines = [line for line in content.splitlines() if line.startswith("    0x")]
        assert entry_lines == [
            "    0x0008: 0x0000ff08,",
            "    0x0020: 0x00000020,",
            "    0x0061: 0x00000061,",
        ]

    def test_render_is_deterministic(self):
        """Test same input renders byte-identical output"""
        first = keysymTable_render(keysymTable_build(HEADER_LINES))
        second = keysymTable_render(keysymTable_build(list(HEADER_LINES)))
        assert first == second

    def test_render_is_valid_python(self):
        """Test rendered module evaluates to the same mapping"""
        table = keysymTable_build(HEADER_LINES)
        namespace: dict = {}
        exec(compile(keysymTable_render(table), "<generated>", "exec"), namespace)
        assert namespace["KEYSYMS_BY_CODEPOINT"] == table


class TestKeysymTableGenerate:
    """Test file level generation"""

    def test_generate_writes_module(self, tmp_path):
        """Test header file is turned into a generated module"""
        header = tmp_path / "keysymdef.h"
        header.write_text("".join(HEADER_LINES))
        output = tmp_path / "generated.py"

        count = keysymTable_generate(header, output)

        assert count == 7
        assert output.read_text() == keysymTable_render(keysymTable_build(HEADER_LINES))

    def test_generate_twice_is_byte_identical(self, tmp_path):
        """Test regeneration produces identical bytes"""
        header = tmp_path / "keysymdef.h"
        header.write_text("".join(HEADER_LINES))
        first = tmp_path / "first.py"
        second = tmp_path / "second.py"

        keysymTable_generate(header, first)
        keysymTable_generate(header, second)

        assert first.read_bytes() == second.read_bytes()

    def test_unreadable_header_is_fatal(self, tmp_path):
        """Test missing header raises instead of writing a table"""
        output = tmp_path / "generated.py"
        with pytest.raises(OSError):
            keysymTable_generate(tmp_path / "missing.h", output)
        assert not output.exists()

    def test_main_reports_missing_header(self, tmp_path, capsys):
        """Test command line entry exits non-zero on unreadable header"""
        status = main(["--header", str(tmp_path / "missing.h"), "--output", str(tmp_path / "o.py")])
        assert status == 1
        assert "Error:" in capsys.readouterr().err


class TestGeneratedTable:
    """Test the checked-in generated table"""

    def test_invariants(self):
        """Test table is bounded and contains the override entries"""
        assert all(0 <= codepoint <= 0xFF for codepoint in KEYSYMS_BY_CODEPOINT)
        assert list(KEYSYMS_BY_CODEPOINT) == sorted(KEYSYMS_BY_CODEPOINT)
        assert KEYSYMS_BY_CODEPOINT[0x08] == 0xFF08
        assert KEYSYMS_BY_CODEPOINT[0x0D] == 0xFF0D
        assert KEYSYMS_BY_CODEPOINT[ord("A")] == 0x41

    def test_lookup_falls_back_to_unicode_keysym(self):
        """Test code points outside the table use the Unicode keysym range"""
        assert keysym_forCodepoint(ord("a")) == 0x61
        assert keysym_forCodepoint(0x20AC) == UNICODE_KEYSYM_OFFSET + 0x20AC

    @pytest.mark.requires_keysymdef
    def test_matches_system_header(self):
        """Test checked-in module matches a fresh build from the system header"""
        header = Path(KEYSYMDEF_HEADER)
        if not header.exists():
            pytest.skip("keysymdef.h not installed")
        generated = Path(__file__).resolve().parents[2] / "rtpad" / "keysyms" / "generated.py"
        with open(header, "r", encoding="utf-8") as f:
            table = keysymTable_build(f)
        if table != KEYSYMS_BY_CODEPOINT:
            pytest.skip("system keysymdef.h differs from the one the table was built from")
        assert generated.read_text() == keysymTable_render(table)
