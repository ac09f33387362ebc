"""Build the Unicode code point to X11 keysym table from keysymdef.h.

The generated module is checked in as ``rtpad/keysyms/generated.py`` and
regenerated with::

    python -m rtpad.keysyms.generator

Only code points up to ``MAX_MAPPED_CODEPOINT`` are kept; the table serves
single-byte text input. When two header lines resolve to the same code point
the first one in file order wins, so the output depends on header ordering
for colliding code points.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Iterable, Mapping, Optional

from rtpad.common.app_logging import logging_setup

logger = logging.getLogger(__name__)

KEYSYMDEF_HEADER: str = "/usr/include/X11/keysymdef.h"
GENERATED_MODULE: Path = Path(__file__).resolve().with_name("generated.py")
MAX_MAPPED_CODEPOINT: int = 0xFF

# Control characters the header does not annotate with U+XXXX.
OVERRIDE_KEYSYMS: Mapping[str, int] = {
    "XK_BackSpace": 0x08,
    "XK_Tab": 0x09,
    "XK_Linefeed": 0x0A,
    "XK_Clear": 0x0B,
    "XK_Return": 0x0D,
    "XK_Pause": 0x13,
    "XK_Scroll_Lock": 0x14,
    "XK_Sys_Req": 0x15,
    "XK_Escape": 0x1B,
}

DEFINE_PATTERN = re.compile(
    r"^#define "
    r"(XK_[a-zA-Z_0-9]+)\s+"  # keysym name
    r"0x([0-9a-f]+)\s*"  # keysym
    r"(?:/\*\s*(?:U\+([0-9A-F]{4,6}))?.*\*/\s*)?"  # unicode annotation (optional)
    r"$"
)

_MODULE_HEADER = (
    "# Code generated by rtpad.keysyms.generator from keysymdef.h; DO NOT EDIT.\n"
    '"""Unicode code point to X11 keysym table."""\n'
    "\n"
    "KEYSYMS_BY_CODEPOINT: dict[int, int] = {\n"
)


def keysymLine_parse(line: str) -> Optional[tuple[str, int, Optional[int]]]:
    """
    Parse one keysymdef.h line.

    Args:
        line: Header line, with or without trailing newline.

    Returns:
        Tuple of (name, keysym, annotated code point or None), or None when the
        line is not a keysym definition.
    """
    match = DEFINE_PATTERN.match(line.rstrip("\r\n"))
    if match is None:
        return None
    name, keysym_hex, unicode_hex = match.groups()
    codepoint: Optional[int] = int(unicode_hex, 16) if unicode_hex else None
    return name, int(keysym_hex, 16), codepoint


def keysymTable_build(
    lines: Iterable[str],
    overrides: Mapping[str, int] = OVERRIDE_KEYSYMS,
    max_codepoint: int = MAX_MAPPED_CODEPOINT,
) -> dict[int, int]:
    """
    Build the code point to keysym mapping.

    Args:
        lines: keysymdef.h lines in file order.
        overrides: Keysym name to code point; wins over header annotations.
        max_codepoint: Largest code point kept in the table.

    Returns:
        Mapping of code point to keysym. The first line for a code point wins.
    """
    table: dict[int, int] = {}
    for line in lines:
        parsed = keysymLine_parse(line)
        if parsed is None:
            continue
        name, keysym, annotated = parsed

        codepoint: Optional[int] = overrides.get(name, annotated)
        if codepoint is None:
            continue
        if codepoint > max_codepoint:
            continue
        if codepoint in table:
            continue
        table[codepoint] = keysym
    return table


def keysymTable_render(table: Mapping[int, int]) -> str:
    """
    Render the table as a Python module, ascending by code point.

    Args:
        table: Code point to keysym mapping.

    Returns:
        Module source text.
    """
    body = "".join(
        f"    0x{codepoint:04x}: 0x{table[codepoint]:08x},\n" for codepoint in sorted(table)
    )
    return _MODULE_HEADER + body + "}\n"


def keysymTable_generate(
    header_path: Path | str = KEYSYMDEF_HEADER,
    output_path: Path | str = GENERATED_MODULE,
    overrides: Mapping[str, int] = OVERRIDE_KEYSYMS,
    max_codepoint: int = MAX_MAPPED_CODEPOINT,
) -> int:
    """
    Read the header, build the table and write the generated module.

    Args:
        header_path: keysymdef.h location.
        output_path: Generated module location.
        overrides: Keysym name to code point overrides.
        max_codepoint: Largest code point kept in the table.

    Returns:
        Number of table entries written.

    Raises:
        OSError: If the header cannot be read or the output cannot be written.
    """
    with open(header_path, "r", encoding="utf-8") as header:
        table = keysymTable_build(header, overrides=overrides, max_codepoint=max_codepoint)

    content = keysymTable_render(table)
    with open(output_path, "w", encoding="utf-8") as output:
        output.write(content)

    logger.info("Wrote %d keysyms from %s to %s", len(table), header_path, output_path)
    return len(table)


def arguments_parse(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse generator command line arguments

    Args:
        argv: Argument list, defaults to sys.argv.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="rtpad-keysyms",
        description="Generate the Unicode to X11 keysym table from keysymdef.h",
    )
    parser.add_argument("--header", type=str, default=KEYSYMDEF_HEADER, help="keysymdef.h path")
    parser.add_argument(
        "--output", type=str, default=str(GENERATED_MODULE), help="Generated module path"
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Entry point for ``python -m rtpad.keysyms.generator``

    Args:
        argv: Argument list, defaults to sys.argv.

    Returns:
        Process exit status.
    """
    args = arguments_parse(argv)
    logging_setup("INFO", "%(levelname)s: %(message)s")
    try:
        keysymTable_generate(args.header, args.output)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
