"""Unicode code point to X11 keysym lookup."""

from rtpad.keysyms.generated import KEYSYMS_BY_CODEPOINT

UNICODE_KEYSYM_OFFSET = 0x01000000


def keysym_forCodepoint(codepoint: int) -> int:
    """
    Resolve the X11 keysym for a Unicode code point.

    Code points outside the generated table use the Unicode keysym range.

    Args:
        codepoint: Unicode code point.

    Returns:
        X11 keysym.
    """
    keysym = KEYSYMS_BY_CODEPOINT.get(codepoint)
    if keysym is not None:
        return keysym
    return UNICODE_KEYSYM_OFFSET + codepoint


__all__ = ["KEYSYMS_BY_CODEPOINT", "UNICODE_KEYSYM_OFFSET", "keysym_forCodepoint"]
