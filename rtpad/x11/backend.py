"""X11 input backend using the XTest extension"""

from __future__ import annotations

import logging
from typing import Any, Optional

from Xlib import X
from Xlib import display as xdisplay
from Xlib import error as xerror
from Xlib.display import Display
from Xlib.ext import xtest

from rtpad.common.config import X11Config
from rtpad.common.errors import PluginError, UnsupportedPlatformError
from rtpad.common.types import PointerButton
from rtpad.input.guarded import GuardedHandle
from rtpad.keysyms import keysym_forCodepoint

logger = logging.getLogger(__name__)

# X core pointer buttons for the scroll directions
SCROLL_UP = 4
SCROLL_DOWN = 5
SCROLL_LEFT = 6
SCROLL_RIGHT = 7


def spareKeycode_find(display: Display) -> Optional[int]:
    """
    Find a keycode with no keysyms bound, used for remapping.

    Args:
        display: Open X11 display.

    Returns:
        Highest unbound keycode, or None if every keycode is bound.
    """
    min_keycode: int = display.display.info.min_keycode
    max_keycode: int = display.display.info.max_keycode
    mapping = display.get_keyboard_mapping(min_keycode, max_keycode - min_keycode + 1)
    for offset in range(len(mapping) - 1, -1, -1):
        if not any(mapping[offset]):
            return min_keycode + offset
    return None


class X11Plugin:
    """Input backend injecting through XTest on an X11 display"""

    def __init__(self, display: Display, config: Optional[X11Config] = None) -> None:
        """
        Initialize plugin around an open display.

        Args:
            display: Open X11 display with XTest; the plugin owns it.
            config: X11 settings.
        """
        self._config: X11Config = config or X11Config()
        self._display: GuardedHandle[Display] = GuardedHandle(
            display, closed_message="X11 connection closed"
        )
        self._spare_keycode: Optional[int] = spareKeycode_find(display)
        self._keysyms_per_keycode: int = max(1, len(display.get_keyboard_mapping(
            display.display.info.min_keycode, 1
        )[0]))
        self._scroll_x: float = 0.0
        self._scroll_y: float = 0.0

    @classmethod
    def plugin_init(cls, config: Optional[X11Config] = None) -> "X11Plugin":
        """
        Open the X11 display and check for XTest.

        Args:
            config: X11 settings.

        Returns:
            Ready plugin.

        Raises:
            UnsupportedPlatformError: If no display or no XTest is available.
        """
        config = config or X11Config()
        try:
            display = xdisplay.Display(config.display)
        except (xerror.DisplayError, OSError) as e:
            raise UnsupportedPlatformError(f"cannot open X11 display: {e}") from e

        if display.query_extension("XTEST") is None:
            display.close()
            raise UnsupportedPlatformError("XTEST extension not available")

        try:
            plugin = cls(display, config)
        except BaseException:
            display.close()
            raise
        logger.info("Using X11 display %s", display.get_display_name())
        return plugin

    def connection_close(self) -> None:
        """
        Close the display; injections fail from now on.

        Raises:
            ConnectionClosedError: If already closed.
        """
        self._display.handle_release(lambda display: display.close())

    def _key_tap(self, display: Display, keycode: int) -> None:
        """Press and release one keycode."""
        xtest.fake_input(display, X.KeyPress, detail=keycode)
        xtest.fake_input(display, X.KeyRelease, detail=keycode)
        display.sync()

    def _keysym_type(self, display: Display, keysym: int) -> None:
        """
        Type one keysym, remapping the spare keycode when needed.

        Args:
            display: Open X11 display.
            keysym: Keysym to type.

        Raises:
            PluginError: If no keycode can produce the keysym.
        """
        keycode: int = display.keysym_to_keycode(keysym)
        if keycode and display.keycode_to_keysym(keycode, 0) == keysym:
            self._key_tap(display, keycode)
            return

        if self._spare_keycode is None:
            raise PluginError(f"no keycode available for keysym 0x{keysym:x}")
        width = self._keysyms_per_keycode
        display.change_keyboard_mapping(self._spare_keycode, [(keysym,) * width])
        display.sync()
        try:
            self._key_tap(display, self._spare_keycode)
        finally:
            display.change_keyboard_mapping(self._spare_keycode, [(X.NoSymbol,) * width])
            display.sync()

    def keyboardText_inject(self, text: str) -> None:
        """
        Type text, one press and release per character.

        Args:
            text: Text to type.
        """
        with self._display.handle_use() as display:
            for char in text:
                self._keysym_type(display, keysym_forCodepoint(ord(char)))

    def pointerButton_inject(self, button: int, pressed: bool) -> None:
        """
        Press or release a pointer button.

        Args:
            button: Button id (1=left, 2=middle, 3=right).
            pressed: True for press, False for release.

        Raises:
            UnsupportedButtonError: For any other button id.
        """
        with self._display.handle_use() as display:
            detail = PointerButton.fromId_get(button).value
            event_type = X.ButtonPress if pressed else X.ButtonRelease
            xtest.fake_input(display, event_type, detail=detail)
            display.sync()

    def pointerMove_inject(self, delta_x: float, delta_y: float) -> None:
        """
        Move the pointer relative to its current position.

        Args:
            delta_x: Horizontal displacement.
            delta_y: Vertical displacement.
        """
        with self._display.handle_use() as display:
            pointer_data: Any = display.screen().root.query_pointer()
            new_x = pointer_data.root_x + int(round(delta_x))
            new_y = pointer_data.root_y + int(round(delta_y))
            # XTest relative motion is unreliable; move absolutely
            xtest.fake_input(display, X.MotionNotify, detail=0, x=new_x, y=new_y)
            display.sync()

    def _button_click(self, display: Display, button: int, count: int) -> None:
        """Click a core pointer button ``count`` times."""
        for _ in range(count):
            xtest.fake_input(display, X.ButtonPress, detail=button)
            xtest.fake_input(display, X.ButtonRelease, detail=button)

    def pointerScroll_inject(self, delta_x: float, delta_y: float) -> None:
        """
        Scroll by axis deltas, one wheel click per `scroll_step` units.

        Args:
            delta_x: Horizontal scroll displacement.
            delta_y: Vertical scroll displacement.
        """
        step = self._config.scroll_step
        with self._display.handle_use() as display:
            self._scroll_x += delta_x
            self._scroll_y += delta_y
            clicks_x = int(self._scroll_x / step)
            clicks_y = int(self._scroll_y / step)
            self._scroll_x -= clicks_x * step
            self._scroll_y -= clicks_y * step

            if clicks_y:
                self._button_click(display, SCROLL_DOWN if clicks_y > 0 else SCROLL_UP, abs(clicks_y))
            if clicks_x:
                self._button_click(display, SCROLL_RIGHT if clicks_x > 0 else SCROLL_LEFT, abs(clicks_x))
            if clicks_x or clicks_y:
                display.sync()

    def pointerScroll_finish(self) -> None:
        """End the scroll gesture and drop leftover partial steps."""
        with self._display.handle_use():
            self._scroll_x = 0.0
            self._scroll_y = 0.0
