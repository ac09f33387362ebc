"""Backend protocol for keyboard and pointer injection."""

from __future__ import annotations

from typing import Protocol


class InputPlugin(Protocol):
    """Abstract input injection backend.

    Construction is backend-specific and raises ``UnsupportedPlatformError``
    when the backend cannot work in this environment. Every operation raises
    a ``PluginError`` subclass on failure, and ``ConnectionClosedError`` once
    ``connection_close`` has succeeded.
    """

    def keyboardText_inject(self, text: str) -> None:
        """
        Type text, pressing and releasing one key per character in order.

        Args:
            text: Text to type.
        """

    def pointerButton_inject(self, button: int, pressed: bool) -> None:
        """
        Press or release a pointer button.

        Args:
            button: Button id (1=left, 2=middle, 3=right).
            pressed: True for press, False for release.
        """

    def pointerMove_inject(self, delta_x: float, delta_y: float) -> None:
        """
        Move the pointer relative to its current position.

        Args:
            delta_x: Horizontal displacement.
            delta_y: Vertical displacement.
        """

    def pointerScroll_inject(self, delta_x: float, delta_y: float) -> None:
        """
        Scroll by axis deltas as part of a scroll gesture.

        Args:
            delta_x: Horizontal scroll displacement.
            delta_y: Vertical scroll displacement.
        """

    def pointerScroll_finish(self) -> None:
        """End the current scroll gesture."""

    def connection_close(self) -> None:
        """Release the backend connection. A second call fails."""
