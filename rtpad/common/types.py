"""Common types and constants for rtpad"""

from enum import Enum, IntFlag

from rtpad.common.errors import UnsupportedButtonError


class DeviceType(IntFlag):
    """Device classes negotiated with the RemoteDesktop portal"""
    KEYBOARD = 1
    POINTER = 2


class KeyState(Enum):
    """Key and button states as sent to the portal"""
    RELEASED = 0
    PRESSED = 1


class PointerButton(Enum):
    """Pointer button ids accepted by every backend"""
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3

    @classmethod
    def fromId_get(cls, button: int) -> "PointerButton":
        """
        Resolve a button id to a PointerButton.

        Args:
            button: Button id (1=left, 2=middle, 3=right).

        Returns:
            Matching PointerButton.

        Raises:
            UnsupportedButtonError: For any other id.
        """
        try:
            return cls(button)
        except ValueError:
            raise UnsupportedButtonError("unsupported pointer button") from None


class SessionPhase(Enum):
    """Lifecycle of a portal session"""
    UNPROBED = "unprobed"
    NEGOTIATING = "negotiating"
    STARTED = "started"
    CLOSED = "closed"


DEVICES_REQUIRED: DeviceType = DeviceType.KEYBOARD | DeviceType.POINTER
"""Both classes must be offered and granted for a usable session"""


def devicesSufficient_check(devices: int) -> bool:
    """Check that a device bitmask contains both keyboard and pointer"""
    return (int(devices) & DEVICES_REQUIRED) == DEVICES_REQUIRED
