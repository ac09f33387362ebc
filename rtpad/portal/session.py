"""RemoteDesktop portal input backend.

Session setup walks UNPROBED -> NEGOTIATING -> STARTED: probe the advertised
device types, then ``CreateSession``, ``SelectDevices`` and ``Start`` through
the request correlator. Anything that shows the portal cannot serve us is
``UnsupportedPlatformError``; a refusal at ``Start`` is ``AccessDeniedError``.
Once started, injection calls go straight to the portal under the session
handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from jeepney.io.common import RouterClosed
from jeepney.wrappers import DBusErrorResponse

from rtpad.common.config import PortalConfig
from rtpad.common.errors import AccessDeniedError, PluginError, UnsupportedPlatformError
from rtpad.common.types import (
    DEVICES_REQUIRED,
    DeviceType,
    KeyState,
    PointerButton,
    SessionPhase,
    devicesSufficient_check,
)
from rtpad.input.guarded import GuardedHandle
from rtpad.keysyms import UNICODE_KEYSYM_OFFSET
from rtpad.portal.bus import PortalBus
from rtpad.portal.correlator import RequestCorrelator, SignalBus

logger = logging.getLogger(__name__)

REMOTE_DESKTOP_INTERFACE = "org.freedesktop.portal.RemoteDesktop"

# linux/input-event-codes.h
BTN_LEFT = 0x110
BTN_RIGHT = 0x111
BTN_MIDDLE = 0x112

BUTTON_CODES: dict[PointerButton, int] = {
    PointerButton.LEFT: BTN_LEFT,
    PointerButton.MIDDLE: BTN_MIDDLE,
    PointerButton.RIGHT: BTN_RIGHT,
}

# Errors raised by the bus itself, rather than by our own checks.
TRANSPORT_FAILURES = (DBusErrorResponse, RouterClosed, OSError)

# Errors that mean the portal conversation itself broke down during setup.
SETUP_FAILURES = (PluginError, *TRANSPORT_FAILURES)


class PortalBusLike(SignalBus, Protocol):
    """Bus operations the portal backend depends on."""

    def property_get(self, interface: str, name: str) -> tuple[str, Any]:
        """Read a property as (signature, value)."""

    def connection_close(self) -> None:
        """Close the connection."""


@dataclass(frozen=True)
class SessionLive:
    """Started RemoteDesktop session"""
    bus: PortalBusLike
    session_handle: str
    devices: DeviceType


class PortalSessionNegotiator:
    """Drives a portal session from UNPROBED to STARTED."""

    def __init__(self, bus: PortalBusLike, config: PortalConfig) -> None:
        """
        Initialize negotiator.

        Args:
            bus: Connected bus.
            config: Portal settings.
        """
        self._bus: PortalBusLike = bus
        self._config: PortalConfig = config
        self._correlator: RequestCorrelator = RequestCorrelator(bus, REMOTE_DESKTOP_INTERFACE)
        self.phase: SessionPhase = SessionPhase.UNPROBED

    def _phase_set(self, phase: SessionPhase) -> None:
        """Record a phase transition."""
        logger.info("Portal session %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _request(self, method: str, signature: str, *args: Any) -> tuple[int, dict[str, Any]]:
        """Issue a correlated portal request."""
        return self._correlator.call(
            method, signature, *args, timeout=self._config.response_timeout
        )

    def capabilities_probe(self) -> DeviceType:
        """
        Read the device types the portal can offer.

        Returns:
            Advertised device types.

        Raises:
            UnsupportedPlatformError: If keyboard or pointer is not offered.
        """
        _, available = self._bus.property_get(REMOTE_DESKTOP_INTERFACE, "AvailableDeviceTypes")
        if not isinstance(available, int) or isinstance(available, bool):
            raise UnsupportedPlatformError("unexpected 'AvailableDeviceTypes' return type")
        if not devicesSufficient_check(available):
            raise UnsupportedPlatformError("keyboard or pointer source type not supported")
        return DeviceType(available)

    def session_create(self) -> str:
        """
        Create a RemoteDesktop session.

        Returns:
            Session handle.

        Raises:
            UnsupportedPlatformError: On a non-zero result or a bad handle.
        """
        options = {"session_handle_token": ("s", self._config.session_handle_token)}
        result, results = self._request("CreateSession", "a{sv}", options)
        if result != 0:
            raise UnsupportedPlatformError(f"Calling 'CreateSession' failed ({result})")
        if "session_handle" not in results:
            raise UnsupportedPlatformError(
                "'session_handle' missing from 'CreateSession' return value"
            )
        session_handle = results["session_handle"]
        if not isinstance(session_handle, str):
            raise UnsupportedPlatformError(
                "unexpected 'session_handle' type in 'CreateSession' return value"
            )
        return session_handle

    def devices_select(self, session_handle: str) -> None:
        """
        Ask for keyboard and pointer control.

        Args:
            session_handle: Session to configure.

        Raises:
            UnsupportedPlatformError: On a non-zero result.
        """
        devices = ("u", int(DEVICES_REQUIRED))
        # "type" as documented for this call; current portals read "types"
        options = {"type": devices, "types": devices}
        result, _ = self._request("SelectDevices", "oa{sv}", session_handle, options)
        if result != 0:
            raise UnsupportedPlatformError(f"Calling 'SelectDevices' failed ({result})")

    def session_start(self, session_handle: str) -> DeviceType:
        """
        Start the session; the user is asked for consent here.

        Args:
            session_handle: Session to start.

        Returns:
            Granted device types.

        Raises:
            AccessDeniedError: If the user refused or withheld a device class.
            UnsupportedPlatformError: If the reply lacks a valid 'devices' entry.
        """
        result, results = self._request(
            "Start", "osa{sv}", session_handle, self._config.parent_window, {}
        )
        if result != 0:
            raise AccessDeniedError("keyboard or pointer access denied")
        if "devices" not in results:
            raise UnsupportedPlatformError("'devices' missing from 'Start' return value")
        devices = results["devices"]
        if not isinstance(devices, int) or isinstance(devices, bool):
            raise UnsupportedPlatformError("unexpected 'devices' type in 'Start' return value")
        if not devicesSufficient_check(devices):
            raise AccessDeniedError("keyboard or pointer access denied")
        return DeviceType(devices)

    def negotiate(self) -> SessionLive:
        """
        Run the whole setup sequence.

        Returns:
            Started session.

        Raises:
            UnsupportedPlatformError: If the portal cannot serve keyboard and pointer.
            AccessDeniedError: If the user refused access.
        """
        self._phase_set(SessionPhase.NEGOTIATING)
        try:
            self.capabilities_probe()
            session_handle = self.session_create()
            self.devices_select(session_handle)
            devices = self.session_start(session_handle)
        except (UnsupportedPlatformError, AccessDeniedError):
            self._phase_set(SessionPhase.CLOSED)
            raise
        except SETUP_FAILURES as e:
            self._phase_set(SessionPhase.CLOSED)
            raise UnsupportedPlatformError(str(e)) from e
        self._phase_set(SessionPhase.STARTED)
        return SessionLive(bus=self._bus, session_handle=session_handle, devices=devices)


class PortalPlugin:
    """Input backend injecting through a started RemoteDesktop portal session."""

    def __init__(self, session: SessionLive) -> None:
        """
        Initialize plugin around a started session.

        Args:
            session: Started session; the plugin owns it from here on.
        """
        self._session: GuardedHandle[SessionLive] = GuardedHandle(
            session, closed_message="dbus connection closed"
        )

    @classmethod
    def plugin_init(
        cls,
        config: Optional[PortalConfig] = None,
        bus_open: Callable[[str], PortalBusLike] = PortalBus.connection_open,
    ) -> "PortalPlugin":
        """
        Connect to the portal and start a session.

        The bus connection is closed again on every failure path.

        Args:
            config: Portal settings.
            bus_open: Opens a private bus connection.

        Returns:
            Ready plugin.

        Raises:
            UnsupportedPlatformError: If the portal is unusable here.
            AccessDeniedError: If the user refused access.
        """
        config = config or PortalConfig()
        try:
            bus = bus_open(config.bus)
        except Exception as e:
            raise UnsupportedPlatformError(f"cannot connect to {config.bus} bus: {e}") from e

        try:
            session = PortalSessionNegotiator(bus, config).negotiate()
        except BaseException:
            try:
                bus.connection_close()
            except Exception as close_error:
                logger.warning("Closing bus after failed setup: %s", close_error)
            raise
        logger.info("Portal session %s granted %r", session.session_handle, session.devices)
        return cls(session)

    @property
    def phase(self) -> SessionPhase:
        """Return STARTED while live and CLOSED afterwards."""
        return SessionPhase.CLOSED if self._session.closed_check() else SessionPhase.STARTED

    def _notify(self, session: SessionLive, method: str, signature: str, *args: Any) -> None:
        """
        Send one injection call scoped to the session.

        Raises:
            PluginError: If the call fails on the bus or the portal rejects it.
        """
        try:
            session.bus.method_call(
                REMOTE_DESKTOP_INTERFACE, method, signature, (session.session_handle, *args)
            )
        except TRANSPORT_FAILURES as e:
            raise PluginError(f"Calling '{method}' failed: {e}") from e

    def connection_close(self) -> None:
        """
        Close the bus connection; injections fail from now on.

        Raises:
            ConnectionClosedError: If already closed.
        """
        self._session.handle_release(lambda session: session.bus.connection_close())
        logger.info("Portal session closed")

    def keyboardText_inject(self, text: str) -> None:
        """
        Type text as Unicode keysyms, press then release per character.

        Args:
            text: Text to type.
        """
        with self._session.handle_use() as session:
            for char in text:
                keysym = UNICODE_KEYSYM_OFFSET + ord(char)
                for state in (KeyState.PRESSED, KeyState.RELEASED):
                    self._notify(session, "NotifyKeyboardKeysym", "oa{sv}iu", {}, keysym, state.value)

    def pointerButton_inject(self, button: int, pressed: bool) -> None:
        """
        Press or release a pointer button.

        Args:
            button: Button id (1=left, 2=middle, 3=right).
            pressed: True for press, False for release.

        Raises:
            UnsupportedButtonError: For any other button id.
        """
        with self._session.handle_use() as session:
            code = BUTTON_CODES[PointerButton.fromId_get(button)]
            state = KeyState.PRESSED if pressed else KeyState.RELEASED
            self._notify(session, "NotifyPointerButton", "oa{sv}iu", {}, code, state.value)

    def pointerMove_inject(self, delta_x: float, delta_y: float) -> None:
        """
        Move the pointer relative to its current position.

        Args:
            delta_x: Horizontal displacement.
            delta_y: Vertical displacement.
        """
        with self._session.handle_use() as session:
            self._notify(
                session, "NotifyPointerMotion", "oa{sv}dd", {}, float(delta_x), float(delta_y)
            )

    def _pointerAxis_notify(self, delta_x: float, delta_y: float, finish: bool) -> None:
        """Send one axis event, optionally marking the end of the gesture."""
        with self._session.handle_use() as session:
            options = {"finish": ("b", finish)}
            self._notify(
                session, "NotifyPointerAxis", "oa{sv}dd", options, float(delta_x), float(delta_y)
            )

    def pointerScroll_inject(self, delta_x: float, delta_y: float) -> None:
        """
        Scroll by axis deltas.

        Args:
            delta_x: Horizontal scroll displacement.
            delta_y: Vertical scroll displacement.
        """
        self._pointerAxis_notify(delta_x, delta_y, finish=False)

    def pointerScroll_finish(self) -> None:
        """End the scroll gesture with a zero-delta finish event."""
        self._pointerAxis_notify(0, 0, finish=True)
