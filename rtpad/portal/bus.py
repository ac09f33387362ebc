"""Private D-Bus connection to the desktop portal, built on jeepney."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Callable, Iterator, Optional

from jeepney import DBusAddress, Message, Properties, new_method_call
from jeepney.bus_messages import MatchRule, message_bus
from jeepney.io.common import RouterClosed
from jeepney.io.threading import DBusConnection, DBusRouter, Proxy, open_dbus_connection
from jeepney.low_level import HeaderFields
from jeepney.wrappers import unwrap_msg

logger = logging.getLogger(__name__)

PORTAL_BUS_NAME = "org.freedesktop.portal.Desktop"
PORTAL_OBJECT_PATH = "/org/freedesktop/portal/desktop"

# Seconds between receiver liveness checks while waiting for a signal
RECEIVER_POLL_INTERVAL = 0.5


@dataclass(frozen=True)
class BusSignal:
    """Signal received on the bus"""
    path: Optional[str]
    interface: Optional[str]
    member: Optional[str]
    body: tuple


def busSignal_fromMessage(message: Message) -> BusSignal:
    """
    Convert a jeepney signal message to a BusSignal.

    Args:
        message: Received signal message.

    Returns:
        BusSignal with header fields and body.
    """
    fields = message.header.fields
    return BusSignal(
        path=fields.get(HeaderFields.path),
        interface=fields.get(HeaderFields.interface),
        member=fields.get(HeaderFields.member),
        body=tuple(message.body),
    )


class SignalSubscription:
    """Queue of signals matching one subscription."""

    def __init__(
        self,
        queue: "Queue[Message]",
        receiver_check: Callable[[], bool],
        poll_interval: float = RECEIVER_POLL_INTERVAL,
    ) -> None:
        """
        Initialize subscription.

        Args:
            queue: Queue the router delivers matching messages to.
            receiver_check: Returns False once the router stopped receiving.
            poll_interval: Seconds between receiver checks while waiting.
        """
        self._queue: "Queue[Message]" = queue
        self._receiver_check: Callable[[], bool] = receiver_check
        self._poll_interval: float = poll_interval

    def signal_next(self, timeout: Optional[float] = None) -> BusSignal:
        """
        Block until the next matching signal arrives.

        Signals queued before the connection dropped are still returned.

        Args:
            timeout: Seconds to wait, or None to wait forever.

        Returns:
            Next signal.

        Raises:
            queue.Empty: If the timeout expires.
            RouterClosed: If the connection stops receiving while waiting.
        """
        deadline: Optional[float] = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = self._poll_interval
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            try:
                return busSignal_fromMessage(self._queue.get(timeout=wait))
            except Empty:
                pass
            if not self._receiver_check():
                # The receiver may have queued a last message before exiting
                try:
                    return busSignal_fromMessage(self._queue.get_nowait())
                except Empty:
                    raise RouterClosed("D-Bus connection stopped receiving") from None
            if deadline is not None and time.monotonic() >= deadline:
                raise Empty


class PortalBus:
    """Method calls, properties and signal subscriptions on the portal object."""

    def __init__(self, connection: DBusConnection, router: DBusRouter) -> None:
        """
        Initialize bus wrapper.

        Args:
            connection: Authenticated connection.
            router: Router dispatching replies and signals for the connection.
        """
        self._connection: DBusConnection = connection
        self._router: DBusRouter = router
        self._bus_proxy: Proxy = Proxy(message_bus, router)

    @classmethod
    def connection_open(cls, bus: str = "SESSION") -> "PortalBus":
        """
        Open a private bus connection.

        Authentication and the ``Hello`` call happen while opening.

        Args:
            bus: 'SESSION', 'SYSTEM' or a bus address.

        Returns:
            Connected PortalBus.
        """
        connection = open_dbus_connection(bus=bus)
        logger.debug("Connected to %s bus as %s", bus, connection.unique_name)
        return cls(connection, DBusRouter(connection))

    def _address(self, interface: str) -> DBusAddress:
        """Return the portal object address for an interface."""
        return DBusAddress(PORTAL_OBJECT_PATH, bus_name=PORTAL_BUS_NAME, interface=interface)

    def property_get(self, interface: str, name: str) -> tuple[str, Any]:
        """
        Read a property of the portal object.

        Args:
            interface: Interface owning the property.
            name: Property name.

        Returns:
            Tuple of (signature, value).

        Raises:
            DBusErrorResponse: If the portal replies with an error.
        """
        message = Properties(self._address(interface)).get(name)
        reply = self._router.send_and_get_reply(message)
        return unwrap_msg(reply)[0]

    def method_call(self, interface: str, method: str, signature: str, body: tuple) -> tuple:
        """
        Call a method on the portal object and wait for its reply.

        Args:
            interface: Interface owning the method.
            method: Method name.
            signature: D-Bus signature of ``body``.
            body: Arguments.

        Returns:
            Reply body.

        Raises:
            DBusErrorResponse: If the portal replies with an error.
        """
        message = new_method_call(self._address(interface), method, signature, body)
        reply = self._router.send_and_get_reply(message)
        return tuple(unwrap_msg(reply))

    @contextmanager
    def signals_subscribe(self, interface: str, member: str) -> Iterator[SignalSubscription]:
        """
        Subscribe to a signal for the duration of a with-block.

        Args:
            interface: Signal interface.
            member: Signal name.

        Yields:
            Subscription delivering matching signals.
        """
        rule = MatchRule(type="signal", interface=interface, member=member)
        with self._router.filter(rule, queue=Queue()) as queue:
            self._bus_proxy.AddMatch(rule)
            try:
                yield SignalSubscription(queue, self.receiver_check)
            finally:
                # A dead connection has no match rules left to remove
                if self.receiver_check():
                    self._bus_proxy.RemoveMatch(rule)

    def receiver_check(self) -> bool:
        """
        Check that the router is still receiving messages.

        jeepney only reports a dropped connection to callers awaiting a
        method reply; signal filters are never told, so waiters poll this.

        Returns:
            False once the receiver thread has exited.
        """
        return self._router._rcv_thread.is_alive()

    def connection_close(self) -> None:
        """Stop the router and close the connection."""
        self._router.close()
        self._connection.close()
