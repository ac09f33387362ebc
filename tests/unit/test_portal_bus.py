"""Unit tests for the jeepney-backed portal bus wrapper."""

from __future__ import annotations

import queue
import threading
from contextlib import contextmanager
from types import SimpleNamespace
from typing import Any, Iterator

import pytest
from jeepney import MessageType
from jeepney.io.common import RouterClosed
from jeepney.low_level import HeaderFields

from rtpad.portal.bus import (
    PORTAL_OBJECT_PATH,
    PortalBus,
    SignalSubscription,
    busSignal_fromMessage,
)


def _signal_message(path: str, member: str, body: tuple) -> SimpleNamespace:
    """Build a message-like object carrying signal header fields."""
    fields = {
        HeaderFields.path: path,
        HeaderFields.interface: "org.freedesktop.portal.Request",
        HeaderFields.member: member,
    }
    return SimpleNamespace(header=SimpleNamespace(fields=fields), body=body)


class _FakeReceiverThread:
    """Receiver thread stand-in whose liveness the test controls."""

    def __init__(self) -> None:
        """Initialize as running."""
        self.alive: bool = True

    def is_alive(self) -> bool:
        """Return whether the receiver is still running."""
        return self.alive


class _FakeRouter:
    """DBusRouter stand-in recording sent messages."""

    def __init__(self, reply_body: tuple = ()) -> None:
        """Initialize fake router."""
        self._rcv_thread = _FakeReceiverThread()
        self.reply_body: tuple = reply_body
        self.members: list[str] = []
        self.filters_active: int = 0
        self.closed: bool = False

    def send_and_get_reply(self, message: Any, timeout: Any = None) -> SimpleNamespace:
        """Record the method name and return a method_return reply."""
        self.members.append(message.header.fields[HeaderFields.member])
        return SimpleNamespace(
            header=SimpleNamespace(message_type=MessageType.method_return), body=self.reply_body
        )

    @contextmanager
    def filter(self, rule: Any, *, queue: "queue.Queue") -> Iterator["queue.Queue"]:
        """Yield the given queue as a filter."""
        self.filters_active += 1
        try:
            yield queue
        finally:
            self.filters_active -= 1

    def close(self) -> None:
        """Record the close."""
        self.closed = True


class _FakeConnection:
    """DBusConnection stand-in."""

    def __init__(self) -> None:
        """Initialize fake connection."""
        self.closed: bool = False

    def close(self) -> None:
        """Record the close."""
        self.closed = True


class TestSignalSubscription:
    """Tests for waiting on subscribed signals."""

    def test_returns_queued_signal(self) -> None:
        """A queued message is converted to a BusSignal."""
        signal_queue: queue.Queue = queue.Queue()
        signal_queue.put(_signal_message("/request/1", "Response", (0, {})))
        subscription = SignalSubscription(signal_queue, lambda: True)

        signal = subscription.signal_next()

        assert signal.path == "/request/1"
        assert signal.member == "Response"
        assert signal.body == (0, {})

    def test_queued_signal_survives_connection_drop(self) -> None:
        """Signals received before the drop are still delivered."""
        signal_queue: queue.Queue = queue.Queue()
        signal_queue.put(_signal_message("/request/1", "Response", (0, {})))
        subscription = SignalSubscription(signal_queue, lambda: False, poll_interval=0.01)

        assert subscription.signal_next().path == "/request/1"
        with pytest.raises(RouterClosed):
            subscription.signal_next()

    def test_timeout_on_live_connection(self) -> None:
        """A live but silent connection times out with queue.Empty."""
        subscription = SignalSubscription(queue.Queue(), lambda: True, poll_interval=0.01)

        with pytest.raises(queue.Empty):
            subscription.signal_next(timeout=0.05)

    def test_drop_while_waiting_without_timeout(self) -> None:
        """An unbounded wait ends when the receiver stops."""
        receiver = _FakeReceiverThread()
        subscription = SignalSubscription(queue.Queue(), receiver.is_alive, poll_interval=0.01)
        outcome: list[BaseException] = []

        def _wait() -> None:
            try:
                subscription.signal_next()
            except RouterClosed as e:
                outcome.append(e)

        waiter = threading.Thread(target=_wait)
        waiter.start()
        waiter.join(timeout=0.1)
        assert waiter.is_alive()

        receiver.alive = False
        waiter.join(timeout=5)

        assert not waiter.is_alive()
        assert len(outcome) == 1


class TestPortalBus:
    """Tests for the bus wrapper over a router."""

    def test_signal_fields_from_message(self) -> None:
        """Header fields and body are copied into the BusSignal."""
        signal = busSignal_fromMessage(_signal_message("/request/7", "Response", (1, {})))

        assert signal.path == "/request/7"
        assert signal.interface == "org.freedesktop.portal.Request"
        assert signal.body == (1, {})

    def test_property_get_returns_variant(self) -> None:
        """Property reads go through Properties.Get and return the variant."""
        router = _FakeRouter(reply_body=(("u", 3),))
        bus = PortalBus(_FakeConnection(), router)

        assert bus.property_get("org.freedesktop.portal.RemoteDesktop", "AvailableDeviceTypes") == ("u", 3)
        assert router.members == ["Get"]

    def test_method_call_returns_body(self) -> None:
        """Method calls return the reply body as a tuple."""
        router = _FakeRouter(reply_body=(PORTAL_OBJECT_PATH,))
        bus = PortalBus(_FakeConnection(), router)

        reply = bus.method_call("org.freedesktop.portal.RemoteDesktop", "CreateSession", "a{sv}", ({},))

        assert reply == (PORTAL_OBJECT_PATH,)
        assert router.members == ["CreateSession"]

    def test_subscription_adds_and_removes_match(self) -> None:
        """A subscription registers and removes its bus match rule."""
        router = _FakeRouter()
        bus = PortalBus(_FakeConnection(), router)

        with bus.signals_subscribe("org.freedesktop.portal.Request", "Response"):
            assert router.filters_active == 1

        assert router.members == ["AddMatch", "RemoveMatch"]
        assert router.filters_active == 0

    def test_dead_connection_skips_remove_match(self) -> None:
        """Leaving a subscription after a drop does not call the bus."""
        router = _FakeRouter()
        bus = PortalBus(_FakeConnection(), router)

        with bus.signals_subscribe("org.freedesktop.portal.Request", "Response"):
            router._rcv_thread.alive = False
            assert not bus.receiver_check()

        assert router.members == ["AddMatch"]
        assert router.filters_active == 0

    def test_connection_close(self) -> None:
        """Close stops the router and closes the connection."""
        connection = _FakeConnection()
        router = _FakeRouter()
        bus = PortalBus(connection, router)

        bus.connection_close()

        assert router.closed
        assert connection.closed
