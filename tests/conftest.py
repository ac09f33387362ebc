"""Pytest configuration and shared fixtures for rtpad tests

This module provides common fixtures and test utilities used across
unit tests.
"""

import logging
import queue
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import pytest
from jeepney.io.common import RouterClosed

from rtpad.common.config import Config, ConfigLoader
from rtpad.portal.bus import BusSignal


@pytest.fixture
def sample_config() -> Config:
    """Load the shipped sample configuration

    Returns:
        Config object with repository defaults
    """
    config_path = Path(__file__).parent.parent / "config.yml"
    if not config_path.exists():
        pytest.skip("config.yml not found - required for this test")
    return ConfigLoader.config_load(config_path)


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)


def pytest_configure(config) -> None:
    """Register custom pytest markers used by this test suite."""
    config.addinivalue_line(
        "markers", "requires_keysymdef: mark test as requiring /usr/include/X11/keysymdef.h"
    )


SESSION_HANDLE = "/org/freedesktop/portal/desktop/session/1_42/rtpad"


class _FakeSubscription:
    """Per-call signal subscription backed by a queue."""

    def __init__(self, signal_queue: "queue.Queue[BusSignal]", bus: "FakePortalBus") -> None:
        """Initialize fake subscription."""
        self._queue = signal_queue
        self._bus = bus

    def signal_next(self, timeout: Optional[float] = None) -> BusSignal:
        """Return the next queued signal, failing once the bus has dropped."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = 0.01 if deadline is None else min(0.01, max(0.0, deadline - time.monotonic()))
            try:
                return self._queue.get(timeout=wait)
            except queue.Empty:
                pass
            if self._bus.connection_dropped:
                raise RouterClosed("D-Bus connection stopped receiving")
            if deadline is not None and time.monotonic() >= deadline:
                raise queue.Empty


class FakePortalBus:
    """In-memory stand-in for PortalBus.

    Request methods listed in `responses` return a fresh request handle and
    broadcast any `extra_signals` followed by the Response for that handle to
    every active subscription. A response of None is never sent. Other
    methods are recorded and return an empty body. Setting `drop_after`
    makes the connection stop receiving once that method has replied.
    """

    def __init__(self) -> None:
        """Initialize fake bus with a successful negotiation script."""
        self.available_devices: Any = ("u", 3)
        self.responses: dict[str, Optional[tuple]] = {
            "CreateSession": (0, {"session_handle": ("s", SESSION_HANDLE)}),
            "SelectDevices": (0, {}),
            "Start": (0, {"devices": ("u", 3)}),
        }
        self.extra_signals: list[BusSignal] = []
        self.call_errors: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.events: list[str] = []
        self.notify_gate: Optional[threading.Event] = None
        self.notify_entered: threading.Event = threading.Event()
        self.subscriptions_active: int = 0
        self.subscriptions_total: int = 0
        self.close_calls: int = 0
        self.drop_after: Optional[str] = None
        self.connection_dropped: bool = False
        self._queues: list["queue.Queue[BusSignal]"] = []
        self._serial: int = 0
        self._lock = threading.Lock()

    def request_handle(self, serial: int) -> str:
        """Return the request path used for the n-th request."""
        return f"/org/freedesktop/portal/desktop/request/1_42/t{serial}"

    def _broadcast(self, signal: BusSignal) -> None:
        """Deliver a signal to every active subscription."""
        for signal_queue in list(self._queues):
            signal_queue.put(signal)

    def property_get(self, interface: str, name: str) -> tuple[str, Any]:
        """Return the advertised device types."""
        if isinstance(self.available_devices, Exception):
            raise self.available_devices
        return self.available_devices

    def method_call(self, interface: str, method: str, signature: str, body: tuple) -> tuple:
        """Record a call and script the portal's behavior."""
        with self._lock:
            self.calls.append((method, body))
        if method in self.call_errors:
            raise self.call_errors[method]
        if method in self.responses:
            with self._lock:
                self._serial += 1
                handle = self.request_handle(self._serial)
            for signal in self.extra_signals:
                self._broadcast(signal)
            response = self.responses[method]
            if response is not None:
                self._broadcast(BusSignal(handle, "org.freedesktop.portal.Request", "Response", response))
            if method == self.drop_after:
                self.connection_dropped = True
            return (handle,)

        self.notify_entered.set()
        if self.notify_gate is not None:
            self.notify_gate.wait(timeout=5)
        with self._lock:
            self.events.append(method)
        return ()

    @contextmanager
    def signals_subscribe(self, interface: str, member: str) -> Iterator[_FakeSubscription]:
        """Open a per-call subscription."""
        signal_queue: "queue.Queue[BusSignal]" = queue.Queue()
        self._queues.append(signal_queue)
        self.subscriptions_active += 1
        self.subscriptions_total += 1
        try:
            yield _FakeSubscription(signal_queue, self)
        finally:
            self._queues.remove(signal_queue)
            self.subscriptions_active -= 1

    def connection_close(self) -> None:
        """Record the close."""
        self.close_calls += 1
        with self._lock:
            self.events.append("close")

    def notifications(self) -> list[tuple[str, tuple]]:
        """Return recorded injection calls."""
        return [call for call in self.calls if call[0].startswith("Notify")]


@pytest.fixture
def portal_bus() -> FakePortalBus:
    """Fresh fake portal bus with a successful negotiation script"""
    return FakePortalBus()
