"""Synchronous calls over the portal's Request/Response protocol.

Portal methods such as ``CreateSession`` return a request object path right
away and deliver their actual result later as an
``org.freedesktop.portal.Request.Response`` signal on that path.
``RequestCorrelator.call`` hides this: it subscribes to ``Response`` before
issuing the call, registers a future for the returned request handle, and
feeds incoming signals to a keyed table of pending requests until its own
future resolves.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import Future
from typing import Any, Optional, Protocol

from rtpad.common.errors import ProtocolError, ResponseTimeoutError
from rtpad.portal.bus import BusSignal, SignalSubscription

logger = logging.getLogger(__name__)

REQUEST_INTERFACE = "org.freedesktop.portal.Request"
RESPONSE_MEMBER = "Response"

ResponseResult = tuple[int, dict[str, Any]]


class SignalBus(Protocol):
    """Bus operations the correlator depends on."""

    def method_call(self, interface: str, method: str, signature: str, body: tuple) -> tuple:
        """Call a method and return the reply body."""

    def signals_subscribe(self, interface: str, member: str) -> Any:
        """Context manager yielding a SignalSubscription."""


def responseBody_parse(body: tuple) -> ResponseResult:
    """
    Validate a ``Response`` signal body.

    Args:
        body: Signal body, expected ``(uint32 result, a{sv} results)``.

    Returns:
        Tuple of (result code, results with variant signatures removed).

    Raises:
        ProtocolError: If the body does not have that shape.
    """
    if len(body) != 2:
        raise ProtocolError("unexpected 'Response' return length")
    result, results = body
    if not isinstance(result, int) or isinstance(result, bool):
        raise ProtocolError("unexpected 'Response' return type")
    if not isinstance(results, dict):
        raise ProtocolError("unexpected 'Response' return type")
    values: dict[str, Any] = {}
    for key, variant in results.items():
        if not isinstance(variant, tuple) or len(variant) != 2:
            raise ProtocolError("unexpected 'Response' return type")
        values[key] = variant[1]
    return result, values


class PendingRequests:
    """Outstanding requests keyed by request handle."""

    def __init__(self, response_member: str = RESPONSE_MEMBER) -> None:
        """
        Initialize pending request table.

        Args:
            response_member: Signal name that completes a request.
        """
        self._lock: threading.Lock = threading.Lock()
        self._futures: dict[str, Future] = {}
        self._response_member: str = response_member

    def request_register(self, handle: str) -> Future:
        """
        Create the future completed by the response for ``handle``.

        Args:
            handle: Request object path.

        Returns:
            Future resolving to a ResponseResult.
        """
        future: Future = Future()
        with self._lock:
            if handle in self._futures:
                raise ProtocolError(f"request handle {handle} already pending")
            self._futures[handle] = future
        return future

    def request_discard(self, handle: str) -> None:
        """Forget a request, whether or not it completed."""
        with self._lock:
            self._futures.pop(handle, None)

    def signal_deliver(self, signal: BusSignal) -> bool:
        """
        Complete the pending request a signal belongs to.

        Signals with another name or an unknown path are ignored. A matching
        signal with a malformed body completes the request with ProtocolError.

        Args:
            signal: Received signal.

        Returns:
            True if the signal completed a pending request.
        """
        if signal.member != self._response_member or signal.path is None:
            return False
        with self._lock:
            future = self._futures.pop(signal.path, None)
        if future is None:
            return False
        try:
            future.set_result(responseBody_parse(signal.body))
        except ProtocolError as e:
            future.set_exception(e)
        return True

    def pending_count(self) -> int:
        """Return the number of outstanding requests."""
        with self._lock:
            return len(self._futures)


class RequestCorrelator:
    """Turns a call plus its later ``Response`` signal into one blocking call."""

    def __init__(
        self,
        bus: SignalBus,
        interface: str,
        response_interface: str = REQUEST_INTERFACE,
        response_member: str = RESPONSE_MEMBER,
    ) -> None:
        """
        Initialize correlator.

        Args:
            bus: Bus to call methods and subscribe to signals on.
            interface: Interface owning the called methods.
            response_interface: Interface of the response signal.
            response_member: Name of the response signal.
        """
        self._bus: SignalBus = bus
        self._interface: str = interface
        self._response_interface: str = response_interface
        self._response_member: str = response_member
        self._pending: PendingRequests = PendingRequests(response_member)

    @property
    def pending(self) -> PendingRequests:
        """Return the pending request table."""
        return self._pending

    def call(
        self, method: str, signature: str, *args: Any, timeout: Optional[float] = None
    ) -> ResponseResult:
        """
        Call a request-returning method and wait for its response.

        Args:
            method: Method name on the correlator's interface.
            signature: D-Bus signature of ``args``.
            *args: Method arguments.
            timeout: Seconds to wait for the response, or None to wait forever.

        Returns:
            Tuple of (result code, results).

        Raises:
            ProtocolError: If the reply or the matching response is malformed.
            ResponseTimeoutError: If ``timeout`` expires first.
            RouterClosed: If the connection drops before the response.
        """
        with self._bus.signals_subscribe(self._response_interface, self._response_member) as subscription:
            reply = self._bus.method_call(self._interface, method, signature, tuple(args))
            if len(reply) != 1 or not isinstance(reply[0], str):
                raise ProtocolError(f"unexpected '{method}' return value")
            handle: str = reply[0]
            logger.debug("%s issued request %s", method, handle)

            future = self._pending.request_register(handle)
            try:
                self._response_await(method, subscription, future, timeout)
                result = future.result()
            finally:
                self._pending.request_discard(handle)

        logger.debug("%s completed with result %s", method, result[0])
        return result

    def _response_await(
        self,
        method: str,
        subscription: SignalSubscription,
        future: Future,
        timeout: Optional[float],
    ) -> None:
        """
        Deliver signals until ``future`` is done.

        Args:
            method: Method name, for error messages.
            subscription: Per-call signal subscription.
            future: Future of the outstanding request.
            timeout: Overall seconds to wait, or None.

        Raises:
            ResponseTimeoutError: If ``timeout`` expires first.
            RouterClosed: If the connection drops while waiting.
        """
        deadline: Optional[float] = None if timeout is None else time.monotonic() + timeout
        while not future.done():
            remaining: Optional[float] = None
            if deadline is not None:
                remaining = max(0.0, deadline - time.monotonic())
            try:
                signal = subscription.signal_next(timeout=remaining)
            except queue.Empty:
                raise ResponseTimeoutError(f"no response to '{method}'") from None
            if not self._pending.signal_deliver(signal):
                logger.debug("Ignoring %s on %s", signal.member, signal.path)
