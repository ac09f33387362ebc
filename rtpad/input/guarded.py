"""Live/closed connection state shared by the input backends."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, TypeVar, Union

from rtpad.common.errors import ConnectionClosedError

HandleT = TypeVar("HandleT")


@dataclass(frozen=True)
class Connected(Generic[HandleT]):
    """Backend connection is live"""
    handle: HandleT


@dataclass(frozen=True)
class Closed:
    """Backend connection has been released"""


ConnectionState = Union[Connected[HandleT], Closed]


class GuardedHandle(Generic[HandleT]):
    """Connection handle that can only be reached while live.

    The closed check and the use of the handle happen under the same lock, so
    a caller either sees a live handle for the whole operation or gets
    ``ConnectionClosedError``.
    """

    def __init__(self, handle: HandleT, closed_message: str = "connection closed") -> None:
        """
        Initialize guarded handle.

        Args:
            handle: Live connection handle.
            closed_message: Error message used once the handle is closed.
        """
        self._lock: threading.Lock = threading.Lock()
        self._state: ConnectionState = Connected(handle)
        self._closed_message: str = closed_message

    @contextmanager
    def handle_use(self) -> Iterator[HandleT]:
        """
        Hold the lock and yield the live handle.

        Yields:
            Live connection handle.

        Raises:
            ConnectionClosedError: If the handle was released.
        """
        with self._lock:
            state = self._state
            if isinstance(state, Closed):
                raise ConnectionClosedError(self._closed_message)
            yield state.handle

    def handle_release(self, closer: Callable[[HandleT], None]) -> None:
        """
        Close the handle exactly once.

        The state only becomes closed when ``closer`` returns normally.

        Args:
            closer: Releases the underlying connection.

        Raises:
            ConnectionClosedError: If the handle was already released.
        """
        with self._lock:
            state = self._state
            if isinstance(state, Closed):
                raise ConnectionClosedError(self._closed_message)
            closer(state.handle)
            self._state = Closed()

    def closed_check(self) -> bool:
        """Return True once the handle has been released."""
        with self._lock:
            return isinstance(self._state, Closed)
