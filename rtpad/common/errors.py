"""Error types shared by all input backends.

Two kinds of failure cross the plugin boundary:

- ``UnsupportedPlatformError``: the backend can never work in this
  environment. Callers try the next backend.
- ``PluginError`` and its subclasses: the backend is applicable but the
  operation failed (closed connection, user denied access, bad argument,
  malformed reply). Not retried.
"""

from __future__ import annotations


class UnsupportedPlatformError(Exception):
    """Backend is not available in this environment."""


class PluginError(RuntimeError):
    """Operational failure of an available backend."""


class ConnectionClosedError(PluginError):
    """Operation attempted on a backend whose connection is closed."""


class AccessDeniedError(PluginError):
    """Keyboard or pointer access was refused after negotiation."""


class UnsupportedButtonError(PluginError):
    """Pointer button id outside 1 (left), 2 (middle), 3 (right)."""


class ProtocolError(PluginError):
    """Reply or signal from the desktop service had an unexpected shape."""


class ResponseTimeoutError(PluginError):
    """No matching response arrived within the requested timeout."""
