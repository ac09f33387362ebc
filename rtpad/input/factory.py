"""Backend factory functions."""

from __future__ import annotations

import logging
from typing import Optional

from rtpad.common.config import Config
from rtpad.common.errors import UnsupportedPlatformError
from rtpad.input.backend import InputPlugin

logger = logging.getLogger(__name__)


def plugin_create(backend_name: str, config: Config) -> InputPlugin:
    """
    Create one input backend.

    Args:
        backend_name: Backend identifier ("portal" or "x11")
        config: Application configuration

    Returns:
        Ready InputPlugin

    Raises:
        UnsupportedPlatformError: If the backend cannot work here
        ValueError: If the backend name is unknown
    """
    backend = backend_name.lower()

    if backend == "portal":
        from rtpad.portal.session import PortalPlugin

        return PortalPlugin.plugin_init(config.portal)

    if backend == "x11":
        from rtpad.x11.backend import X11Plugin

        return X11Plugin.plugin_init(config.x11)

    raise ValueError(f"Unsupported backend '{backend_name}'. Supported: portal, x11.")


def plugin_init(config: Config, backends: Optional[list[str]] = None) -> InputPlugin:
    """
    Create the first backend that works in this environment.

    Backends raising UnsupportedPlatformError are skipped. Any other error
    (for example the user denying access) stops the chain.

    Args:
        config: Application configuration
        backends: Probe order, defaults to `config.backends`

    Returns:
        Ready InputPlugin

    Raises:
        UnsupportedPlatformError: If no backend is supported
    """
    reasons: list[str] = []
    for backend_name in backends or config.backends:
        try:
            plugin = plugin_create(backend_name, config)
        except UnsupportedPlatformError as e:
            logger.info("Backend %s unsupported: %s", backend_name, e)
            reasons.append(f"{backend_name}: {e}")
            continue
        logger.info("Using %s backend", backend_name)
        return plugin

    raise UnsupportedPlatformError("no supported input backend (" + "; ".join(reasons) + ")")
