"""Backend abstraction layer for input injection."""

from rtpad.input.backend import InputPlugin
from rtpad.input.factory import plugin_create, plugin_init
from rtpad.input.guarded import GuardedHandle

__all__ = [
    "GuardedHandle",
    "InputPlugin",
    "plugin_create",
    "plugin_init",
]
