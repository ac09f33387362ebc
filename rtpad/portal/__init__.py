"""RemoteDesktop portal backend over D-Bus."""
