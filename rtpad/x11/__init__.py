"""X11 XTest backend."""
