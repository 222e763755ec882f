"""modsync - keep a local mod installation in step with a server manifest."""

__version__ = "0.4.0"
