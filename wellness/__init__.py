"""Student wellness assessment scoring service."""

__version__ = "1.0.0"
