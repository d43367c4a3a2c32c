"""WardFlow: clinical workflow coordination service."""

__version__ = "0.1.0"
