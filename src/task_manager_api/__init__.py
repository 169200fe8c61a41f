"""Task tracking HTTP/JSON service."""

__version__ = "0.1.0"
