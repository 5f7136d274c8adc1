"""cachegate: cache-aside HTTP gateway backed by Redis."""

__version__ = "0.1.0"
