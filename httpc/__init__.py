"""httpc: a small HTTP/1.1 client speaking raw sockets."""

__version__ = "0.1.0"
