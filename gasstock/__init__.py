"""Gas cylinder inventory service."""

__version__ = "1.0.0"
