"""Mini LinkedIn: a small social feed REST API."""

__version__ = "0.1.0"
