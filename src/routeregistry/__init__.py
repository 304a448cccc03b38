"""Versioned registry of public-transport route records."""

__version__ = "0.1.0"
