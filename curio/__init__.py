"""Curio news aggregation backend."""

__version__ = "0.1.0"
