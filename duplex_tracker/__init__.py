"""Duplex Tracker: construction cost ledger for duplex housing units."""

__version__ = "0.1.0"
