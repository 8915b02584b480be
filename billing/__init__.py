# billing/__init__.py
"""Ledger and inventory reconciliation for a small-business billing app."""

__version__ = "0.3.0"
