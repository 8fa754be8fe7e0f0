"""Keyed workbook comparison and reconciliation."""

__version__ = "0.1.0"
