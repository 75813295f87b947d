"""Searchable PDFs from scanned book pages."""

__version__ = "0.1.0"
