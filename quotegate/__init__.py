"""Quotegate: duplicate detection and abuse throttling for submitted statements."""
__version__ = "0.4.0"
