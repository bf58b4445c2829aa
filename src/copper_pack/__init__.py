"""Copper CRM adapter: enriched records, paginated sync, and record actions."""

__version__ = "0.1.0"
