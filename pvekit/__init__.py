"""Property-string codecs, request and response types for VM settings, and read helpers for cluster data sources."""

__version__ = "0.10.0"