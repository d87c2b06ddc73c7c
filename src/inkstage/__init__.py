"""Inkstage - content path resolution and canonical URLs for a publishing frontend."""

__version__ = "0.1.0"
