"""Coop - addon cache and synchronization manager."""

__version__ = "0.1.0"
