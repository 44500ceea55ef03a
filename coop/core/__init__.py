"""Addon cache, synchronization and installation engine."""
