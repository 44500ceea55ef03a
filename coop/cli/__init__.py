"""Command-line interface for Coop."""
