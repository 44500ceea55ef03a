"""Shell, filesystem and platform helpers."""
