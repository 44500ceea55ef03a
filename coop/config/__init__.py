"""Project configuration loading and schemas."""
