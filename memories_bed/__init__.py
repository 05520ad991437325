"""Memories Bed desktop viewer."""

__version__ = "1.0.0"
