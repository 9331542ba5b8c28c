"""Authoritative server engine for the Literature card game."""

__version__ = "1.0.0"
