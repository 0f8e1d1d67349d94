"""Typed HTTP clients for Aha!, GitHub and ZenHub."""

__version__ = "0.1.0"
