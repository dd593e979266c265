"""Chirpy: a small social-posting service backed by a single JSON document."""

__version__ = "0.1.0"
