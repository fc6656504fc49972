"""Translate validation field schemas into OpenAPI documentation."""

__version__ = "0.1.0"
