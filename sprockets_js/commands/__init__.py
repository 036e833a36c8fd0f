"""CLI command groups for sprockets-js."""

__all__ = [
    "manifest",
    "paths",
    "resolve",
]
