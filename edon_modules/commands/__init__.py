"""CLI commands for edon-modules."""

__all__ = [
    "cache",
    "install",
    "load",
]
