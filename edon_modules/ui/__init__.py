"""Terminal presentation helpers."""

from .error_display import display_load_error

__all__ = ["display_load_error"]
