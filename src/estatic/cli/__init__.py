"""Command-line entry points for the field simulation."""

__all__ = ["main"]
