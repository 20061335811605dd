"""Core module with types, frames, sizing, config, errors and logging."""

__all__ = [
    "types",
    "frames",
    "errors",
    "logging",
    "config",
    "sizing",
]
