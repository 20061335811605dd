"""Exception types for the electrostatic field simulation.

Errors raised while building or exporting a grid carry the offending values
as attributes so callers can report or retry without parsing messages.
"""

from __future__ import annotations

from pathlib import Path


class EstaticError(Exception):
    """Base exception for all estatic errors."""


class ConfigError(EstaticError):
    """A scene file is missing, unreadable or not a mapping.

    Attributes:
        path: Scene file that failed to load, if known
    """

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class GridError(EstaticError):
    """Rejected grid geometry.

    Attributes:
        width, height: Requested grid size in cells, if relevant
        resolution: Requested resolution, if relevant
        ratio: Requested subdivisions per cell edge, if relevant
    """

    def __init__(
        self,
        message: str,
        *,
        width: int | None = None,
        height: int | None = None,
        resolution: int | None = None,
        ratio: int | None = None,
    ):
        super().__init__(message)
        self.width = width
        self.height = height
        self.resolution = resolution
        self.ratio = ratio


class SizingError(EstaticError):
    """A field grid would not fit in the memory budget."""

    def __init__(
        self, width: int, height: int, resolution: int, estimate_gb: float, budget_gb: float
    ):
        self.width = width
        self.height = height
        self.resolution = resolution
        self.estimate_gb = estimate_gb
        self.budget_gb = budget_gb
        super().__init__(
            f"Cannot fit a {width}x{height} grid at resolution {resolution} in "
            f"{budget_gb:.2f} GB. Estimated requirement: {estimate_gb:.2f} GB"
        )

    @property
    def excess_gb(self) -> float:
        """How far the estimate overshoots the budget."""
        return self.estimate_gb - self.budget_gb


class ExportError(EstaticError):
    """A field stack or line file could not be written.

    Attributes:
        path: Output file that failed
    """

    def __init__(self, message: str, path: str | Path):
        super().__init__(message)
        self.path = Path(path)


__all__ = [
    "EstaticError",
    "ConfigError",
    "GridError",
    "SizingError",
    "ExportError",
]
