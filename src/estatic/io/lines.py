"""JSON export of traced field lines."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from ..core.errors import ExportError
from ..core.types import Polyline


def lines_to_dict(lines: list[Polyline], metadata: dict[str, Any] | None = None) -> dict[str, Any]:
    """Plain-data form of a set of polylines."""
    data: dict[str, Any] = {
        "count": len(lines),
        "lines": [np.asarray(line, dtype=np.float64).tolist() for line in lines],
    }
    if metadata:
        data["metadata"] = metadata
    return data


def write_lines_json(
    filename: str | Path, lines: list[Polyline], metadata: dict[str, Any] | None = None
) -> None:
    """Write polylines as JSON lists of [x, y] points.

    Raises:
        ExportError: If the file cannot be written
    """
    filename = Path(filename)
    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
        filename.write_text(json.dumps(lines_to_dict(lines, metadata), indent=2))
    except OSError as e:
        raise ExportError(f"Failed to write field lines {filename}: {e}", filename) from e


def read_lines_json(filename: str | Path) -> list[Polyline]:
    data = json.loads(Path(filename).read_text())
    return [np.asarray(points, dtype=np.float64).reshape(-1, 2) for points in data["lines"]]


__all__ = [
    "lines_to_dict",
    "write_lines_json",
    "read_lines_json",
]
