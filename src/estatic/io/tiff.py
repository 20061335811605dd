"""TIFF export of cached field grids.

Writes a 32-bit float stack with three planes (force x, force y, potential)
and JSON metadata in the ImageDescription tag.
"""

from __future__ import annotations

import json
import platform
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np
import tifffile

from ..core.errors import ExportError
from ..physics.field_grid import FieldGrid

PLANES = ("force_x", "force_y", "potential")


def field_stack(field: FieldGrid) -> np.ndarray:
    """Stack a field grid as float32 planes, shape (3, rows, cols)."""
    return np.stack(
        [field.force[..., 0], field.force[..., 1], field.potential], axis=0
    ).astype(np.float32)


def _prepare_metadata(field: FieldGrid, user_metadata: dict[str, Any] | None) -> dict[str, Any]:
    """Collect grid geometry, system info and user metadata."""
    meta: dict[str, Any] = {
        "planes": list(PLANES),
        "width": field.width,
        "height": field.height,
        "ratio": field.ratio,
        "shape": [len(PLANES), *field.shape],
        "dtype": "float32",
        "units": "charge cells",
        "timestamp": datetime.now().isoformat(),
        "system": {
            "platform": platform.platform(),
            "python_version": platform.python_version(),
            "numpy_version": np.__version__,
            "tifffile_version": tifffile.__version__,
        },
    }

    if user_metadata:
        for key, value in user_metadata.items():
            if key not in meta:
                meta[key] = value

    return meta


def write_field_tiff(
    filename: str | Path, field: FieldGrid, metadata: dict[str, Any] | None = None
) -> None:
    """Write a field grid to a TIFF stack.

    Args:
        filename: Output filename
        field: Field grid to export
        metadata: Additional metadata merged into the description

    Raises:
        ExportError: If the file cannot be written
    """
    filename = Path(filename)
    meta = _prepare_metadata(field, metadata)

    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
        tifffile.imwrite(
            filename,
            field_stack(field),
            dtype=np.float32,
            photometric="minisblack",
            metadata=None,
            description=json.dumps(meta, indent=2, default=str),
        )
    except OSError as e:
        raise ExportError(f"Failed to write field TIFF {filename}: {e}", filename) from e


def read_field_tiff(filename: str | Path) -> tuple[np.ndarray, dict[str, Any]]:
    """Read a field TIFF written by :func:`write_field_tiff`.

    Returns:
        Tuple of (stack of shape (3, rows, cols), metadata)
    """
    with tifffile.TiffFile(filename) as tif:
        data = tif.asarray()

        metadata: dict[str, Any] = {}
        description = tif.pages[0].description
        if description:
            try:
                metadata = json.loads(description)
            except json.JSONDecodeError:
                metadata = {"description": description}

    return data, metadata


__all__ = [
    "PLANES",
    "field_stack",
    "write_field_tiff",
    "read_field_tiff",
]
