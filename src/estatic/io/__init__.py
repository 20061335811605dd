"""Export of derived simulation data: field TIFF stacks and field line JSON."""

from .lines import read_lines_json, write_lines_json
from .tiff import read_field_tiff, write_field_tiff

__all__ = [
    "write_field_tiff",
    "read_field_tiff",
    "write_lines_json",
    "read_lines_json",
]
