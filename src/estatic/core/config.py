"""Scene configuration models and I/O.

Pydantic models describing a grid, its initial charges and tracing options,
with YAML/JSON load and save.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .errors import ConfigError
from .sizing import DEFAULT_MEMORY_GB, check_field_budget
from .types import CHARGE_MAX, CHARGE_MIN


class GridSpec(BaseModel):
    """Charge grid dimensions and field resolution."""

    width: int = Field(default=200, ge=1, description="Width in charge cells")
    height: int = Field(default=200, ge=1, description="Height in charge cells")
    resolution: int = Field(
        default=1, ge=1, description="Field resolution (ratio = 2 * resolution - 1)"
    )


class ChargeSpec(BaseModel):
    """A charge placed on one tile."""

    x: int = Field(ge=0, description="Cell column")
    y: int = Field(ge=0, description="Cell row")
    charge: int = Field(description="Signed charge, -128..127")

    @field_validator("charge")
    @classmethod
    def validate_charge(cls, v: int) -> int:
        """Charges are stored as signed 8-bit values."""
        if not CHARGE_MIN <= v <= CHARGE_MAX:
            raise ValueError(f"Charge must be between {CHARGE_MIN} and {CHARGE_MAX}, got {v}")
        return v


class TraceSpec(BaseModel):
    """Field line tracing options."""

    enabled: bool = Field(default=True, description="Trace field lines after solving")
    max_steps: int = Field(default=2000, ge=1, description="Step cap per field line")


class Budget(BaseModel):
    """Resource budget for the field grid."""

    memory_gb: float = Field(
        default=DEFAULT_MEMORY_GB, gt=0, allow_inf_nan=False, description="Maximum field memory"
    )


class Scene(BaseModel):
    """Complete scene configuration."""

    grid: GridSpec = Field(default_factory=GridSpec, description="Grid layout")
    charges: list[ChargeSpec] = Field(default_factory=list, description="Initial charges")
    trace: TraceSpec = Field(default_factory=TraceSpec, description="Tracing options")
    budget: Budget = Field(default_factory=Budget, description="Resource budget")

    @model_validator(mode="after")
    def validate_scene(self) -> Scene:
        """Check charges against the grid and the grid against the budget."""
        seen = set()
        for spec in self.charges:
            if spec.x >= self.grid.width or spec.y >= self.grid.height:
                raise ValueError(
                    f"Charge at ({spec.x}, {spec.y}) is outside the "
                    f"{self.grid.width}x{self.grid.height} grid"
                )
            if (spec.x, spec.y) in seen:
                raise ValueError(f"Cell ({spec.x}, {spec.y}) is charged more than once")
            seen.add((spec.x, spec.y))

        check_field_budget(
            self.grid.width, self.grid.height, self.grid.resolution, self.budget.memory_gb
        )
        return self


def load_config(path: str | Path) -> Scene:
    """Load a scene from a YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Validated Scene object

    Raises:
        ConfigError: If the file is missing or cannot be parsed
        pydantic.ValidationError: If the scene is invalid
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", path)

    with open(path, encoding="utf-8") as f:
        content = f.read()

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse {path}: {e}", path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Scene file {path} must contain a mapping, got {type(data).__name__}", path
        )

    return Scene(**data)


def save_config(scene: Scene, path: str | Path) -> None:
    """Save a scene to a YAML or JSON file.

    Args:
        scene: Scene configuration to save
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = scene.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def round_trip_config(scene: Scene) -> Scene:
    """Serialize a scene to YAML and load it back."""
    data = scene.model_dump(mode="json", exclude_unset=True)
    yaml_str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    loaded_data = yaml.safe_load(yaml_str)
    return Scene(**loaded_data)


__all__ = [
    "GridSpec",
    "ChargeSpec",
    "TraceSpec",
    "Budget",
    "Scene",
    "load_config",
    "save_config",
    "round_trip_config",
]
