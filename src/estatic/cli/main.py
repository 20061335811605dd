"""CLI main module with subcommands for run, validate, and inspect.

Usage:
    python -m estatic.cli run --config scene.yaml --out out_dir
    python -m estatic.cli validate
    python -m estatic.cli inspect --config scene.yaml
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..core.config import load_config
from ..core.errors import EstaticError
from ..core.logging import get_logger, setup_logging
from ..core.sizing import check_field_budget, max_resolution
from ..io.lines import write_lines_json
from ..io.tiff import write_field_tiff
from ..physics.charge_grid import ChargeGrid
from ..validation.cases import run_all

logger = get_logger(__name__)


def cmd_run(args: argparse.Namespace) -> int:
    """Solve a scene and write the field stack and field lines.

    Writes `scene.normalized.json`, `field.tif` and, when tracing is enabled,
    `lines.json` to the output directory.
    """
    try:
        scene = load_config(args.config)
        logger.info("Loaded scene", {"config": str(args.config), "charges": len(scene.charges)})

        out_path = Path(args.out)
        out_path.mkdir(parents=True, exist_ok=True)
        (out_path / "scene.normalized.json").write_text(
            json.dumps(scene.model_dump(mode="json"), indent=2)
        )

        grid = ChargeGrid.from_scene(scene)

        with logger.timed("Field solved") as stats:
            grid.solve()
            stats["subcells"] = int(grid.field.potential.size)

        metadata = {"resolution": grid.resolution, "charges": len(scene.charges)}
        write_field_tiff(out_path / "field.tif", grid.field, metadata=metadata)
        print("Wrote", out_path / "field.tif")

        if scene.trace.enabled:
            with logger.timed("Field lines traced") as stats:
                lines = grid.trace_lines(max_steps=scene.trace.max_steps)
                stats["lines"] = len(lines)
            write_lines_json(out_path / "lines.json", lines, metadata=metadata)
            print("Wrote", out_path / "lines.json")

        return 0
    except (EstaticError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Run validation cases and check tolerances.

    Optionally accepts a config path for a scene load sanity check.
    """
    print("Running validation suite...")
    if getattr(args, "config", None):
        try:
            load_config(args.config)
            print("Loaded config:", args.config)
        except (EstaticError, ValueError) as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return 2

    results = run_all()

    print("\nValidation Results:")
    print("-" * 56)
    for result in results:
        status = "PASS" if result["passed"] else "FAIL"
        print(f"  {result['name']:30} {status}  (error {result['error']:.2e})")
    print("-" * 56)

    if all(result["passed"] for result in results):
        print("\nAll validation cases passed")
        return 0
    print("\nSome validation cases failed")
    return 1


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print a scene summary and field memory estimates."""
    try:
        scene = load_config(args.config)
        grid = scene.grid
        sizing = check_field_budget(
            grid.width, grid.height, grid.resolution, scene.budget.memory_gb
        )
        positive = sum(1 for spec in scene.charges if spec.charge > 0)
        negative = sum(1 for spec in scene.charges if spec.charge < 0)

        print("Inspecting config:", args.config)
        print("Scene Summary:")
        print("-" * 40)
        print(f"  Grid:         {grid.width} x {grid.height}")
        print(f"  Resolution:   {grid.resolution} (ratio {sizing['ratio']})")
        print(f"  Charges:      {len(scene.charges)} ({positive} positive, {negative} negative)")
        print(f"  Tracing:      {'on' if scene.trace.enabled else 'off'}")
        print()

        print("Field Estimates:")
        print("-" * 40)
        print(f"  Field grid:   {sizing['field_width']} x {sizing['field_height']}")
        print(f"  Subcells:     {sizing['subcells']}")
        print(f"  Memory:       {sizing['memory_estimate_gb']:.4f} GB")
        print(f"  Budget:       {scene.budget.memory_gb:.2f} GB")
        print(
            "  Max resolution within budget: "
            f"{max_resolution(grid.width, grid.height, scene.budget.memory_gb)}"
        )

        return 0
    except (EstaticError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _logging_options(suppress: bool) -> argparse.ArgumentParser:
    """Logging flags shared by the top-level parser and every subcommand.

    Subcommand copies default to SUPPRESS so they only override the top-level
    value when given after the subcommand.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Enable debug logging",
    )
    parent.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress else None,
        help="Optional JSON lines log file",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="estatic.cli",
        description="2D electrostatic field simulation CLI",
        parents=[_logging_options(suppress=False)],
    )
    subcommand_options = _logging_options(suppress=True)

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # Run subcommand
    parser_run = subparsers.add_parser(
        "run",
        parents=[subcommand_options],
        help="Solve a scene and export the field and field lines",
    )
    parser_run.add_argument(
        "--config",
        "-c",
        type=Path,
        required=True,
        help="Path to YAML/JSON scene file",
    )
    parser_run.add_argument(
        "--out",
        "-o",
        type=Path,
        default=Path("output"),
        help="Output directory (default: output)",
    )
    parser_run.set_defaults(func=cmd_run)

    # Validate subcommand
    parser_validate = subparsers.add_parser(
        "validate",
        parents=[subcommand_options],
        help="Run analytic validation cases",
    )
    parser_validate.add_argument(
        "--config",
        "-c",
        type=Path,
        required=False,
        help="Optional path to YAML/JSON scene to sanity-check",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # Inspect subcommand
    parser_inspect = subparsers.add_parser(
        "inspect",
        parents=[subcommand_options],
        help="Print scene summary and field memory estimates",
    )
    parser_inspect.add_argument(
        "--config",
        "-c",
        type=Path,
        required=True,
        help="Path to YAML/JSON scene file",
    )
    parser_inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)
    return int(args.func(args) or 0)

