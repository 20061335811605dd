"""Analytic validation cases for the field solver and line tracer."""

from .cases import CASES, run_all

__all__ = [
    "CASES",
    "run_all",
]
