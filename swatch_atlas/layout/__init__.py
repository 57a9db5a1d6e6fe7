# swatch_atlas/layout/__init__.py
"""
Atlas layout API.

Provides:
  polar_layout(records, params=PolarParams()) -> LayoutResult
  grid_layout(records, params=GridParams()) -> LayoutResult
  run_layout(mode, records, polar=PolarParams(), grid=GridParams()) -> LayoutResult

Both strategies are stateless: each call replaces the previous layout and the
same input always gives the same positions.
"""

from __future__ import annotations

from typing import Callable, Dict, Literal, Sequence

from ..core_types import SwatchRecord
from .common import (
    GridGuides,
    LayoutResult,
    PolarGuides,
    SizeEncoding,
    group_colour,
    stable_hash,
)
from .grid import GridParams, grid_layout, jitter_offset
from .polar import PolarParams, polar_layout

Mode = Literal["polar", "grid"]
MODES: tuple[str, ...] = ("polar", "grid")


def run_layout(
    mode: Mode,
    records: Sequence[SwatchRecord],
    polar: PolarParams = PolarParams(),
    grid: GridParams = GridParams(),
) -> LayoutResult:
    """Dispatch to the strategy for `mode`."""
    layouts: Dict[str, Callable[[], LayoutResult]] = {
        "polar": lambda: polar_layout(records, polar),
        "grid": lambda: grid_layout(records, grid),
    }
    if mode not in layouts:
        raise ValueError(f"unknown layout mode: {mode!r}")
    return layouts[mode]()


__all__ = [
    "Mode",
    "MODES",
    "run_layout",
    "LayoutResult",
    "PolarGuides",
    "GridGuides",
    "SizeEncoding",
    "group_colour",
    "stable_hash",
    "PolarParams",
    "polar_layout",
    "GridParams",
    "grid_layout",
    "jitter_offset",
]
