# swatch_atlas/layout/polar.py
from __future__ import annotations

"""
Polar colour wheel.

Angle from hue (rotated so hue 0 points up), radius from saturation,
size and opacity from brightness. World coordinates are centred on (0, 0)
with y growing downwards.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from ..constants import (
    POLAR_DIAMETER,
    POLAR_INNER_RADIUS,
    POLAR_OUTER_RATIO,
    POLAR_RING_SATURATIONS,
    POLAR_SPOKE_HUES,
)
from ..core_types import PositionedEntry, SwatchRecord, clamp_value, lerp
from .common import LayoutResult, PolarGuides, SizeEncoding


@dataclass(frozen=True)
class PolarParams:
    diameter: float = POLAR_DIAMETER
    inner_radius: float = POLAR_INNER_RADIUS
    outer_ratio: float = POLAR_OUTER_RATIO
    encoding: SizeEncoding = field(default_factory=SizeEncoding)

    @property
    def outer_radius(self) -> float:
        return self.outer_ratio * self.diameter


def polar_angle(hue: float) -> float:
    """Screen angle in radians for a hue in degrees."""
    return math.radians(hue - 90.0)


def polar_radius(saturation: float, params: PolarParams) -> float:
    t = clamp_value(saturation / 100.0, 0.0, 1.0)
    return lerp(params.inner_radius, params.outer_radius, t)


def polar_position(record: SwatchRecord, params: PolarParams) -> tuple[float, float]:
    angle = polar_angle(record.h)
    r = polar_radius(record.s, params)
    return r * math.cos(angle), r * math.sin(angle)


def polar_layout(
    records: Sequence[SwatchRecord], params: PolarParams = PolarParams()
) -> LayoutResult:
    """
    Place every record on the wheel. Entries come back sorted by ascending y
    (paint order only; coordinates are untouched by the sort).
    """
    entries: List[PositionedEntry] = []
    for rec in records:
        x, y = polar_position(rec, params)
        size, alpha = params.encoding.encode(rec.b)
        entries.append(PositionedEntry(record=rec, x=x, y=y, size=size, alpha=alpha))

    entries.sort(key=lambda e: e.y)

    guides = PolarGuides(
        inner_radius=params.inner_radius,
        outer_radius=params.outer_radius,
        ring_radii=tuple(polar_radius(float(s), params) for s in POLAR_RING_SATURATIONS),
        spoke_angles=tuple(float(h) - 90.0 for h in POLAR_SPOKE_HUES),
    )
    return LayoutResult(mode="polar", entries=tuple(entries), guides=guides)


__all__ = ["PolarParams", "polar_angle", "polar_radius", "polar_position", "polar_layout"]
