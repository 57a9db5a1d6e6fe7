# swatch_atlas/layout/common.py
from __future__ import annotations

"""
Pieces shared by the atlas layouts: the layout result, brightness encoding,
the seeded placement hash and group colours.
"""

import colorsys
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from ..constants import (
    ALPHA_MAX,
    ALPHA_MIN,
    GROUP_LIGHTNESS,
    GROUP_SATURATION,
    SIZE_MAX,
    SIZE_MIN,
)
from ..core_types import HexStr, PositionedEntry, clamp_value, lerp, rgb_to_hex

_HASH_MASK = 0xFFFFFFFF


def stable_hash(text: str, seed: int = 0) -> int:
    """
    Polynomial rolling hash (base 31, mod 2**32). Not cryptographic.
    Same text and seed always give the same value across runs and platforms.
    """
    h = seed & _HASH_MASK
    for ch in text:
        h = (h * 31 + ord(ch)) & _HASH_MASK
    return h


@dataclass(frozen=True)
class SizeEncoding:
    """Brightness [0,100] maps linearly to sprite size and opacity."""

    min_size: float = SIZE_MIN
    max_size: float = SIZE_MAX
    min_alpha: float = ALPHA_MIN
    max_alpha: float = ALPHA_MAX

    def encode(self, brightness: float) -> Tuple[float, float]:
        t = clamp_value(brightness / 100.0, 0.0, 1.0)
        return (
            lerp(self.min_size, self.max_size, t),
            lerp(self.min_alpha, self.max_alpha, t),
        )


def group_colour(value: str) -> HexStr:
    """Tag colour for a categorical value: hue from the hash, fixed S/L."""
    hue = stable_hash(value) % 360
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, GROUP_LIGHTNESS, GROUP_SATURATION)
    return rgb_to_hex((round(r * 255), round(g * 255), round(b * 255)))


@dataclass(frozen=True)
class PolarGuides:
    """Polar guide geometry, centred at the origin."""

    inner_radius: float
    outer_radius: float
    ring_radii: Tuple[float, ...]
    spoke_angles: Tuple[float, ...]  # degrees, already rotated so hue 0 is up


@dataclass(frozen=True)
class GridGuides:
    """Grid guide geometry and axis values."""

    origin_x: float
    origin_y: float
    cell_w: float
    cell_h: float
    outer_x_values: Tuple[str, ...]
    outer_y_values: Tuple[str, ...]
    inner_counts: Dict[Tuple[int, int], Tuple[int, int]]  # (col,row) -> (inner cols, inner rows)

    @property
    def cols(self) -> int:
        return max(len(self.outer_x_values), 1)

    @property
    def rows(self) -> int:
        return max(len(self.outer_y_values), 1)


Guides = Union[PolarGuides, GridGuides]


@dataclass(frozen=True)
class LayoutResult:
    """Positioned entries for one layout pass plus guide data for overlays."""

    mode: str
    entries: Tuple[PositionedEntry, ...]
    guides: Optional[Guides] = None

    def __len__(self) -> int:
        return len(self.entries)


__all__ = [
    "stable_hash",
    "SizeEncoding",
    "group_colour",
    "PolarGuides",
    "GridGuides",
    "Guides",
    "LayoutResult",
]
