# swatch_atlas/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Callable, Dict, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import W_BRIGHTNESS_DEFAULT, W_HUE_DEFAULT, W_SATURATION_DEFAULT

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
Point = Tuple[float, float]

U8RGBA = NDArray[np.uint8]  # (H, W, 4)
HSBArray = NDArray[np.float64]  # (..., 3) hue deg, sat %, bright %


# Categorical fields


class Field(str, Enum):
    """The five categorical swatch fields. Values match the lookup-table keys."""

    DYESTUFF = "dyestuff"
    PH = "pH"
    MORDANT = "mordant"
    ADDITIVE = "additive"
    TIME = "time"


FIELDS: Tuple[Field, ...] = tuple(Field)

_FIELD_ALIASES: Dict[str, Field] = {
    "ph": Field.PH,
    "exposuretime": Field.TIME,
    "exposure_time": Field.TIME,
    "exposure": Field.TIME,
}


def parse_field(name: str | Field) -> Field:
    """Field from its key ('dyestuff', 'pH', ...) or a common alias."""
    if isinstance(name, Field):
        return name
    key = name.strip()
    for f in FIELDS:
        if f.value == key:
            return f
    try:
        return _FIELD_ALIASES[key.lower()]
    except KeyError:
        raise ValueError(f"unknown field: {name!r}") from None


# Value objects


@dataclass(frozen=True)
class HSB:
    """Hue in degrees [0,360), saturation and brightness in percent [0,100]."""

    h: float
    s: float
    b: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.h, self.s, self.b)


@dataclass(frozen=True)
class SwatchRecord:
    """One dye sample: measured colour plus categorical provenance."""

    filename: str
    h: float
    s: float
    b: float
    dyestuff: str = ""
    ph: str = ""
    mordant: str = ""
    additive: str = ""
    time: str = ""

    @property
    def hsb(self) -> HSB:
        return HSB(self.h, self.s, self.b)


@dataclass(frozen=True)
class Weights:
    """Per-channel weights for the swatch score. Need not sum to 1."""

    hue: float = W_HUE_DEFAULT
    brightness: float = W_BRIGHTNESS_DEFAULT
    saturation: float = W_SATURATION_DEFAULT


@dataclass(frozen=True)
class Tile:
    """One mosaic cell: pixel bounds, sampled colour, chosen swatch and score."""

    tx: int
    ty: int
    x: int
    y: int
    w: int
    h: int
    colour: HSB
    swatch: Optional[SwatchRecord]
    score: float


@dataclass(frozen=True)
class PositionedEntry:
    """A swatch placed by an atlas layout."""

    record: SwatchRecord
    x: float
    y: float
    size: float
    alpha: float
    group_colour: Optional[HexStr] = None


# Field accessors (one per field, no attribute lookup by string)

FIELD_ACCESSORS: Dict[Field, Callable[[SwatchRecord], str]] = {
    Field.DYESTUFF: attrgetter("dyestuff"),
    Field.PH: attrgetter("ph"),
    Field.MORDANT: attrgetter("mordant"),
    Field.ADDITIVE: attrgetter("additive"),
    Field.TIME: attrgetter("time"),
}


def field_value(record: SwatchRecord, field: Field) -> str:
    """Categorical value of `record` for `field`."""
    return FIELD_ACCESSORS[field](record)


# Small helpers


def clamp_value(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def lerp(lo: float, hi: float, t: float) -> float:
    """Linear interpolation lo..hi for t in [0,1] (not clamped)."""
    return lo + (hi - lo) * t


def hue_difference_degrees(hue_a: float, hue_b: float) -> float:
    """Minimal absolute difference between two hues in degrees [0..180]."""
    d = abs(hue_a - hue_b) % 360.0
    return 360.0 - d if d > 180.0 else d


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def assert_u8_rgba(image: np.ndarray) -> U8RGBA:
    """Validate a uint8 (H,W,4) image and return it typed as U8RGBA."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "Point",
    "U8RGBA",
    "HSBArray",
    "Field",
    "FIELDS",
    "parse_field",
    # value objects
    "HSB",
    "SwatchRecord",
    "Weights",
    "Tile",
    "PositionedEntry",
    # accessors
    "FIELD_ACCESSORS",
    "field_value",
    # helpers
    "clamp_value",
    "lerp",
    "hue_difference_degrees",
    "rgb_to_hex",
    "hex_to_rgb",
    "assert_u8_rgba",
]
