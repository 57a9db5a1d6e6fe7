# swatch_atlas/__init__.py
"""
swatch_atlas package.

Purpose:
  Colour matching and layout for a catalogue of dye swatches: photomosaics of a
  sample image, and a polar / nested-grid colour atlas with filtering and hover.
  See dye_mosaic.py and dye_atlas.py for the CLIs.

Public API:
  SwatchCatalogue : typed records + per-field value indexes (catalogue)
  FilterEngine    : categorical multi-select filter (filters)
  compose_mosaic  : tile a sample image with the nearest swatch (mosaic)
  polar_layout    : hue/saturation wheel (layout)
  grid_layout     : nested-axis grid (layout)
  find_entry_at   : hover hit-test (hit_test)
  AtlasController : explicit app state with last-writer-wins re-layout (state)
  colour_convert  : RGB -> HSB, hue distance, swatch score
  core_types      : shared value objects (SwatchRecord, Tile, PositionedEntry, Field)

Quick start:
  from swatch_atlas import SwatchCatalogue, compose_mosaic, load_lookup
  cat = SwatchCatalogue.load(load_lookup(Path("swatch_lookup.json")))
"""

__version__ = "0.2.0"

from . import colour_convert
from . import core_types
from . import errors
from . import utils

from .catalogue import SwatchCatalogue, load_lookup  # noqa: E402,F401
from .core_types import (  # noqa: E402,F401
    Field,
    HSB,
    PositionedEntry,
    SwatchRecord,
    Tile,
    Weights,
)
from .errors import (  # noqa: E402,F401
    ImageUnavailable,
    MalformedRecord,
    NoSwatchesAvailable,
    SampleUnreadable,
    SwatchAtlasError,
)
from .filters import FilterEngine  # noqa: E402,F401
from .hit_test import Viewport, find_entry_at  # noqa: E402,F401
from .layout import GridParams, PolarParams, grid_layout, polar_layout  # noqa: E402,F401
from .mosaic import Mosaic, compose_mosaic, tiles_to_csv  # noqa: E402,F401
from .state import AtlasController  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "errors",
    "utils",
    "SwatchCatalogue",
    "load_lookup",
    "Field",
    "HSB",
    "PositionedEntry",
    "SwatchRecord",
    "Tile",
    "Weights",
    "SwatchAtlasError",
    "MalformedRecord",
    "ImageUnavailable",
    "NoSwatchesAvailable",
    "SampleUnreadable",
    "FilterEngine",
    "Viewport",
    "find_entry_at",
    "PolarParams",
    "GridParams",
    "polar_layout",
    "grid_layout",
    "Mosaic",
    "compose_mosaic",
    "tiles_to_csv",
    "AtlasController",
]
