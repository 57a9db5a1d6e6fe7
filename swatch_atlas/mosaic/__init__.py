# swatch_atlas/mosaic/__init__.py
"""
Mosaic API.

Provides:
  compose_mosaic(rgba, swatches, tile_size, weights=Weights(), debug=False) -> Mosaic
    Tile an RGBA sample and pick the nearest swatch per tile.

    Args:
      rgba      : uint8 [H,W,4]
      swatches  : filtered SwatchRecord list in catalogue order (non-empty)
      tile_size : tile edge in pixels (callers clamp with clamp_tile_size)
      weights   : Weights(hue, brightness, saturation)

    Returns:
      Mosaic with grid [ty][tx], flat tiles, tiles_x = ceil(W/tile), tiles_y = ceil(H/tile).

  compose_from_path(path, swatches, tile_size, ...) -> Mosaic
  tiles_to_csv(mosaic) / write_tiles_csv(path, mosaic)
"""

from .compose import Mosaic, clamp_tile_size, compose_from_path, compose_mosaic
from .export import TILE_CSV_COLUMNS, tile_rows, tiles_to_csv, write_tiles_csv

__all__ = [
    "Mosaic",
    "clamp_tile_size",
    "compose_mosaic",
    "compose_from_path",
    "TILE_CSV_COLUMNS",
    "tile_rows",
    "tiles_to_csv",
    "write_tiles_csv",
]
