# swatch_atlas/mosaic/compose.py
from __future__ import annotations

"""
Mosaic composer.

Walks the sample image on a tile grid, averages each tile's visible pixels to
HSB, and assigns the swatch with the lowest weighted score. The result is
built completely before it is returned; on failure nothing is returned.
"""

import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import numpy as np

from ..colour_convert import average_colour, best_match, hsb_matrix
from ..constants import TILE_SIZE_DEFAULT, TILE_SIZE_MAX, TILE_SIZE_MIN
from ..core_types import SwatchRecord, Tile, Weights, assert_u8_rgba, clamp_value
from ..errors import NoSwatchesAvailable, SampleUnreadable
from ..image_io import load_sample_rgba
from ..utils import debug_log, format_seconds_compact, key_value_pairs_to_string

TileGrid = List[List[Optional[Tile]]]


@dataclass(frozen=True)
class Mosaic:
    """Tile assignment grid [ty][tx] plus the flat tile list in scan order."""

    grid: TileGrid
    tiles: List[Tile]
    tiles_x: int
    tiles_y: int
    tile_size: int
    width: int
    height: int

    def tile_at(self, px: float, py: float) -> Optional[Tile]:
        """Tile under an image-space point, or None outside the grid."""
        if px < 0 or py < 0:
            return None
        tx = int(px // self.tile_size)
        ty = int(py // self.tile_size)
        if tx >= self.tiles_x or ty >= self.tiles_y:
            return None
        return self.grid[ty][tx]


def clamp_tile_size(value: Any) -> int:
    """Parse and clamp a tile edge to [TILE_SIZE_MIN, TILE_SIZE_MAX]."""
    try:
        size = int(value)
    except (TypeError, ValueError):
        size = 0
    if size == 0:
        size = TILE_SIZE_DEFAULT
    return int(clamp_value(size, TILE_SIZE_MIN, TILE_SIZE_MAX))


def compose_mosaic(
    rgba: np.ndarray,
    swatches: Sequence[SwatchRecord],
    tile_size: int,
    weights: Weights = Weights(),
    debug: bool = False,
) -> Mosaic:
    """
    Assign a swatch to every tile of `rgba` (uint8 H,W,4).

    Tiles start at multiples of `tile_size`; the last row and column are
    clipped to the image. Each tile takes the lowest-scoring swatch, the
    first in catalogue order on exact ties.

    Raises:
      NoSwatchesAvailable: `swatches` is empty.
      SampleUnreadable: `rgba` is not a uint8 (H,W,4) buffer.
    """
    if not swatches:
        raise NoSwatchesAvailable("no swatches to match against")
    try:
        rgba = assert_u8_rgba(rgba)
    except TypeError as e:
        raise SampleUnreadable(str(e)) from e
    if tile_size <= 0:
        raise ValueError("tile_size must be positive")

    t0 = time.perf_counter()
    height, width = int(rgba.shape[0]), int(rgba.shape[1])
    tiles_x = math.ceil(width / tile_size)
    tiles_y = math.ceil(height / tile_size)
    cand_hsb = hsb_matrix(swatches)

    grid: TileGrid = [[None] * tiles_x for _ in range(tiles_y)]
    tiles: List[Tile] = []
    for y in range(0, height, tile_size):
        ty = y // tile_size
        for x in range(0, width, tile_size):
            tx = x // tile_size
            colour = average_colour(rgba, x, y, tile_size, tile_size)
            idx, score = best_match(colour, cand_hsb, weights)
            if idx < 0:
                continue
            tile = Tile(
                tx=tx,
                ty=ty,
                x=x,
                y=y,
                w=min(tile_size, width - x),
                h=min(tile_size, height - y),
                colour=colour,
                swatch=swatches[idx],
                score=score,
            )
            grid[ty][tx] = tile
            tiles.append(tile)

    if debug:
        used = len({t.swatch.filename for t in tiles if t.swatch is not None})
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Tiles", f"{tiles_x}x{tiles_y}"),
                    ("Tile size", tile_size),
                    ("Candidates", len(swatches)),
                    ("Distinct swatches", used),
                    ("Time", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )

    return Mosaic(
        grid=grid,
        tiles=tiles,
        tiles_x=tiles_x,
        tiles_y=tiles_y,
        tile_size=tile_size,
        width=width,
        height=height,
    )


def compose_from_path(
    sample_path: Path,
    swatches: Sequence[SwatchRecord],
    tile_size: int,
    weights: Weights = Weights(),
    debug: bool = False,
) -> Mosaic:
    """Decode the sample (SampleUnreadable on failure) and compose."""
    if not swatches:
        raise NoSwatchesAvailable("no swatches to match against")
    rgba = load_sample_rgba(sample_path)
    return compose_mosaic(rgba, swatches, tile_size, weights, debug=debug)


__all__ = ["Mosaic", "TileGrid", "clamp_tile_size", "compose_mosaic", "compose_from_path"]
