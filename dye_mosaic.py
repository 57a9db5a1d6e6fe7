#!/usr/bin/env python3
"""
dye_mosaic.py
Rebuild a sample image as a mosaic of dye swatches.

Usage:
  python dye_mosaic.py SAMPLE [--lut swatch_lookup.json] [--tiles imagesSuperCrop]
                       [--tile 20] [--wh 1.0] [--wb 0.6] [--ws 0.2]
                       [--filter pH=Acidic,Neutral] [--out mosaic.png]
                       [--csv mosaic_tile_to_swatch.csv] [--debug]

Matching:
  Each tile's visible pixels are averaged and converted to HSB. The swatch with
  the lowest  wh*hue_distance + wb*|dB| + ws*|dS|  wins; ties go to the first
  swatch in lookup order.

Output:
  PNG mosaic plus a CSV with one row per tile (geometry, sampled colour,
  matched swatch metadata, score).
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

from swatch_atlas.catalogue import SwatchCatalogue, load_lookup
from swatch_atlas.constants import LUT_PATH, PREVIEW_DIR, TILE_DIR, TILE_SIZE_DEFAULT
from swatch_atlas.core_types import Weights
from swatch_atlas.errors import SwatchAtlasError
from swatch_atlas.filters import FilterEngine, parse_filter_spec
from swatch_atlas.image_io import load_sample_rgba, load_swatch_images, save_png
from swatch_atlas.mosaic import clamp_tile_size, write_tiles_csv
from swatch_atlas.render import render_mosaic
from swatch_atlas.state import AppState, compose_for_state
from swatch_atlas.utils import (
    error,
    format_seconds_compact,
    log,
    print_banner,
    print_config_line,
    warn,
)


def _default_workers() -> int:
    """Leave a core free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    return max(1, n - 1)


def parse_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dye_mosaic",
        description="Approximate an image with a mosaic of dye swatches.",
    )
    parser.add_argument("sample", type=Path, help="Sample image")
    parser.add_argument("--lut", type=Path, default=Path(LUT_PATH), help="Swatch lookup (JSON or CSV)")
    parser.add_argument("--tiles", type=Path, default=Path(TILE_DIR), help="Folder of tile images")
    parser.add_argument(
        "--previews", type=Path, default=Path(PREVIEW_DIR), help="Folder of preview images"
    )
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Skip swatch images and paint flat HSB squares instead",
    )
    parser.add_argument("--tile", type=int, default=TILE_SIZE_DEFAULT, help="Tile edge in px (4..200)")
    parser.add_argument("--wh", type=float, default=Weights().hue, help="Hue weight")
    parser.add_argument("--wb", type=float, default=Weights().brightness, help="Brightness weight")
    parser.add_argument("--ws", type=float, default=Weights().saturation, help="Saturation weight")
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="FIELD=V1,V2",
        help="Restrict a field to the listed values (repeatable)",
    )
    parser.add_argument("--out", type=Path, default=Path("mosaic.png"), help="Output PNG")
    parser.add_argument(
        "--csv", type=Path, default=Path("mosaic_tile_to_swatch.csv"), help="Output CSV"
    )
    parser.add_argument("--workers", type=int, default=_default_workers(), help="Image decode threads")
    parser.add_argument("--debug", action="store_true", help="Verbose matching details")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    t0 = time.perf_counter()
    print_banner(args.sample.name)

    catalogue = SwatchCatalogue.load(load_lookup(args.lut), debug=args.debug)
    images = None
    if not args.no_images:
        images = load_swatch_images(
            catalogue.records, args.tiles, args.previews, args.workers, debug=args.debug
        )
        catalogue = catalogue.restrict_to(images.keys())

    engine = FilterEngine(parse_filter_spec(args.filter))
    state = AppState(catalogue=catalogue, selection=engine.selection)
    swatches = engine.apply(catalogue)
    tile = clamp_tile_size(args.tile)
    weights = Weights(hue=args.wh, brightness=args.wb, saturation=args.ws)
    print_config_line(
        "mosaic",
        [
            ("Tile", tile),
            ("Weights", f"{weights.hue:.2f}/{weights.brightness:.2f}/{weights.saturation:.2f}"),
            ("Swatches", len(catalogue)),
            ("Shown", len(swatches)),
        ],
        args.debug,
    )

    rgba = load_sample_rgba(args.sample)
    if catalogue and not swatches:
        warn("filter matches no swatches; writing an empty mosaic")
    mosaic = compose_for_state(state, rgba, tile, weights, debug=args.debug)

    out_png = save_png(args.out, render_mosaic(mosaic, images))
    out_csv = write_tiles_csv(args.csv, mosaic)
    log(f"Rendered mosaic: {mosaic.tiles_x}x{mosaic.tiles_y} tiles ({len(mosaic.tiles)} tiles)")
    log(f"Wrote {out_png} and {out_csv} in {format_seconds_compact(time.perf_counter() - t0)}")


def main(argv: list[str] | None = None) -> int:
    args = parse_cli_args(argv)
    try:
        run(args)
    except SwatchAtlasError as exc:
        error(str(exc))
        return 1
    except (OSError, ValueError) as exc:
        error(str(exc))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
