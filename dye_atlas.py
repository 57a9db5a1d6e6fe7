#!/usr/bin/env python3
"""
dye_atlas.py
Lay out a dye swatch catalogue as a colour atlas and render it to PNG.

Usage:
  python dye_atlas.py [--lut swatch_lookup.json] [--tiles imagesSuperCrop]
                      [--mode polar|grid] [--outer-x dyestuff] [--outer-y pH]
                      [--inner-x mordant] [--inner-y time] [--colour-by additive]
                      [--filter pH=Acidic] [--size-scale 1.0]
                      [--hover X Y] [--out atlas.png] [--manifest atlas.json] [--debug]

Modes:
  polar : hue is the angle (0 at the top, clockwise), saturation the radius.
  grid  : outer axes are two catalogue fields; optional inner axes subdivide
          each cell by the values present in that cell.

Brightness drives sprite size and opacity in both modes.

Output:
  PNG atlas plus a JSON manifest with every placed swatch and the axis values.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from swatch_atlas.catalogue import FIELD_TITLES, SwatchCatalogue, display_label, load_lookup
from swatch_atlas.constants import (
    GRID_HEIGHT,
    GRID_WIDTH,
    LUT_PATH,
    POLAR_DIAMETER,
    PREVIEW_DIR,
    SIZE_SCALE_DEFAULT,
    TILE_DIR,
)
from swatch_atlas.core_types import Field, PositionedEntry, parse_field
from swatch_atlas.errors import SwatchAtlasError
from swatch_atlas.filters import parse_filter_spec
from swatch_atlas.hit_test import Viewport
from swatch_atlas.image_io import load_swatch_images, save_png
from swatch_atlas.layout import MODES, GridGuides
from swatch_atlas.render import render_atlas, render_hover_preview
from swatch_atlas.state import AtlasController
from swatch_atlas.utils import (
    debug_log,
    error,
    format_bool_on_off,
    format_seconds_compact,
    log,
    print_banner,
    print_config_line,
    warn,
)


def _default_workers() -> int:
    n = os.cpu_count() or 4
    return max(1, n - 1)


def _optional_field(name: Optional[str]) -> Optional[Field]:
    if name is None or name.strip().lower() in ("", "none"):
        return None
    return parse_field(name)


def canvas_size_for(mode: str) -> Tuple[int, int]:
    """Polar atlases are square; grids use the fixed grid area."""
    if mode == "polar":
        return (int(POLAR_DIAMETER), int(POLAR_DIAMETER))
    return (int(GRID_WIDTH), int(GRID_HEIGHT))


def entry_to_dict(entry: PositionedEntry) -> Dict[str, Any]:
    r = entry.record
    return {
        "filename": r.filename,
        "x": round(entry.x, 3),
        "y": round(entry.y, 3),
        "size": round(entry.size, 3),
        "alpha": round(entry.alpha, 3),
        "group_colour": entry.group_colour,
        "h": r.h,
        "s": r.s,
        "b": r.b,
        "dyestuff": r.dyestuff,
        "pH": r.ph,
        "mordant": r.mordant,
        "additive": r.additive,
        "time": r.time,
    }


def build_manifest(
    controller: AtlasController,
    lut_path: Path,
    image_path: Path,
    canvas_size: Tuple[int, int],
    hovered: Optional[PositionedEntry] = None,
) -> Dict[str, Any]:
    st = controller.state
    total, shown = controller.counts()
    manifest: Dict[str, Any] = {
        "lut_file": str(lut_path),
        "image_file": str(image_path),
        "mode": st.mode,
        "canvas_width": canvas_size[0],
        "canvas_height": canvas_size[1],
        "size_scale": st.size_scale,
        "total": total,
        "shown": shown,
        "filters": {
            f.value: (None if sel is None else sorted(sel)) for f, sel in st.selection.items()
        },
        "placed": [entry_to_dict(e) for e in controller.entries],
    }
    guides = controller.layout.guides
    if isinstance(guides, GridGuides):
        manifest["axes"] = {
            "titles": [FIELD_TITLES[st.grid.outer_x], FIELD_TITLES[st.grid.outer_y]],
            "outer_x": st.grid.outer_x.value,
            "outer_y": st.grid.outer_y.value,
            "inner_x": st.grid.inner_x.value if st.grid.inner_x else None,
            "inner_y": st.grid.inner_y.value if st.grid.inner_y else None,
            "outer_x_values": [display_label(st.grid.outer_x, v) for v in guides.outer_x_values],
            "outer_y_values": [display_label(st.grid.outer_y, v) for v in guides.outer_y_values],
            "inner_counts": [
                {"col": c, "row": r, "inner_cols": ic, "inner_rows": ir}
                for (c, r), (ic, ir) in sorted(guides.inner_counts.items())
            ],
        }
    if hovered is not None:
        manifest["hover"] = entry_to_dict(hovered)
    return manifest


def parse_cli_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dye_atlas",
        description="Render a dye swatch catalogue as a polar or nested-grid colour atlas.",
    )
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
    parser.add_argument("--mode", choices=MODES, default="polar", help="Layout mode")
    parser.add_argument("--outer-x", default=Field.DYESTUFF.value, help="Grid outer column field")
    parser.add_argument("--outer-y", default=Field.PH.value, help="Grid outer row field")
    parser.add_argument("--inner-x", default=None, help="Grid inner column field (optional)")
    parser.add_argument("--inner-y", default=None, help="Grid inner row field (optional)")
    parser.add_argument("--colour-by", default=None, help="Outline swatches by this field (grid)")
    parser.add_argument(
        "--size-scale", type=float, default=SIZE_SCALE_DEFAULT, help="Sprite size multiplier"
    )
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="FIELD=V1,V2",
        help="Restrict a field to the listed values (repeatable)",
    )
    parser.add_argument(
        "--hover",
        type=float,
        nargs=2,
        default=None,
        metavar=("X", "Y"),
        help="Canvas point to hit-test; writes <out>_hover.png for the hit",
    )
    parser.add_argument("--out", type=Path, default=Path("atlas.png"), help="Output PNG")
    parser.add_argument(
        "--manifest", type=Path, default=None, help="Manifest JSON path. Defaults to <out>.json"
    )
    parser.add_argument("--no-guides", action="store_true", help="Skip rings/spokes and grid lines")
    parser.add_argument("--workers", type=int, default=_default_workers(), help="Image decode threads")
    parser.add_argument("--debug", action="store_true", help="Verbose layout details")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    t0 = time.perf_counter()
    print_banner(f"atlas ({args.mode})")

    catalogue = SwatchCatalogue.load(load_lookup(args.lut), debug=args.debug)
    images = None
    if not args.no_images:
        images = load_swatch_images(
            catalogue.records, args.tiles, args.previews, args.workers, debug=args.debug
        )
        catalogue = catalogue.restrict_to(images.keys())

    controller = AtlasController(catalogue, mode=args.mode)
    for f, values in parse_filter_spec(args.filter).items():
        controller.set_filter(f, values)
    controller.set_axes(
        parse_field(args.outer_x),
        parse_field(args.outer_y),
        _optional_field(args.inner_x),
        _optional_field(args.inner_y),
    )
    controller.set_colour_by(_optional_field(args.colour_by))
    controller.set_size_scale(args.size_scale)

    canvas = canvas_size_for(args.mode)
    if args.mode == "polar":
        controller.set_viewport(Viewport(canvas[0] / 2.0, canvas[1] / 2.0, 1.0))

    total, shown = controller.counts()
    print_config_line(
        "atlas",
        [
            ("Mode", args.mode),
            ("Canvas", f"{canvas[0]}x{canvas[1]}"),
            ("Scale", args.size_scale),
            ("Guides", format_bool_on_off(not args.no_guides)),
            ("Shown", f"{shown}/{total}"),
        ],
        args.debug,
    )
    if total and not shown:
        warn("filter matches no swatches; writing an empty atlas")
    cards = controller.axis_cardinalities()
    if cards and args.debug:
        debug_log(f"grid {cards['cols']}x{cards['rows']} cells")

    st = controller.state
    out_png = save_png(
        args.out,
        render_atlas(
            st.layout,
            canvas,
            images,
            size_scale=st.size_scale,
            viewport=st.viewport,
            show_guides=not args.no_guides,
        ),
    )

    hovered = None
    if args.hover is not None:
        hovered = controller.hover((args.hover[0], args.hover[1]))
        if hovered is None:
            log(f"No swatch under ({args.hover[0]:g}, {args.hover[1]:g})")
        else:
            preview = save_png(
                out_png.with_name(out_png.stem + "_hover.png"),
                render_hover_preview(hovered.record, images),
            )
            log(f"Hover: {hovered.record.filename} -> {preview}")

    manifest_path = args.manifest if args.manifest is not None else out_png.with_suffix(".json")
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    with open(manifest_path, "w", encoding="utf-8") as mf:
        json.dump(build_manifest(controller, args.lut, out_png, canvas, hovered), mf, indent=2)

    log(f"Placed {len(controller.entries)} swatches")
    log(f"Wrote {out_png} and {manifest_path} in {format_seconds_compact(time.perf_counter() - t0)}")


def main(argv: List[str] | None = None) -> int:
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
