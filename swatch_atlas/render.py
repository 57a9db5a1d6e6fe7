# swatch_atlas/render.py
from __future__ import annotations

"""
Pillow rendering of mosaics and atlas layouts.

Every swatch thumbnail is drawn from its largest centred square, scaled to the
target rectangle. Swatches without a decoded image are drawn as flat squares
of their own HSB colour.
"""

import colorsys
import math
from typing import Dict, Mapping, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .core_types import RGBTuple, SwatchRecord, hex_to_rgb
from .hit_test import Viewport
from .image_io import SwatchImages
from .layout.common import GridGuides, LayoutResult, PolarGuides
from .mosaic.compose import Mosaic

GUIDE_RGBA: Tuple[int, int, int, int] = (229, 231, 235, 255)
BACKGROUND_RGBA: Tuple[int, int, int, int] = (255, 255, 255, 255)

SwatchImageMap = Mapping[str, SwatchImages]


def crop_square(img: Image.Image) -> Image.Image:
    """Largest centred square: offset = (long edge - short edge) / 2."""
    w, h = img.size
    side = min(w, h)
    left = (w - side) // 2
    top = (h - side) // 2
    return img.crop((left, top, left + side, top + side))


def hsb_to_rgb(record: SwatchRecord) -> RGBTuple:
    r, g, b = colorsys.hsv_to_rgb(
        (record.h % 360.0) / 360.0,
        min(max(record.s / 100.0, 0.0), 1.0),
        min(max(record.b / 100.0, 0.0), 1.0),
    )
    return (round(r * 255), round(g * 255), round(b * 255))


def swatch_sprite(
    record: SwatchRecord,
    images: Optional[SwatchImageMap],
    size: int,
    preview: bool = False,
) -> Image.Image:
    """Square RGBA sprite of `size` px for a swatch."""
    size = max(1, int(size))
    pair = images.get(record.filename) if images is not None else None
    if pair is None:
        return Image.new("RGBA", (size, size), hsb_to_rgb(record) + (255,))
    src = pair.preview if preview else pair.tile
    return crop_square(src.convert("RGBA")).resize(
        (size, size), Image.Resampling.LANCZOS
    )


def _with_opacity(sprite: Image.Image, alpha: float) -> Image.Image:
    if alpha >= 1.0:
        return sprite
    arr = np.array(sprite, dtype=np.uint8)
    arr[..., 3] = (arr[..., 3].astype(np.float32) * max(alpha, 0.0)).astype(np.uint8)
    return Image.fromarray(arr)


# Mosaic


def render_mosaic(mosaic: Mosaic, images: Optional[SwatchImageMap] = None) -> Image.Image:
    """Paint each tile's swatch over the tile rectangle (clipped at the image edge)."""
    canvas = Image.new("RGBA", (max(mosaic.width, 1), max(mosaic.height, 1)), (0, 0, 0, 0))
    cache: Dict[str, Image.Image] = {}
    for t in mosaic.tiles:
        if t.swatch is None:
            continue
        sprite = cache.get(t.swatch.filename)
        if sprite is None:
            sprite = swatch_sprite(t.swatch, images, mosaic.tile_size)
            cache[t.swatch.filename] = sprite
        canvas.paste(sprite, (t.x, t.y))
    return canvas


# Atlas


def _draw_polar_guides(draw: ImageDraw.ImageDraw, guides: PolarGuides, vp: Viewport) -> None:
    cx, cy = vp.to_screen((0.0, 0.0))
    for r in guides.ring_radii:
        rr = r * vp.zoom
        draw.ellipse([cx - rr, cy - rr, cx + rr, cy + rr], outline=GUIDE_RGBA, width=1)
    for deg in guides.spoke_angles:
        a = math.radians(deg)
        end = vp.to_screen(
            (math.cos(a) * guides.outer_radius, math.sin(a) * guides.outer_radius)
        )
        draw.line([(cx, cy), end], fill=GUIDE_RGBA, width=1)


def _draw_grid_guides(draw: ImageDraw.ImageDraw, guides: GridGuides, vp: Viewport) -> None:
    x0, y0 = guides.origin_x, guides.origin_y
    x1 = x0 + guides.cell_w * guides.cols
    y1 = y0 + guides.cell_h * guides.rows
    for i in range(guides.cols + 1):
        x = x0 + guides.cell_w * i
        draw.line([vp.to_screen((x, y0)), vp.to_screen((x, y1))], fill=GUIDE_RGBA, width=1)
    for j in range(guides.rows + 1):
        y = y0 + guides.cell_h * j
        draw.line([vp.to_screen((x0, y)), vp.to_screen((x1, y))], fill=GUIDE_RGBA, width=1)


def render_atlas(
    result: LayoutResult,
    canvas_size: Tuple[int, int],
    images: Optional[SwatchImageMap] = None,
    size_scale: float = 1.0,
    viewport: Optional[Viewport] = None,
    show_guides: bool = True,
) -> Image.Image:
    """
    Draw a layout back-to-front in entry order.
    Polar layouts default to a viewport centred on the canvas.
    """
    w, h = canvas_size
    if viewport is None:
        viewport = Viewport(w / 2.0, h / 2.0, 1.0) if result.mode == "polar" else Viewport()
    canvas = Image.new("RGBA", (w, h), BACKGROUND_RGBA)
    draw = ImageDraw.Draw(canvas)

    if show_guides and isinstance(result.guides, PolarGuides):
        _draw_polar_guides(draw, result.guides, viewport)
    elif show_guides and isinstance(result.guides, GridGuides):
        _draw_grid_guides(draw, result.guides, viewport)

    for e in result.entries:
        side = max(1, int(round(e.size * size_scale * viewport.zoom)))
        sx, sy = viewport.to_screen((e.x, e.y))
        left = int(round(sx - side / 2.0))
        top = int(round(sy - side / 2.0))
        sprite = _with_opacity(swatch_sprite(e.record, images, side), e.alpha)
        canvas.paste(sprite, (left, top), sprite)
        if e.group_colour is not None:
            draw.rectangle(
                [left, top, left + side - 1, top + side - 1],
                outline=hex_to_rgb(e.group_colour) + (255,),
                width=2,
            )
    return canvas


def render_hover_preview(
    record: SwatchRecord, images: Optional[SwatchImageMap], size: int = 160
) -> Image.Image:
    """Hover panel image: the preview scan, square-cropped."""
    return swatch_sprite(record, images, size, preview=True)


__all__ = [
    "crop_square",
    "hsb_to_rgb",
    "swatch_sprite",
    "render_mosaic",
    "render_atlas",
    "render_hover_preview",
]
