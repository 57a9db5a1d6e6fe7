# swatch_atlas/image_io.py
from __future__ import annotations

import io
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import SwatchRecord, U8RGBA
from .errors import ImageUnavailable, SampleUnreadable
from .utils import debug_log, key_value_pairs_to_string, warn

"""
Image I/O: sample pixels (RGBA in sRGB), swatch thumbnails, PNG output.

Swatch thumbnails decode independently on a thread pool. A record whose
image fails is dropped with a warning; the rest of the load continues.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except Exception:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


@dataclass(frozen=True)
class SwatchImages:
    """Decoded images for one swatch: mosaic/atlas tile and hover preview."""

    tile: Image.Image
    preview: Image.Image


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            return im.convert("RGBA")

    return im.convert("RGBA")


def load_sample_rgba(path: Path) -> U8RGBA:
    """
    Decode the mosaic sample to a uint8 (H,W,4) array.
    Raises SampleUnreadable when the pixels cannot be read.
    """
    try:
        with Image.open(path) as im0:
            im = _convert_to_srgb_rgba(im0)
            im.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise SampleUnreadable(f"cannot read pixels of {path}: {exc}") from exc
    return np.array(im, dtype=np.uint8)


def load_swatch_image(path: Path) -> Image.Image:
    """Decode one swatch image to RGBA. Raises ImageUnavailable."""
    try:
        with Image.open(path) as im0:
            im = _convert_to_srgb_rgba(im0)
            im.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageUnavailable(path.name, str(exc)) from exc
    return im


def _load_one(
    record: SwatchRecord, tile_dir: Path, preview_dir: Optional[Path]
) -> Tuple[str, Optional[SwatchImages]]:
    try:
        tile = load_swatch_image(tile_dir / record.filename)
    except ImageUnavailable as exc:
        warn(f"failed swatch {record.filename}: {exc.reason or exc}")
        return record.filename, None
    preview = tile
    if preview_dir is not None:
        try:
            preview = load_swatch_image(preview_dir / record.filename)
        except ImageUnavailable:
            preview = tile
    return record.filename, SwatchImages(tile=tile, preview=preview)


def load_swatch_images(
    records: Sequence[SwatchRecord],
    tile_dir: Path,
    preview_dir: Optional[Path] = None,
    workers: int = 4,
    debug: bool = False,
) -> Dict[str, SwatchImages]:
    """
    Decode every record's images concurrently and wait for all of them.
    Returns {filename: SwatchImages} for the records that decoded.
    """
    out: Dict[str, SwatchImages] = {}
    if not records:
        return out
    with ThreadPoolExecutor(max_workers=max(1, int(workers))) as ex:
        for filename, images in ex.map(
            lambda r: _load_one(r, tile_dir, preview_dir), records
        ):
            if images is not None:
                out[filename] = images
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [("Images", len(out)), ("Dropped", len(records) - len(out))]
            )
        )
    return out


def save_png(path: Path, image: Image.Image) -> Path:
    """Save as PNG, creating parent folders. Forces a .png suffix."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path)
    return path


__all__ = [
    "SwatchImages",
    "load_sample_rgba",
    "load_swatch_image",
    "load_swatch_images",
    "save_png",
]
