# swatch_atlas/errors.py
"""
Failure kinds surfaced by loading, composition and layout.

Load-time per-record failures (MalformedRecord, ImageUnavailable) are caught
by the loaders and the record is dropped. NoSwatchesAvailable and
SampleUnreadable abort the whole operation. A filter that matches nothing is
not an error: it produces an empty layout or a zero-size mosaic.
"""

from __future__ import annotations


class SwatchAtlasError(Exception):
    """Base class for every failure this package raises on purpose."""


class MalformedRecord(SwatchAtlasError):
    """A lookup row whose h/s/b (or filename) cannot be used."""


class ImageUnavailable(SwatchAtlasError):
    """A swatch image could not be read or decoded."""

    def __init__(self, filename: str, reason: str = "") -> None:
        self.filename = filename
        self.reason = reason
        msg = f"image unavailable: {filename}"
        super().__init__(f"{msg} ({reason})" if reason else msg)


class NoSwatchesAvailable(SwatchAtlasError):
    """There are no swatches to match against or lay out."""


class SampleUnreadable(SwatchAtlasError):
    """The mosaic sample image has no readable pixel data."""


__all__ = [
    "SwatchAtlasError",
    "MalformedRecord",
    "ImageUnavailable",
    "NoSwatchesAvailable",
    "SampleUnreadable",
]
