# swatch_atlas/mosaic/export.py
from __future__ import annotations

"""
Tabular export of a mosaic: one row per tile.
"""

import csv
import io
from pathlib import Path
from typing import List

from .compose import Mosaic

TILE_CSV_COLUMNS: List[str] = [
    "tx",
    "ty",
    "x",
    "y",
    "w",
    "h",
    "tileH",
    "tileS",
    "tileB",
    "filename",
    "swatchH",
    "swatchS",
    "swatchB",
    "dyestuff",
    "pH",
    "mordant",
    "additive",
    "time",
    "score",
]


def tile_rows(mosaic: Mosaic) -> List[List[str]]:
    """Formatted CSV rows (colours to 2 d.p., score to 3 d.p.). Unassigned tiles are skipped."""
    rows: List[List[str]] = []
    for t in mosaic.tiles:
        s = t.swatch
        if s is None:
            continue
        rows.append(
            [
                str(t.tx),
                str(t.ty),
                str(t.x),
                str(t.y),
                str(t.w),
                str(t.h),
                f"{t.colour.h:.2f}",
                f"{t.colour.s:.2f}",
                f"{t.colour.b:.2f}",
                s.filename,
                f"{s.h:.2f}",
                f"{s.s:.2f}",
                f"{s.b:.2f}",
                s.dyestuff,
                s.ph,
                s.mordant,
                s.additive,
                s.time,
                f"{t.score:.3f}",
            ]
        )
    return rows


def tiles_to_csv(mosaic: Mosaic) -> str:
    """The whole export as CSV text with a header line."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(TILE_CSV_COLUMNS)
    writer.writerows(tile_rows(mosaic))
    return buf.getvalue()


def write_tiles_csv(path: Path, mosaic: Mosaic) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tiles_to_csv(mosaic), encoding="utf-8")
    return path


__all__ = ["TILE_CSV_COLUMNS", "tile_rows", "tiles_to_csv", "write_tiles_csv"]
