# swatch_atlas/layout/grid.py
from __future__ import annotations

"""
Nested-axis grid.

Two outer fields split the area into cols x rows equal cells. Inside a cell
records either scatter around the centre by a seeded hash offset (no inner
fields) or sit at the centre of a sub-cell picked by up to two inner fields.
Inner axes are indexed per cell, from the records that fall in that cell.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..catalogue import FieldIndex, build_field_index
from ..constants import (
    GRID_HEIGHT,
    GRID_INNER_PAD_RATIO,
    GRID_MARGIN,
    GRID_WIDTH,
    JITTER_RATIO,
    JITTER_SEED,
)
from ..core_types import Field, PositionedEntry, SwatchRecord, field_value
from .common import GridGuides, LayoutResult, SizeEncoding, group_colour, stable_hash

Cell = Tuple[int, int]


@dataclass(frozen=True)
class GridParams:
    outer_x: Field = Field.DYESTUFF
    outer_y: Field = Field.PH
    inner_x: Optional[Field] = None
    inner_y: Optional[Field] = None
    colour_by: Optional[Field] = None
    width: float = GRID_WIDTH
    height: float = GRID_HEIGHT
    margin: float = GRID_MARGIN
    inner_pad_ratio: float = GRID_INNER_PAD_RATIO
    jitter_ratio: float = JITTER_RATIO
    jitter_seed: int = JITTER_SEED
    encoding: SizeEncoding = field(default_factory=SizeEncoding)

    @property
    def has_inner(self) -> bool:
        return self.inner_x is not None or self.inner_y is not None


def jitter_offset(key: str, cell_w: float, cell_h: float, params: GridParams) -> Tuple[float, float]:
    """
    Deterministic offset for one record inside its cell.
    Angle = hash mod 360 degrees; magnitude = jitter_ratio * min(cell) * f,
    with f in [0,1) from a second, seeded hash.
    """
    angle = math.radians(stable_hash(key) % 360)
    frac = (stable_hash(key, params.jitter_seed) % 1000) / 1000.0
    mag = params.jitter_ratio * min(cell_w, cell_h) * frac
    return math.cos(angle) * mag, math.sin(angle) * mag


def _inner_index(records: Sequence[SwatchRecord], inner: Optional[Field]) -> FieldIndex:
    if inner is None:
        return ("",)
    return build_field_index(records, inner)


def _inner_slot(record: SwatchRecord, inner: Optional[Field], index: FieldIndex) -> int:
    if inner is None:
        return 0
    return index.index(field_value(record, inner))


def grid_layout(
    records: Sequence[SwatchRecord], params: GridParams = GridParams()
) -> LayoutResult:
    """
    Lay out `records` on the nested grid. Entries keep input order.
    Records whose outer value is not among the filtered axis values are dropped.
    """
    x_values = build_field_index(records, params.outer_x)
    y_values = build_field_index(records, params.outer_y)
    x_pos = {v: i for i, v in enumerate(x_values)}
    y_pos = {v: j for j, v in enumerate(y_values)}

    cols = max(len(x_values), 1)
    rows = max(len(y_values), 1)
    origin_x = params.margin
    origin_y = params.margin
    cell_w = max(params.width - 2.0 * params.margin, 0.0) / cols
    cell_h = max(params.height - 2.0 * params.margin, 0.0) / rows

    # bucket by outer cell, keeping input order
    placed: List[Tuple[SwatchRecord, Cell]] = []
    members: Dict[Cell, List[SwatchRecord]] = {}
    for rec in records:
        i = x_pos.get(field_value(rec, params.outer_x))
        j = y_pos.get(field_value(rec, params.outer_y))
        if i is None or j is None:
            continue
        placed.append((rec, (i, j)))
        members.setdefault((i, j), []).append(rec)

    # per-cell inner indexes
    inner_idx: Dict[Cell, Tuple[FieldIndex, FieldIndex]] = {}
    inner_counts: Dict[Cell, Tuple[int, int]] = {}
    if params.has_inner:
        for cell, cell_recs in members.items():
            ix_vals = _inner_index(cell_recs, params.inner_x)
            iy_vals = _inner_index(cell_recs, params.inner_y)
            inner_idx[cell] = (ix_vals, iy_vals)
            inner_counts[cell] = (len(ix_vals), len(iy_vals))

    pad_x = params.inner_pad_ratio * cell_w
    pad_y = params.inner_pad_ratio * cell_h

    entries: List[PositionedEntry] = []
    for rec, (i, j) in placed:
        cell_x = origin_x + cell_w * i
        cell_y = origin_y + cell_h * j
        if params.has_inner:
            ix_vals, iy_vals = inner_idx[(i, j)]
            sub_w = (cell_w - 2.0 * pad_x) / len(ix_vals)
            sub_h = (cell_h - 2.0 * pad_y) / len(iy_vals)
            ix = _inner_slot(rec, params.inner_x, ix_vals)
            iy = _inner_slot(rec, params.inner_y, iy_vals)
            x = cell_x + pad_x + (ix + 0.5) * sub_w
            y = cell_y + pad_y + (iy + 0.5) * sub_h
        else:
            dx, dy = jitter_offset(rec.filename, cell_w, cell_h, params)
            x = cell_x + 0.5 * cell_w + dx
            y = cell_y + 0.5 * cell_h + dy

        size, alpha = params.encoding.encode(rec.b)
        tag = (
            group_colour(field_value(rec, params.colour_by))
            if params.colour_by is not None
            else None
        )
        entries.append(
            PositionedEntry(record=rec, x=x, y=y, size=size, alpha=alpha, group_colour=tag)
        )

    guides = GridGuides(
        origin_x=origin_x,
        origin_y=origin_y,
        cell_w=cell_w,
        cell_h=cell_h,
        outer_x_values=x_values,
        outer_y_values=y_values,
        inner_counts=inner_counts,
    )
    return LayoutResult(mode="grid", entries=tuple(entries), guides=guides)


__all__ = ["GridParams", "jitter_offset", "grid_layout"]
