# swatch_atlas/state.py
from __future__ import annotations

"""
Application state and the controller that owns it.

AppState is an immutable value; every change produces a new state and a full
re-layout. Requests are numbered: a result is installed only if no newer
request was started after it (last writer wins, stale results are dropped).
"""

import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .catalogue import FieldIndex, SwatchCatalogue
from .constants import SIZE_SCALE_DEFAULT
from .core_types import Field, Point, PositionedEntry, SwatchRecord, Weights
from .errors import NoSwatchesAvailable
from .filters import FilterEngine, Selection, passes, unrestricted
from .hit_test import Viewport, find_entry_at
from .layout import GridGuides, GridParams, LayoutResult, Mode, MODES, PolarParams, run_layout
from .mosaic import Mosaic, clamp_tile_size, compose_mosaic


@dataclass(frozen=True)
class AppState:
    catalogue: SwatchCatalogue
    selection: Mapping[Field, Selection] = field(default_factory=unrestricted)
    mode: Mode = "polar"
    polar: PolarParams = field(default_factory=PolarParams)
    grid: GridParams = field(default_factory=GridParams)
    size_scale: float = SIZE_SCALE_DEFAULT
    viewport: Viewport = field(default_factory=Viewport)
    hover_index: Optional[int] = None
    layout: LayoutResult = field(default_factory=lambda: LayoutResult("polar", ()))
    generation: int = 0


def filtered_records(state: AppState) -> List[SwatchRecord]:
    """Catalogue records passing the current selection, in catalogue order."""
    return [r for r in state.catalogue if passes(r, state.selection)]


def compute_layout(state: AppState) -> LayoutResult:
    """Full layout for the state's mode. An empty filter result is an empty layout."""
    if not state.catalogue:
        raise NoSwatchesAvailable("catalogue is empty")
    return run_layout(state.mode, filtered_records(state), state.polar, state.grid)


def compose_for_state(
    state: AppState,
    rgba: np.ndarray,
    tile_size: int,
    weights: Weights = Weights(),
    debug: bool = False,
) -> Mosaic:
    """Mosaic from the filtered records; zero-size when the filter matches nothing."""
    if not state.catalogue:
        raise NoSwatchesAvailable("catalogue is empty")
    records = filtered_records(state)
    tile = clamp_tile_size(tile_size)
    if not records:
        return Mosaic(grid=[], tiles=[], tiles_x=0, tiles_y=0, tile_size=tile, width=0, height=0)
    return compose_mosaic(rgba, records, tile, weights, debug=debug)


class AtlasController:
    """Single owner of the AppState. Every setter re-runs the layout in full."""

    def __init__(self, catalogue: SwatchCatalogue, mode: Mode = "polar") -> None:
        self._lock = threading.Lock()
        self._state = AppState(catalogue=catalogue, mode=mode)
        if catalogue:
            self._update()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def layout(self) -> LayoutResult:
        return self._state.layout

    @property
    def entries(self) -> Sequence[PositionedEntry]:
        return self._state.layout.entries

    def filtered(self) -> List[SwatchRecord]:
        return filtered_records(self._state)

    def field_values(self, field: Field) -> FieldIndex:
        """Catalogue-wide values of a field, for building filter checkboxes."""
        return self._state.catalogue.unique_values(field)

    def counts(self) -> tuple[int, int]:
        return FilterEngine(self._state.selection).counts(self._state.catalogue.records)

    # request bookkeeping

    def begin_request(self) -> int:
        """Start a new request; any older pending request becomes stale."""
        with self._lock:
            gen = self._state.generation + 1
            self._state = replace(self._state, generation=gen)
            return gen

    def complete_request(self, token: int, layout: LayoutResult) -> bool:
        """Install `layout` if `token` is still the newest request."""
        with self._lock:
            if token != self._state.generation:
                return False
            self._state = replace(self._state, layout=layout, hover_index=None)
            return True

    def _update(self, **changes: object) -> LayoutResult:
        """Apply `changes` and the matching layout together, or neither."""
        with self._lock:
            candidate = replace(self._state, **changes)
            layout = compute_layout(candidate)
            self._state = replace(
                candidate,
                layout=layout,
                hover_index=None,
                generation=candidate.generation + 1,
            )
        return layout

    def relayout_async(
        self,
        executor: Executor,
        prepare: Optional[Callable[[Sequence[SwatchRecord]], object]] = None,
    ) -> "Future[bool]":
        """
        Run `prepare` (e.g. image loads) then the layout on `executor`.
        The future resolves to False when a newer request superseded this one.
        """
        token = self.begin_request()
        snapshot = self._state

        def job() -> bool:
            if prepare is not None:
                prepare(filtered_records(snapshot))
            return self.complete_request(token, compute_layout(snapshot))

        return executor.submit(job)

    # filter

    def set_filter(self, field: Field, values: Optional[Iterable[str]]) -> LayoutResult:
        engine = FilterEngine(self._state.selection)
        engine.set_selection(field, values)
        return self._update(selection=engine.selection)

    def toggle_filter(self, field: Field, value: str) -> LayoutResult:
        engine = FilterEngine(self._state.selection)
        engine.toggle(field, value, self.field_values(field))
        return self._update(selection=engine.selection)

    def select_all(self) -> LayoutResult:
        return self._update(selection=unrestricted())

    def clear_all(self) -> LayoutResult:
        engine = FilterEngine()
        engine.clear_all()
        return self._update(selection=engine.selection)

    # mode / axes / display

    def set_mode(self, mode: Mode) -> LayoutResult:
        if mode not in MODES:
            raise ValueError(f"unknown layout mode: {mode!r}")
        return self._update(mode=mode)

    def set_axes(
        self,
        outer_x: Field,
        outer_y: Field,
        inner_x: Optional[Field] = None,
        inner_y: Optional[Field] = None,
    ) -> LayoutResult:
        grid = replace(
            self._state.grid,
            outer_x=outer_x,
            outer_y=outer_y,
            inner_x=inner_x,
            inner_y=inner_y,
        )
        return self._update(grid=grid)

    def set_colour_by(self, field: Optional[Field]) -> LayoutResult:
        return self._update(grid=replace(self._state.grid, colour_by=field))

    def set_size_scale(self, scale: float) -> None:
        """Sprite scale only affects drawing and hit-testing, not positions."""
        with self._lock:
            self._state = replace(self._state, size_scale=float(scale))

    def set_viewport(self, viewport: Viewport) -> None:
        with self._lock:
            self._state = replace(self._state, viewport=viewport)

    # hover

    def hover(self, point: Point) -> Optional[PositionedEntry]:
        """Hit-test a presentation-space point and remember the hovered entry."""
        with self._lock:
            st = self._state
            idx = find_entry_at(point, st.layout.entries, st.size_scale, st.viewport)
            self._state = replace(st, hover_index=idx)
        return None if idx is None else st.layout.entries[idx]

    # mosaic

    def compose(self, rgba: np.ndarray, tile_size: int, weights: Weights = Weights()) -> Mosaic:
        return compose_for_state(self._state, rgba, tile_size, weights)

    def axis_cardinalities(self) -> Dict[str, object]:
        """Outer/inner axis sizes of the current grid layout (empty for polar)."""
        guides = self._state.layout.guides
        if not isinstance(guides, GridGuides):
            return {}
        return {
            "cols": guides.cols,
            "rows": guides.rows,
            "inner": dict(guides.inner_counts),
        }


__all__ = [
    "AppState",
    "filtered_records",
    "compute_layout",
    "compose_for_state",
    "AtlasController",
]
