"""Tests for hover hit-testing and the viewport transform."""
from __future__ import annotations

import pytest

from swatch_atlas.core_types import PositionedEntry
from swatch_atlas.hit_test import Viewport, find_entry_at

from conftest import make_record


def _entry(name: str, x: float, y: float, size: float = 20.0) -> PositionedEntry:
    return PositionedEntry(record=make_record(name, 0, 0, 0), x=x, y=y, size=size, alpha=1.0)


class TestFindEntryAt:
    """Box test with nearest-centre resolution."""

    def test_inside_single_box(self) -> None:
        entries = [_entry("a.jpg", 0.0, 0.0), _entry("b.jpg", 100.0, 100.0)]
        assert find_entry_at((104.0, 96.0), entries) == 1

    def test_box_edge_is_inclusive(self) -> None:
        assert find_entry_at((10.0, -10.0), [_entry("a.jpg", 0.0, 0.0)]) == 0

    def test_miss(self) -> None:
        entries = [_entry("a.jpg", 0.0, 0.0)]
        assert find_entry_at((50.0, 50.0), entries) is None
        assert find_entry_at((0.0, 0.0), []) is None

    def test_overlap_nearest_centre_wins(self) -> None:
        entries = [_entry("a.jpg", 0.0, 0.0), _entry("b.jpg", 15.0, 0.0)]
        assert find_entry_at((8.0, 0.0), entries) == 1
        assert find_entry_at((6.0, 0.0), entries) == 0

    def test_exact_tie_first_wins(self) -> None:
        entries = [_entry("a.jpg", 0.0, 0.0), _entry("b.jpg", 15.0, 0.0)]
        assert find_entry_at((7.5, 0.0), entries) == 0

    def test_size_scale_grows_the_box(self) -> None:
        entries = [_entry("a.jpg", 0.0, 0.0)]
        assert find_entry_at((12.0, 0.0), entries, size_scale=1.0) is None
        assert find_entry_at((12.0, 0.0), entries, size_scale=2.0) == 0

    def test_point_mapped_through_viewport(self) -> None:
        entries = [_entry("a.jpg", 0.0, 0.0)]
        vp = Viewport(pan_x=400.0, pan_y=400.0, zoom=2.0)
        assert find_entry_at((410.0, 400.0), entries, viewport=vp) == 0
        assert find_entry_at((430.0, 400.0), entries, viewport=vp) is None


class TestViewport:
    """World <-> screen."""

    def test_round_trip(self) -> None:
        vp = Viewport(10.0, 20.0, 2.0)
        assert vp.to_screen((3.0, 4.0)) == (16.0, 28.0)
        assert vp.to_world(vp.to_screen((3.0, 4.0))) == (3.0, 4.0)

    def test_zero_zoom_rejected(self) -> None:
        with pytest.raises(ValueError):
            Viewport(0.0, 0.0, 0.0).to_world((1.0, 1.0))
