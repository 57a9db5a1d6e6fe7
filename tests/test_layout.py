"""Tests for the polar and nested-grid atlas layouts."""
from __future__ import annotations

import math

import pytest

from swatch_atlas.core_types import Field
from swatch_atlas.layout import (
    GridGuides,
    GridParams,
    PolarGuides,
    PolarParams,
    SizeEncoding,
    grid_layout,
    group_colour,
    jitter_offset,
    polar_layout,
    run_layout,
    stable_hash,
)

from conftest import make_record


class TestSizeEncoding:
    """Brightness to sprite size and opacity."""

    @pytest.mark.parametrize(
        "brightness, size, alpha",
        [(0.0, 14.0, 0.55), (50.0, 22.0, 0.775), (100.0, 30.0, 1.0), (150.0, 30.0, 1.0), (-5.0, 14.0, 0.55)],
    )
    def test_encode(self, brightness, size, alpha) -> None:
        got_size, got_alpha = SizeEncoding().encode(brightness)
        assert got_size == pytest.approx(size)
        assert got_alpha == pytest.approx(alpha)


class TestPolar:
    """Hue wheel placement."""

    def test_hue_zero_full_saturation_points_up(self) -> None:
        params = PolarParams()
        result = polar_layout([make_record("r.jpg", 0.0, 100.0, 100.0)], params)
        e = result.entries[0]
        assert e.x == pytest.approx(0.0, abs=1e-9)
        assert e.y == pytest.approx(-params.outer_radius)
        assert params.outer_radius == pytest.approx(368.0)

    def test_hue_ninety_points_right(self) -> None:
        e = polar_layout([make_record("y.jpg", 90.0, 100.0, 100.0)]).entries[0]
        assert e.x == pytest.approx(368.0)
        assert e.y == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("hue", [0.0, 45.0, 180.0, 299.0])
    def test_zero_saturation_sits_on_inner_radius(self, hue: float) -> None:
        e = polar_layout([make_record("g.jpg", hue, 0.0, 50.0)]).entries[0]
        assert math.hypot(e.x, e.y) == pytest.approx(24.0)

    def test_entries_sorted_by_y(self, records) -> None:
        ys = [e.y for e in polar_layout(records).entries]
        assert ys == sorted(ys)
        assert len(ys) == len(records)

    def test_size_and_alpha_from_brightness(self) -> None:
        e = polar_layout([make_record("d.jpg", 10.0, 50.0, 0.0)]).entries[0]
        assert (e.size, e.alpha) == (pytest.approx(14.0), pytest.approx(0.55))
        assert e.group_colour is None

    def test_guides(self) -> None:
        result = polar_layout([])
        assert result.entries == ()
        assert isinstance(result.guides, PolarGuides)
        assert result.guides.ring_radii[-1] == pytest.approx(368.0)
        assert result.guides.spoke_angles[0] == -90.0


class TestGrid:
    """Nested-axis grid placement."""

    def test_deterministic(self, records) -> None:
        params = GridParams()
        assert grid_layout(records, params) == grid_layout(records, params)

    def test_keeps_input_order(self, records) -> None:
        result = grid_layout(records)
        assert [e.record.filename for e in result.entries] == [r.filename for r in records]

    def test_jitter_stays_inside_cell(self, records) -> None:
        params = GridParams()
        result = grid_layout(records, params)
        g = result.guides
        bound = params.jitter_ratio * min(g.cell_w, g.cell_h)
        for e in result.entries:
            i = g.outer_x_values.index(e.record.dyestuff)
            j = g.outer_y_values.index(e.record.ph)
            cx = g.origin_x + g.cell_w * (i + 0.5)
            cy = g.origin_y + g.cell_h * (j + 0.5)
            assert math.hypot(e.x - cx, e.y - cy) <= bound + 1e-9

    def test_jitter_offset_is_stable(self) -> None:
        params = GridParams()
        assert jitter_offset("a.jpg", 100.0, 80.0, params) == jitter_offset("a.jpg", 100.0, 80.0, params)
        dx, dy = jitter_offset("a.jpg", 100.0, 80.0, params)
        assert math.hypot(dx, dy) <= params.jitter_ratio * 80.0

    def test_outer_axes_and_cells(self, records) -> None:
        result = grid_layout(records, GridParams(outer_x=Field.DYESTUFF, outer_y=Field.PH))
        g = result.guides
        assert isinstance(g, GridGuides)
        assert g.outer_x_values == ("indigo", "Madder", "Weld")
        assert g.outer_y_values == ("Acidic", "Neutral", "Alkaline")
        assert g.cell_w == pytest.approx(920.0 / 3)
        assert g.cell_h == pytest.approx(720.0 / 3)
        assert (g.origin_x, g.origin_y) == (40.0, 40.0)

    def test_inner_axes_indexed_per_cell(self) -> None:
        recs = [
            make_record("a.jpg", 0, 50, 50, dyestuff="Madder", ph="Acidic", mordant="Alum"),
            make_record("b.jpg", 0, 50, 50, dyestuff="Madder", ph="Acidic", mordant="Iron"),
            make_record("c.jpg", 0, 50, 50, dyestuff="Weld", ph="Acidic", mordant="Alum"),
        ]
        params = GridParams(inner_x=Field.MORDANT)
        result = grid_layout(recs, params)
        assert result.guides.inner_counts == {(0, 0): (2, 1), (1, 0): (1, 1)}

        cell_w = 920.0 / 2
        cell_h = 720.0
        pad_x = 0.08 * cell_w
        pad_y = 0.08 * cell_h
        sub_w = (cell_w - 2 * pad_x) / 2
        a, b, c = result.entries
        assert a.x == pytest.approx(40.0 + pad_x + 0.5 * sub_w)
        assert b.x == pytest.approx(40.0 + pad_x + 1.5 * sub_w)
        assert a.y == pytest.approx(40.0 + pad_y + 0.5 * (cell_h - 2 * pad_y))
        assert c.x == pytest.approx(40.0 + cell_w + 0.5 * cell_w)

    def test_two_inner_axes(self) -> None:
        recs = [
            make_record("a.jpg", 0, 50, 50, mordant="Alum", time="30m"),
            make_record("b.jpg", 0, 50, 50, mordant="Iron", time="12h"),
            make_record("c.jpg", 0, 50, 50, mordant="Iron", time="60m"),
        ]
        result = grid_layout(recs, GridParams(inner_x=Field.MORDANT, inner_y=Field.TIME))
        assert result.guides.inner_counts == {(0, 0): (2, 3)}
        a, b, c = result.entries
        assert a.x < b.x
        assert b.x == pytest.approx(c.x)
        assert a.y < c.y < b.y

    def test_colour_by_tags_entries(self, records) -> None:
        result = grid_layout(records, GridParams(colour_by=Field.MORDANT))
        for e in result.entries:
            assert e.group_colour == group_colour(e.record.mordant)

    def test_empty_input(self) -> None:
        result = grid_layout([])
        assert len(result) == 0
        assert result.guides.cols == 1
        assert result.guides.rows == 1


class TestHashing:
    """Seeded placement hash and group colours."""

    def test_stable_hash_known_values(self) -> None:
        assert stable_hash("") == 0
        assert stable_hash("a") == 97
        assert stable_hash("ab") == 97 * 31 + 98
        assert stable_hash("", seed=5) == 5

    def test_stable_hash_fits_32_bits(self) -> None:
        assert 0 <= stable_hash("x" * 200) < 2**32

    def test_group_colour_is_hex_and_deterministic(self) -> None:
        c = group_colour("Alum")
        assert c == group_colour("Alum")
        assert len(c) == 7 and c.startswith("#")
        int(c[1:], 16)


class TestDispatch:
    """Mode dispatch."""

    def test_run_layout_modes(self, records) -> None:
        assert run_layout("polar", records).mode == "polar"
        assert run_layout("grid", records).mode == "grid"

    def test_unknown_mode(self, records) -> None:
        with pytest.raises(ValueError):
            run_layout("spiral", records)  # type: ignore[arg-type]
