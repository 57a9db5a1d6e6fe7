"""Tests for mosaic composition and its CSV export."""
from __future__ import annotations

import numpy as np
import pytest

from swatch_atlas.core_types import Weights
from swatch_atlas.errors import NoSwatchesAvailable, SampleUnreadable
from swatch_atlas.mosaic import (
    TILE_CSV_COLUMNS,
    clamp_tile_size,
    compose_mosaic,
    tile_rows,
    tiles_to_csv,
)

from conftest import make_record


class TestTileGrid:
    """Grid dimensions and tile bounds."""

    def test_dimensions_round_up(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(100, 50, (255, 0, 0)), rgb_swatches, 20)
        assert (mosaic.tiles_x, mosaic.tiles_y) == (5, 3)
        assert len(mosaic.tiles) == 15
        assert len(mosaic.grid) == 3
        assert all(len(row) == 5 for row in mosaic.grid)

    def test_edge_tiles_clipped(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(50, 45, (255, 0, 0)), rgb_swatches, 20)
        corner = mosaic.grid[2][2]
        assert (corner.x, corner.y) == (40, 40)
        assert (corner.w, corner.h) == (10, 5)
        assert mosaic.grid[0][0].w == 20

    def test_scan_order(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(40, 40, (0, 0, 255)), rgb_swatches, 20)
        assert [(t.tx, t.ty) for t in mosaic.tiles] == [(0, 0), (1, 0), (0, 1), (1, 1)]

    def test_tile_at(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(100, 50, (255, 0, 0)), rgb_swatches, 20)
        tile = mosaic.tile_at(25, 45)
        assert (tile.tx, tile.ty) == (1, 2)
        assert mosaic.tile_at(100, 0) is None
        assert mosaic.tile_at(-1, 0) is None


class TestMatching:
    """Swatch choice per tile."""

    def test_solid_colour_matches_unique_minimum(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(60, 40, (0, 255, 0)), rgb_swatches, 20)
        assert {t.swatch.filename for t in mosaic.tiles} == {"green.jpg"}
        assert all(t.score == pytest.approx(0.0) for t in mosaic.tiles)
        assert all(t.colour.as_tuple() == pytest.approx((120.0, 100.0, 100.0)) for t in mosaic.tiles)

    def test_each_half_matches_its_colour(self, solid_rgba, rgb_swatches) -> None:
        img = solid_rgba(40, 20, (255, 0, 0))
        img[:, 20:, :3] = (0, 0, 255)
        mosaic = compose_mosaic(img, rgb_swatches, 20)
        assert [t.swatch.filename for t in mosaic.tiles] == ["red.jpg", "blue.jpg"]

    def test_tie_goes_to_first_swatch(self, solid_rgba) -> None:
        swatches = [
            make_record("first.jpg", 10.0, 100.0, 100.0),
            make_record("second.jpg", 350.0, 100.0, 100.0),
        ]
        mosaic = compose_mosaic(solid_rgba(20, 20, (255, 0, 0)), swatches, 20)
        assert mosaic.tiles[0].swatch.filename == "first.jpg"

    def test_weights_change_the_winner(self, solid_rgba) -> None:
        swatches = [
            make_record("same_hue_dark.jpg", 0.0, 100.0, 20.0),
            make_record("near_hue_bright.jpg", 30.0, 100.0, 100.0),
        ]
        img = solid_rgba(20, 20, (255, 0, 0))
        hue_heavy = compose_mosaic(img, swatches, 20, Weights(hue=1.0, brightness=0.1, saturation=0.0))
        bright_heavy = compose_mosaic(img, swatches, 20, Weights(hue=0.1, brightness=1.0, saturation=0.0))
        assert hue_heavy.tiles[0].swatch.filename == "same_hue_dark.jpg"
        assert bright_heavy.tiles[0].swatch.filename == "near_hue_bright.jpg"

    def test_transparent_tile_samples_black(self, rgb_swatches) -> None:
        img = np.zeros((20, 20, 4), dtype=np.uint8)
        mosaic = compose_mosaic(img, rgb_swatches, 20)
        assert mosaic.tiles[0].colour.as_tuple() == (0.0, 0.0, 0.0)
        assert mosaic.tiles[0].swatch.filename == "red.jpg"


class TestErrors:
    """Rejected inputs."""

    def test_no_swatches(self, solid_rgba) -> None:
        with pytest.raises(NoSwatchesAvailable):
            compose_mosaic(solid_rgba(20, 20, (0, 0, 0)), [], 20)

    def test_bad_tile_size(self, solid_rgba, rgb_swatches) -> None:
        with pytest.raises(ValueError):
            compose_mosaic(solid_rgba(20, 20, (0, 0, 0)), rgb_swatches, 0)

    def test_wrong_buffer_type(self, rgb_swatches) -> None:
        with pytest.raises(SampleUnreadable):
            compose_mosaic(np.zeros((20, 20, 3), dtype=np.uint8), rgb_swatches, 20)

    @pytest.mark.parametrize(
        "raw, expected",
        [(0, 20), (2, 4), (4, 4), (37, 37), (500, 200), ("12", 12), ("abc", 20), (None, 20)],
    )
    def test_clamp_tile_size(self, raw, expected) -> None:
        assert clamp_tile_size(raw) == expected


class TestExport:
    """One CSV row per tile."""

    def test_header(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(20, 20, (255, 0, 0)), rgb_swatches, 20)
        text = tiles_to_csv(mosaic)
        assert text.splitlines()[0] == ",".join(TILE_CSV_COLUMNS)

    def test_row_formatting(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(30, 20, (255, 0, 0)), rgb_swatches, 20)
        rows = tile_rows(mosaic)
        assert len(rows) == 2
        row = dict(zip(TILE_CSV_COLUMNS, rows[1]))
        assert row["tx"] == "1"
        assert row["x"] == "20"
        assert row["w"] == "10"
        assert row["tileH"] == "0.00"
        assert row["tileS"] == "100.00"
        assert row["filename"] == "red.jpg"
        assert row["pH"] == "Neutral"
        assert row["score"] == "0.000"

    def test_line_count(self, solid_rgba, rgb_swatches) -> None:
        mosaic = compose_mosaic(solid_rgba(100, 50, (255, 0, 0)), rgb_swatches, 20)
        assert len(tiles_to_csv(mosaic).splitlines()) == 1 + 15
