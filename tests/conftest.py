"""Shared fixtures: a small swatch catalogue and RGBA sample buffers."""
from __future__ import annotations

from typing import Callable, List, Tuple

import numpy as np
import pytest

from swatch_atlas.catalogue import SwatchCatalogue
from swatch_atlas.core_types import SwatchRecord


def make_record(
    filename: str,
    h: float,
    s: float,
    b: float,
    dyestuff: str = "Madder",
    ph: str = "Neutral",
    mordant: str = "Alum",
    additive: str = "None",
    time: str = "30m",
) -> SwatchRecord:
    return SwatchRecord(
        filename=filename,
        h=h,
        s=s,
        b=b,
        dyestuff=dyestuff,
        ph=ph,
        mordant=mordant,
        additive=additive,
        time=time,
    )


@pytest.fixture
def records() -> List[SwatchRecord]:
    """Six swatches spread over two dyestuffs, three pH values and two mordants."""
    return [
        make_record("madder_acid_alum.jpg", 5.0, 80.0, 70.0, "Madder", "Acidic", "Alum", "None", "30m"),
        make_record("madder_alk_iron.jpg", 350.0, 40.0, 30.0, "Madder", "Alkaline", "Iron", "Vinegar", "12h"),
        make_record("weld_acid_alum.jpg", 55.0, 90.0, 85.0, "Weld", "Acidic", "Alum", "None", "60m"),
        make_record("weld_acid_iron.jpg", 60.0, 50.0, 40.0, "Weld", "Acidic", "Iron", "Chalk", "90m"),
        make_record("weld_neutral_alum.jpg", 70.0, 20.0, 95.0, "Weld", "Neutral", "Alum", "None", "30m"),
        make_record("indigo_neutral_alum.jpg", 220.0, 70.0, 50.0, "indigo", "Neutral", "Alum", "Chalk", "2h"),
    ]


@pytest.fixture
def catalogue(records: List[SwatchRecord]) -> SwatchCatalogue:
    return SwatchCatalogue(records)


@pytest.fixture
def rgb_swatches() -> List[SwatchRecord]:
    """Pure red, green and blue swatches."""
    return [
        make_record("red.jpg", 0.0, 100.0, 100.0),
        make_record("green.jpg", 120.0, 100.0, 100.0),
        make_record("blue.jpg", 240.0, 100.0, 100.0),
    ]


@pytest.fixture
def solid_rgba() -> Callable[[int, int, Tuple[int, int, int]], np.ndarray]:
    """Factory for an opaque single-colour (H,W,4) uint8 image."""

    def _make(width: int, height: int, rgb: Tuple[int, int, int]) -> np.ndarray:
        img = np.zeros((height, width, 4), dtype=np.uint8)
        img[..., 0] = rgb[0]
        img[..., 1] = rgb[1]
        img[..., 2] = rgb[2]
        img[..., 3] = 255
        return img

    return _make
