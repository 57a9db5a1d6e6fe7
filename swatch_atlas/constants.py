# swatch_atlas/constants.py
"""
Global tunables used across the project.

- Mosaic constants (TILE_*, default weights)
- Field ordering and display labels (PH_*, TIME labels)
- Atlas layout constants (POLAR_*, GRID_*, size / alpha encoding)
- Default lookup and image locations for the CLIs
"""
from __future__ import annotations

from typing import Dict, Tuple

# ==========
# Mosaic
# ==========
TILE_SIZE_DEFAULT: int = 20
TILE_SIZE_MIN: int = 4
TILE_SIZE_MAX: int = 200

W_HUE_DEFAULT: float = 1.0
W_BRIGHTNESS_DEFAULT: float = 0.6
W_SATURATION_DEFAULT: float = 0.2

# =================
# Field ordering
# =================
PH_ORDER: Tuple[str, ...] = ("Acidic", "Neutral", "Alkaline")
PH_LABELS: Dict[str, str] = {
    "Acidic": "Acidic (~pH3)",
    "Neutral": "Neutral (~pH7)",
    "Alkaline": "Alkaline (~pH9)",
}
MINUTES_PER_HOUR: int = 60

# ===========================
# Size / alpha from brightness
# ===========================
SIZE_MIN: float = 14.0
SIZE_MAX: float = 30.0
ALPHA_MIN: float = 0.55
ALPHA_MAX: float = 1.0

# ======
# Polar
# ======
POLAR_DIAMETER: float = 800.0
POLAR_INNER_RADIUS: float = 24.0
POLAR_OUTER_RATIO: float = 0.46  # outer radius = ratio * diameter
POLAR_RING_SATURATIONS: Tuple[int, ...] = (20, 40, 60, 80, 100)
POLAR_SPOKE_HUES: Tuple[int, ...] = (0, 60, 120, 180, 240, 300)

# =====
# Grid
# =====
GRID_WIDTH: float = 1000.0
GRID_HEIGHT: float = 800.0
GRID_MARGIN: float = 40.0
GRID_INNER_PAD_RATIO: float = 0.08
JITTER_RATIO: float = 0.15
JITTER_SEED: int = 0x9E37
GROUP_SATURATION: float = 0.65
GROUP_LIGHTNESS: float = 0.55

# ============
# Hit-testing
# ============
SIZE_SCALE_DEFAULT: float = 1.0

# ===============
# CLI locations
# ===============
LUT_PATH: str = "swatch_lookup.json"
TILE_DIR: str = "imagesSuperCrop"
PREVIEW_DIR: str = "imagesBordered"

__all__ = [
    "TILE_SIZE_DEFAULT",
    "TILE_SIZE_MIN",
    "TILE_SIZE_MAX",
    "W_HUE_DEFAULT",
    "W_BRIGHTNESS_DEFAULT",
    "W_SATURATION_DEFAULT",
    "PH_ORDER",
    "PH_LABELS",
    "MINUTES_PER_HOUR",
    "SIZE_MIN",
    "SIZE_MAX",
    "ALPHA_MIN",
    "ALPHA_MAX",
    "POLAR_DIAMETER",
    "POLAR_INNER_RADIUS",
    "POLAR_OUTER_RATIO",
    "POLAR_RING_SATURATIONS",
    "POLAR_SPOKE_HUES",
    "GRID_WIDTH",
    "GRID_HEIGHT",
    "GRID_MARGIN",
    "GRID_INNER_PAD_RATIO",
    "JITTER_RATIO",
    "JITTER_SEED",
    "GROUP_SATURATION",
    "GROUP_LIGHTNESS",
    "SIZE_SCALE_DEFAULT",
    "LUT_PATH",
    "TILE_DIR",
    "PREVIEW_DIR",
]
