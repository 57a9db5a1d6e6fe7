# swatch_atlas/colour_convert.py
from __future__ import annotations

"""
Colour conversions and the swatch match score (HSB).

Exports:
  rgb_to_hsb(rgb)
  rgb_to_hsb_tuple(r, g, b)
  average_colour(rgba, x, y, w, h)
  hue_distance(a, b)
  hue_distance_vec(source_hue, target_hues)
  score_hsb(candidate, target, weights)
  hsb_matrix(records)
  score_candidates(target, cand_hsb, weights)
  best_match(target, cand_hsb, weights)
"""

import math
from typing import Sequence, Tuple

import numpy as np

from .core_types import HSB, HSBArray, SwatchRecord, Weights, hue_difference_degrees


# RGB to HSB


def rgb_to_hsb(rgb: np.ndarray) -> HSBArray:
    """
    RGB [0..255] to HSB (standard HSV). Vectorised over (...,3).
    Returns float64 (...,3): hue in degrees [0,360), saturation and brightness in %.
    """
    arr = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = arr[..., 0], arr[..., 1], arr[..., 2]
    c_max = np.max(arr, axis=-1)
    c_min = np.min(arr, axis=-1)
    delta = c_max - c_min
    safe = np.where(delta > 0.0, delta, 1.0)

    hue = np.zeros_like(c_max)
    r_max = (delta > 0.0) & (c_max == r)
    g_max = (delta > 0.0) & (c_max == g) & ~r_max
    b_max = (delta > 0.0) & ~r_max & ~g_max
    hue = np.where(r_max, ((g - b) / safe) % 6.0, hue)
    hue = np.where(g_max, (b - r) / safe + 2.0, hue)
    hue = np.where(b_max, (r - g) / safe + 4.0, hue)
    hue = (hue * 60.0) % 360.0

    sat = np.where(c_max > 0.0, delta / np.where(c_max > 0.0, c_max, 1.0), 0.0)

    out = np.empty(arr.shape, dtype=np.float64)
    out[..., 0] = hue
    out[..., 1] = sat * 100.0
    out[..., 2] = c_max * 100.0
    return out


def rgb_to_hsb_tuple(r: int, g: int, b: int) -> HSB:
    """Single RGB triple to an HSB value."""
    h, s, v = rgb_to_hsb(np.array([r, g, b], dtype=np.float64)).tolist()
    return HSB(h, s, v)


# Tile sampling


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_colour(rgba: np.ndarray, x: int, y: int, w: int, h: int) -> HSB:
    """
    Mean colour of a rectangular region of an RGBA (H,W,4) buffer, as HSB.

    The region is clipped to the image; pixels outside it are never sampled.
    Only pixels with alpha > 0 count. The mean channels are rounded to integers
    before conversion. A region with no eligible pixels gives HSB(0, 0, 0).
    """
    height, width = rgba.shape[0], rgba.shape[1]
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(width, x + w), min(height, y + h)
    if x1 <= x0 or y1 <= y0:
        return HSB(0.0, 0.0, 0.0)

    region = rgba[y0:y1, x0:x1]
    visible = region[..., 3] > 0
    count = int(np.count_nonzero(visible))
    if count == 0:
        return HSB(0.0, 0.0, 0.0)

    sums = region[..., :3][visible].astype(np.int64).sum(axis=0)
    r, g, b = (_round_half_up(float(s) / count) for s in sums.tolist())
    return rgb_to_hsb_tuple(r, g, b)


# Distance and score


def hue_distance(a: float, b: float) -> float:
    """Circular hue distance in degrees, in [0,180]."""
    return hue_difference_degrees(a, b)


def hue_distance_vec(source_hue: float, target_hues: np.ndarray) -> np.ndarray:
    """Circular hue distance from one hue to a vector of hues."""
    delta = np.abs(np.asarray(target_hues, dtype=np.float64) - source_hue) % 360.0
    return np.where(delta > 180.0, 360.0 - delta, delta)


def score_hsb(candidate: HSB, target: HSB, weights: Weights) -> float:
    """
    Weighted swatch distance; lower is better.
      hue * hue_distance + brightness * |db| + saturation * |ds|
    """
    return (
        weights.hue * hue_distance(candidate.h, target.h)
        + weights.brightness * abs(candidate.b - target.b)
        + weights.saturation * abs(candidate.s - target.s)
    )


def hsb_matrix(records: Sequence[SwatchRecord]) -> HSBArray:
    """Stack record colours into a float64 (N,3) array in catalogue order."""
    if not records:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array([(r.h, r.s, r.b) for r in records], dtype=np.float64)


def score_candidates(target: HSB, cand_hsb: HSBArray, weights: Weights) -> np.ndarray:
    """score_hsb of every candidate row against `target`. Returns float64 (N,)."""
    return (
        weights.hue * hue_distance_vec(target.h, cand_hsb[:, 0])
        + weights.brightness * np.abs(cand_hsb[:, 2] - target.b)
        + weights.saturation * np.abs(cand_hsb[:, 1] - target.s)
    )


def best_match(target: HSB, cand_hsb: HSBArray, weights: Weights) -> Tuple[int, float]:
    """
    Index and score of the lowest-scoring candidate.
    On exact ties the first row wins (argmin returns the first minimum).
    Returns (-1, inf) for an empty candidate array.
    """
    if cand_hsb.shape[0] == 0:
        return -1, float("inf")
    scores = score_candidates(target, cand_hsb, weights)
    idx = int(np.argmin(scores))
    return idx, float(scores[idx])


__all__ = [
    "rgb_to_hsb",
    "rgb_to_hsb_tuple",
    "average_colour",
    "hue_distance",
    "hue_distance_vec",
    "score_hsb",
    "hsb_matrix",
    "score_candidates",
    "best_match",
]
