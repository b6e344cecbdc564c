# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Stroke Normalizer
Maps a drawing from the caller's coordinate system into the canonical
[0, 255] x [0, 255] integer space. Three steps applied in sequence:

  1. Bounding box  - AABB over every point of every stroke
  2. Expansion     - each side grown to at least MIN_WIDTH, then the
                     shorter side grown until the box satisfies max_ratio
                     (1.0 = square). Both grow symmetrically about the
                     centre. Minimum width must come first: equalisation
                     has to see the already-expanded dimension.
  3. Projection    - linear map of the expanded box onto the canonical
                     box, rounded half away from zero

Normalisation depends only on the points themselves; canvas width and
height hints from the caller are not needed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from strokelens.models.matching import MAX_RATIO, MIN_WIDTH, NUM_ENCODED_VALUES
from strokelens.utils.geometry_utils import Point, Stroke, round_half_away


@dataclass(frozen=True)
class AABB:
    """Axis-aligned bounding box as (min corner, max corner)."""
    min: Point
    max: Point

    @property
    def width(self) -> float:
        return self.max[0] - self.min[0]

    @property
    def height(self) -> float:
        return self.max[1] - self.min[1]


# ─── Step 1: Bounding Box ────────────────────────────────────────────────────

def compute_aabb(strokes: Sequence[Stroke]) -> AABB:
    """
    Bounding box of all points across all strokes.
    Raises ValueError if there are no points at all.
    """
    xs = [p[0] for stroke in strokes for p in stroke]
    ys = [p[1] for stroke in strokes for p in stroke]
    if not xs:
        raise ValueError("compute_aabb: no points in stroke set.")
    return AABB(min=(min(xs), min(ys)), max=(max(xs), max(ys)))


# ─── Step 2: Expansion ───────────────────────────────────────────────────────

def _grow_axis(lo: float, hi: float, target: float) -> tuple[float, float]:
    """Grow [lo, hi] symmetrically about its centre to exactly target extent."""
    extra = (target - (hi - lo)) / 2.0
    return lo - extra, hi + extra


def expand_aabb(
    aabb: AABB,
    min_width: float = MIN_WIDTH,
    max_ratio: float = MAX_RATIO,
) -> AABB:
    """
    Enforce the minimum extent, then the aspect-ratio constraint.

    Args:
        aabb:      Tight bounding box of the drawing
        min_width: Minimum extent on both axes
        max_ratio: Largest allowed long/short side ratio. 1.0 forces a
                   square; <= 0 disables the constraint.

    Returns:
        New AABB, never smaller than the input on either axis.
    """
    (x0, y0), (x1, y1) = aabb.min, aabb.max

    if x1 - x0 < min_width:
        x0, x1 = _grow_axis(x0, x1, min_width)
    if y1 - y0 < min_width:
        y0, y1 = _grow_axis(y0, y1, min_width)

    if max_ratio > 0:
        w, h = x1 - x0, y1 - y0
        if w < h / max_ratio:
            x0, x1 = _grow_axis(x0, x1, h / max_ratio)
        elif h < w / max_ratio:
            y0, y1 = _grow_axis(y0, y1, w / max_ratio)

    return AABB(min=(x0, y0), max=(x1, y1))


# ─── Step 3: Projection ──────────────────────────────────────────────────────

def project_point(p: Point, aabb: AABB, canvas_max: float) -> Point:
    """
    Map p from aabb into [0, canvas_max] on both axes, rounded.
    A zero extent maps that axis to 0 instead of dividing by zero.
    """
    w, h = aabb.width, aabb.height
    fx = (p[0] - aabb.min[0]) / w if w > 0 else 0.0
    fy = (p[1] - aabb.min[1]) / h if h > 0 else 0.0
    return round_half_away(fx * canvas_max), round_half_away(fy * canvas_max)


# ─── Main Entry Point ────────────────────────────────────────────────────────

def normalize_strokes(
    strokes: Sequence[Stroke],
    min_width: float = MIN_WIDTH,
    max_ratio: float = MAX_RATIO,
    num_encoded_values: int = NUM_ENCODED_VALUES,
) -> list[Stroke]:
    """
    Full normalisation: bounding box → expansion → projection.
    Returns new strokes; the input is left untouched.
    """
    aabb = expand_aabb(compute_aabb(strokes), min_width, max_ratio)
    canvas_max = float(num_encoded_values - 1)
    return [
        [project_point(p, aabb, canvas_max) for p in stroke]
        for stroke in strokes
    ]
