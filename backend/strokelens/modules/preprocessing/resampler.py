# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Arc-Length Resampler
Replaces a normalised stroke of arbitrary point count with exactly K
points spaced evenly by distance travelled along the polyline.

The first K-1 points are interpolated and rounded to the integer grid.
The K-th point is the stroke's own last point, copied as-is, so the
stroke endpoint is never shifted by interpolation or rounding.
"""

from __future__ import annotations

from strokelens.models.matching import NUM_ENCODED_POINTS
from strokelens.utils.geometry_utils import Point, Stroke, cumulative_lengths, round_point


def _interpolate(p0: Point, p1: Point, f: float) -> Point:
    return (1.0 - f) * p0[0] + f * p1[0], (1.0 - f) * p0[1] + f * p1[1]


def resample_stroke(stroke: Stroke, n_points: int = NUM_ENCODED_POINTS) -> Stroke:
    """
    Resample one stroke to exactly n_points by arc length.

    Args:
        stroke:   Non-empty list of (x, y) points
        n_points: Output point count (K), at least 2

    Returns:
        List of n_points points. A single-point or zero-length stroke
        yields n_points copies of its (rounded) start, last point exact.

    Raises:
        ValueError: if stroke is empty or n_points < 2.
    """
    if not stroke:
        raise ValueError("resample_stroke: stroke has no points.")
    if n_points < 2:
        raise ValueError(f"resample_stroke: n_points must be >= 2, got {n_points}.")

    dists = cumulative_lengths(stroke)
    total = dists[-1]
    last_vertex = len(stroke) - 1

    result: Stroke = []
    seg = 0  # index of the segment start vertex
    for i in range(n_points - 1):
        target = i * total / (n_points - 1)

        # Advance while the target lies beyond the current segment
        while seg < last_vertex - 1 and target > dists[seg + 1]:
            seg += 1

        if seg >= last_vertex:
            point = stroke[seg]
        else:
            seg_len = dists[seg + 1] - dists[seg]
            # Duplicate consecutive points: carry the vertex forward
            f = (target - dists[seg]) / seg_len if seg_len > 0 else 0.0
            point = _interpolate(stroke[seg], stroke[seg + 1], min(max(f, 0.0), 1.0))

        result.append(round_point(point))

    result.append((stroke[-1][0], stroke[-1][1]))
    return result
