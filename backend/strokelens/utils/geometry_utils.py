# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Geometry Utilities
2D point arithmetic and the single rounding rule shared by the
normaliser, resampler and encoder. Corpus preprocessing and query
preprocessing must round identically for self-matching to be exact,
so nothing else in the package calls round() on coordinates.
"""

import math

Point = tuple[float, float]
Stroke = list[Point]


# ─── Rounding ────────────────────────────────────────────────────────────────

def round_half_away(value: float) -> float:
    """Round to nearest integer, halves away from zero (2.5 → 3, -2.5 → -3)."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def round_point(p: Point) -> Point:
    return round_half_away(p[0]), round_half_away(p[1])


# ─── Vector Arithmetic ───────────────────────────────────────────────────────

def subtract(a: Point, b: Point) -> Point:
    """Component-wise a - b."""
    return a[0] - b[0], a[1] - b[1]


def squared_norm(p: Point) -> float:
    return p[0] * p[0] + p[1] * p[1]


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.sqrt(squared_norm(subtract(a, b)))


# ─── Polyline Helpers ────────────────────────────────────────────────────────

def cumulative_lengths(stroke: Stroke) -> list[float]:
    """
    Arc length travelled at each vertex of a polyline.
    Returns a list the same length as stroke, starting at 0.0.
    """
    dists = [0.0]
    for i in range(1, len(stroke)):
        dists.append(dists[-1] + distance(stroke[i - 1], stroke[i]))
    return dists
