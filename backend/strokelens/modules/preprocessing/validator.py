# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Query Validator
Admission control for untrusted query input, applied at the service
boundary before anything reaches the matcher. Checks stroke count,
points per stroke, coordinate finiteness, and preprocessed vector shape.

Matching cost grows with corpus size x strokes per query, and the
resampling walk grows with raw point count, so both are capped.

Raises StrokeInputError (subclass of ValueError) on any failure
so the API error handler maps it cleanly to HTTP 422.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from strokelens.api.middleware.error_handler import StrokeInputError
from strokelens.config import get_settings
from strokelens.models.matching import NUM_ENCODED_POINTS, NUM_ENCODED_VALUES
from strokelens.utils.geometry_utils import Stroke
from strokelens.utils.logger import get_logger

log = get_logger(__name__)


def validate_strokes(
    strokes: Sequence[Stroke],
    max_strokes: int | None = None,
    max_points_per_stroke: int | None = None,
) -> list[Stroke]:
    """
    Validate raw query strokes and return them as lists of float tuples.

    Checks performed (in order):
      1. Stroke count within max_strokes
      2. Every stroke non-empty
      3. Point count within max_points_per_stroke
      4. Every point is exactly two finite numbers

    An empty stroke list is valid (the matcher answers with no candidates).

    Raises:
        StrokeInputError: On any validation failure.
    """
    settings = get_settings()
    if max_strokes is None:
        max_strokes = settings.max_strokes
    if max_points_per_stroke is None:
        max_points_per_stroke = settings.max_points_per_stroke

    if len(strokes) > max_strokes:
        raise StrokeInputError(
            f"Query has {len(strokes)} strokes; at most {max_strokes} are accepted."
        )

    cleaned: list[Stroke] = []
    for i, stroke in enumerate(strokes):
        if len(stroke) == 0:
            raise StrokeInputError(f"Stroke {i} has no points.")
        if len(stroke) > max_points_per_stroke:
            raise StrokeInputError(
                f"Stroke {i} has {len(stroke)} points; at most "
                f"{max_points_per_stroke} are accepted."
            )
        points = []
        for point in stroke:
            if len(point) != 2:
                raise StrokeInputError(f"Stroke {i} contains a point without two coordinates.")
            x, y = float(point[0]), float(point[1])
            if not (math.isfinite(x) and math.isfinite(y)):
                raise StrokeInputError(f"Stroke {i} contains a non-finite coordinate.")
            points.append((x, y))
        cleaned.append(points)

    log.debug(
        "strokes_validated",
        stroke_count=len(cleaned),
        point_counts=[len(s) for s in cleaned],
    )
    return cleaned


def validate_vectors(
    vectors: Sequence[Sequence[float]],
    num_points: int = NUM_ENCODED_POINTS,
    num_values: int = NUM_ENCODED_VALUES,
    max_strokes: int | None = None,
) -> list[list[float]]:
    """
    Validate preprocessed feature vectors supplied by a caller.
    Each must hold exactly 2K+2 finite numbers; the angle code must lie
    in [0, num_values).

    Raises:
        StrokeInputError: On any validation failure.
    """
    if max_strokes is None:
        max_strokes = get_settings().max_strokes

    if len(vectors) > max_strokes:
        raise StrokeInputError(
            f"Query has {len(vectors)} strokes; at most {max_strokes} are accepted."
        )

    expected = 2 * num_points + 2
    cleaned: list[list[float]] = []
    for i, vec in enumerate(vectors):
        if len(vec) != expected:
            raise StrokeInputError(
                f"Vector {i} has {len(vec)} values; expected {expected}."
            )
        values = [float(v) for v in vec]
        if not all(math.isfinite(v) for v in values):
            raise StrokeInputError(f"Vector {i} contains a non-finite value.")
        if not 0 <= values[-2] < num_values:
            raise StrokeInputError(
                f"Vector {i} angle code {values[-2]} outside [0, {num_values})."
            )
        cleaned.append(values)
    return cleaned
