# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Stroke Feature Encoder
Turns a resampled stroke (K points) into its ProcessedStroke vector:

    [x0, y0, x1, y1, ..., x(K-1), y(K-1), angle_code, length_code]

Angle and length describe the span from the first to the last sampled
point. The angle code is 8-bit circular: 0 points along -x, 64 along
-y, 128 along +x and 192 along +y. The length code is |span| / sqrt(2), which
cannot exceed 255 inside the canonical box.
"""

from __future__ import annotations

import math

import numpy as np

from strokelens.models.matching import NUM_ENCODED_VALUES
from strokelens.utils.geometry_utils import Stroke, round_half_away, squared_norm, subtract


def encode_angle(theta: float, num_encoded_values: int = NUM_ENCODED_VALUES) -> int:
    """Quantise an angle in radians to [0, num_encoded_values), wrapping at 2π."""
    code = round_half_away(((theta + math.pi) * num_encoded_values) / (2 * math.pi))
    return int(code) % num_encoded_values


def encode_length(span_squared: float, num_encoded_values: int = NUM_ENCODED_VALUES) -> int:
    code = int(round_half_away(math.sqrt(span_squared / 2.0)))
    return min(max(code, 0), num_encoded_values - 1)


def encode_stroke(
    resampled: Stroke,
    num_encoded_values: int = NUM_ENCODED_VALUES,
) -> np.ndarray:
    """
    Build the (2K + 2,) float64 feature vector for one resampled stroke.
    Raises ValueError on an empty stroke.
    """
    if not resampled:
        raise ValueError("encode_stroke: resampled stroke has no points.")

    span = subtract(resampled[-1], resampled[0])
    angle = encode_angle(math.atan2(span[1], span[0]), num_encoded_values)
    length = encode_length(squared_norm(span), num_encoded_values)

    flat = [c for point in resampled for c in point]
    return np.asarray(flat + [angle, length], dtype=np.float64)
