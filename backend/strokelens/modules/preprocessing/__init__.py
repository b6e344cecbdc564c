# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Preprocessing Module
Public API for the normalise → resample → encode stage.
"""

from strokelens.modules.preprocessing.encoder import (
    encode_angle,
    encode_length,
    encode_stroke,
)
from strokelens.modules.preprocessing.normalizer import (
    AABB,
    compute_aabb,
    expand_aabb,
    normalize_strokes,
    project_point,
)
from strokelens.modules.preprocessing.resampler import resample_stroke
from strokelens.modules.preprocessing.validator import (
    validate_strokes,
    validate_vectors,
)

__all__ = [
    # Validator
    "validate_strokes",
    "validate_vectors",
    # Normalizer
    "AABB",
    "compute_aabb",
    "expand_aabb",
    "project_point",
    "normalize_strokes",
    # Resampler
    "resample_stroke",
    # Encoder
    "encode_angle",
    "encode_length",
    "encode_stroke",
]
