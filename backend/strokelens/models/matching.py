# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Matching Models
Tunable constants for the preprocessing/scoring chain and the
transient Candidate produced per query.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from strokelens.config import Settings

# Canonical coordinate space is [0, NUM_ENCODED_VALUES - 1] on both axes
NUM_ENCODED_VALUES = 256
# Sampled points per stroke
NUM_ENCODED_POINTS = 4
PER_STROKE_WEIGHT = 4.0
MIN_WIDTH = 8.0
MAX_RATIO = 1.0


class StrokeCountPolicy(str, Enum):
    """How a query is compared against an entry with a different stroke count."""
    TRUNCATE = "truncate"
    REJECT = "reject"
    PENALIZE = "penalize"


class MatcherOptions(BaseModel):
    """
    Every numeric constant the Normalizer, Encoder and Scorer depend on.
    Frozen so one instance can be shared across request threads.
    """
    model_config = ConfigDict(frozen=True)

    min_width: float = Field(MIN_WIDTH, gt=0)
    max_ratio: float = Field(MAX_RATIO, description="<= 0 disables the aspect constraint")
    num_encoded_values: int = Field(NUM_ENCODED_VALUES, ge=2)
    num_encoded_points: int = Field(NUM_ENCODED_POINTS, ge=2)
    per_stroke_weight: float = Field(PER_STROKE_WEIGHT, ge=0.0)
    stroke_count_policy: StrokeCountPolicy = StrokeCountPolicy.TRUNCATE
    stroke_count_penalty: float = Field(256.0, ge=0.0)

    @property
    def vector_length(self) -> int:
        """Fields per ProcessedStroke: K points (x, y) + angle + length."""
        return 2 * self.num_encoded_points + 2

    @property
    def canvas_max(self) -> float:
        return float(self.num_encoded_values - 1)

    @classmethod
    def from_settings(cls, settings: Settings) -> MatcherOptions:
        return cls(
            min_width=settings.min_width,
            max_ratio=settings.max_ratio,
            per_stroke_weight=settings.per_stroke_weight,
            stroke_count_policy=StrokeCountPolicy(settings.stroke_count_policy),
            stroke_count_penalty=settings.stroke_count_penalty,
        )


class Candidate(BaseModel):
    """One ranked corpus entry. Higher score is better; 0 is a perfect match."""
    label: str
    score: float
