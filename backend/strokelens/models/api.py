# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - API Request/Response Models
Shapes accepted and returned by the HTTP routes.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from strokelens.models.matching import Candidate


class MatchRequest(BaseModel):
    """Raw strokes in any caller-defined coordinate system (e.g. canvas pixels)."""
    strokes: list[list[tuple[float, float]]] = Field(
        ..., description="Strokes in drawing order, each a list of [x, y] points"
    )
    limit: Optional[int] = Field(None, ge=1, description="Candidates to return")


class PreprocessedMatchRequest(BaseModel):
    """Feature vectors already in corpus form: [x0, y0, ..., x3, y3, angle, length]."""
    vectors: list[list[float]]
    limit: Optional[int] = Field(None, ge=1)


class MatchResponse(BaseModel):
    candidates: list[Candidate] = Field(default_factory=list)
    count: int = 0


class CorpusSummary(BaseModel):
    entries: int
    max_strokes: int
    stroke_counts: dict[int, int] = Field(
        default_factory=dict, description="stroke count → number of entries"
    )
    source: Optional[str] = None
