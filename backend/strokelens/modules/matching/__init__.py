# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Matching Engine Module
Public API for scoring, ranking and the Matcher façade.
"""

from strokelens.modules.matching.matcher import Matcher, preprocess_strokes
from strokelens.modules.matching.ranker import rank, rank_candidates
from strokelens.modules.matching.similarity import (
    StrokeCountRule,
    circular_distance,
    penalize_policy,
    reject_policy,
    resolve_policy,
    score_corpus,
    score_similarity,
    stroke_penalty,
    truncate_policy,
)

__all__ = [
    # Similarity
    "circular_distance",
    "stroke_penalty",
    "score_similarity",
    "score_corpus",
    # Stroke-count policies
    "StrokeCountRule",
    "truncate_policy",
    "reject_policy",
    "penalize_policy",
    "resolve_policy",
    # Ranking
    "rank",
    "rank_candidates",
    # Orchestrator
    "Matcher",
    "preprocess_strokes",
]
