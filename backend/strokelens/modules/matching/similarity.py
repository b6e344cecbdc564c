# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Stroke Similarity Scorer
Scores a query's ProcessedStroke vectors against one reference entry.

Per compared stroke pair:
  position penalty  sum over the K sampled points of |dx| + |dy|
  angle penalty     weight^2 * (q_len + r_len) / 256 * circular_distance
                    (long strokes pointing the wrong way cost the most)

The score is the negated total: 0 is a perfect match, more negative is
worse. How many stroke pairs are compared when the two stroke counts
differ is decided by a stroke-count policy:

  truncate_policy   compare the first min(q, r) strokes (default)
  reject_policy     only equal stroke counts are comparable
  penalize_policy   truncate, then charge a fixed cost per unmatched stroke

A policy returns (strokes_to_compare, extra_penalty), or None to
disqualify the entry; disqualified entries score -inf.

score_corpus() is the vectorised form used by the ranker: one numpy pass
over the pre-stacked corpus instead of a Python loop per entry.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Optional

import numpy as np

from strokelens.models.matching import (
    NUM_ENCODED_POINTS,
    NUM_ENCODED_VALUES,
    PER_STROKE_WEIGHT,
    MatcherOptions,
    StrokeCountPolicy,
)

StrokeCountRule = Callable[[int, int], Optional[tuple[int, float]]]


# ─── Stroke-Count Policies ───────────────────────────────────────────────────

def truncate_policy(query_count: int, reference_count: int) -> tuple[int, float]:
    return min(query_count, reference_count), 0.0


def reject_policy(query_count: int, reference_count: int) -> tuple[int, float] | None:
    if query_count != reference_count:
        return None
    return query_count, 0.0


def penalize_policy(per_stroke_penalty: float) -> StrokeCountRule:
    """Build a truncating policy that also charges per_stroke_penalty per unmatched stroke."""

    def _penalize(query_count: int, reference_count: int) -> tuple[int, float]:
        missing = abs(query_count - reference_count)
        return min(query_count, reference_count), per_stroke_penalty * missing

    _penalize.__name__ = "penalize_policy"
    return _penalize


def resolve_policy(options: MatcherOptions) -> StrokeCountRule:
    """Return the policy function selected by options.stroke_count_policy."""
    if options.stroke_count_policy == StrokeCountPolicy.REJECT:
        return reject_policy
    if options.stroke_count_policy == StrokeCountPolicy.PENALIZE:
        return penalize_policy(options.stroke_count_penalty)
    return truncate_policy


# ─── Single-Entry Scorer ─────────────────────────────────────────────────────

def circular_distance(a: float, b: float, num_encoded_values: int = NUM_ENCODED_VALUES) -> float:
    """Distance between two angle codes on the wrap-around scale. At most num_encoded_values / 2."""
    c = abs(a - b)
    return min(c, num_encoded_values - c)


def stroke_penalty(
    query_stroke: np.ndarray,
    reference_stroke: np.ndarray,
    num_points: int = NUM_ENCODED_POINTS,
    num_encoded_values: int = NUM_ENCODED_VALUES,
    per_stroke_weight: float = PER_STROKE_WEIGHT,
) -> float:
    """Non-negative penalty for one stroke pair (position + weighted angle)."""
    k2 = 2 * num_points
    position = float(np.abs(query_stroke[:k2] - reference_stroke[:k2]).sum())

    angle = circular_distance(query_stroke[k2], reference_stroke[k2], num_encoded_values)
    lengthy = (query_stroke[k2 + 1] + reference_stroke[k2 + 1]) / num_encoded_values
    return position + per_stroke_weight * per_stroke_weight * lengthy * angle


def score_similarity(
    query: Sequence[Sequence[float]] | np.ndarray,
    reference: Sequence[Sequence[float]] | np.ndarray,
    policy: StrokeCountRule = truncate_policy,
    num_points: int = NUM_ENCODED_POINTS,
    num_encoded_values: int = NUM_ENCODED_VALUES,
    per_stroke_weight: float = PER_STROKE_WEIGHT,
) -> float:
    """
    Score query vectors against one reference entry's vectors.

    Returns:
        Float <= 0 (0 = perfect match), or -inf if the policy
        disqualifies the pair.
    """
    rule = policy(len(query), len(reference))
    if rule is None:
        return -math.inf

    n, extra = rule
    n = min(n, len(query), len(reference))
    q = np.asarray(query, dtype=np.float64)
    r = np.asarray(reference, dtype=np.float64)

    score = -extra
    for i in range(n):
        score -= stroke_penalty(q[i], r[i], num_points, num_encoded_values, per_stroke_weight)
    return float(score)


# ─── Vectorised Corpus Scorer ────────────────────────────────────────────────

def score_corpus(
    query: np.ndarray,
    stacked: np.ndarray,
    stroke_counts: np.ndarray,
    policy: StrokeCountRule = truncate_policy,
    num_points: int = NUM_ENCODED_POINTS,
    num_encoded_values: int = NUM_ENCODED_VALUES,
    per_stroke_weight: float = PER_STROKE_WEIGHT,
) -> np.ndarray:
    """
    Score one query against every corpus entry at once.

    Args:
        query:         (q, 2K+2) query vectors
        stacked:       (N, S, 2K+2) zero-padded corpus vectors
        stroke_counts: (N,) real stroke count of each entry

    Returns:
        (N,) float64 scores, same order as the corpus. Entries the policy
        disqualifies are -inf.

    Algorithm:
        1. Per-stroke penalties for the first min(q, S) stroke slots of
           every entry → (N, w)
        2. Cumulative sum along strokes, so the score for "compare the
           first n strokes" is a single lookup
        3. Apply the policy once per distinct stroke count
    """
    n_entries = stacked.shape[0]
    scores = np.full(n_entries, -np.inf, dtype=np.float64)
    q_count = query.shape[0]
    if n_entries == 0:
        return scores

    width = min(q_count, stacked.shape[1])
    k2 = 2 * num_points
    ref = stacked[:, :width, :]
    qv = query[None, :width, :]

    position = np.abs(ref[..., :k2] - qv[..., :k2]).sum(axis=-1)
    c = np.abs(ref[..., k2] - qv[..., k2])
    angle = np.minimum(c, num_encoded_values - c)
    lengthy = (ref[..., k2 + 1] + qv[..., k2 + 1]) / num_encoded_values
    per_stroke = position + per_stroke_weight * per_stroke_weight * lengthy * angle

    cumulative = np.zeros((n_entries, width + 1), dtype=np.float64)
    cumulative[:, 1:] = np.cumsum(per_stroke, axis=1)

    for count in np.unique(stroke_counts):
        rule = policy(q_count, int(count))
        if rule is None:
            continue
        n, extra = rule
        n = min(n, q_count, int(count))
        mask = stroke_counts == count
        scores[mask] = -(cumulative[mask, n] + extra)

    return scores
