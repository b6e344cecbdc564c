# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Candidate Ranker
Scores a query against the whole corpus and keeps the best N entries.

Ordering is by descending score. Exact ties keep corpus order (stable
sort), so the entry loaded first wins. Entries disqualified by the
stroke-count policy never appear in the result.
"""

from __future__ import annotations

import numpy as np

from strokelens.models.corpus import Corpus
from strokelens.models.matching import Candidate, MatcherOptions
from strokelens.modules.matching.similarity import (
    StrokeCountRule,
    resolve_policy,
    score_corpus,
)
from strokelens.utils.logger import get_logger

log = get_logger(__name__)


def rank_candidates(
    query: np.ndarray,
    corpus: Corpus,
    how_many: int,
    options: MatcherOptions | None = None,
    policy: StrokeCountRule | None = None,
) -> list[Candidate]:
    """
    Return up to how_many Candidates, best first.

    Args:
        query:    (q, 2K+2) feature vectors. q == 0 returns [] unscored.
        corpus:   Read-only reference corpus
        how_many: Requested candidate count; <= 0 returns []
        options:  Scoring constants. Defaults to MatcherOptions().
        policy:   Stroke-count policy override. Defaults to the one
                  named in options.
    """
    if query.shape[0] == 0 or how_many <= 0 or len(corpus) == 0:
        return []

    if options is None:
        options = MatcherOptions()
    if policy is None:
        policy = resolve_policy(options)

    scores = score_corpus(
        query,
        corpus.stacked_vectors,
        corpus.stroke_counts,
        policy=policy,
        num_points=options.num_encoded_points,
        num_encoded_values=options.num_encoded_values,
        per_stroke_weight=options.per_stroke_weight,
    )

    order = np.argsort(-scores, kind="stable")
    labels = corpus.labels

    candidates: list[Candidate] = []
    for idx in order:
        score = float(scores[idx])
        if not np.isfinite(score):
            # -inf sorts last, so everything after this is disqualified too
            break
        candidates.append(Candidate(label=labels[idx], score=score))
        if len(candidates) >= how_many:
            break

    log.debug(
        "ranking_complete",
        query_strokes=int(query.shape[0]),
        corpus_size=len(corpus),
        returned=len(candidates),
        best_score=candidates[0].score if candidates else None,
    )
    return candidates


def rank(
    query: np.ndarray,
    corpus: Corpus,
    how_many: int,
    options: MatcherOptions | None = None,
    policy: StrokeCountRule | None = None,
) -> list[str]:
    """Labels only, best first. See rank_candidates()."""
    return [c.label for c in rank_candidates(query, corpus, how_many, options, policy)]
