# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Matching Engine Orchestrator
Wires the preprocessing and matching sub-modules into two entry points:

  match_raw:          Normalize → Resample (per stroke) → Encode (per
                      stroke) → Rank
  match_preprocessed: Rank only, for callers that already hold
                      quantised feature vectors

The second path exists for bit-exact comparison against the corpus's
own stored vectors. Re-deriving vectors from already-quantised data
rounds a second time and can break self-matching.

A Matcher holds one Corpus and never mutates it, so a single instance
serves concurrent requests without locking.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from strokelens.api.middleware.error_handler import StrokeInputError
from strokelens.models.corpus import Corpus
from strokelens.models.matching import Candidate, MatcherOptions
from strokelens.modules.matching.ranker import rank_candidates
from strokelens.modules.matching.similarity import StrokeCountRule, resolve_policy
from strokelens.modules.preprocessing.encoder import encode_stroke
from strokelens.modules.preprocessing.normalizer import normalize_strokes
from strokelens.modules.preprocessing.resampler import resample_stroke
from strokelens.utils.geometry_utils import Stroke
from strokelens.utils.logger import get_logger

log = get_logger(__name__)


def preprocess_strokes(
    strokes: Sequence[Stroke],
    options: MatcherOptions | None = None,
) -> np.ndarray:
    """
    Turn raw strokes into (n_strokes, 2K+2) feature vectors.

    Raises:
        StrokeInputError: if strokes is empty or any stroke has no points.
    """
    if options is None:
        options = MatcherOptions()
    if len(strokes) == 0 or any(len(s) == 0 for s in strokes):
        raise StrokeInputError("Invalid stroke data: empty strokes are not allowed.")

    normalized = normalize_strokes(
        strokes,
        min_width=options.min_width,
        max_ratio=options.max_ratio,
        num_encoded_values=options.num_encoded_values,
    )
    vectors = [
        encode_stroke(
            resample_stroke(stroke, options.num_encoded_points),
            options.num_encoded_values,
        )
        for stroke in normalized
    ]
    return np.stack(vectors)


class Matcher:
    """
    Handwriting matcher over one immutable reference corpus.

    Usage:
        matcher = Matcher(corpus)
        matcher.match_raw([[(10, 10), (90, 90)]], 5)
    """

    def __init__(
        self,
        corpus: Corpus,
        options: MatcherOptions | None = None,
        policy: StrokeCountRule | None = None,
    ) -> None:
        self.options = options or MatcherOptions()
        if corpus.num_points != self.options.num_encoded_points:
            raise ValueError(
                f"Corpus was built for K={corpus.num_points} points but options "
                f"use K={self.options.num_encoded_points}."
            )
        self.corpus = corpus
        self.policy = policy or resolve_policy(self.options)

    def preprocess(self, strokes: Sequence[Stroke]) -> np.ndarray:
        return preprocess_strokes(strokes, self.options)

    # ── Scored entry points ──────────────────────────────────────────────────

    def match_raw_scored(self, strokes: Sequence[Stroke], how_many: int) -> list[Candidate]:
        if len(strokes) == 0:
            return []
        query = self.preprocess(strokes)
        candidates = rank_candidates(query, self.corpus, how_many, self.options, self.policy)
        log.debug(
            "match_raw_complete",
            strokes=len(strokes),
            candidates=len(candidates),
        )
        return candidates

    def match_preprocessed_scored(
        self,
        vectors: Sequence[Sequence[float]] | np.ndarray,
        how_many: int,
    ) -> list[Candidate]:
        try:
            query = np.asarray(vectors, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise StrokeInputError("Feature vectors must be equal-length numeric rows.") from exc
        if query.size == 0:
            return []
        if query.ndim != 2 or query.shape[1] != self.options.vector_length:
            raise StrokeInputError(
                f"Feature vectors must have shape (n, {self.options.vector_length}), "
                f"got {query.shape}."
            )
        candidates = rank_candidates(query, self.corpus, how_many, self.options, self.policy)
        log.debug(
            "match_preprocessed_complete",
            strokes=int(query.shape[0]),
            candidates=len(candidates),
        )
        return candidates

    # ── Label-only entry points ──────────────────────────────────────────────

    def match_raw(self, strokes: Sequence[Stroke], how_many: int) -> list[str]:
        """Best-first labels for raw strokes; [] for an empty query."""
        return [c.label for c in self.match_raw_scored(strokes, how_many)]

    def match_preprocessed(
        self,
        vectors: Sequence[Sequence[float]] | np.ndarray,
        how_many: int,
    ) -> list[str]:
        """Best-first labels for precomputed feature vectors; [] for an empty query."""
        return [c.label for c in self.match_preprocessed_scored(vectors, how_many)]
