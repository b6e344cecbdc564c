# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 3 - Matching tests.
Covers the similarity scorer, stroke-count policies, vectorised corpus
scoring, the ranker, and the Matcher facade. Uses a synthetic corpus
preprocessed from random drawings.
"""

import math

import numpy as np
import pytest

from strokelens.api.middleware.error_handler import StrokeInputError

DIAGONAL = [(0.0, 0.0), (100.0, 100.0), (200.0, 200.0), (255.0, 255.0)]
OFFSET_DIAGONAL = [(10.0, 10.0), (110.0, 110.0), (210.0, 210.0), (245.0, 245.0)]


def _random_drawing(rng: np.random.Generator, n_strokes: int) -> list:
    return [
        [(float(x), float(y)) for x, y in rng.integers(0, 400, size=(int(rng.integers(2, 7)), 2))]
        for _ in range(n_strokes)
    ]


def _synthetic_corpus(n_entries: int = 40, seed: int = 7):
    """Returns (corpus, drawings) where drawings[i] produced corpus[i]."""
    from strokelens.models.corpus import Corpus
    from strokelens.modules.matching.matcher import preprocess_strokes
    rng = np.random.default_rng(seed)
    drawings = [_random_drawing(rng, int(rng.integers(1, 6))) for _ in range(n_entries)]
    records = [
        (f"char_{i:03d}", preprocess_strokes(d).tolist())
        for i, d in enumerate(drawings)
    ]
    return Corpus.from_records(records), drawings


def _vec(points) -> np.ndarray:
    from strokelens.modules.preprocessing.encoder import encode_stroke
    return encode_stroke(points)


# ─── Circular Distance ───────────────────────────────────────────────────────

def test_circular_distance_wraps():
    from strokelens.modules.matching.similarity import circular_distance
    assert circular_distance(0, 255) == 1
    assert circular_distance(0, 128) == 128
    assert circular_distance(10, 10) == 0


def test_circular_distance_symmetric_and_bounded():
    from strokelens.modules.matching.similarity import circular_distance
    for a in range(0, 256, 7):
        for b in range(0, 256, 11):
            d = circular_distance(a, b)
            assert d == circular_distance(b, a)
            assert 0 <= d <= 128


# ─── Stroke-Count Policies ───────────────────────────────────────────────────

def test_truncate_policy():
    from strokelens.modules.matching.similarity import truncate_policy
    assert truncate_policy(3, 5) == (3, 0.0)
    assert truncate_policy(5, 3) == (3, 0.0)


def test_reject_policy():
    from strokelens.modules.matching.similarity import reject_policy
    assert reject_policy(3, 5) is None
    assert reject_policy(4, 4) == (4, 0.0)


def test_penalize_policy():
    from strokelens.modules.matching.similarity import penalize_policy
    rule = penalize_policy(10.0)
    assert rule(3, 5) == (3, 20.0)
    assert rule(2, 2) == (2, 0.0)


def test_resolve_policy_from_options():
    from strokelens.models.matching import MatcherOptions
    from strokelens.modules.matching.similarity import (
        reject_policy,
        resolve_policy,
        truncate_policy,
    )
    assert resolve_policy(MatcherOptions()) is truncate_policy
    assert resolve_policy(MatcherOptions(stroke_count_policy="reject")) is reject_policy
    rule = resolve_policy(
        MatcherOptions(stroke_count_policy="penalize", stroke_count_penalty=7.0)
    )
    assert rule(1, 3) == (1, 14.0)


# ─── Score Similarity ────────────────────────────────────────────────────────

def test_identical_strokes_score_zero():
    from strokelens.modules.matching.similarity import score_similarity
    v = _vec(DIAGONAL)
    assert v.tolist() == [0, 0, 100, 100, 200, 200, 255, 255, 160, 255]
    assert score_similarity([v], [v]) == 0.0


def test_offset_stroke_costs_position_only():
    from strokelens.modules.matching.similarity import score_similarity
    # Same angle code (160) on both sides, so only the 8 x 10 position gap counts
    assert score_similarity([_vec(DIAGONAL)], [_vec(OFFSET_DIAGONAL)]) == -80.0


def test_angle_penalty_weighted_by_length():
    from strokelens.modules.matching.similarity import stroke_penalty
    q = np.array([0, 0, 0, 0, 0, 0, 0, 0, 0, 100], dtype=float)
    r = np.array([0, 0, 0, 0, 0, 0, 0, 0, 64, 156], dtype=float)
    # 4^2 * (100 + 156) / 256 * 64
    assert stroke_penalty(q, r) == pytest.approx(16 * 1.0 * 64)


def test_score_never_positive_and_monotonic():
    from strokelens.modules.matching.similarity import score_similarity
    base = _vec(DIAGONAL)
    previous = 0.0
    for shift in (1, 5, 20, 60):
        moved = base.copy()
        moved[2] += shift
        score = score_similarity([base], [moved])
        assert score <= 0.0
        assert score < previous
        previous = score


def test_score_truncates_to_shorter_entry():
    from strokelens.modules.matching.similarity import score_similarity
    v = _vec(DIAGONAL)
    w = _vec(OFFSET_DIAGONAL)
    assert score_similarity([v], [v, w]) == 0.0
    assert score_similarity([v, w], [v]) == 0.0


def test_score_reject_policy_disqualifies():
    from strokelens.modules.matching.similarity import reject_policy, score_similarity
    v = _vec(DIAGONAL)
    assert score_similarity([v], [v, v], policy=reject_policy) == -math.inf
    assert score_similarity([v, v], [v, v], policy=reject_policy) == 0.0


def test_score_penalize_policy():
    from strokelens.modules.matching.similarity import penalize_policy, score_similarity
    v = _vec(DIAGONAL)
    assert score_similarity([v], [v, v, v], policy=penalize_policy(100.0)) == -200.0


# ─── Vectorised Corpus Scoring ───────────────────────────────────────────────

@pytest.mark.parametrize("policy_name", ["truncate", "reject", "penalize"])
def test_score_corpus_agrees_with_scalar(policy_name):
    from strokelens.models.matching import MatcherOptions
    from strokelens.modules.matching.matcher import preprocess_strokes
    from strokelens.modules.matching.similarity import (
        resolve_policy,
        score_corpus,
        score_similarity,
    )
    corpus, _ = _synthetic_corpus(30, seed=1)
    policy = resolve_policy(
        MatcherOptions(stroke_count_policy=policy_name, stroke_count_penalty=33.0)
    )
    rng = np.random.default_rng(99)
    for n_strokes in (1, 3, 7):
        query = preprocess_strokes(_random_drawing(rng, n_strokes))
        fast = score_corpus(query, corpus.stacked_vectors, corpus.stroke_counts, policy)
        slow = np.array([score_similarity(query, e.vectors, policy) for e in corpus])
        assert fast.shape == (len(corpus),)
        assert np.array_equal(np.isinf(fast), np.isinf(slow))
        finite = np.isfinite(slow)
        assert np.allclose(fast[finite], slow[finite])


def test_score_corpus_empty_corpus():
    from strokelens.modules.matching.similarity import score_corpus
    out = score_corpus(np.zeros((1, 10)), np.zeros((0, 0, 10)), np.zeros(0, dtype=np.int64))
    assert out.shape == (0,)


# ─── Ranker ──────────────────────────────────────────────────────────────────

def test_rank_best_first():
    from strokelens.models.corpus import Corpus
    from strokelens.modules.matching.ranker import rank_candidates
    v, w = _vec(DIAGONAL), _vec(OFFSET_DIAGONAL)
    corpus = Corpus.from_records([("far", [w.tolist()]), ("exact", [v.tolist()])])
    candidates = rank_candidates(np.stack([v]), corpus, 5)
    assert [c.label for c in candidates] == ["exact", "far"]
    assert candidates[0].score == 0.0
    assert candidates[1].score == -80.0


def test_rank_ties_keep_corpus_order():
    from strokelens.models.corpus import Corpus
    from strokelens.modules.matching.ranker import rank
    v = _vec(DIAGONAL).tolist()
    corpus = Corpus.from_records([("b", [v]), ("a", [v]), ("c", [v])])
    assert rank(np.array([v]), corpus, 3) == ["b", "a", "c"]


def test_rank_respects_how_many():
    from strokelens.modules.matching.ranker import rank
    corpus, _ = _synthetic_corpus(20)
    query = corpus[0].vectors
    assert len(rank(query, corpus, 5)) == 5
    assert len(rank(query, corpus, 500)) == 20
    assert rank(query, corpus, 0) == []


def test_rank_empty_query():
    from strokelens.modules.matching.ranker import rank
    corpus, _ = _synthetic_corpus(5)
    assert rank(np.zeros((0, 10)), corpus, 5) == []


def test_rank_reject_policy_filters_stroke_counts():
    from strokelens.models.corpus import Corpus
    from strokelens.models.matching import MatcherOptions
    from strokelens.modules.matching.ranker import rank
    v, w = _vec(DIAGONAL).tolist(), _vec(OFFSET_DIAGONAL).tolist()
    corpus = Corpus.from_records([
        ("one", [v]),
        ("two", [v, w]),
        ("one_far", [w]),
    ])
    opts = MatcherOptions(stroke_count_policy="reject")
    assert rank(np.array([v]), corpus, 10, opts) == ["one", "one_far"]
    assert rank(np.array([v, w]), corpus, 10, opts) == ["two"]


def test_rank_penalize_prefers_equal_stroke_count():
    from strokelens.models.corpus import Corpus
    from strokelens.models.matching import MatcherOptions
    from strokelens.modules.matching.ranker import rank
    v, w = _vec(DIAGONAL).tolist(), _vec(OFFSET_DIAGONAL).tolist()
    # Under truncate the prefix entry would tie at 0 and win on corpus order
    corpus = Corpus.from_records([("prefix", [v]), ("full", [v, w])])
    query = np.array([v, w])
    assert rank(query, corpus, 2) == ["prefix", "full"]
    opts = MatcherOptions(stroke_count_policy="penalize", stroke_count_penalty=50.0)
    assert rank(query, corpus, 2, opts) == ["full", "prefix"]


# ─── Matcher ─────────────────────────────────────────────────────────────────

def test_matcher_self_match_preprocessed():
    from strokelens.modules.matching.matcher import Matcher
    corpus, _ = _synthetic_corpus(40)
    matcher = Matcher(corpus)
    for entry in corpus:
        assert matcher.match_preprocessed(entry.vectors, 3)[0] == entry.label


def test_matcher_raw_recovers_source_drawing():
    from strokelens.modules.matching.matcher import Matcher
    corpus, drawings = _synthetic_corpus(40)
    matcher = Matcher(corpus)
    for entry, drawing in zip(corpus, drawings):
        candidates = matcher.match_raw_scored(drawing, 1)
        assert candidates[0].label == entry.label
        assert candidates[0].score == 0.0


def test_matcher_raw_is_scale_invariant():
    from strokelens.modules.matching.matcher import Matcher
    corpus, drawings = _synthetic_corpus(20, seed=5)
    matcher = Matcher(corpus)
    drawing = [[(2 * x + 300, 2 * y - 50) for x, y in s] for s in drawings[4]]
    assert matcher.match_raw(drawing, 1) == [corpus[4].label]


def test_matcher_empty_query():
    from strokelens.modules.matching.matcher import Matcher
    corpus, _ = _synthetic_corpus(5)
    matcher = Matcher(corpus)
    assert matcher.match_raw([], 5) == []
    assert matcher.match_preprocessed([], 5) == []


def test_matcher_rejects_empty_stroke():
    from strokelens.modules.matching.matcher import Matcher
    corpus, _ = _synthetic_corpus(5)
    with pytest.raises(StrokeInputError):
        Matcher(corpus).match_raw([[(0, 0), (10, 10)], []], 5)


def test_matcher_rejects_bad_vector_shape():
    from strokelens.modules.matching.matcher import Matcher
    corpus, _ = _synthetic_corpus(5)
    matcher = Matcher(corpus)
    with pytest.raises(StrokeInputError):
        matcher.match_preprocessed([[0, 0, 1, 1]], 5)
    with pytest.raises(StrokeInputError):
        matcher.match_preprocessed([[0] * 10, [0] * 4], 5)


def test_matcher_point_count_mismatch():
    from strokelens.models.matching import MatcherOptions
    from strokelens.modules.matching.matcher import Matcher
    corpus, _ = _synthetic_corpus(3)
    with pytest.raises(ValueError):
        Matcher(corpus, MatcherOptions(num_encoded_points=6))


def test_preprocess_strokes_shape():
    from strokelens.modules.matching.matcher import preprocess_strokes
    out = preprocess_strokes([[(0, 0), (10, 10)], [(5, 0)], [(0, 9), (9, 0), (3, 3)]])
    assert out.shape == (3, 10)
    assert out[:, :8].min() >= 0 and out[:, :8].max() <= 255


def test_preprocess_strokes_rejects_empty():
    from strokelens.modules.matching.matcher import preprocess_strokes
    with pytest.raises(StrokeInputError):
        preprocess_strokes([])
