# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 2 - Preprocessing tests.
Covers the normaliser, arc-length resampler, feature encoder and
query validator. Pure synthetic strokes; no corpus required.
"""

import math

import numpy as np
import pytest

from strokelens.api.middleware.error_handler import StrokeInputError


def _random_stroke(rng: np.random.Generator, n_points: int) -> list[tuple[float, float]]:
    pts = rng.integers(0, 256, size=(n_points, 2))
    return [(float(x), float(y)) for x, y in pts]


# ─── Normalizer: Bounding Box ────────────────────────────────────────────────

def test_compute_aabb():
    from strokelens.modules.preprocessing.normalizer import compute_aabb
    strokes = [
        [(0.0, 0.0), (10.0, 10.0)],
        [(5.0, 5.0), (15.0, 20.0)],
    ]
    aabb = compute_aabb(strokes)
    assert aabb.min == (0.0, 0.0)
    assert aabb.max == (15.0, 20.0)
    assert aabb.width == 15.0
    assert aabb.height == 20.0


def test_compute_aabb_empty_raises():
    from strokelens.modules.preprocessing.normalizer import compute_aabb
    with pytest.raises(ValueError):
        compute_aabb([[]])


# ─── Normalizer: Expansion ───────────────────────────────────────────────────

def test_expand_aabb_min_width_point():
    from strokelens.modules.preprocessing.normalizer import AABB, expand_aabb
    aabb = expand_aabb(AABB(min=(5.0, 5.0), max=(5.0, 5.0)), min_width=8.0)
    assert aabb.min == (1.0, 1.0)
    assert aabb.max == (9.0, 9.0)


def test_expand_aabb_min_width_then_square():
    from strokelens.modules.preprocessing.normalizer import AABB, expand_aabb
    # Width 2 → 8 (min width), then 8 → 20 to match the height
    aabb = expand_aabb(AABB(min=(0.0, 0.0), max=(2.0, 20.0)), min_width=8.0)
    assert aabb.width == 20.0
    assert aabb.height == 20.0
    assert aabb.min == (-9.0, 0.0)
    assert aabb.max == (11.0, 20.0)


def test_expand_aabb_grows_height_when_wide():
    from strokelens.modules.preprocessing.normalizer import AABB, expand_aabb
    aabb = expand_aabb(AABB(min=(0.0, 10.0), max=(100.0, 30.0)))
    assert aabb.height == 100.0
    # Centred on the original vertical midpoint (20)
    assert (aabb.min[1] + aabb.max[1]) / 2 == 20.0


def test_expand_aabb_respects_max_ratio():
    from strokelens.modules.preprocessing.normalizer import AABB, expand_aabb
    aabb = expand_aabb(AABB(min=(0.0, 0.0), max=(100.0, 10.0)), max_ratio=2.0)
    assert aabb.width == 100.0
    assert aabb.height == 50.0


def test_expand_aabb_ratio_disabled():
    from strokelens.modules.preprocessing.normalizer import AABB, expand_aabb
    aabb = expand_aabb(AABB(min=(0.0, 0.0), max=(100.0, 10.0)), max_ratio=0.0)
    assert aabb.width == 100.0
    assert aabb.height == 10.0


# ─── Normalizer: Projection ──────────────────────────────────────────────────

def test_project_point_zero_extent_guard():
    from strokelens.modules.preprocessing.normalizer import AABB, project_point
    p = project_point((3.0, 5.0), AABB(min=(3.0, 0.0), max=(3.0, 10.0)), 255.0)
    assert p == (0.0, 128.0)


def test_normalize_single_point_centres_with_half_away_rounding():
    from strokelens.modules.preprocessing.normalizer import normalize_strokes
    # Box grows to [1, 9]; (5 - 1) / 8 * 255 = 127.5 → 128
    assert normalize_strokes([[(5.0, 5.0)]]) == [[(128.0, 128.0)]]


def test_normalize_is_idempotent_on_canonical_input():
    from strokelens.modules.preprocessing.normalizer import normalize_strokes
    strokes = [
        [(0.0, 0.0), (100.0, 100.0), (255.0, 255.0)],
        [(0.0, 255.0), (100.0, 30.0)],
    ]
    assert normalize_strokes(strokes) == strokes


def test_normalize_output_in_canonical_range():
    from strokelens.modules.preprocessing.normalizer import normalize_strokes
    rng = np.random.default_rng(3)
    strokes = [
        [(float(x), float(y)) for x, y in rng.uniform(-500, 900, size=(6, 2))]
        for _ in range(4)
    ]
    out = normalize_strokes(strokes)
    assert [len(s) for s in out] == [len(s) for s in strokes]
    for stroke in out:
        for x, y in stroke:
            assert 0.0 <= x <= 255.0 and 0.0 <= y <= 255.0
            assert x == int(x) and y == int(y)


def test_normalize_is_translation_and_scale_invariant():
    from strokelens.modules.preprocessing.normalizer import normalize_strokes
    strokes = [[(10.0, 20.0), (90.0, 60.0)], [(30.0, 30.0), (50.0, 100.0)]]
    moved = [[(2 * x + 1000, 2 * y - 40) for x, y in s] for s in strokes]
    assert normalize_strokes(strokes) == normalize_strokes(moved)


def test_normalize_does_not_mutate_input():
    from strokelens.modules.preprocessing.normalizer import normalize_strokes
    strokes = [[(10.0, 20.0), (90.0, 60.0)]]
    snapshot = [list(s) for s in strokes]
    normalize_strokes(strokes)
    assert strokes == snapshot


# ─── Resampler ───────────────────────────────────────────────────────────────

def test_resample_diagonal_stroke():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    stroke = [(0.0, 0.0), (100.0, 100.0), (200.0, 200.0), (255.0, 255.0)]
    assert resample_stroke(stroke, 4) == [
        (0.0, 0.0), (85.0, 85.0), (170.0, 170.0), (255.0, 255.0)
    ]


def test_resample_straight_line():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    assert resample_stroke([(0.0, 0.0), (90.0, 0.0)], 4) == [
        (0.0, 0.0), (30.0, 0.0), (60.0, 0.0), (90.0, 0.0)
    ]


def test_resample_skips_duplicate_points():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    stroke = [(0.0, 0.0), (0.0, 0.0), (30.0, 0.0), (30.0, 0.0), (90.0, 0.0)]
    assert resample_stroke(stroke, 4) == [
        (0.0, 0.0), (30.0, 0.0), (60.0, 0.0), (90.0, 0.0)
    ]


def test_resample_all_duplicates():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    out = resample_stroke([(5.0, 5.0), (5.0, 5.0), (5.0, 5.0)], 4)
    assert out == [(5.0, 5.0)] * 4


def test_resample_single_point():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    assert resample_stroke([(42.0, 7.0)], 4) == [(42.0, 7.0)] * 4


def test_resample_empty_raises():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    with pytest.raises(ValueError):
        resample_stroke([], 4)


@pytest.mark.parametrize("n_points", [2, 3, 4, 8])
def test_resample_fixed_arity(n_points):
    from strokelens.modules.preprocessing.resampler import resample_stroke
    rng = np.random.default_rng(n_points)
    for length in (1, 2, 5, 40):
        out = resample_stroke(_random_stroke(rng, length), n_points)
        assert len(out) == n_points


def test_resample_preserves_endpoint_exactly():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    rng = np.random.default_rng(11)
    for _ in range(25):
        stroke = [(float(x), float(y)) for x, y in rng.uniform(0, 255, size=(7, 2))]
        out = resample_stroke(stroke, 4)
        assert out[-1] == stroke[-1]


def test_resample_interior_points_on_integer_grid():
    from strokelens.modules.preprocessing.resampler import resample_stroke
    stroke = [(0.0, 0.0), (13.0, 7.0), (40.0, 90.0)]
    for x, y in resample_stroke(stroke, 4)[:-1]:
        assert x == int(x) and y == int(y)


# ─── Encoder ─────────────────────────────────────────────────────────────────

def test_encode_angle_cardinal_directions():
    from strokelens.modules.preprocessing.encoder import encode_angle
    assert encode_angle(-math.pi) == 0
    assert encode_angle(math.pi) == 0
    assert encode_angle(0.0) == 128
    assert encode_angle(-math.pi / 2) == 64
    assert encode_angle(math.pi / 2) == 192


@pytest.mark.parametrize("theta", [-2.4, -0.7, 0.3, 1.1, 2.9])
def test_encode_angle_is_circular(theta):
    from strokelens.modules.preprocessing.encoder import encode_angle
    assert encode_angle(theta) == encode_angle(theta + 2 * math.pi)
    assert 0 <= encode_angle(theta) < 256


def test_encode_length():
    from strokelens.modules.preprocessing.encoder import encode_length
    assert encode_length(0.0) == 0
    # sqrt(25 / 2) = 3.54 → 4
    assert encode_length(25.0) == 4
    assert encode_length(2 * 255.0 ** 2) == 255
    # Clamp
    assert encode_length(10.0 ** 9) == 255


def test_encode_stroke_layout():
    from strokelens.modules.preprocessing.encoder import encode_stroke
    vec = encode_stroke([(0.0, 0.0), (100.0, 100.0), (200.0, 200.0), (255.0, 255.0)])
    assert vec.shape == (10,)
    # Span (255, 255): 45° → (π/4 + π) * 256 / 2π = 160; |span| / √2 = 255
    assert vec.tolist() == [0, 0, 100, 100, 200, 200, 255, 255, 160, 255]


def test_encode_stroke_uses_sampled_span():
    from strokelens.modules.preprocessing.encoder import encode_stroke
    # Leftward stroke → angle 0
    vec = encode_stroke([(200.0, 50.0), (150.0, 50.0), (100.0, 50.0), (0.0, 50.0)])
    assert vec[8] == 0
    assert vec[9] == round(200 / math.sqrt(2))


# ─── Validator ───────────────────────────────────────────────────────────────

def test_validate_strokes_cleans_points():
    from strokelens.modules.preprocessing.validator import validate_strokes
    out = validate_strokes([[[1, 2], [3, 4]]], max_strokes=4, max_points_per_stroke=8)
    assert out == [[(1.0, 2.0), (3.0, 4.0)]]


def test_validate_strokes_allows_empty_query():
    from strokelens.modules.preprocessing.validator import validate_strokes
    assert validate_strokes([], max_strokes=4, max_points_per_stroke=8) == []


def test_validate_strokes_limits():
    from strokelens.modules.preprocessing.validator import validate_strokes
    with pytest.raises(StrokeInputError):
        validate_strokes([[(0, 0)]] * 5, max_strokes=4, max_points_per_stroke=8)
    with pytest.raises(StrokeInputError):
        validate_strokes([[(0, 0)] * 9], max_strokes=4, max_points_per_stroke=8)


def test_validate_strokes_rejects_bad_points():
    from strokelens.modules.preprocessing.validator import validate_strokes
    with pytest.raises(StrokeInputError):
        validate_strokes([[]], max_strokes=4, max_points_per_stroke=8)
    with pytest.raises(StrokeInputError):
        validate_strokes([[(0.0, float("nan"))]], max_strokes=4, max_points_per_stroke=8)
    with pytest.raises(StrokeInputError):
        validate_strokes([[(0.0, 1.0, 2.0)]], max_strokes=4, max_points_per_stroke=8)


def test_validate_vectors():
    from strokelens.modules.preprocessing.validator import validate_vectors
    good = [[0, 0, 1, 1, 2, 2, 3, 3, 160, 3]]
    assert validate_vectors(good, max_strokes=4) == [[float(v) for v in good[0]]]
    with pytest.raises(StrokeInputError):
        validate_vectors([[0, 0, 1, 1]], max_strokes=4)
    with pytest.raises(StrokeInputError):
        validate_vectors([[0, 0, 1, 1, 2, 2, 3, 3, 256, 3]], max_strokes=4)
