"""
Tests for core/latent/vector_math.py — vector algebra primitives.

Validates:
    - element-wise add / subtract / scale and dimension checks
    - magnitude, dot, euclidean (identity, symmetry, non-negativity)
    - angle_between range, clamping, and the zero-vector sentinel
    - interpolate at the midpoint
"""

from __future__ import annotations

import math

import pytest

from core.latent.types import DimensionMismatch
from core.latent.vector_math import (
    UNDEFINED_ANGLE,
    add,
    angle_between,
    dot,
    euclidean,
    interpolate,
    magnitude,
    scale,
    subtract,
)

SAMPLE_VECTORS: list[tuple[float, ...]] = [
    (1.0, 0.0),
    (0.3, -2.5),
    (1.0, 2.0, 3.0, 4.0),
    (-7.25, 0.5, 1e-3),
]

# ---------------------------------------------------------------------------
# Element-wise operations
# ---------------------------------------------------------------------------


class TestElementWise:
    def test_subtract(self):
        assert subtract([3, 5], [1, 2]) == (2.0, 3.0)

    def test_add(self):
        assert add([3, 5], [1, 2]) == (4.0, 7.0)

    def test_scale(self):
        assert scale([2, -4], 0.5) == (1.0, -2.0)

    def test_results_are_float_tuples(self):
        result = add([1, 2], [3, 4])
        assert isinstance(result, tuple)
        assert all(isinstance(x, float) for x in result)

    def test_subtract_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatch):
            subtract([1, 2], [1, 2, 3])

    def test_add_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatch):
            add([1], [1, 2])

    def test_mismatch_is_a_value_error(self):
        with pytest.raises(ValueError, match="dimension mismatch"):
            add([1], [1, 2])

    def test_mismatch_carries_lengths(self):
        with pytest.raises(DimensionMismatch) as exc_info:
            subtract([1, 2, 3], [1, 2])
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2


# ---------------------------------------------------------------------------
# Norms and products
# ---------------------------------------------------------------------------


class TestMagnitudeAndDot:
    def test_magnitude_3_4_5(self):
        assert magnitude([3, 4]) == pytest.approx(5.0)

    def test_magnitude_zero_vector(self):
        assert magnitude([0, 0, 0]) == 0.0

    def test_dot(self):
        assert dot([1, 2, 3], [4, 5, 6]) == pytest.approx(32.0)

    def test_dot_orthogonal(self):
        assert dot([1, 0], [0, 1]) == 0.0

    def test_dot_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatch):
            dot([1, 2], [1])


class TestEuclidean:
    def test_known_distance(self):
        assert euclidean([0, 0], [3, 4]) == pytest.approx(5.0)

    @pytest.mark.parametrize("v", SAMPLE_VECTORS)
    def test_distance_to_self_is_zero(self, v):
        assert euclidean(v, v) == 0.0

    def test_symmetric_and_non_negative(self):
        for a in SAMPLE_VECTORS:
            for b in SAMPLE_VECTORS:
                if len(a) != len(b):
                    continue
                assert euclidean(a, b) == pytest.approx(euclidean(b, a))
                assert euclidean(a, b) >= 0.0

    def test_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatch):
            euclidean([1, 2], [1, 2, 3])


# ---------------------------------------------------------------------------
# Angles
# ---------------------------------------------------------------------------


class TestAngleBetween:
    @pytest.mark.parametrize("v", SAMPLE_VECTORS)
    def test_angle_to_self_is_zero(self, v):
        assert angle_between(v, v) == pytest.approx(0.0, abs=1e-6)

    @pytest.mark.parametrize("v", SAMPLE_VECTORS)
    def test_angle_to_negation_is_pi(self, v):
        assert angle_between(v, scale(v, -1.0)) == pytest.approx(math.pi, abs=1e-6)

    def test_right_angle(self):
        assert angle_between([1, 0], [0, 2]) == pytest.approx(math.pi / 2)

    def test_scale_invariant(self):
        assert angle_between([1, 1], [10, 10]) == pytest.approx(0.0, abs=1e-6)

    def test_zero_vector_returns_sentinel(self):
        assert angle_between([0, 0], [1, 0]) == UNDEFINED_ANGLE
        assert angle_between([1, 0], [0, 0]) == UNDEFINED_ANGLE

    def test_sentinel_is_infinity(self):
        assert math.isinf(UNDEFINED_ANGLE)

    def test_result_within_range(self):
        for a in SAMPLE_VECTORS:
            for b in SAMPLE_VECTORS:
                if len(a) != len(b):
                    continue
                assert 0.0 <= angle_between(a, b) <= math.pi

    def test_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatch):
            angle_between([1, 0], [1, 0, 0])


class TestInterpolate:
    def test_midpoint(self):
        assert interpolate([0, 0], [2, 0], 0.5) == (1.0, 0.0)

    def test_endpoints(self):
        assert interpolate([1, 2], [3, 4], 0.0) == (1.0, 2.0)
        assert interpolate([1, 2], [3, 4], 1.0) == (3.0, 4.0)
