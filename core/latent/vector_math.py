"""
core/latent/vector_math.py — Pure vector algebra over latent vectors.

Every function takes plain sequences of floats of a fixed length D and
returns plain Python values (tuples / floats) so results can live inside
frozen records. numpy does the arithmetic in float64.

No implicit broadcasting: element-wise binary operations require equal
lengths and raise DimensionMismatch otherwise. scale() is the exception,
it multiplies a vector by a scalar.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from core.latent.types import DimensionMismatch, Vector

UNDEFINED_ANGLE: float = math.inf
"""Returned by angle_between() when either vector has zero magnitude."""


def _as_array(v: Sequence[float]) -> np.ndarray:
    return np.asarray(v, dtype=np.float64)


def _pair(a: Sequence[float], b: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    va = _as_array(a)
    vb = _as_array(b)
    if va.shape != vb.shape:
        raise DimensionMismatch(len(va), len(vb))
    return va, vb


def _to_vector(arr: np.ndarray) -> Vector:
    return tuple(float(x) for x in arr)


def subtract(a: Sequence[float], b: Sequence[float]) -> Vector:
    """Element-wise ``a - b``."""
    va, vb = _pair(a, b)
    return _to_vector(va - vb)


def add(a: Sequence[float], b: Sequence[float]) -> Vector:
    """Element-wise ``a + b``."""
    va, vb = _pair(a, b)
    return _to_vector(va + vb)


def scale(v: Sequence[float], t: float) -> Vector:
    """Multiply every component of ``v`` by ``t``."""
    return _to_vector(_as_array(v) * t)


def magnitude(v: Sequence[float]) -> float:
    """Euclidean norm of ``v`` (0.0 for the zero vector)."""
    return float(np.linalg.norm(_as_array(v)))


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of two equal-length vectors."""
    va, vb = _pair(a, b)
    return float(np.dot(va, vb))


def euclidean(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two equal-length vectors.

    Raises:
        DimensionMismatch: If ``len(a) != len(b)``.
    """
    va, vb = _pair(a, b)
    return float(np.linalg.norm(va - vb))


def interpolate(a: Sequence[float], b: Sequence[float], t: float) -> Vector:
    """Point at fraction ``t`` of the way from ``a`` to ``b``: ``(1 - t)·a + t·b``."""
    return add(scale(a, 1.0 - t), scale(b, t))


def angle_between(a: Sequence[float], b: Sequence[float]) -> float:
    """Angle in radians between two vectors, in [0, π].

    Computed as ``acos(clamp(a·b / (|a|·|b|), -1, 1))``. The clamp absorbs
    floating point drift just outside the acos domain.

    Returns:
        The angle, or UNDEFINED_ANGLE (``math.inf``) when either vector has
        zero magnitude. Callers treat it as "never preferred".

    Raises:
        DimensionMismatch: If the vectors differ in length.
    """
    va, vb = _pair(a, b)
    mag_a = float(np.linalg.norm(va))
    mag_b = float(np.linalg.norm(vb))
    if mag_a == 0.0 or mag_b == 0.0:
        return UNDEFINED_ANGLE
    cos_theta = float(np.dot(va, vb)) / (mag_a * mag_b)
    return math.acos(min(1.0, max(-1.0, cos_theta)))
