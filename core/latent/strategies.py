"""
core/latent/strategies.py — The three chord substitution strategies.

Each strategy receives a complete context window (A, B, C), the chord index
and its own parameters, and returns a StrategyOutcome: the id to write in
place of B plus the geometry a visualization needs to explain the choice.

    linear_interpolation   Nearest chord to the midpoint of A and C.
                           Ignores B entirely.
    knn_substitution       Nearest neighbour of B (B itself excluded).
    angular_alignment      Among B's k nearest, the candidate N whose offset
                           N - A points most nearly along B - A.

Fallbacks never raise: an empty dictionary keeps C (linear), an empty
neighbour pool keeps B (k-NN, angular).
"""

from __future__ import annotations

from core.latent.index import ChordIndex
from core.latent.neighbors import k_nearest, nearest
from core.latent.types import (
    AngularGeometry,
    Chord,
    ChordId,
    KnnGeometry,
    LinearGeometry,
    StrategyOutcome,
)
from core.latent.vector_math import UNDEFINED_ANGLE, angle_between, interpolate, subtract

# Linear strategy samples halfway between A and C.
MIDPOINT_T: float = 0.5


def linear_interpolation(a: Chord, c: Chord, index: ChordIndex) -> StrategyOutcome:
    """Sample the chord nearest to the midpoint ``0.5·A.z + 0.5·C.z``.

    The whole dictionary is scanned, A, B and C included, and ties go to
    the earliest chord in dictionary order.

    Returns:
        StrategyOutcome with LinearGeometry(point=midpoint). C's id when the
        dictionary is empty.
    """
    midpoint = interpolate(a.z, c.z, MIDPOINT_T)
    best = nearest(midpoint, index)
    substituted_id = best.chord.id if best is not None else c.id
    return StrategyOutcome(substituted_id=substituted_id, geometry=LinearGeometry(point=midpoint))


def knn_substitution(
    b: Chord,
    index: ChordIndex,
    k: int,
    *,
    metric: str = "euclidean",
) -> StrategyOutcome:
    """Replace B with its nearest neighbour among the k nearest.

    Returns:
        StrategyOutcome with KnnGeometry(neighbors). B's id when no
        neighbour exists (``k <= 0`` or a single-chord dictionary).
    """
    neighbors = k_nearest(b.z, index, k, exclude_id=b.id, metric=metric)
    substituted_id = neighbors[0].chord.id if neighbors else b.id
    return StrategyOutcome(substituted_id=substituted_id, geometry=KnnGeometry(neighbors=neighbors))


def angular_alignment(
    a: Chord,
    b: Chord,
    index: ChordIndex,
    k: int,
    *,
    metric: str = "euclidean",
) -> StrategyOutcome:
    """Replace B with the candidate best aligned to the A→B direction.

    For every candidate N among B's k nearest, score the angle between
    ``B.z - A.z`` and ``N.z - A.z``. The first strict minimum wins; an
    undefined angle (zero-length offset) never wins.

    Returns:
        StrategyOutcome with AngularGeometry(neighbors, reference, angles).
        B's id when there is no candidate or no candidate has a defined angle.
    """
    neighbors = k_nearest(b.z, index, k, exclude_id=b.id, metric=metric)
    reference = subtract(b.z, a.z)

    angles: list[float] = []
    best_id: ChordId | None = None
    best_angle = UNDEFINED_ANGLE
    for candidate in neighbors:
        angle = angle_between(reference, subtract(candidate.chord.z, a.z))
        angles.append(angle)
        if angle < best_angle:
            best_angle = angle
            best_id = candidate.chord.id

    geometry = AngularGeometry(neighbors=neighbors, reference=reference, angles=tuple(angles))
    return StrategyOutcome(
        substituted_id=best_id if best_id is not None else b.id,
        geometry=geometry,
    )
