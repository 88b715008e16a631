"""
core/latent/neighbors.py — Brute-force k-nearest-neighbour search.

Algorithm:
    1. Euclidean distance from the target to every row of the index matrix
    2. Stable ascending sort, so equal distances keep dictionary order
    3. Drop the excluded id (the query chord itself), if given
    4. Take the first k

Self-exclusion is by identifier rather than by dropping the first sorted
result: a query vector that is not itself in the dictionary keeps its true
nearest neighbour, and a chord sharing B's exact vector is still a candidate.

Cost is O(N·D) per query plus an O(N log N) sort.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from core.latent.config import VALID_METRICS
from core.latent.index import ChordIndex
from core.latent.types import ChordId, DimensionMismatch, Neighbor, UnsupportedMetric


def distances_to(target: Sequence[float], index: ChordIndex) -> np.ndarray:
    """Euclidean distance from ``target`` to every chord, in index order.

    Raises:
        DimensionMismatch: If ``target`` does not match the index dimension.
    """
    vec = np.asarray(target, dtype=np.float64)
    if len(index) == 0:
        return np.empty(0, dtype=np.float64)
    if vec.shape != (index.dimension,):
        raise DimensionMismatch(index.dimension, len(vec), context="query vector")
    return np.linalg.norm(index.matrix - vec, axis=1)


def rank_by_distance(target: Sequence[float], index: ChordIndex) -> list[Neighbor]:
    """Every chord in the index paired with its distance, nearest first.

    Ties keep dictionary order (stable sort).
    """
    dists = distances_to(target, index)
    order = np.argsort(dists, kind="stable")
    return [Neighbor(chord=index[int(i)], distance=float(dists[i])) for i in order]


def nearest(target: Sequence[float], index: ChordIndex) -> Neighbor | None:
    """The single nearest chord to ``target`` (no exclusion), or None if empty.

    Ties resolve to the earliest chord in dictionary order.
    """
    dists = distances_to(target, index)
    if dists.size == 0:
        return None
    # argmin returns the first occurrence of the minimum
    i = int(np.argmin(dists))
    return Neighbor(chord=index[i], distance=float(dists[i]))


def k_nearest(
    target: Sequence[float],
    index: ChordIndex,
    k: int,
    *,
    exclude_id: ChordId | None = None,
    metric: str = "euclidean",
) -> tuple[Neighbor, ...]:
    """Up to ``k`` chords nearest to ``target``, nearest first.

    Args:
        target:     Query vector (length must equal the index dimension)
        index:      Chord dictionary to search
        k:          Number of neighbours; ``k <= 0`` returns an empty tuple,
                    ``k`` beyond the pool returns everything available
        exclude_id: Chord id to leave out, normally the chord whose vector
                    is the query
        metric:     Distance metric; only "euclidean" is supported

    Returns:
        Tuple of Neighbor records in non-decreasing distance order.

    Raises:
        UnsupportedMetric: If ``metric`` is not "euclidean".
        DimensionMismatch: If ``target`` has the wrong length.
    """
    if metric not in VALID_METRICS:
        raise UnsupportedMetric(metric)
    if k <= 0:
        return ()

    ranked = rank_by_distance(target, index)
    if exclude_id is not None:
        ranked = [n for n in ranked if n.chord.id != exclude_id]
    return tuple(ranked[:k])
