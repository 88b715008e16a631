"""
core/latent/index.py — In-memory chord dictionary with lookup by id.

ChordIndex is an immutable value object: it is built once from a sequence
of Chord records (or raw rows) and never modified. Reloading means building
a new index. Every latent vector is stacked into a read-only float64 matrix
so neighbour search can compute all distances in one pass.

Validation happens at construction, never mid-query:
    - ids must be unique                → ValueError
    - every z must have the same length → DimensionMismatch
    - rows must carry id and numeric z  → ValueError
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

import numpy as np

from core.latent.types import Chord, ChordId, DimensionMismatch

logger = logging.getLogger(__name__)


def _parse_vector(row_id: ChordId, field: str, raw: Any) -> tuple[float, ...]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ValueError(f"Chord {row_id!r}: {field} must be a sequence of numbers")
    try:
        return tuple(float(x) for x in raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Chord {row_id!r}: {field} contains a non-numeric value") from exc


def chord_from_row(row: Mapping[str, Any]) -> Chord:
    """Build a Chord from a plain mapping as found in the dictionary JSON.

    Accepted keys: ``id`` (required, string or integer, kept as given), ``z`` (required), ``z2D`` or ``z2d``
    (optional), ``pitchclass`` (optional).

    Raises:
        ValueError: If ``id`` or ``z`` is missing, or a vector is malformed.
    """
    if "id" not in row or row["id"] is None or row["id"] == "":
        raise ValueError(f"Chord row is missing 'id': {dict(row)!r}")
    chord_id = row["id"]
    if isinstance(chord_id, bool) or not isinstance(chord_id, (str, int)):
        raise ValueError(f"Chord id must be a string or integer, got {chord_id!r}")
    if row.get("z") is None:
        raise ValueError(f"Chord {chord_id!r} is missing 'z'")

    z = _parse_vector(chord_id, "z", row["z"])
    raw_2d = row.get("z2D", row.get("z2d"))
    z2d = _parse_vector(chord_id, "z2D", raw_2d) if raw_2d is not None else None
    pitchclass = row.get("pitchclass")

    return Chord(
        id=chord_id,
        z=z,
        z2d=z2d,  # type: ignore[arg-type]  # length checked by Chord
        pitchclass=str(pitchclass) if pitchclass is not None else None,
    )


class ChordIndex:
    """Read-only chord dictionary, ordered and unique by id.

    Iteration order is the order the chords were supplied in; neighbour
    search breaks distance ties by this order.

    Args:
        chords: Chord records. May be empty.

    Raises:
        ValueError: On duplicate ids.
        DimensionMismatch: If latent vectors differ in length.
    """

    def __init__(self, chords: Iterable[Chord] = ()) -> None:
        self._chords: tuple[Chord, ...] = tuple(chords)
        self._by_id: dict[ChordId, Chord] = {}
        self._dimension: int | None = None

        for chord in self._chords:
            if chord.id in self._by_id:
                raise ValueError(f"Duplicate chord id {chord.id!r}")
            if self._dimension is None:
                self._dimension = chord.dimension
            elif chord.dimension != self._dimension:
                raise DimensionMismatch(
                    self._dimension, chord.dimension, context=f"chord {chord.id!r}"
                )
            self._by_id[chord.id] = chord

        if self._chords:
            matrix = np.array([c.z for c in self._chords], dtype=np.float64)
        else:
            matrix = np.empty((0, 0), dtype=np.float64)
        matrix.setflags(write=False)
        self._matrix = matrix

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> ChordIndex:
        """Build an index from raw dictionary rows (see chord_from_row)."""
        index = cls(chord_from_row(row) for row in rows)
        logger.info(
            "Chord dictionary built: %d chords, dimension %s",
            len(index),
            index.dimension,
        )
        return index

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_by_id(self, chord_id: ChordId) -> Chord | None:
        """Return the chord with ``chord_id``, or None if it is not present."""
        return self._by_id.get(chord_id)

    def __contains__(self, chord_id: object) -> bool:
        return chord_id in self._by_id

    def __len__(self) -> int:
        return len(self._chords)

    def __iter__(self) -> Iterator[Chord]:
        return iter(self._chords)

    def __getitem__(self, position: int) -> Chord:
        return self._chords[position]

    def __repr__(self) -> str:
        return f"ChordIndex(size={len(self)}, dimension={self.dimension})"

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def chords(self) -> tuple[Chord, ...]:
        return self._chords

    @property
    def ids(self) -> tuple[ChordId, ...]:
        return tuple(c.id for c in self._chords)

    @property
    def dimension(self) -> int | None:
        """Shared latent dimensionality, or None for an empty index."""
        return self._dimension

    @property
    def matrix(self) -> np.ndarray:
        """Read-only (N, D) float64 matrix of latent vectors in index order."""
        return self._matrix
