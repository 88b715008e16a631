"""
core/latent/types.py — Frozen value objects for the latent substitution engine.

All types are immutable frozen dataclasses. No I/O, no side effects.

Types:
    Chord               — a dictionary entry: id + latent vector + display data
    Neighbor            — a chord paired with its distance to a query vector
    LinearStrategy      — strategy variant: midpoint interpolation between A and C
    KnnStrategy         — strategy variant: nearest neighbour of B
    AngularStrategy     — strategy variant: k-NN screened by angle to A→B
    LinearGeometry      — visualization payload of the linear strategy
    KnnGeometry         — visualization payload of the k-NN strategy
    AngularGeometry     — visualization payload of the angular strategy
    StrategyOutcome     — (substituted id, geometry) returned by a strategy
    SubstitutionDetails — context window + decision record for one call
    PhraseSubstitution  — generated phrase + details (orchestrator output)

Errors:
    LatentSpaceError    — base class, a ValueError
    DimensionMismatch   — vectors of unequal length
    UnsupportedMetric   — distance metric other than euclidean
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Vector = tuple[float, ...]
ChordId = str | int

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class LatentSpaceError(ValueError):
    """Base class for data and programming errors in the latent engine."""


class DimensionMismatch(LatentSpaceError):
    """Raised when two vectors that must share a length do not."""

    def __init__(self, expected: int, actual: int, context: str = "vector") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{context} dimension mismatch: expected length {expected}, got {actual}"
        )


class UnsupportedMetric(LatentSpaceError):
    """Raised when a distance metric other than euclidean is requested."""

    def __init__(self, metric: str) -> None:
        self.metric = metric
        super().__init__(f"Unsupported distance metric: {metric!r}")


# ---------------------------------------------------------------------------
# Chord
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Chord:
    """A single entry of the chord dictionary.

    Attributes:
        id:          Unique identifier within the dictionary (string or integer,
                     kept as given so lookups round-trip)
        z:           Latent vector (dimensionality shared by the dictionary)
        z2d:         Precomputed 2D projection for display, or None
        pitchclass:  MIDI pitches joined by "-", e.g. "60-64-67", or None.
                     Opaque to the engine; decoded by core.latent.pitch.
    """

    id: ChordId
    z: Vector
    z2d: tuple[float, float] | None = None
    pitchclass: str | None = None

    def __post_init__(self) -> None:
        if self.id is None or self.id == "":
            raise ValueError("Chord.id must not be empty")
        if isinstance(self.id, bool) or not isinstance(self.id, (str, int)):
            raise ValueError(f"Chord.id must be a string or integer, got {self.id!r}")
        if not self.z:
            raise ValueError(f"Chord {self.id!r}: z must not be empty")
        if self.z2d is not None and len(self.z2d) != 2:
            raise ValueError(
                f"Chord {self.id!r}: z2d must have 2 components, got {len(self.z2d)}"
            )

    @property
    def dimension(self) -> int:
        return len(self.z)


@dataclass(frozen=True)
class Neighbor:
    """A chord and its distance to the query vector of a neighbour search."""

    chord: Chord
    distance: float

    @property
    def id(self) -> ChordId:
        return self.chord.id


# ---------------------------------------------------------------------------
# Strategy variants — closed union, dispatched by isinstance
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinearStrategy:
    """Pick the chord nearest the midpoint of A and C (t fixed at 0.5)."""

    name = "linear"


@dataclass(frozen=True)
class KnnStrategy:
    """Pick the nearest neighbour of B among its k nearest.

    k <= 0 yields an empty neighbour list and B is kept.
    """

    k: int = 5
    name = "knn"


@dataclass(frozen=True)
class AngularStrategy:
    """Among B's k nearest, pick the one whose offset from A best aligns with A→B."""

    k: int = 5
    name = "angular"


Strategy = LinearStrategy | KnnStrategy | AngularStrategy


# ---------------------------------------------------------------------------
# Geometry payloads
# ---------------------------------------------------------------------------


def _farthest_distance(neighbors: tuple[Neighbor, ...]) -> float:
    return neighbors[-1].distance if neighbors else 0.0


@dataclass(frozen=True)
class LinearGeometry:
    """The interpolated high-dimensional point the linear strategy searched from."""

    point: Vector


@dataclass(frozen=True)
class KnnGeometry:
    """Ordered neighbour list (nearest first) screened by the k-NN strategy."""

    neighbors: tuple[Neighbor, ...]

    @property
    def search_radius(self) -> float:
        """Distance to the farthest returned neighbour (0.0 when empty)."""
        return _farthest_distance(self.neighbors)


@dataclass(frozen=True)
class AngularGeometry:
    """Candidates screened by the angular strategy.

    Attributes:
        neighbors:  Candidate pool, nearest first
        reference:  Direction B.z - A.z every candidate was compared against
        angles:     Angle (radians) per candidate, parallel to neighbors;
                    math.inf where the direction is undefined
    """

    neighbors: tuple[Neighbor, ...]
    reference: Vector
    angles: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.angles and len(self.angles) != len(self.neighbors):
            raise ValueError(
                f"AngularGeometry.angles must match neighbors "
                f"({len(self.neighbors)}), got {len(self.angles)}"
            )

    @property
    def search_radius(self) -> float:
        """Distance to the farthest candidate in the pool (0.0 when empty)."""
        return _farthest_distance(self.neighbors)


Geometry = LinearGeometry | KnnGeometry | AngularGeometry


@dataclass(frozen=True)
class StrategyOutcome:
    """What a strategy decided: the replacement id and the geometry behind it."""

    substituted_id: ChordId
    geometry: Geometry


# ---------------------------------------------------------------------------
# Orchestration results
# ---------------------------------------------------------------------------


class DeclineReason(str, Enum):
    """Why a substitution request left the phrase unchanged."""

    selection = "selection"  # not exactly one strictly interior index
    missing_chord = "missing_chord"  # A, B or C id not in the dictionary
    unknown_strategy = "unknown_strategy"  # strategy name not recognised


@dataclass(frozen=True)
class SubstitutionDetails:
    """Decision record for one substitution call, for visualization.

    On a selection or missing-chord decline every context field is None.
    On an unknown-strategy decline the context is filled, substituted_id is
    B's id and geometry is None.

    Attributes:
        strategy:        Strategy name as requested
        context_a:       Chord preceding the target
        context_b:       The target chord
        context_c:       Chord following the target
        substituted_id:  Id written into the generated phrase, or None
        geometry:        Strategy-specific payload, or None
        declined:        Reason the request was declined, or None
    """

    strategy: str
    context_a: Chord | None = None
    context_b: Chord | None = None
    context_c: Chord | None = None
    substituted_id: ChordId | None = None
    geometry: Geometry | None = None
    declined: DeclineReason | None = None

    @property
    def changed(self) -> bool:
        """True when the substituted chord differs from the original target."""
        return (
            self.context_b is not None
            and self.substituted_id is not None
            and self.substituted_id != self.context_b.id
        )


@dataclass(frozen=True)
class PhraseSubstitution:
    """Output of a substitution call: the new phrase and how it was reached."""

    generated_ids: tuple[ChordId, ...]
    details: SubstitutionDetails
