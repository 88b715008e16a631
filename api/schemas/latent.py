"""
Pydantic schemas for the ``/latent`` endpoints.

Defines request validation and response serialization models for loading
the chord dictionary, resolving chords, and substituting within a phrase.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from core.latent.config import DEFAULT_CONFIG
from core.latent.pitch import parse_pitchclass


class ChordIn(BaseModel):
    """One row of the chord dictionary as sent by the data-loading client."""

    id: str | int = Field(..., description="Unique chord identifier (string or integer).")
    z: list[float] = Field(..., min_length=1, description="Latent vector.")
    z2D: list[float] | None = Field(
        default=None, description="Precomputed 2D projection for display (2 components)."
    )
    pitchclass: str | None = Field(
        default=None, description="MIDI pitches joined by '-', e.g. '60-64-67'."
    )

    @field_validator("id")
    @classmethod
    def id_must_not_be_empty(cls, v: str | int) -> str | int:
        """Validate that a string id is not empty or whitespace-only."""
        if isinstance(v, str) and not v.strip():
            raise ValueError("id must be a non-empty string")
        return v

    @field_validator("pitchclass")
    @classmethod
    def pitchclass_must_parse(cls, v: str | None) -> str | None:
        """Reject pitchclass strings that do not decode to MIDI pitches."""
        parse_pitchclass(v)
        return v


class DictionaryRequest(BaseModel):
    """Request body for ``PUT /latent/dictionary``."""

    chords: list[ChordIn] = Field(..., description="Full dictionary, in search order.")


class DictionaryResponse(BaseModel):
    """Response body for ``PUT /latent/dictionary``."""

    count: int = Field(..., description="Number of chords loaded.")
    dimension: int | None = Field(..., description="Latent dimensionality (null if empty).")


class ChordOut(BaseModel):
    """A chord as returned to visualization, notation and audio clients."""

    id: str | int
    z: list[float]
    z2D: list[float] | None = None
    pitchclass: str | None = None
    note_names: list[str] = Field(default_factory=list, description="e.g. ['C4', 'E4', 'G4'].")


class NeighborOut(BaseModel):
    """A screened candidate with its distance to B (and angle, for angular)."""

    chord: ChordOut
    distance: float
    angle: float | None = Field(
        default=None,
        description="Angle to the A→B direction in radians; null if undefined or not angular.",
    )


class GeometryOut(BaseModel):
    """Strategy-specific geometry for drawing the decision."""

    kind: Literal["linear", "knn", "angular"]
    point: list[float] | None = Field(
        default=None, description="Interpolated midpoint of A and C (linear)."
    )
    neighbors: list[NeighborOut] = Field(default_factory=list)
    reference: list[float] | None = Field(
        default=None, description="Direction B - A the candidates were scored against (angular)."
    )
    search_radius: float | None = Field(
        default=None, description="Distance to the farthest neighbour (knn, angular)."
    )


class SubstituteRequest(BaseModel):
    """Request body for ``POST /latent/substitute``."""

    phrase_ids: list[str | int] = Field(..., description="Ordered chord ids of the phrase.")
    target_indices: list[int] = Field(
        ..., description="Selected positions. Only exactly one interior index is substituted."
    )
    strategy: str = Field(
        default="knn",
        description="'linear', 'knn' or 'angular'. Unknown names leave the phrase unchanged.",
    )
    k: int = Field(
        default=DEFAULT_CONFIG.default_k,
        ge=0,
        le=DEFAULT_CONFIG.max_k,
        description="Neighbour count for knn / angular (0–50).",
    )


class SubstitutionDetailsOut(BaseModel):
    """Context window and decision record."""

    strategy: str
    context_a: ChordOut | None = None
    context_b: ChordOut | None = None
    context_c: ChordOut | None = None
    substituted_id: str | int | None = None
    geometry: GeometryOut | None = None
    declined: str | None = Field(
        default=None,
        description="'selection', 'missing_chord' or 'unknown_strategy' when declined.",
    )
    changed: bool = Field(..., description="True if the target chord was replaced.")


class SubstituteResponse(BaseModel):
    """Response body for ``POST /latent/substitute``."""

    generated_ids: list[str | int]
    details: SubstitutionDetailsOut
