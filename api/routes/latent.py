"""
api/routes/latent.py — Latent chord substitution endpoints.

Endpoints:
    PUT  /latent/dictionary      — Replace the active chord dictionary
    GET  /latent/chords/{id}     — Resolve one chord (404 if unknown)
    POST /latent/substitute      — Substitute one chord of a phrase

All endpoints delegate to the process-wide ChordSession from api.deps.
No database, no file I/O — pure latent-space computation.
"""

from __future__ import annotations

import logging
import math

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_chord_session
from api.schemas.latent import (
    ChordOut,
    DictionaryRequest,
    DictionaryResponse,
    GeometryOut,
    NeighborOut,
    SubstituteRequest,
    SubstituteResponse,
    SubstitutionDetailsOut,
)
from core.latent.pitch import pitchclass_to_note_names
from core.latent.substitutor import STRATEGY_NAMES, ChordSession
from core.latent.types import (
    AngularGeometry,
    Chord,
    Geometry,
    KnnGeometry,
    LatentSpaceError,
    LinearGeometry,
    PhraseSubstitution,
)
from infrastructure.metrics import LatencyTimer, record_dictionary_reload, record_substitution

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/latent", tags=["latent"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------


def _chord_out(chord: Chord | None) -> ChordOut | None:
    if chord is None:
        return None
    return ChordOut(
        id=chord.id,
        z=list(chord.z),
        z2D=list(chord.z2d) if chord.z2d is not None else None,
        pitchclass=chord.pitchclass,
        note_names=list(pitchclass_to_note_names(chord.pitchclass)),
    )


def _finite(value: float) -> float | None:
    # JSON has no Infinity; an undefined angle is reported as null
    return value if math.isfinite(value) else None


def _geometry_out(geometry: Geometry | None) -> GeometryOut | None:
    if geometry is None:
        return None
    if isinstance(geometry, LinearGeometry):
        return GeometryOut(kind="linear", point=list(geometry.point))
    if isinstance(geometry, KnnGeometry):
        return GeometryOut(
            kind="knn",
            neighbors=[
                NeighborOut(chord=_chord_out(n.chord), distance=n.distance)
                for n in geometry.neighbors
            ],
            search_radius=geometry.search_radius,
        )
    if isinstance(geometry, AngularGeometry):
        angles = geometry.angles or (math.inf,) * len(geometry.neighbors)
        return GeometryOut(
            kind="angular",
            neighbors=[
                NeighborOut(chord=_chord_out(n.chord), distance=n.distance, angle=_finite(a))
                for n, a in zip(geometry.neighbors, angles)
            ],
            reference=list(geometry.reference),
            search_radius=geometry.search_radius,
        )
    raise TypeError(f"Unsupported geometry: {type(geometry).__name__}")


def _lookup(session: ChordSession, chord_id: str) -> Chord | None:
    # Path parameters are always strings; integer ids are matched by value
    chord = session.get_by_id(chord_id)
    if chord is None and chord_id.lstrip("-").isdigit():
        chord = session.get_by_id(int(chord_id))
    return chord


def _outcome_label(result: PhraseSubstitution) -> str:
    details = result.details
    if details.declined is not None:
        return details.declined.value
    return "substituted" if details.changed else "unchanged"


# ---------------------------------------------------------------------------
# PUT /latent/dictionary
# ---------------------------------------------------------------------------


@router.put("/dictionary", response_model=DictionaryResponse)
def set_dictionary(
    request: DictionaryRequest,
    session: ChordSession = Depends(get_chord_session),
) -> DictionaryResponse:
    """Replace the active chord dictionary.

    The whole dictionary is validated before it replaces the previous one;
    on failure the previous dictionary stays active.

    Args:
        request: DictionaryRequest with the full list of chord rows.

    Returns:
        DictionaryResponse with the chord count and latent dimensionality.

    Raises:
        422: Duplicate ids or latent vectors of unequal length.
    """
    try:
        index = session.set_dictionary(row.model_dump() for row in request.chords)
    except ValueError as exc:
        logger.warning("Rejected chord dictionary: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_dictionary_reload(len(index))
    return DictionaryResponse(count=len(index), dimension=index.dimension)


# ---------------------------------------------------------------------------
# GET /latent/chords/{chord_id}
# ---------------------------------------------------------------------------


@router.get("/chords/{chord_id}", response_model=ChordOut)
def get_chord(
    chord_id: str,
    session: ChordSession = Depends(get_chord_session),
) -> ChordOut:
    """Resolve a chord id to its vectors and note names.

    Raises:
        404: Unknown chord id (or no dictionary loaded).
    """
    chord = _lookup(session, chord_id)
    if chord is None:
        raise HTTPException(status_code=404, detail=f"Unknown chord id {chord_id!r}")
    return _chord_out(chord)


# ---------------------------------------------------------------------------
# POST /latent/substitute
# ---------------------------------------------------------------------------


@router.post("/substitute", response_model=SubstituteResponse)
def substitute(
    request: SubstituteRequest,
    session: ChordSession = Depends(get_chord_session),
) -> SubstituteResponse:
    """Substitute the selected chord of a phrase.

    Invalid selections (boundary, multi-select), unknown chord ids and
    unknown strategy names are not errors: the phrase comes back unchanged
    with ``details.declined`` set.

    Args:
        request: SubstituteRequest with phrase, selection, strategy and k.

    Returns:
        SubstituteResponse with the generated phrase and visualization details.

    Raises:
        409: No chord dictionary has been loaded.
        422: Corrupted dictionary (dimension / metric errors).
    """
    if not session.loaded:
        raise HTTPException(status_code=409, detail="No chord dictionary loaded")

    try:
        with LatencyTimer() as timer:
            result = session.substitute_phrase(
                request.phrase_ids,
                request.target_indices,
                request.strategy,
                {"k": request.k},
            )
    except LatentSpaceError as exc:
        logger.warning("Substitution failed: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    strategy_label = request.strategy.strip().lower()
    record_substitution(
        strategy=strategy_label if strategy_label in STRATEGY_NAMES else "unknown",
        outcome=_outcome_label(result),
        latency_seconds=timer.elapsed,
    )

    details = result.details
    return SubstituteResponse(
        generated_ids=list(result.generated_ids),
        details=SubstitutionDetailsOut(
            strategy=details.strategy,
            context_a=_chord_out(details.context_a),
            context_b=_chord_out(details.context_b),
            context_c=_chord_out(details.context_c),
            substituted_id=details.substituted_id,
            geometry=_geometry_out(details.geometry),
            declined=details.declined.value if details.declined is not None else None,
            changed=details.changed,
        ),
    )
