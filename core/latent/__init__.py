"""
core/latent/ — Chord substitution in a learned latent space.

Given a context window (A, B, C) of chords from a fixed dictionary, propose
a replacement for B by linear interpolation, k-NN, or k-NN with angular
alignment, and return the geometry behind the choice for visualization.

Exports:
    Types:      Chord, ChordId, Neighbor, LinearStrategy, KnnStrategy, AngularStrategy,
                LinearGeometry, KnnGeometry, AngularGeometry, StrategyOutcome,
                SubstitutionDetails, PhraseSubstitution, DeclineReason
    Errors:     LatentSpaceError, DimensionMismatch, UnsupportedMetric
    Config:     SubstitutionConfig, DEFAULT_CONFIG
    Index:      ChordIndex, chord_from_row
    Search:     k_nearest
    Strategies: linear_interpolation, knn_substitution, angular_alignment
    Orchestration: PhraseSubstitutor, ChordSession, substitute_phrase, parse_strategy
"""

from core.latent.config import DEFAULT_CONFIG, SubstitutionConfig
from core.latent.index import ChordIndex, chord_from_row
from core.latent.neighbors import k_nearest
from core.latent.strategies import angular_alignment, knn_substitution, linear_interpolation
from core.latent.substitutor import (
    ChordSession,
    PhraseSubstitutor,
    parse_strategy,
    substitute_phrase,
)
from core.latent.types import (
    AngularGeometry,
    AngularStrategy,
    Chord,
    ChordId,
    DeclineReason,
    DimensionMismatch,
    KnnGeometry,
    KnnStrategy,
    LatentSpaceError,
    LinearGeometry,
    LinearStrategy,
    Neighbor,
    PhraseSubstitution,
    StrategyOutcome,
    SubstitutionDetails,
    UnsupportedMetric,
)

__all__ = [
    # Types
    "Chord",
    "ChordId",
    "Neighbor",
    "LinearStrategy",
    "KnnStrategy",
    "AngularStrategy",
    "LinearGeometry",
    "KnnGeometry",
    "AngularGeometry",
    "StrategyOutcome",
    "SubstitutionDetails",
    "PhraseSubstitution",
    "DeclineReason",
    # Errors
    "LatentSpaceError",
    "DimensionMismatch",
    "UnsupportedMetric",
    # Config
    "SubstitutionConfig",
    "DEFAULT_CONFIG",
    # Index
    "ChordIndex",
    "chord_from_row",
    # Search
    "k_nearest",
    # Strategies
    "linear_interpolation",
    "knn_substitution",
    "angular_alignment",
    # Orchestration
    "PhraseSubstitutor",
    "ChordSession",
    "substitute_phrase",
    "parse_strategy",
]
