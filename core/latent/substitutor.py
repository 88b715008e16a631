"""
core/latent/substitutor.py — Phrase-level substitution orchestrator.

PhraseSubstitutor validates a substitution request, extracts the (A, B, C)
context window, dispatches to a strategy and assembles the result record.

Validity gate (checked in order, each failure is a decline, never an error):
    1. exactly one target index i with 0 < i < len(phrase) - 1
    2. phrase[i-1], phrase[i], phrase[i+1] all resolve in the index

A declined request returns the phrase unchanged and a SubstitutionDetails
with empty context and a DeclineReason, so interactive callers can tell
"out of range" apart from "mapped back to itself".

ChordSession holds the active ChordIndex for one caller (UI session, API
process, test) and serves the string-named entry point used by UI code.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import Any

from core.latent.config import DEFAULT_CONFIG, SubstitutionConfig
from core.latent.index import ChordIndex, chord_from_row
from core.latent.strategies import angular_alignment, knn_substitution, linear_interpolation
from core.latent.types import (
    AngularStrategy,
    Chord,
    ChordId,
    DeclineReason,
    KnnStrategy,
    LinearStrategy,
    PhraseSubstitution,
    Strategy,
    StrategyOutcome,
    SubstitutionDetails,
)

logger = logging.getLogger(__name__)

STRATEGY_NAMES: tuple[str, ...] = ("linear", "knn", "angular")


def parse_strategy(name: str, k: int = DEFAULT_CONFIG.default_k) -> Strategy:
    """Map a strategy name to its typed variant.

    Args:
        name: "linear", "knn" or "angular" (case-insensitive)
        k:    Neighbour count for knn / angular; ignored by linear

    Raises:
        ValueError: If ``name`` is not a known strategy.
    """
    key = name.strip().lower()
    if key == "linear":
        return LinearStrategy()
    if key == "knn":
        return KnnStrategy(k=k)
    if key == "angular":
        return AngularStrategy(k=k)
    raise ValueError(f"Unknown strategy {name!r}. Valid: {list(STRATEGY_NAMES)}")


def _interior_index(phrase_len: int, target_indices: Collection[int]) -> int | None:
    """The single strictly interior target index, or None if the selection is invalid.

    ``target_indices`` may be any collection (list, tuple, set).
    """
    if len(target_indices) != 1:
        return None
    (i,) = target_indices
    if 0 < i < phrase_len - 1:
        return i
    return None


class PhraseSubstitutor:
    """Substitutes one chord of a phrase using a latent-space strategy.

    Stateless per call; holds only a read-only ChordIndex.

    Args:
        index:  Chord dictionary to resolve ids and search in
        config: Metric used by neighbour search
    """

    def __init__(self, index: ChordIndex, config: SubstitutionConfig = DEFAULT_CONFIG) -> None:
        self._index = index
        self._config = config

    @property
    def index(self) -> ChordIndex:
        return self._index

    def substitute(
        self,
        phrase_ids: Sequence[ChordId],
        target_indices: Collection[int],
        strategy: Strategy,
    ) -> PhraseSubstitution:
        """Replace the chord at the single target index using ``strategy``.

        Args:
            phrase_ids:     Ordered chord ids (duplicates allowed)
            target_indices: Indices selected for substitution; only exactly
                            one strictly interior index is honoured
            strategy:       LinearStrategy, KnnStrategy or AngularStrategy

        Returns:
            PhraseSubstitution with the generated phrase and details.

        Raises:
            TypeError: If ``strategy`` is not one of the strategy variants.
            DimensionMismatch: If the dictionary is internally inconsistent.
        """
        if not isinstance(strategy, (LinearStrategy, KnnStrategy, AngularStrategy)):
            raise TypeError(f"Unsupported strategy variant: {type(strategy).__name__}")
        original = tuple(phrase_ids)
        context = self._resolve_context(original, target_indices, strategy.name)
        if isinstance(context, PhraseSubstitution):
            return context
        i, a, b, c = context

        outcome = self._run(strategy, a, b, c)
        logger.debug(
            "Substitution %s at %d: %s -> %s", strategy.name, i, b.id, outcome.substituted_id
        )

        generated = list(original)
        generated[i] = outcome.substituted_id
        details = SubstitutionDetails(
            strategy=strategy.name,
            context_a=a,
            context_b=b,
            context_c=c,
            substituted_id=outcome.substituted_id,
            geometry=outcome.geometry,
        )
        return PhraseSubstitution(generated_ids=tuple(generated), details=details)

    def decline_unknown_strategy(
        self,
        phrase_ids: Sequence[ChordId],
        target_indices: Collection[int],
        strategy_name: str,
    ) -> PhraseSubstitution:
        """Result for a valid selection with an unrecognised strategy name.

        The context is reported and B is kept; no geometry is recorded.
        Selection and missing-chord declines take precedence.
        """
        original = tuple(phrase_ids)
        context = self._resolve_context(original, target_indices, strategy_name)
        if isinstance(context, PhraseSubstitution):
            return context
        _i, a, b, c = context
        logger.debug("Declined substitution: unknown strategy %r", strategy_name)
        details = SubstitutionDetails(
            strategy=strategy_name,
            context_a=a,
            context_b=b,
            context_c=c,
            substituted_id=b.id,
            declined=DeclineReason.unknown_strategy,
        )
        return PhraseSubstitution(generated_ids=original, details=details)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_context(
        self,
        original: tuple[ChordId, ...],
        target_indices: Collection[int],
        strategy_name: str,
    ) -> tuple[int, Chord, Chord, Chord] | PhraseSubstitution:
        i = _interior_index(len(original), target_indices)
        if i is None:
            logger.debug(
                "Declined substitution: selection %s in phrase of %d",
                list(target_indices),
                len(original),
            )
            return self._declined(original, strategy_name, DeclineReason.selection)

        a = self._index.get_by_id(original[i - 1])
        b = self._index.get_by_id(original[i])
        c = self._index.get_by_id(original[i + 1])
        if a is None or b is None or c is None:
            logger.debug(
                "Declined substitution: unresolved context %s", list(original[i - 1 : i + 2])
            )
            return self._declined(original, strategy_name, DeclineReason.missing_chord)
        return i, a, b, c

    @staticmethod
    def _declined(
        original: tuple[ChordId, ...], strategy_name: str, reason: DeclineReason
    ) -> PhraseSubstitution:
        return PhraseSubstitution(
            generated_ids=original,
            details=SubstitutionDetails(strategy=strategy_name, declined=reason),
        )

    def _run(self, strategy: Strategy, a: Chord, b: Chord, c: Chord) -> StrategyOutcome:
        metric = self._config.metric
        if isinstance(strategy, LinearStrategy):
            return linear_interpolation(a, c, self._index)
        if isinstance(strategy, KnnStrategy):
            return knn_substitution(b, self._index, strategy.k, metric=metric)
        if isinstance(strategy, AngularStrategy):
            return angular_alignment(a, b, self._index, strategy.k, metric=metric)
        raise TypeError(f"Unsupported strategy variant: {type(strategy).__name__}")


def substitute_phrase(
    index: ChordIndex,
    phrase_ids: Sequence[ChordId],
    target_indices: Collection[int],
    strategy_name: str,
    params: Mapping[str, Any] | None = None,
    *,
    config: SubstitutionConfig = DEFAULT_CONFIG,
) -> PhraseSubstitution:
    """String-named entry point for UI callers.

    Args:
        index:          Chord dictionary
        phrase_ids:     Ordered chord ids
        target_indices: Selected indices
        strategy_name:  "linear", "knn" or "angular"
        params:         Optional mapping; ``k`` defaults to config.default_k

    Returns:
        PhraseSubstitution. An unknown strategy name is a decline with
        DeclineReason.unknown_strategy, not an error.
    """
    params = params or {}
    k = params.get("k")
    k = config.default_k if k is None else int(k)

    substitutor = PhraseSubstitutor(index, config=config)
    try:
        strategy = parse_strategy(strategy_name, k)
    except ValueError:
        return substitutor.decline_unknown_strategy(phrase_ids, target_indices, strategy_name)
    return substitutor.substitute(phrase_ids, target_indices, strategy)


class ChordSession:
    """Holds the active chord dictionary for one caller.

    Replaces a process-wide dictionary: each session (UI tab, API process,
    test) owns its own index, and independent sessions never interfere.
    ``set_dictionary`` swaps the whole index; there are no partial updates.
    Reloading while a substitution is in flight must be serialized by the
    caller.

    Args:
        config: Defaults applied to string-named requests
    """

    def __init__(self, config: SubstitutionConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._index: ChordIndex | None = None

    @property
    def config(self) -> SubstitutionConfig:
        return self._config

    @property
    def index(self) -> ChordIndex | None:
        """The active index, or None before any dictionary was set."""
        return self._index

    @property
    def loaded(self) -> bool:
        return self._index is not None

    def set_dictionary(self, chords: Iterable[Chord | Mapping[str, Any]]) -> ChordIndex:
        """Replace the active dictionary with ``chords``.

        Accepts Chord records or raw rows (``{"id", "z", "z2D", "pitchclass"}``),
        validated up front. On failure the previous dictionary stays active.

        Raises:
            ValueError: On malformed rows or duplicate ids.
            DimensionMismatch: On mixed vector lengths.
        """
        index = ChordIndex(
            item if isinstance(item, Chord) else chord_from_row(item) for item in chords
        )
        self._index = index
        logger.info("Chord dictionary set: %d chords, dimension %s", len(index), index.dimension)
        return index

    def get_by_id(self, chord_id: ChordId) -> Chord | None:
        """Resolve a chord id; None when unknown or no dictionary is set."""
        if self._index is None:
            return None
        return self._index.get_by_id(chord_id)

    def substitute(
        self,
        phrase_ids: Sequence[ChordId],
        target_indices: Collection[int],
        strategy: Strategy,
    ) -> PhraseSubstitution:
        """Typed-variant substitution against the active dictionary."""
        return PhraseSubstitutor(self._active(), config=self._config).substitute(
            phrase_ids, target_indices, strategy
        )

    def substitute_phrase(
        self,
        phrase_ids: Sequence[ChordId],
        target_indices: Collection[int],
        strategy_name: str,
        params: Mapping[str, Any] | None = None,
    ) -> PhraseSubstitution:
        """String-named substitution against the active dictionary."""
        return substitute_phrase(
            self._active(),
            phrase_ids,
            target_indices,
            strategy_name,
            params,
            config=self._config,
        )

    def _active(self) -> ChordIndex:
        # An unset session behaves like an empty dictionary: every id is
        # unknown, so every request declines.
        return self._index if self._index is not None else ChordIndex()
