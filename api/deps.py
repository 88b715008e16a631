"""
FastAPI dependency providers.

Provides the process-wide ChordSession singleton so the chord dictionary is
loaded once and shared across requests. Tests swap it out through
``app.dependency_overrides[get_chord_session]``.
"""

from core.latent.config import DEFAULT_CONFIG
from core.latent.substitutor import ChordSession

_chord_session: ChordSession | None = None


def get_chord_session() -> ChordSession:
    """
    Return the cached ``ChordSession`` singleton.

    The session starts empty; the data-loading client fills it through
    ``PUT /latent/dictionary``. Reloads replace the whole dictionary and
    must not overlap in-flight substitutions.
    """
    global _chord_session  # noqa: PLW0603
    if _chord_session is None:
        _chord_session = ChordSession(config=DEFAULT_CONFIG)
    return _chord_session
