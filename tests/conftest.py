"""
Shared fixtures for the test suite.

Centralizes small chord dictionaries and the API client override so
individual test files don't need to repeat setup boilerplate.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from api.deps import get_chord_session
from api.main import app
from core.latent.index import ChordIndex
from core.latent.substitutor import ChordSession
from core.latent.types import Chord

# ---------------------------------------------------------------------------
# Chord factory
# ---------------------------------------------------------------------------


def make_chord(
    chord_id: str,
    *z: float,
    z2d: tuple[float, float] | None = None,
    pitchclass: str | None = None,
) -> Chord:
    """Build a Chord with latent vector ``z`` given as positional floats."""
    return Chord(id=chord_id, z=tuple(float(x) for x in z), z2d=z2d, pitchclass=pitchclass)


# ---------------------------------------------------------------------------
# Dictionaries
# ---------------------------------------------------------------------------

LINE_ROWS: list[dict[str, object]] = [
    {"id": "C", "z": [0.0, 0.0], "z2D": [0.0, 0.0], "pitchclass": "60-64-67"},
    {"id": "Dm", "z": [1.0, 0.0], "z2D": [0.1, 0.0], "pitchclass": "62-65-69"},
    {"id": "Em", "z": [2.0, 0.0], "z2D": [0.2, 0.0], "pitchclass": "64-67-71"},
    {"id": "F", "z": [3.0, 0.0], "z2D": [0.3, 0.0], "pitchclass": "65-69-72"},
    {"id": "G", "z": [5.0, 0.0], "z2D": [0.5, 0.0], "pitchclass": "67-71-74"},
]
"""Five chords on the x axis at 0, 1, 2, 3 and 5."""


@pytest.fixture
def line_rows() -> list[dict[str, object]]:
    return [dict(row) for row in LINE_ROWS]


@pytest.fixture
def line_index(line_rows) -> ChordIndex:
    return ChordIndex.from_rows(line_rows)


@pytest.fixture
def plane_index() -> ChordIndex:
    """A at the origin, B on +x, X further along +x, Y on +y."""
    return ChordIndex(
        [
            make_chord("A", 0, 0),
            make_chord("B", 1, 0),
            make_chord("X", 2, 0),
            make_chord("Y", 0, 2),
        ]
    )


# ---------------------------------------------------------------------------
# API client with an isolated session
# ---------------------------------------------------------------------------


@pytest.fixture
def api_session() -> ChordSession:
    return ChordSession()


@pytest.fixture
def client(api_session: ChordSession) -> Generator[TestClient, None, None]:
    """TestClient whose ChordSession is fresh for every test."""
    app.dependency_overrides[get_chord_session] = lambda: api_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_chord_session, None)
