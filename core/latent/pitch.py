"""
core/latent/pitch.py — Decode a chord's pitchclass string for display and playback.

The dictionary stores each chord's pitches as MIDI numbers joined by "-",
e.g. "60-64-67" for a C major triad. The engine never reads this field;
notation and audio collaborators call these helpers after get_by_id().

Note naming uses sharps and scientific octave numbering (MIDI 60 = C4).
"""

from __future__ import annotations

NOTE_NAMES: tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

_SEPARATOR = "-"


def parse_pitchclass(pitchclass: str | None) -> tuple[int, ...]:
    """Split a pitchclass string into MIDI note numbers.

    Args:
        pitchclass: e.g. "60-64-67". None or "" yields ().

    Returns:
        Tuple of MIDI pitches in the order given.

    Raises:
        ValueError: If a token is not an integer or lies outside [0, 127].
    """
    if not pitchclass:
        return ()
    pitches: list[int] = []
    for token in pitchclass.split(_SEPARATOR):
        token = token.strip()
        try:
            pitch = int(token)
        except ValueError as exc:
            raise ValueError(f"Invalid MIDI pitch {token!r} in pitchclass {pitchclass!r}") from exc
        if not (0 <= pitch <= 127):
            raise ValueError(f"MIDI pitch {pitch} out of range [0, 127]")
        pitches.append(pitch)
    return tuple(pitches)


def midi_to_note_name(midi: int) -> str:
    """Convert a MIDI pitch to a note name with octave, e.g. 69 → "A4".

    Raises:
        ValueError: If midi is out of range [0, 127]
    """
    if not (0 <= midi <= 127):
        raise ValueError(f"MIDI pitch {midi} out of range [0, 127]")
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"


def pitchclass_to_note_names(pitchclass: str | None) -> tuple[str, ...]:
    """Note names for a pitchclass string, e.g. "60-64-67" → ("C4", "E4", "G4")."""
    return tuple(midi_to_note_name(p) for p in parse_pitchclass(pitchclass))
