"""Tonic and scale tables for Gridseq.

Tonic frequencies are the fourth octave (C4 = 261.63 Hz).
Each scale spans exactly one octave: 8 ascending semitone offsets, 0 to 12.
"""

from typing import Final

TONIC_FREQUENCIES: Final[dict[str, float]] = {
    "C": 261.63,
    "C#": 277.18,
    "D": 293.66,
    "D#": 311.13,
    "E": 329.63,
    "F": 349.23,
    "F#": 369.99,
    "G": 392.00,
    "G#": 415.30,
    "A": 440.00,
    "A#": 466.16,
    "B": 493.88,
}

SCALE_INTERVALS: Final[dict[str, tuple[int, ...]]] = {
    "Major": (0, 2, 4, 5, 7, 9, 11, 12),
    "Minor": (0, 2, 3, 5, 7, 8, 10, 12),
    "Lydian": (0, 2, 4, 6, 7, 9, 11, 12),
    "Mixolydian": (0, 2, 4, 5, 7, 9, 10, 12),
    "Dorian": (0, 2, 3, 5, 7, 9, 10, 12),
    "Phrygian": (0, 1, 3, 5, 7, 8, 10, 12),
    "Locrian": (0, 1, 3, 5, 6, 8, 10, 12),
}

DEFAULT_TONIC: Final[str] = "C"
DEFAULT_SCALE: Final[str] = "Major"
