"""Constants for Gridseq."""

from .grid import (
    DEFAULT_BPM,
    GRID_CELLS,
    GRID_COLS,
    GRID_ROWS,
    RANDOMIZE_PROBABILITY,
    VOICE_GAIN,
)
from .tables import DEFAULT_SCALE, DEFAULT_TONIC, SCALE_INTERVALS, TONIC_FREQUENCIES

__all__ = [
    "GRID_ROWS",
    "GRID_COLS",
    "GRID_CELLS",
    "DEFAULT_BPM",
    "VOICE_GAIN",
    "RANDOMIZE_PROBABILITY",
    "TONIC_FREQUENCIES",
    "SCALE_INTERVALS",
    "DEFAULT_TONIC",
    "DEFAULT_SCALE",
]
