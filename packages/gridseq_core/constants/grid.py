"""Grid-related constants for Gridseq.

The 8x8 grid is a core product concept and is fixed.
"""

from typing import Final

# Grid dimensions - fixed for the lifetime of the program
GRID_ROWS: Final[int] = 8  # one row per pitch (row 0 = highest)
GRID_COLS: Final[int] = 8  # one column per time step
GRID_CELLS: Final[int] = GRID_ROWS * GRID_COLS

# Playback defaults
DEFAULT_BPM: Final[float] = 120.0
VOICE_GAIN: Final[float] = 0.1  # fixed output gain per voice

# Probability that randomize() activates a cell
RANDOMIZE_PROBABILITY: Final[float] = 0.15
