"""
Gridseq Loop Runtime State

Single owned state object for the sequencer engine: grid, key selection,
tempo and transport. Mutated only through the engine's operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gridseq_core.constants.grid import GRID_COLS
from gridseq_core.constants.tables import DEFAULT_SCALE, DEFAULT_TONIC
from gridseq_core.ir.frequency import FrequencyTable
from gridseq_core.ir.grid import Grid

from ..engine.tempo import TempoController


class PlaybackState(Enum):
    """Playback state enumeration"""
    STOPPED = "stopped"
    PLAYING = "playing"


@dataclass
class Playhead:
    """Current column cursor"""
    column: int = 0

    def advance(self, cols: int = GRID_COLS) -> None:
        """Advance by one column, wrapping at the grid edge"""
        self.column = (self.column + 1) % cols

    def reset(self) -> None:
        """Reset cursor to the first column"""
        self.column = 0


@dataclass
class RuntimeState:
    """
    Runtime state for the sequencer engine.

    tonic/scale hold the current selection and may change at any time;
    frequencies holds the table actually in use, which is only
    re-resolved while stopped.
    """

    grid: Grid = field(default_factory=Grid)
    playback_state: PlaybackState = PlaybackState.STOPPED
    playhead: Playhead = field(default_factory=Playhead)
    tempo: TempoController = field(default_factory=TempoController)

    # Key selection
    tonic: str = DEFAULT_TONIC
    scale: str = DEFAULT_SCALE
    frequencies: FrequencyTable | None = None

    # Incremented on every Stopped -> Playing transition
    session: int = 0

    @property
    def playing(self) -> bool:
        """Check if actively playing"""
        return self.playback_state == PlaybackState.PLAYING

    @property
    def current_column(self) -> int:
        return self.playhead.column

    @property
    def controls_enabled(self) -> bool:
        """Key and tempo controls are editable only while stopped"""
        return not self.playing

    @property
    def bpm(self) -> float:
        return self.tempo.bpm

    @property
    def step_interval_ms(self) -> float:
        return self.tempo.step_interval_ms

    @property
    def step_interval(self) -> float:
        """Step interval in seconds"""
        return self.tempo.step_interval

    def to_status_dict(self) -> dict[str, Any]:
        """Convert transport/tempo/key status to dict for IPC"""
        return {
            "transport": self.playback_state.value,
            "column": self.playhead.column,
            "bpm": self.bpm,
            "step_interval_ms": self.step_interval_ms,
            "tonic": self.tonic,
            "scale": self.scale,
            "frequencies": list(self.frequencies) if self.frequencies else [],
            "controls_enabled": self.controls_enabled,
            "session": self.session,
        }
