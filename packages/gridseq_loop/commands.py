"""
Pydantic models for command validation.

Each command has a corresponding model that validates the payload structure.
Invalid payloads become CommandResult errors instead of exceptions.
"""

from pydantic import BaseModel, Field

from gridseq_core.constants.grid import GRID_COLS, GRID_ROWS


class PlayCommand(BaseModel):
    """Play command payload (empty)."""

    pass


class StopCommand(BaseModel):
    """Stop command payload (empty)."""

    pass


class TogglePlaybackCommand(BaseModel):
    """Play/stop toggle payload (empty)."""

    pass


class ClearCommand(BaseModel):
    """Clear command payload (empty). Stops playback and clears the grid."""

    pass


class RandomizeCommand(BaseModel):
    """
    Randomize command payload.

    Fields:
        probability: Chance that each cell becomes active
            (default: engine's configured probability)
    """

    probability: float | None = Field(default=None, ge=0.0, le=1.0)


class ToggleCellCommand(BaseModel):
    """
    Cell toggle command payload.

    Fields:
        row: Row index (0 = highest pitch)
        col: Column index (time step)
    """

    row: int = Field(ge=0, lt=GRID_ROWS)
    col: int = Field(ge=0, lt=GRID_COLS)


class BpmCommand(BaseModel):
    """
    BPM change command payload.

    Fields:
        bpm: Beats per minute (positive and finite)
    """

    bpm: float = Field(gt=0, allow_inf_nan=False)


class TonicCommand(BaseModel):
    """
    Tonic selection command payload.

    Fields:
        tonic: Tonic name (e.g. "C#")
    """

    tonic: str


class ScaleCommand(BaseModel):
    """
    Scale selection command payload.

    Fields:
        scale: Scale name (e.g. "Dorian")
    """

    scale: str
