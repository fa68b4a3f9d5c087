"""
Step Processor

Samples one grid column and turns it into per-voice target frequencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gridseq_core.ir.frequency import FrequencyTable
from gridseq_core.ir.grid import Grid

SILENT_HZ: float = 0.0


@dataclass
class StepOutput:
    """Targets for one step: one frequency per row, 0 for silent rows."""

    column: int
    frequencies: list[float] = field(default_factory=list)
    sounding_rows: list[int] = field(default_factory=list)


class StepProcessor:
    """
    Builds the step output for the current column.

    Stateless: the grid is read, never written.
    """

    def process_step(
        self,
        grid: Grid,
        column: int,
        frequencies: FrequencyTable,
    ) -> StepOutput:
        """
        Sample one column.

        Args:
            grid: Grid state
            column: Column to sample
            frequencies: Per-row frequencies frozen for this session

        Returns:
            StepOutput with a target frequency for every row
        """
        output = StepOutput(column=column)
        for row, active in enumerate(grid.column(column)):
            if active:
                output.frequencies.append(frequencies[row])
                output.sounding_rows.append(row)
            else:
                output.frequencies.append(SILENT_HZ)
        return output
