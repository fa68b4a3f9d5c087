"""
Tempo Controller

Converts the user-facing BPM into the step interval.

The grid advances two columns per beat (an eighth-note grid against a
quarter-note BPM), so one step lasts half a beat:
    step_interval_ms = (60 / bpm) * 500
"""

from __future__ import annotations

import logging

from gridseq_core.constants.grid import DEFAULT_BPM

logger = logging.getLogger(__name__)

# Half of the 1000 ms in a beat-length second
STEP_INTERVAL_FACTOR_MS: float = 500.0


def bpm_to_step_interval_ms(bpm: float) -> float:
    """Step interval in milliseconds for a BPM (no validation)."""
    return (60.0 / bpm) * STEP_INTERVAL_FACTOR_MS


class TempoController:
    """Holds the current BPM and its derived step interval."""

    def __init__(self, bpm: float = DEFAULT_BPM):
        self._bpm = float(bpm)
        self._step_interval_ms = bpm_to_step_interval_ms(self._bpm)

    def set_bpm(self, bpm: float) -> float:
        """
        Change the tempo.

        Args:
            bpm: Beats per minute (positive; range enforced by the
                command layer)

        Returns:
            New step interval in milliseconds
        """
        self._bpm = float(bpm)
        self._step_interval_ms = bpm_to_step_interval_ms(self._bpm)
        logger.debug(f"BPM set to {self._bpm} (step interval {self._step_interval_ms:.1f}ms)")
        return self._step_interval_ms

    @property
    def bpm(self) -> float:
        return self._bpm

    @property
    def step_interval_ms(self) -> float:
        return self._step_interval_ms

    @property
    def step_interval(self) -> float:
        """Step interval in seconds (timer units)."""
        return self._step_interval_ms / 1000.0
