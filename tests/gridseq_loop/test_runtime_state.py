"""
Tests for RuntimeState and StepProcessor
"""

import pytest

from gridseq_core.ir.frequency import resolve_frequencies
from gridseq_core.ir.grid import Grid
from gridseq_loop.engine.step_processor import SILENT_HZ, StepProcessor
from gridseq_loop.engine.tempo import TempoController
from gridseq_loop.state import PlaybackState, Playhead, RuntimeState


class TestPlayhead:
    def test_advance_wraps(self):
        playhead = Playhead(column=7)

        playhead.advance(8)

        assert playhead.column == 0

    def test_reset(self):
        playhead = Playhead(column=5)
        playhead.reset()
        assert playhead.column == 0


class TestRuntimeState:
    def test_defaults(self):
        state = RuntimeState()

        assert state.playback_state == PlaybackState.STOPPED
        assert not state.playing
        assert state.controls_enabled
        assert state.current_column == 0
        assert state.session == 0

    def test_controls_locked_while_playing(self):
        state = RuntimeState(playback_state=PlaybackState.PLAYING)

        assert state.playing
        assert not state.controls_enabled

    def test_tempo_passthrough(self):
        state = RuntimeState(tempo=TempoController(60))

        assert state.bpm == 60
        assert state.step_interval_ms == pytest.approx(500.0)
        assert state.step_interval == pytest.approx(0.5)

    def test_status_dict(self):
        state = RuntimeState(tonic="D", scale="Dorian")
        state.frequencies = resolve_frequencies("D", "Dorian")

        status = state.to_status_dict()

        assert status["transport"] == "stopped"
        assert status["bpm"] == 120.0
        assert status["step_interval_ms"] == pytest.approx(250.0)
        assert status["tonic"] == "D"
        assert status["scale"] == "Dorian"
        assert len(status["frequencies"]) == 8
        assert status["controls_enabled"] is True


class TestStepProcessor:
    def test_active_rows_get_table_frequency(self):
        grid = Grid()
        grid.set(1, 3, True)
        grid.set(6, 3, True)
        freqs = resolve_frequencies("C", "Major")

        output = StepProcessor().process_step(grid, 3, freqs)

        assert output.column == 3
        assert output.sounding_rows == [1, 6]
        assert output.frequencies[1] == freqs[1]
        assert output.frequencies[6] == freqs[6]
        assert [output.frequencies[r] for r in (0, 2, 3, 4, 5, 7)] == [SILENT_HZ] * 6

    def test_empty_column_is_silent(self):
        output = StepProcessor().process_step(Grid(), 0, resolve_frequencies("C", "Major"))

        assert output.frequencies == [0.0] * 8
        assert output.sounding_rows == []

    def test_grid_not_modified(self):
        grid = Grid()
        grid.set(0, 0, True)

        StepProcessor().process_step(grid, 0, resolve_frequencies("C", "Major"))

        assert grid.active_count == 1
