"""
Gridseq Sequencer Engine

Main engine that orchestrates:
- Play/stop state machine and the column cursor
- Re-arming step timer (one step per column)
- Tone bank lifecycle (one voice per row, per session)
- Command handling from the presentation layer

Single-threaded: commands and steps all run on one asyncio event loop,
so a handler never interleaves with a step.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import random
import traceback
from collections.abc import Callable, Coroutine
from typing import Any

from pydantic import ValidationError

from gridseq_core.constants.grid import RANDOMIZE_PROBABILITY, VOICE_GAIN
from gridseq_core.constants.tables import DEFAULT_SCALE, DEFAULT_TONIC
from gridseq_core.exceptions import AudioUnavailableError
from gridseq_core.ir.frequency import FrequencyTable, resolve_frequencies
from gridseq_core.ir.tables import ScaleTables

from ..commands import (
    BpmCommand,
    ClearCommand,
    PlayCommand,
    RandomizeCommand,
    ScaleCommand,
    StopCommand,
    TogglePlaybackCommand,
    ToggleCellCommand,
    TonicCommand,
)
from ..protocols import AudioPipeline, CommandSource, ScheduledStep, StateSink, StepTimer
from ..result import CommandResult
from ..state import PlaybackState, RuntimeState
from .step_processor import StepProcessor
from .step_timer import AsyncioStepTimer, StepClock, TimingMode
from .tempo import TempoController
from .tone_bank import DEFAULT_WAVEFORM, ToneBank

logger = logging.getLogger(__name__)


class SequencerEngine:
    """
    Main engine for Gridseq.

    Owns the runtime state and is its only mutator. Delegates column
    sampling to StepProcessor, voice management to ToneBank and delay
    computation to StepClock.

    Dependencies are injected via constructor for testability.
    Use create_sequencer_engine() factory for production instances.
    """

    # Command loop backoff configuration (CPU optimization)
    COMMAND_POLL_MIN_INTERVAL: float = 0.001  # 1ms minimum (responsive)
    COMMAND_POLL_MAX_INTERVAL: float = 0.050  # 50ms maximum

    def __init__(
        self,
        pipeline: AudioPipeline,
        commands: CommandSource,
        publisher: StateSink,
        timer: StepTimer | None = None,
        tables: ScaleTables | None = None,
        bpm: float | None = None,
        tonic: str = DEFAULT_TONIC,
        scale: str = DEFAULT_SCALE,
        waveform: str = DEFAULT_WAVEFORM,
        voice_gain: float = VOICE_GAIN,
        randomize_probability: float = RANDOMIZE_PROBABILITY,
        timing_mode: TimingMode | str = TimingMode.REARM,
        rng: random.Random | None = None,
    ):
        """
        Initialize SequencerEngine with injected dependencies.

        Args:
            pipeline: Audio pipeline (ScsynthPipeline or mock); opened on first play
            commands: Command source (InProcessCommandSource or mock)
            publisher: State sink (InProcessStateSink or mock)
            timer: Step timer (default: AsyncioStepTimer on the running loop)
            tables: Tonic/scale tables (default: built-in tables)
            bpm: Initial tempo (default: 120)
            tonic: Initial tonic name
            scale: Initial scale name
            waveform: Voice waveform, fixed for the engine's lifetime
            voice_gain: Output gain per voice
            randomize_probability: Default per-cell probability for randomize
            timing_mode: "rearm" (default) or "drift_corrected"
            rng: Random source for randomize (default: module random)

        Raises:
            ConfigurationError: If tonic or scale is not in the tables
        """
        self._tables = tables or ScaleTables()

        # State: the only mutable sequencer state, owned here
        tempo = TempoController(bpm) if bpm is not None else TempoController()
        self.state = RuntimeState(tempo=tempo, tonic=tonic, scale=scale)
        self.state.frequencies = resolve_frequencies(tonic, scale, self._tables)

        # Output (injected); opened lazily on first play
        self._pipeline = pipeline
        self._pipeline_ready = False

        # IPC (injected)
        self._commands = commands
        self._publisher = publisher

        # Timing
        self._timer: StepTimer = timer or AsyncioStepTimer()
        self._step_clock = StepClock(timing_mode, now=self._timer.now)
        self._pending_step: ScheduledStep | None = None

        # Processors
        self._step_processor = StepProcessor()
        self._tone_bank: ToneBank | None = None

        # Voice configuration
        self._waveform = waveform
        self._voice_gain = voice_gain
        self._randomize_probability = randomize_probability
        self._rng = rng

        # Control flags
        self._running = False

    # ================================================================
    # Lifecycle
    # ================================================================

    def start(self) -> None:
        """Start the engine (connect IPC, register handlers)"""
        self._commands.connect()
        self._publisher.connect()
        self._register_handlers()
        logger.info("Sequencer engine started")

    def stop(self) -> None:
        """Stop the engine, releasing voices and closing the pipeline"""
        self._running = False

        if self.state.playback_state != PlaybackState.STOPPED:
            self._handle_stop({})

        if self._pipeline_ready:
            self._pipeline.close()
            self._pipeline_ready = False

        self._commands.disconnect()
        self._publisher.disconnect()

        logger.info("Sequencer engine stopped")

    def _register_handlers(self) -> None:
        """Register command handlers"""
        self._commands.register_handler("play", self._handle_play)
        self._commands.register_handler("stop", self._handle_stop)
        self._commands.register_handler("toggle_playback", self._handle_toggle_playback)
        self._commands.register_handler("clear", self._handle_clear)
        self._commands.register_handler("randomize", self._handle_randomize)
        self._commands.register_handler("toggle", self._handle_toggle)
        self._commands.register_handler("bpm", self._handle_bpm)
        self._commands.register_handler("tonic", self._handle_tonic)
        self._commands.register_handler("scale", self._handle_scale)

    # ================================================================
    # Session control (state machine)
    # ================================================================

    def _ensure_pipeline(self) -> None:
        """
        Open the audio pipeline once per engine lifetime.

        Raises:
            AudioUnavailableError: If the pipeline cannot be created
        """
        if self._pipeline_ready:
            return
        self._pipeline.open()
        self._pipeline_ready = True

    def _start_session(self) -> None:
        """
        Stopped -> Playing.

        Resolves the frequency table for the current key selection,
        builds a fresh tone bank and arms the first step with no delay.

        Raises:
            AudioUnavailableError: If the pipeline or a voice cannot be created
        """
        self._ensure_pipeline()

        # Frozen for the whole session
        frequencies = resolve_frequencies(self.state.tonic, self.state.scale, self._tables)

        bank = ToneBank(
            self._pipeline,
            voice_count=self.state.grid.rows,
            waveform=self._waveform,
            gain=self._voice_gain,
        )
        bank.create()

        self._tone_bank = bank
        self.state.frequencies = frequencies
        self.state.session += 1
        self.state.playhead.reset()
        self.state.playback_state = PlaybackState.PLAYING
        self._step_clock.start()

        logger.info(
            f"Playback started (session {self.state.session}, "
            f"{self.state.bpm:g} BPM, {self.state.tonic} {self.state.scale})"
        )

        # First column plays on the next loop iteration
        try:
            self._pending_step = self._timer.call_later(
                0.0, functools.partial(self._run_step, self.state.session)
            )
        except Exception:
            # Could not arm the step timer; do not leave voices running
            self._stop_session()
            raise

    def _stop_session(self) -> None:
        """
        Playing -> Stopped.

        The pending step is cancelled before the voices are released so
        no step can touch a released bank.
        """
        if self._pending_step is not None:
            self._pending_step.cancel()
            self._pending_step = None

        try:
            if self._tone_bank is not None:
                self._tone_bank.release()
        finally:
            self._tone_bank = None
            self.state.playhead.reset()
            self.state.playback_state = PlaybackState.STOPPED
            self._step_clock.reset()

        logger.info("Playback stopped, cursor reset")
        self._schedule_publish(self._publisher.send_playhead, None, [])

    def _run_step(self, session: int) -> None:
        """
        Play the current column, advance the cursor and re-arm.

        Args:
            session: Session number this step was armed for; a step from
                an earlier session does nothing
        """
        if not self.state.playing or session != self.state.session or self._tone_bank is None:
            logger.debug(f"Dropping stale step for session {session}")
            return

        self._pending_step = None
        interval = self.state.step_interval
        self._step_clock.mark_step(interval)

        column = self.state.current_column
        try:
            assert self.state.frequencies is not None
            output = self._step_processor.process_step(
                self.state.grid, column, self.state.frequencies
            )
        except Exception as e:
            logger.error(f"Step processing error: {e}\n{traceback.format_exc()}")
            self._schedule_publish(self._publisher.send_error, "STEP_ERROR", str(e))
        else:
            # One failing voice must not leave the other rows on stale pitches
            for row, frequency in enumerate(output.frequencies):
                try:
                    self._tone_bank.retune(row, frequency)
                except Exception as e:
                    logger.error(f"Retune error on row {row}: {e}\n{traceback.format_exc()}")
                    self._schedule_publish(
                        self._publisher.send_error, "STEP_ERROR", f"Row {row}: {e}"
                    )

            logger.debug(f"Step column={column} rows={output.sounding_rows}")
            self._schedule_publish(
                self._publisher.send_playhead, column, output.sounding_rows
            )

        self.state.playhead.advance(self.state.grid.cols)

        # Delay counts from the end of this step's work
        delay = self._step_clock.next_delay(interval)
        self._pending_step = self._timer.call_later(
            delay, functools.partial(self._run_step, session)
        )

    # ================================================================
    # Command Handlers
    # ================================================================

    def _handle_play(self, payload: dict[str, Any]) -> CommandResult:
        """Start playback from the first column"""
        try:
            # Validate payload with Pydantic
            PlayCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid play command: {e}")

        if self.state.playing:
            return CommandResult.ok("Already playing")

        try:
            self._start_session()
        except AudioUnavailableError as e:
            logger.error(f"Audio unavailable: {e}")
            self._schedule_publish(self._publisher.send_error, "AUDIO_UNAVAILABLE", str(e))
            return CommandResult.error(str(e), data={"code": "AUDIO_UNAVAILABLE"})

        self._schedule_status_update()
        return CommandResult.ok()

    def _handle_stop(self, payload: dict[str, Any]) -> CommandResult:
        """Stop playback, release voices and reset the cursor"""
        try:
            # Validate payload with Pydantic
            StopCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid stop command: {e}")

        if not self.state.playing:
            # Already stopped, do nothing
            return CommandResult.ok("Already stopped")

        self._stop_session()
        self._schedule_status_update()
        return CommandResult.ok()

    def _handle_toggle_playback(self, payload: dict[str, Any]) -> CommandResult:
        """Single play/stop button"""
        try:
            # Validate payload with Pydantic
            TogglePlaybackCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid toggle_playback command: {e}")

        if self.state.playing:
            return self._handle_stop({})
        return self._handle_play({})

    def _handle_clear(self, payload: dict[str, Any]) -> CommandResult:
        """Stop playback and deactivate every cell"""
        try:
            # Validate payload with Pydantic
            ClearCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid clear command: {e}")

        if self.state.playing:
            self._stop_session()

        self.state.grid.clear()
        logger.info("Grid cleared")

        self._schedule_grid_update()
        self._schedule_status_update()
        return CommandResult.ok()

    def _handle_randomize(self, payload: dict[str, Any]) -> CommandResult:
        """Activate each cell independently with a fixed probability"""
        try:
            # Validate payload with Pydantic
            cmd = RandomizeCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid randomize command: {e}")

        probability = (
            cmd.probability if cmd.probability is not None else self._randomize_probability
        )
        self.state.grid.randomize(probability, self._rng)
        logger.debug(
            f"Grid randomized (p={probability}): {self.state.grid.active_count} active cells"
        )

        self._schedule_grid_update()
        return CommandResult.ok(data={"active_count": self.state.grid.active_count})

    def _handle_toggle(self, payload: dict[str, Any]) -> CommandResult:
        """Flip one cell"""
        try:
            # Validate payload with Pydantic
            cmd = ToggleCellCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid toggle command: {e}")

        active = self.state.grid.toggle(cmd.row, cmd.col)
        logger.debug(f"Cell ({cmd.row}, {cmd.col}) active={active}")

        self._schedule_grid_update()
        return CommandResult.ok(data={"row": cmd.row, "col": cmd.col, "active": active})

    def _handle_bpm(self, payload: dict[str, Any]) -> CommandResult:
        """
        Change the tempo.

        While playing, the session is restarted: stop (cancel the pending
        step, release voices) then start with a fresh bank at column 0.
        An in-flight timer is never re-targeted to a new interval.
        """
        try:
            # Validate payload with Pydantic
            cmd = BpmCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid bpm command: {e}")

        old_bpm = self.state.bpm
        interval_ms = self.state.tempo.set_bpm(cmd.bpm)

        if self.state.playing:
            logger.info(f"BPM changed {old_bpm:g} → {cmd.bpm:g} during playback, restarting session")
            self._stop_session()
            try:
                self._start_session()
            except AudioUnavailableError as e:
                logger.error(f"Audio unavailable on restart: {e}")
                self._schedule_publish(self._publisher.send_error, "AUDIO_UNAVAILABLE", str(e))
                self._schedule_status_update()
                return CommandResult.error(str(e), data={"code": "AUDIO_UNAVAILABLE"})
        else:
            logger.debug(f"BPM changed to {cmd.bpm:g}")

        self._schedule_status_update()
        return CommandResult.ok(data={"step_interval_ms": interval_ms})

    def _handle_tonic(self, payload: dict[str, Any]) -> CommandResult:
        """Select the tonic (takes effect now if stopped, else at next play)"""
        try:
            # Validate payload with Pydantic
            cmd = TonicCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid tonic command: {e}")

        if cmd.tonic not in self._tables.tonics:
            return CommandResult.error(f"Unknown tonic: {cmd.tonic}")

        self.state.tonic = cmd.tonic
        return self._apply_key_selection()

    def _handle_scale(self, payload: dict[str, Any]) -> CommandResult:
        """Select the scale (takes effect now if stopped, else at next play)"""
        try:
            # Validate payload with Pydantic
            cmd = ScaleCommand(**payload)
        except ValidationError as e:
            return CommandResult.error(f"Invalid scale command: {e}")

        if cmd.scale not in self._tables.scales:
            return CommandResult.error(f"Unknown scale: {cmd.scale}")

        self.state.scale = cmd.scale
        return self._apply_key_selection()

    def _apply_key_selection(self) -> CommandResult:
        """Re-resolve frequencies unless a session is in flight."""
        if self.state.playing:
            logger.debug(
                f"Key {self.state.tonic} {self.state.scale} deferred until next play"
            )
            self._schedule_status_update()
            return CommandResult.ok("Key change deferred until playback stops")

        self.state.frequencies = resolve_frequencies(
            self.state.tonic, self.state.scale, self._tables
        )
        logger.debug(f"Key set to {self.state.tonic} {self.state.scale}")
        self._schedule_status_update()
        return CommandResult.ok()

    # ================================================================
    # Public API Methods
    # ================================================================

    def play(self) -> CommandResult:
        """
        Public API: Start playback.

        Returns:
            CommandResult; an error result carries code AUDIO_UNAVAILABLE
            when the audio pipeline cannot be created
        """
        return self._handle_play({})

    def stop_playback(self) -> CommandResult:
        """Public API: Stop playback and reset the cursor."""
        return self._handle_stop({})

    def toggle_playback(self) -> CommandResult:
        """Public API: Play if stopped, stop if playing."""
        return self._handle_toggle_playback({})

    def clear(self) -> CommandResult:
        """Public API: Stop playback and clear the grid."""
        return self._handle_clear({})

    def randomize(self, probability: float | None = None) -> CommandResult:
        """
        Public API: Randomize the grid.

        Args:
            probability: Per-cell activation probability (default: configured)
        """
        return self._handle_randomize({"probability": probability})

    def toggle_cell(self, row: int, col: int) -> CommandResult:
        """Public API: Flip one cell."""
        return self._handle_toggle({"row": row, "col": col})

    def set_bpm(self, bpm: float) -> CommandResult:
        """
        Public API: Change the BPM.

        Args:
            bpm: Beats per minute (must be positive)
        """
        return self._handle_bpm({"bpm": bpm})

    def set_tonic(self, tonic: str) -> CommandResult:
        """Public API: Select the tonic."""
        return self._handle_tonic({"tonic": tonic})

    def set_scale(self, scale: str) -> CommandResult:
        """Public API: Select the scale."""
        return self._handle_scale({"scale": scale})

    # ================================================================
    # Main Loop
    # ================================================================

    async def run(self) -> None:
        """Run the command loop until stop() is called"""
        self._running = True
        self._schedule_status_update()
        await self._command_loop()

    async def _command_loop(self) -> None:
        """
        Process incoming commands with exponential backoff.

        - Starts at COMMAND_POLL_MIN_INTERVAL sleep
        - Doubles on each idle iteration (no commands)
        - Caps at COMMAND_POLL_MAX_INTERVAL
        - Resets to minimum when commands are received
        """
        backoff = self.COMMAND_POLL_MIN_INTERVAL

        while self._running:
            try:
                processed = await self._commands.process_commands()
                if processed > 0:
                    backoff = self.COMMAND_POLL_MIN_INTERVAL
                else:
                    backoff = min(self.COMMAND_POLL_MAX_INTERVAL, backoff * 2)
            except Exception as e:
                logger.error(f"Command processing error: {e}\n{traceback.format_exc()}")
            await asyncio.sleep(backoff)

    # ================================================================
    # Status
    # ================================================================

    def _schedule_publish(
        self,
        method: Callable[..., Coroutine[Any, Any, None]],
        *args: Any,
    ) -> None:
        """Schedule a publisher call if an event loop is running."""
        try:
            loop = asyncio.get_running_loop()
            loop.create_task(method(*args))
        except RuntimeError:
            # No running event loop (e.g., in tests), skip
            pass

    def _schedule_status_update(self) -> None:
        self._schedule_publish(self._publisher.send_status, self.state.to_status_dict())

    def _schedule_grid_update(self) -> None:
        self._schedule_publish(self._publisher.send_grid, self.state.grid.to_rows())

    def get_drift_stats(self) -> dict[str, float | int | str]:
        """Get step timing statistics for monitoring."""
        return self._step_clock.get_drift_stats()

    # ================================================================
    # Properties
    # ================================================================

    @property
    def is_playing(self) -> bool:
        return self.state.playing

    @property
    def controls_enabled(self) -> bool:
        return self.state.controls_enabled

    @property
    def live_voice_count(self) -> int:
        """Live voices: 0 when stopped, one per row when playing."""
        return self._tone_bank.live_count if self._tone_bank is not None else 0

    @property
    def tone_bank(self) -> ToneBank | None:
        return self._tone_bank

    @property
    def frequencies(self) -> FrequencyTable | None:
        """Frequency table in use (frozen while playing)."""
        return self.state.frequencies

    @property
    def tables(self) -> ScaleTables:
        return self._tables

    @property
    def pipeline(self) -> AudioPipeline:
        return self._pipeline

    @property
    def commands(self) -> CommandSource:
        return self._commands

    @property
    def publisher(self) -> StateSink:
        return self._publisher
