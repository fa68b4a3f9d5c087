"""
Gridseq Loop Factory

Factory functions for creating production SequencerEngine instances.
Separates object creation from business logic (DI pattern).
"""

from __future__ import annotations

import random
from typing import cast

from gridseq_core.ir.tables import ScaleTables
from gridseq_core.protocols.ipc import CommandSource, StateSink

from .config import Settings
from .engine import SequencerEngine
from .ipc import InProcessStateSink, NoopCommandSource
from .output import ScsynthPipeline


def create_sequencer_engine(
    settings: Settings | None = None,
    command_source: CommandSource | None = None,
    state_sink: StateSink | None = None,
    tables: ScaleTables | None = None,
    rng: random.Random | None = None,
) -> SequencerEngine:
    """
    Create a production SequencerEngine with a scsynth audio pipeline.

    Args:
        settings: Configuration (default: loaded from environment)
        command_source: CommandSource implementation (default: NoopCommandSource)
        state_sink: StateSink implementation (default: InProcessStateSink)
        tables: Tonic/scale tables (default: built-in tables)
        rng: Random source for randomize

    Returns:
        Configured SequencerEngine instance
    """
    settings = settings or Settings()

    pipeline = ScsynthPipeline(
        host=settings.osc_host,
        port=settings.osc_port,
        synthdef_prefix=settings.synthdef_prefix,
    )
    commands = cast(
        CommandSource,
        command_source if command_source is not None else NoopCommandSource()
    )
    publisher = cast(
        StateSink,
        state_sink if state_sink is not None else InProcessStateSink()
    )

    return SequencerEngine(
        pipeline=pipeline,
        commands=commands,
        publisher=publisher,
        tables=tables,
        bpm=settings.default_bpm,
        tonic=settings.default_tonic,
        scale=settings.default_scale,
        waveform=settings.waveform,
        voice_gain=settings.voice_gain,
        randomize_probability=settings.randomize_probability,
        timing_mode=settings.timing_mode,
        rng=rng,
    )
