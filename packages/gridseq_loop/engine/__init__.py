"""Gridseq Sequencer Engine"""

from .step_processor import StepOutput, StepProcessor
from .step_timer import AsyncioStepTimer, StepClock, TimingMode
from .tempo import TempoController, bpm_to_step_interval_ms
from .tone_bank import ToneBank
from .sequencer_engine import SequencerEngine

__all__ = [
    "SequencerEngine",
    "StepOutput",
    "StepProcessor",
    "AsyncioStepTimer",
    "StepClock",
    "TimingMode",
    "TempoController",
    "bpm_to_step_interval_ms",
    "ToneBank",
]
