"""
Gridseq Loop Protocols

Abstract interfaces for testability via dependency injection.
Uses typing.Protocol for structural subtyping (duck typing).

IPC protocols are imported from gridseq_core for consistency.
"""

from gridseq_core.protocols import CommandSource, StateSink

from .output import AudioPipeline, ToneVoice
from .timer import ScheduledStep, StepTimer

__all__ = [
    "AudioPipeline",
    "ToneVoice",
    "ScheduledStep",
    "StepTimer",
    "CommandSource",
    "StateSink",
]
