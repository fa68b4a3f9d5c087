"""
Gridseq Loop Service

8x8 step sequencer engine driving continuously running tone voices.
"""

__version__ = "0.1.0"

from .engine import SequencerEngine
from .factory import create_sequencer_engine
from .protocols import AudioPipeline, CommandSource, StateSink, StepTimer, ToneVoice

__all__ = [
    "create_sequencer_engine",
    "SequencerEngine",
    "AudioPipeline",
    "ToneVoice",
    "StepTimer",
    "CommandSource",
    "StateSink",
]
