"""Gridseq Loop Output Adapters"""

from .scsynth_sender import WAVEFORMS, ScsynthPipeline, ScsynthVoice

__all__ = ["ScsynthPipeline", "ScsynthVoice", "WAVEFORMS"]
