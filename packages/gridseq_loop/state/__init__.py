"""Gridseq Loop State Management"""

from .runtime_state import PlaybackState, Playhead, RuntimeState

__all__ = [
    "RuntimeState",
    "Playhead",
    "PlaybackState",
]
