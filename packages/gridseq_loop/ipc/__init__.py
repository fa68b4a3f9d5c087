"""Gridseq Loop IPC: in-process implementations."""

from .in_process import InProcessCommandSource, InProcessStateSink, NoopCommandSource

__all__ = ["InProcessCommandSource", "NoopCommandSource", "InProcessStateSink"]
