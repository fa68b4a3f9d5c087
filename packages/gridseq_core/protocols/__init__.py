"""
Protocol interfaces for gridseq_core.

This module exports protocol definitions for IPC communication
(CommandSource, StateSink).
"""

from gridseq_core.protocols.ipc import CommandSource, StateSink

__all__ = [
    "CommandSource",
    "StateSink",
]
