"""
Gridseq Core

Pure data and contracts for the grid step sequencer:
scale tables, frequency resolution, grid state and IPC protocols.
"""

__version__ = "0.1.0"
