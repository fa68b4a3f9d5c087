"""IR models for Gridseq."""

from .frequency import FrequencyTable, resolve_frequencies
from .grid import Grid
from .tables import ScaleTables

__all__ = [
    "FrequencyTable",
    "Grid",
    "ScaleTables",
    "resolve_frequencies",
]
