"""
Frequency resolution for Gridseq.

Turns a (tonic, scale) selection into one frequency per grid row.
Row 0 sits at the top of the grid, so the table runs from the highest
scale degree down to the tonic.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .tables import OCTAVE_SEMITONES, ScaleTables


@dataclass(frozen=True)
class FrequencyTable:
    """Per-row frequencies in Hz (index 0 = highest pitch)."""

    tonic: str
    scale: str
    frequencies: tuple[float, ...]

    def __getitem__(self, row: int) -> float:
        return self.frequencies[row]

    def __len__(self) -> int:
        return len(self.frequencies)

    def __iter__(self) -> Iterator[float]:
        return iter(self.frequencies)

    def to_dict(self) -> dict[str, object]:
        return {
            "tonic": self.tonic,
            "scale": self.scale,
            "frequencies": list(self.frequencies),
        }


def resolve_frequencies(
    tonic: str,
    scale: str,
    tables: ScaleTables | None = None,
) -> FrequencyTable:
    """
    Resolve row frequencies for a tonic and scale.

    Each offset ``o`` yields ``tonic_hz * 2 ** (o / 12)``; the resulting
    sequence is reversed so the highest degree maps to row 0.

    Args:
        tonic: Tonic name (key of the tonic table)
        scale: Scale name (key of the scale table)
        tables: Lookup tables (default: built-in 12 tonics / 7 scales)

    Returns:
        FrequencyTable with one frequency per row, strictly descending

    Raises:
        ConfigurationError: If tonic or scale is not in the tables

    Example:
        >>> resolve_frequencies("A", "Minor").frequencies[-1]
        440.0
    """
    tables = tables or ScaleTables()
    tonic_hz = tables.tonic_frequency(tonic)
    offsets = tables.scale_intervals(scale)

    ascending = [tonic_hz * 2 ** (offset / OCTAVE_SEMITONES) for offset in offsets]
    return FrequencyTable(
        tonic=tonic,
        scale=scale,
        frequencies=tuple(reversed(ascending)),
    )
