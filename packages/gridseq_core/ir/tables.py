"""Scale/tonic lookup tables for Gridseq."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from gridseq_core.constants.grid import GRID_ROWS
from gridseq_core.constants.tables import SCALE_INTERVALS, TONIC_FREQUENCIES
from gridseq_core.exceptions import ConfigurationError

OCTAVE_SEMITONES = 12


@dataclass(frozen=True)
class ScaleTables:
    """Tonic name -> base frequency, scale name -> semitone offsets.

    Passed to the engine at construction. Each scale must hold exactly
    one offset per grid row, ascending from 0 to 12.
    """

    tonics: Mapping[str, float] = field(default_factory=lambda: dict(TONIC_FREQUENCIES))
    scales: Mapping[str, tuple[int, ...]] = field(
        default_factory=lambda: dict(SCALE_INTERVALS)
    )

    def __post_init__(self) -> None:
        # Own read-only copies; later edits to the caller's dicts must not leak in
        object.__setattr__(self, "tonics", MappingProxyType(dict(self.tonics)))
        object.__setattr__(
            self,
            "scales",
            MappingProxyType({name: tuple(offsets) for name, offsets in self.scales.items()}),
        )
        self.validate()

    def __hash__(self) -> int:
        return hash((tuple(self.tonics.items()), tuple(self.scales.items())))

    def validate(self) -> None:
        """
        Check table shape.

        Raises:
            ConfigurationError: If a tonic frequency is not positive or a
                scale is not 8 ascending offsets spanning one octave
        """
        if not self.tonics:
            raise ConfigurationError("Tonic table is empty")
        if not self.scales:
            raise ConfigurationError("Scale table is empty")

        for name, hz in self.tonics.items():
            if hz <= 0:
                raise ConfigurationError(f"Tonic '{name}' has non-positive frequency {hz}")

        for name, offsets in self.scales.items():
            if len(offsets) != GRID_ROWS:
                raise ConfigurationError(
                    f"Scale '{name}' has {len(offsets)} offsets, expected {GRID_ROWS}"
                )
            if offsets[0] != 0 or offsets[-1] != OCTAVE_SEMITONES:
                raise ConfigurationError(
                    f"Scale '{name}' must span 0..{OCTAVE_SEMITONES} semitones"
                )
            if any(b <= a for a, b in zip(offsets, offsets[1:])):
                raise ConfigurationError(f"Scale '{name}' offsets must be ascending")

    def tonic_frequency(self, tonic: str) -> float:
        try:
            return self.tonics[tonic]
        except KeyError:
            raise ConfigurationError(f"Unknown tonic: {tonic!r}") from None

    def scale_intervals(self, scale: str) -> tuple[int, ...]:
        try:
            return tuple(self.scales[scale])
        except KeyError:
            raise ConfigurationError(f"Unknown scale: {scale!r}") from None

    @property
    def tonic_names(self) -> list[str]:
        return list(self.tonics)

    @property
    def scale_names(self) -> list[str]:
        return list(self.scales)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tonics": dict(self.tonics),
            "scales": {name: list(offsets) for name, offsets in self.scales.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScaleTables:
        """Create from dictionary (deserialization)."""
        return cls(
            tonics={k: float(v) for k, v in data.get("tonics", TONIC_FREQUENCIES).items()},
            scales={
                k: tuple(int(o) for o in v)
                for k, v in data.get("scales", SCALE_INTERVALS).items()
            },
        )
