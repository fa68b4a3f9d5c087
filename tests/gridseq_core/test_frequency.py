"""
Tests for frequency resolution.
"""

from __future__ import annotations

import itertools

import pytest

from gridseq_core.constants.tables import SCALE_INTERVALS, TONIC_FREQUENCIES
from gridseq_core.exceptions import ConfigurationError
from gridseq_core.ir.frequency import FrequencyTable, resolve_frequencies
from gridseq_core.ir.tables import ScaleTables


class TestResolveFrequencies:
    """Test resolve_frequencies()"""

    def test_c_major(self):
        table = resolve_frequencies("C", "Major")

        expected = [523.26, 493.88, 440.00, 392.00, 349.23, 329.63, 293.66, 261.63]
        assert list(table) == pytest.approx(expected, abs=0.02)

    def test_top_row_is_octave_above_tonic(self):
        table = resolve_frequencies("A", "Minor")

        assert table[0] == pytest.approx(880.0)
        assert table[7] == pytest.approx(440.0)

    @pytest.mark.parametrize(
        ("tonic", "scale"),
        list(itertools.product(TONIC_FREQUENCIES, SCALE_INTERVALS)),
    )
    def test_eight_positive_strictly_descending(self, tonic: str, scale: str):
        table = resolve_frequencies(tonic, scale)

        assert len(table) == 8
        assert all(hz > 0 for hz in table)
        assert all(a > b for a, b in zip(table, list(table)[1:]))

    def test_table_records_key(self):
        table = resolve_frequencies("F#", "Dorian")

        assert table.tonic == "F#"
        assert table.scale == "Dorian"
        assert table.to_dict()["frequencies"] == list(table.frequencies)

    def test_unknown_tonic(self):
        with pytest.raises(ConfigurationError, match="Unknown tonic"):
            resolve_frequencies("H", "Major")

    def test_unknown_scale(self):
        with pytest.raises(ConfigurationError, match="Unknown scale"):
            resolve_frequencies("C", "Blues")

    def test_configuration_error_is_key_error(self):
        with pytest.raises(KeyError):
            resolve_frequencies("C", "Blues")

    def test_custom_tables(self):
        tables = ScaleTables(
            tonics={"X": 100.0},
            scales={"Even": (0, 2, 4, 6, 8, 9, 10, 12)},
        )

        table = resolve_frequencies("X", "Even", tables)

        assert table[0] == pytest.approx(200.0)
        assert table[7] == pytest.approx(100.0)

    def test_frequency_table_is_immutable(self):
        table = resolve_frequencies("C", "Major")

        with pytest.raises(AttributeError):
            table.tonic = "D"  # type: ignore[misc]
        assert isinstance(table, FrequencyTable)
