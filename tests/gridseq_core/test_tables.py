"""
Tests for ScaleTables.
"""

import pytest

from gridseq_core.exceptions import ConfigurationError
from gridseq_core.ir.tables import ScaleTables


class TestDefaultTables:
    def test_twelve_tonics(self):
        tables = ScaleTables()
        assert len(tables.tonic_names) == 12
        assert tables.tonic_frequency("A") == 440.0

    def test_seven_scales(self):
        tables = ScaleTables()
        assert tables.scale_names == [
            "Major", "Minor", "Lydian", "Mixolydian", "Dorian", "Phrygian", "Locrian",
        ]

    def test_every_scale_spans_one_octave(self):
        for offsets in ScaleTables().scales.values():
            assert len(offsets) == 8
            assert offsets[0] == 0
            assert offsets[-1] == 12


class TestValidation:
    def test_wrong_length(self):
        with pytest.raises(ConfigurationError, match="expected 8"):
            ScaleTables(scales={"Short": (0, 2, 4, 12)})

    def test_not_one_octave(self):
        with pytest.raises(ConfigurationError, match="span"):
            ScaleTables(scales={"Wide": (0, 2, 4, 5, 7, 9, 11, 14)})

    def test_not_ascending(self):
        with pytest.raises(ConfigurationError, match="ascending"):
            ScaleTables(scales={"Bad": (0, 4, 2, 5, 7, 9, 11, 12)})

    def test_non_positive_tonic(self):
        with pytest.raises(ConfigurationError, match="non-positive"):
            ScaleTables(tonics={"Z": 0.0})

    def test_empty_tables(self):
        with pytest.raises(ConfigurationError):
            ScaleTables(tonics={})


class TestSerialization:
    def test_round_trip_preserves_tables(self):
        tables = ScaleTables()

        restored = ScaleTables.from_dict(tables.to_dict())

        assert restored.tonics == tables.tonics
        assert restored.scales == tables.scales

    def test_from_dict_defaults_missing_sections(self):
        tables = ScaleTables.from_dict({"tonics": {"C": 261.63}})

        assert tables.tonic_names == ["C"]
        assert len(tables.scale_names) == 7


class TestImmutability:
    def test_caller_dict_edits_do_not_leak_in(self):
        tonics = {"C": 261.63}
        tables = ScaleTables(tonics=tonics)

        tonics["C"] = -1.0
        tonics["X"] = 100.0

        assert tables.tonic_frequency("C") == 261.63
        assert tables.tonic_names == ["C"]

    def test_tables_are_read_only(self):
        tables = ScaleTables()

        with pytest.raises(TypeError):
            tables.tonics["C"] = 0.0  # type: ignore[index]

    def test_hashable_and_equal_by_value(self):
        assert hash(ScaleTables()) == hash(ScaleTables())
        assert ScaleTables() == ScaleTables()
        assert ScaleTables() != ScaleTables(tonics={"A": 440.0})
