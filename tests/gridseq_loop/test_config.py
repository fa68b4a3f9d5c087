"""Tests for Settings, the engine factory and the service entry point."""

import pytest
from pydantic import ValidationError

from gridseq_loop.config import Settings, get_settings
from gridseq_loop.engine.step_timer import TimingMode
from gridseq_loop.factory import create_sequencer_engine
from gridseq_loop.ipc import InProcessStateSink, NoopCommandSource
from gridseq_loop.main import build_settings, parse_args
from gridseq_loop.output import ScsynthPipeline


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GRIDSEQ_OSC_HOST",
        "GRIDSEQ_OSC_PORT",
        "GRIDSEQ_DEFAULT_BPM",
        "GRIDSEQ_DEFAULT_TONIC",
        "GRIDSEQ_TIMING_MODE",
        "GRIDSEQ_WAVEFORM",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = get_settings()

        assert settings.osc_host == "127.0.0.1"
        assert settings.osc_port == 57110
        assert settings.waveform == "triangle"
        assert settings.voice_gain == pytest.approx(0.1)
        assert settings.default_bpm == 120.0
        assert settings.default_tonic == "C"
        assert settings.default_scale == "Major"
        assert settings.randomize_probability == pytest.approx(0.15)
        assert settings.timing_mode == "rearm"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("GRIDSEQ_OSC_PORT", "57120")
        monkeypatch.setenv("GRIDSEQ_DEFAULT_BPM", "90")
        monkeypatch.setenv("GRIDSEQ_TIMING_MODE", "drift_corrected")

        settings = Settings()

        assert settings.osc_port == 57120
        assert settings.default_bpm == 90.0
        assert settings.timing_mode == "drift_corrected"

    def test_invalid_waveform(self, monkeypatch):
        monkeypatch.setenv("GRIDSEQ_WAVEFORM", "noise")

        with pytest.raises(ValidationError):
            Settings()

    def test_non_positive_bpm(self):
        with pytest.raises(ValidationError):
            Settings(default_bpm=0)


class TestFactory:
    def test_create_engine_from_settings(self):
        settings = Settings(default_bpm=60, default_tonic="G", timing_mode="drift_corrected")

        engine = create_sequencer_engine(settings)

        assert isinstance(engine.pipeline, ScsynthPipeline)
        assert isinstance(engine.commands, NoopCommandSource)
        assert isinstance(engine.publisher, InProcessStateSink)
        assert engine.state.step_interval_ms == pytest.approx(500.0)
        assert engine.frequencies.tonic == "G"
        assert engine.get_drift_stats()["mode"] == TimingMode.DRIFT_CORRECTED.value
        assert not engine.pipeline.is_open


class TestMain:
    def test_cli_overrides_settings(self, monkeypatch):
        monkeypatch.setenv("GRIDSEQ_OSC_HOST", "10.0.0.5")

        settings = build_settings(parse_args(["--bpm", "140", "--scale", "Dorian"]))

        assert settings.osc_host == "10.0.0.5"
        assert settings.default_bpm == 140.0
        assert settings.default_scale == "Dorian"
        assert settings.default_tonic == "C"

    def test_timing_mode_choices(self):
        with pytest.raises(SystemExit):
            parse_args(["--timing-mode", "sloppy"])
