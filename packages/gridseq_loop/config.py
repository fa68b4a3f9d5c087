"""Centralized configuration using Pydantic Settings

All environment variables (prefix GRIDSEQ_) are managed here.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gridseq_core.constants.grid import DEFAULT_BPM, RANDOMIZE_PROBABILITY, VOICE_GAIN
from gridseq_core.constants.tables import DEFAULT_SCALE, DEFAULT_TONIC


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="GRIDSEQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # scsynth (OSC) Configuration
    osc_host: str = "127.0.0.1"
    osc_port: int = 57110
    synthdef_prefix: str = "gridseq_"

    # Voice Configuration
    waveform: Literal["sine", "triangle", "square", "sawtooth"] = "triangle"
    voice_gain: float = Field(default=VOICE_GAIN, gt=0.0, le=1.0)

    # Sequencer Defaults
    default_bpm: float = Field(default=DEFAULT_BPM, gt=0, allow_inf_nan=False)
    default_tonic: str = DEFAULT_TONIC
    default_scale: str = DEFAULT_SCALE
    randomize_probability: float = Field(default=RANDOMIZE_PROBABILITY, ge=0.0, le=1.0)

    # Step timing: "rearm" (re-arm after each step) or "drift_corrected"
    timing_mode: Literal["rearm", "drift_corrected"] = "rearm"


def get_settings() -> Settings:
    """Load settings from the environment (and .env, if present)"""
    return Settings()
