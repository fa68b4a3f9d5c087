"""
Audio Output Protocols for gridseq_loop.

The tone bank only needs three capabilities from the platform:
create a continuously running voice, retune it, release it.

Implementations:
    - ScsynthPipeline / ScsynthVoice: SuperCollider server over OSC
    - MockAudioPipeline / MockToneVoice: Test doubles for unit tests
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = [
    "AudioPipeline",
    "ToneVoice",
]


@runtime_checkable
class ToneVoice(Protocol):
    """
    One continuously running tone generator.

    A voice starts sounding (at 0 Hz, i.e. silent) as soon as it is
    created and is retuned in place; it is never stopped and restarted.
    """

    def set_frequency(self, frequency_hz: float, at_time: float | None = None) -> bool:
        """
        Change the output frequency without a stop/start cycle.

        Args:
            frequency_hz: Target frequency, 0 for silence
            at_time: Wall-clock time (seconds since epoch) to apply the
                change, or None for immediately

        Returns:
            True if the change was sent successfully
        """
        ...

    def release(self) -> None:
        """
        Stop sound production and free the voice.

        Raises:
            AudioUnavailableError: If the voice could not be freed; it
                stays unreleased so the call can be repeated
        """
        ...

    @property
    def frequency(self) -> float:
        """Last frequency requested."""
        ...

    @property
    def is_released(self) -> bool:
        """Whether release() has been called."""
        ...


@runtime_checkable
class AudioPipeline(Protocol):
    """
    Process-wide audio pipeline.

    Opened once on the first play and kept for the life of the engine;
    it is never reopened after a playback session ends.
    """

    def open(self) -> None:
        """
        Create the pipeline.

        Raises:
            AudioUnavailableError: If the platform cannot provide audio
        """
        ...

    def close(self) -> None:
        """Tear down the pipeline."""
        ...

    def create_voice(self, waveform: str, gain: float) -> ToneVoice:
        """Create a voice already running at 0 Hz with a fixed gain."""
        ...

    @property
    def is_open(self) -> bool:
        """Whether open() succeeded and close() has not been called."""
        ...
