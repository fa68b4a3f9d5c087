"""
Tone Bank

One continuously running voice per grid row for a single playback
session. Voices are retuned each step instead of being started and
stopped per note, which keeps the output free of clicks.

A bank is single-use: create() once, release() once. A new session
builds a new bank because a released pipeline voice cannot be restarted.
"""

from __future__ import annotations

import logging

from gridseq_core.constants.grid import GRID_ROWS, VOICE_GAIN
from gridseq_core.exceptions import GridseqError, ToneBankReleasedError

from ..protocols import AudioPipeline, ToneVoice

logger = logging.getLogger(__name__)

DEFAULT_WAVEFORM = "triangle"


class ToneBank:
    """
    Owns the voices of one playback session.

    Live voice count is always 0 or exactly voice_count.
    """

    def __init__(
        self,
        pipeline: AudioPipeline,
        voice_count: int = GRID_ROWS,
        waveform: str = DEFAULT_WAVEFORM,
        gain: float = VOICE_GAIN,
    ):
        self._pipeline = pipeline
        self._voice_count = voice_count
        self._waveform = waveform
        self._gain = gain

        self._voices: list[ToneVoice] = []
        self._created = False
        self._released = False

    def create(self) -> None:
        """
        Create every voice, all or nothing.

        If any voice fails, the ones already created are released and
        the error propagates.

        Raises:
            GridseqError: If the bank was already created
        """
        if self._created:
            raise GridseqError("Tone bank already created; build a new bank per session")
        self._created = True

        voices: list[ToneVoice] = []
        try:
            for _ in range(self._voice_count):
                voices.append(self._pipeline.create_voice(self._waveform, self._gain))
        except Exception:
            logger.error(
                f"Tone bank creation failed after {len(voices)}/{self._voice_count} voices, "
                "releasing partial bank"
            )
            for index, voice in enumerate(voices):
                try:
                    voice.release()
                except Exception as e:
                    logger.error(f"Failed to release voice {index} during rollback: {e}")
            self._released = True
            raise

        self._voices = voices
        logger.debug(f"Tone bank created: {self._voice_count} {self._waveform} voices")

    def retune(self, row: int, frequency_hz: float, at_time: float | None = None) -> bool:
        """
        Retune one row's voice.

        Args:
            row: Voice index (grid row)
            frequency_hz: Target frequency, 0 for silence
            at_time: Optional pipeline time for the change

        Returns:
            True if the change was sent successfully

        Raises:
            ToneBankReleasedError: If the bank is not live
        """
        if not self.is_live:
            raise ToneBankReleasedError(f"Cannot retune row {row}: tone bank is not live")
        return self._voices[row].set_frequency(frequency_hz, at_time)

    def release(self) -> None:
        """
        Release every voice. Idempotent.

        A voice that fails to release is logged and the remaining voices
        are still released.
        """
        if self._released:
            return
        self._released = True

        for index, voice in enumerate(self._voices):
            try:
                voice.release()
            except Exception as e:
                logger.error(f"Failed to release voice {index}: {e}")

        released = len(self._voices)
        self._voices = []
        logger.debug(f"Tone bank released ({released} voices)")

    @property
    def is_live(self) -> bool:
        return self._created and not self._released

    @property
    def live_count(self) -> int:
        return len(self._voices) if self.is_live else 0

    @property
    def voices(self) -> list[ToneVoice]:
        return list(self._voices)

    @property
    def frequencies(self) -> list[float]:
        """Current frequency of each live voice."""
        return [voice.frequency for voice in self._voices]
