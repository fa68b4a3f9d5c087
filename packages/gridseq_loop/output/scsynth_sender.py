"""
Gridseq scsynth Output

Drives a SuperCollider server (scsynth) over OSC. Each voice is one
synth node that runs for the whole playback session; retuning sets its
``freq`` control, releasing frees the node.

The server must have one SynthDef per waveform, named
``<synthdef_prefix><waveform>`` with ``freq`` and ``amp`` controls, e.g.:

    SynthDef(\\gridseq_triangle, { |freq = 0, amp = 0.1|
        Out.ar(0, LFTri.ar(freq) * amp ! 2)
    }).add;
"""

from __future__ import annotations

import itertools
import logging
from typing import Any

from pythonosc import osc_bundle_builder, osc_message_builder, udp_client

from gridseq_core.exceptions import AudioUnavailableError, ConfigurationError

logger = logging.getLogger(__name__)

WAVEFORMS: tuple[str, ...] = ("sine", "triangle", "square", "sawtooth")


class ScsynthVoice:
    """One running synth node"""

    def __init__(self, pipeline: ScsynthPipeline, node_id: int, waveform: str, gain: float):
        self._pipeline = pipeline
        self._node_id = node_id
        self._waveform = waveform
        self._gain = gain
        self._frequency = 0.0
        self._released = False

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def frequency(self) -> float:
        return self._frequency

    @property
    def is_released(self) -> bool:
        return self._released

    def set_frequency(self, frequency_hz: float, at_time: float | None = None) -> bool:
        """Set the node's freq control (/n_set)"""
        if self._released:
            logger.warning(f"Ignoring retune of released node {self._node_id}")
            return False
        self._frequency = float(frequency_hz)
        return self._pipeline.send(
            "/n_set", [self._node_id, "freq", self._frequency], at_time=at_time
        )

    def release(self) -> None:
        """
        Free the node (/n_free). Idempotent once it succeeds.

        Raises:
            AudioUnavailableError: If /n_free could not be sent; the voice
                stays unreleased so release() can be called again
        """
        if self._released:
            return
        if not self._pipeline.send("/n_free", [self._node_id]):
            logger.error(f"Failed to free node {self._node_id}, it may still be sounding")
            raise AudioUnavailableError(f"Failed to free synth node {self._node_id}")
        self._released = True

    def __repr__(self) -> str:
        return (
            f"ScsynthVoice(node_id={self._node_id}, waveform={self._waveform!r}, "
            f"freq={self._frequency})"
        )


class ScsynthPipeline:
    """AudioPipeline implementation for a SuperCollider server"""

    DEFAULT_HOST = "127.0.0.1"
    DEFAULT_PORT = 57110  # scsynth default UDP port
    DEFAULT_SYNTHDEF_PREFIX = "gridseq_"
    DEFAULT_GROUP = 1  # default group created by the server
    ADD_TO_HEAD = 0
    FIRST_NODE_ID = 1000

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        synthdef_prefix: str = DEFAULT_SYNTHDEF_PREFIX,
    ):
        self._host = host
        self._port = port
        self._synthdef_prefix = synthdef_prefix
        self._client: udp_client.SimpleUDPClient | None = None
        self._node_ids = itertools.count(self.FIRST_NODE_ID)

    def open(self) -> None:
        """
        Initialize OSC client

        Raises:
            AudioUnavailableError: If the server address cannot be used
        """
        try:
            self._client = udp_client.SimpleUDPClient(self._host, self._port)
        except OSError as e:
            raise AudioUnavailableError(
                f"Cannot open scsynth connection to {self._host}:{self._port}: {e}"
            ) from e
        logger.info(f"scsynth pipeline opened at {self._host}:{self._port}")

    def close(self) -> None:
        """Close OSC client"""
        self._client = None
        logger.info("scsynth pipeline closed")

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def synthdef_name(self, waveform: str) -> str:
        if waveform not in WAVEFORMS:
            raise ConfigurationError(
                f"Unknown waveform: {waveform!r} (expected one of {', '.join(WAVEFORMS)})"
            )
        return f"{self._synthdef_prefix}{waveform}"

    def create_voice(self, waveform: str, gain: float) -> ScsynthVoice:
        """
        Start a silent synth node (/s_new at freq 0).

        Raises:
            AudioUnavailableError: If the pipeline is closed or the node
                could not be created
        """
        if not self._client:
            raise AudioUnavailableError("scsynth pipeline is not open")

        node_id = next(self._node_ids)
        created = self.send(
            "/s_new",
            [
                self.synthdef_name(waveform),
                node_id,
                self.ADD_TO_HEAD,
                self.DEFAULT_GROUP,
                "freq",
                0.0,
                "amp",
                float(gain),
            ],
        )
        if not created:
            raise AudioUnavailableError(f"Failed to create synth node {node_id}")

        logger.debug(f"Created {waveform} node {node_id}")
        return ScsynthVoice(self, node_id, waveform, gain)

    def send(self, address: str, args: list[Any], at_time: float | None = None) -> bool:
        """
        Send an OSC message, time-tagged in a bundle when at_time is given.

        Returns:
            True if sent successfully
        """
        if not self._client:
            logger.warning("scsynth pipeline not open")
            return False

        try:
            if at_time is None:
                self._client.send_message(address, args)
            else:
                self._client.send(self._build_bundle(address, args, at_time))
            return True
        except Exception as e:
            logger.error(f"OSC send error ({address}): {e}")
            return False

    @staticmethod
    def _build_bundle(address: str, args: list[Any], at_time: float) -> Any:
        msg = osc_message_builder.OscMessageBuilder(address=address)
        for arg in args:
            msg.add_arg(arg)
        bundle = osc_bundle_builder.OscBundleBuilder(at_time)
        bundle.add_content(msg.build())
        return bundle.build()

    def __repr__(self) -> str:
        return f"ScsynthPipeline(host={self._host!r}, port={self._port})"
