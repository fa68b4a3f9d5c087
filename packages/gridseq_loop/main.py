"""
Gridseq Loop Service Entry Point

Hosts the engine on an asyncio event loop against a running scsynth.
Randomizes the grid and plays until interrupted.

Run as:
    gridseq-loop (after pip install)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from .config import Settings
from .factory import create_sequencer_engine


def setup_logging(debug: bool = False) -> None:
    """Configure logging"""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides applied"""
    overrides = {
        key: value
        for key, value in {
            "osc_host": args.osc_host,
            "osc_port": args.osc_port,
            "default_bpm": args.bpm,
            "default_tonic": args.tonic,
            "default_scale": args.scale,
            "timing_mode": args.timing_mode,
        }.items()
        if value is not None
    }
    return Settings(**overrides)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Gridseq Loop Service - 8x8 step sequencer"
    )
    parser.add_argument("--osc-host", default=None, help="scsynth host (default: 127.0.0.1)")
    parser.add_argument("--osc-port", type=int, default=None, help="scsynth port (default: 57110)")
    parser.add_argument("--bpm", type=float, default=None, help="Tempo (default: 120)")
    parser.add_argument("--tonic", default=None, help="Tonic name (default: C)")
    parser.add_argument("--scale", default=None, help="Scale name (default: Major)")
    parser.add_argument(
        "--timing-mode",
        choices=["rearm", "drift_corrected"],
        default=None,
        help="Step timing mode (default: rearm)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def serve(settings: Settings) -> None:
    """Start the engine, randomize the grid, play until cancelled"""
    logger = logging.getLogger(__name__)
    engine = create_sequencer_engine(settings)
    engine.start()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, engine.stop)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            pass

    try:
        engine.randomize()
        result = engine.play()
        if not result.success:
            logger.error(f"Cannot start playback: {result.message}")
            return
        await engine.run()
    finally:
        engine.stop()


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    settings = build_settings(args)
    logger.info("Starting Gridseq Loop Service")
    logger.info(f"  scsynth: {settings.osc_host}:{settings.osc_port}")

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt")

    return 0


if __name__ == "__main__":
    sys.exit(main())
