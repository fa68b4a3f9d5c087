"""
Pytest fixtures for gridseq_loop tests.

Provides mock dependencies and test engine configurations.
"""

from __future__ import annotations

import random

import pytest

from gridseq_loop.engine import SequencerEngine

from .mocks import MockAudioPipeline, MockCommandSource, MockStateSink, MockStepTimer


@pytest.fixture
def mock_pipeline() -> MockAudioPipeline:
    """Create a fresh MockAudioPipeline for testing."""
    return MockAudioPipeline()


@pytest.fixture
def mock_timer() -> MockStepTimer:
    """Create a fresh MockStepTimer for testing."""
    return MockStepTimer()


@pytest.fixture
def mock_commands() -> MockCommandSource:
    """Create a fresh MockCommandSource for testing."""
    return MockCommandSource()


@pytest.fixture
def mock_publisher() -> MockStateSink:
    """Create a fresh MockStateSink for testing."""
    return MockStateSink()


@pytest.fixture
def test_engine(
    mock_pipeline: MockAudioPipeline,
    mock_commands: MockCommandSource,
    mock_publisher: MockStateSink,
    mock_timer: MockStepTimer,
) -> SequencerEngine:
    """
    Create a SequencerEngine with all mock dependencies.

    This engine can be tested without any real audio or event loop.
    """
    engine = SequencerEngine(
        pipeline=mock_pipeline,
        commands=mock_commands,
        publisher=mock_publisher,
        timer=mock_timer,
        rng=random.Random(1234),
    )
    engine.start()
    return engine
