"""Pytest configuration and shared fixtures."""

import os

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'

import random

import pytest

from glider_rush.config import GameConfig
from glider_rush.persistence import MemoryBestScoreStore
from glider_rush.session import GameSession


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def store():
    """In-memory best-score store that records saves."""
    return MemoryBestScoreStore()


@pytest.fixture
def session(game_config, store):
    """Seeded idle session."""
    return GameSession(game_config, store=store, rng=random.Random(1234))


@pytest.fixture
def playing(session):
    """Seeded session already in the playing state, glider mid-field."""
    session.start()
    return session
