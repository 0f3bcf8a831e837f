"""Shared test fixtures."""

import random

import pytest

from models import Faction
from state import initialize_game
from tests.helpers import build_state


@pytest.fixture
def game():
    """Fresh generated game (game number 42)."""
    return initialize_game(42)


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def chain_state():
    """Three-node chain A-B-C: A and B red, C blue."""
    return build_state([
        {'id': 0, 'gridX': 0, 'faction': Faction.RED, 'strength': 3, 'connections': [1]},
        {'id': 1, 'gridX': 1, 'faction': Faction.RED, 'strength': 2, 'connections': [0, 2]},
        {'id': 2, 'gridX': 2, 'faction': Faction.BLUE, 'strength': 4, 'connections': [1]},
    ])


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app, games

    app.config["TESTING"] = True
    games.clear()
    with app.test_client() as client:
        yield client
