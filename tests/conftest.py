"""
Pytest fixtures for the ping/pong simulator tests.
"""
import pytest

from pingpong.rng import RandomSource, SequenceSource
from pingpong.simulation import Simulation
from pingpong.types import PHASE_RALLY, Ball, SimState


def make_state(x=20.0, y=10.0, dx=6.0, dy=0.0, spin=0.0,
               left_y=10.0, right_y=10.0, phase=PHASE_RALLY, serving=0):
    """SimState with the ball in play at the given position and velocity."""
    state = SimState(ball=Ball(x=x, y=y, dx=dx, dy=dy, spin=spin))
    state.left.y = left_y
    state.right.y = right_y
    state.match.phase = phase
    state.match.serving = serving
    return state


@pytest.fixture
def mid_rng():
    """Always answers mid-range: zero jitter, no net clip, no weak returns."""
    return SequenceSource([0.5])


@pytest.fixture
def sure_return_rng():
    """Never fires a Bernoulli event, so every covered ball is returned."""
    return SequenceSource([0.99])


@pytest.fixture
def seeded_rng():
    return RandomSource(1234)


@pytest.fixture
def fresh_sim(mid_rng):
    """A simulation waiting for ping's first serve."""
    return Simulation(mid_rng)
