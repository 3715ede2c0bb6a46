"""Tests for the paddle AI."""

import pytest

from conftest import make_state
from pingpong.paddle_ai import is_incoming, predict_target, time_to_reach, update_paddles
from pingpong.rng import RandomSource, SequenceSource
from pingpong.types import LEFT, RIGHT, Ball
from pingpong import court


def test_incoming_only_in_own_half():
    assert is_incoming(Ball(x=20, dx=-6), LEFT)
    assert not is_incoming(Ball(x=50, dx=-6), LEFT)
    assert not is_incoming(Ball(x=20, dx=6), LEFT)
    assert is_incoming(Ball(x=50, dx=6), RIGHT)
    assert not is_incoming(Ball(x=20, dx=6), RIGHT)


def test_time_to_reach():
    assert time_to_reach(Ball(x=20, dx=-5), LEFT) == pytest.approx(4.0)
    assert time_to_reach(Ball(x=56, dx=5), RIGHT) == pytest.approx(4.0)


def test_time_to_reach_guards_zero_velocity():
    assert time_to_reach(Ball(x=20, dx=0.0), LEFT) == 0.0
    assert time_to_reach(Ball(x=60, dx=0.0), RIGHT) == 0.0


def test_prediction_extrapolates_incoming_ball(mid_rng):
    """x=20, dx=-5, dy=1 → arrives in 4 ticks at y=14 (no jitter at mid-range)."""
    ball = Ball(x=20, y=10, dx=-5, dy=1)
    assert predict_target(ball, LEFT, mid_rng) == pytest.approx(14.0)


def test_idle_paddle_targets_centre(mid_rng):
    ball = Ball(x=20, y=4, dx=-5, dy=1)
    assert predict_target(ball, RIGHT, mid_rng) == pytest.approx(court.PADDLE_CENTER)


def test_jitter_is_bounded():
    ball = Ball(x=20, y=4, dx=6, dy=0)
    low = predict_target(ball, LEFT, SequenceSource([0.0]))
    high = predict_target(ball, LEFT, SequenceSource([0.999]))
    assert low == pytest.approx(court.PADDLE_CENTER - court.AI_JITTER)
    assert court.PADDLE_CENTER < high < court.PADDLE_CENTER + court.AI_JITTER


def test_paddle_steps_toward_target(mid_rng):
    """Left paddle chases the predicted row by 0.5; idle right paddle stays centred."""
    state = make_state(x=20, y=10, dx=-5, dy=1)
    left_target, right_target = update_paddles(state, mid_rng)

    assert left_target == pytest.approx(14.0)
    assert right_target == pytest.approx(court.PADDLE_CENTER)
    assert state.left.y == pytest.approx(10.5)
    assert state.right.y == pytest.approx(10.0)


def test_dead_zone_holds_paddle(mid_rng):
    state = make_state(x=60, y=10.05, dx=6, dy=0, right_y=10.0)
    update_paddles(state, mid_rng)
    assert state.right.y == pytest.approx(10.0)


def test_paddle_moves_up(mid_rng):
    state = make_state(x=20, y=5, dx=-5, dy=0, left_y=10.0)
    update_paddles(state, mid_rng)
    assert state.left.y == pytest.approx(9.5)


def test_paddle_clamped_to_court():
    """A target above the court leaves the paddle at its lowest legal row."""
    state = make_state(x=20, y=1.0, dx=-5, dy=-3, left_y=3.2)
    update_paddles(state, SequenceSource([0.0]))
    assert state.left.y == court.PADDLE_SIZE


def test_paddles_always_in_range():
    """Random play: both paddles stay inside [3, H-3]."""
    rng = RandomSource(5)
    state = make_state(x=20, y=2, dx=-6, dy=-1)
    for _ in range(500):
        state.ball.x = rng.uniform_float(0, court.WIDTH)
        state.ball.y = rng.uniform_float(court.TOP_WALL, court.BOTTOM_WALL)
        state.ball.dx = rng.uniform_float(-10, 10)
        state.ball.dy = rng.uniform_float(-10, 10)
        update_paddles(state, rng)
        for paddle in (state.left, state.right):
            assert court.PADDLE_SIZE <= paddle.y <= court.HEIGHT - court.PADDLE_SIZE
