"""Tests for the two-sided match scheduler."""

import pytest

from conftest import make_state
from display.recorder import RecordingDisplay
from pingpong.rng import RandomSource, SequenceSource
from pingpong.scheduler import MatchScheduler, frame_delay_ms, next_active, play_match
from pingpong.simulation import Simulation
from pingpong.types import LEFT, PHASE_RALLY, PHASE_SERVE, RIGHT, Ball, MatchState
from pingpong import court


def _rally(serving=LEFT):
    return MatchState(phase=PHASE_RALLY, serving=serving)


def test_left_hands_over_past_the_net():
    assert next_active(LEFT, Ball(x=40, dx=6), _rally()) == RIGHT
    assert next_active(LEFT, Ball(x=38, dx=6), _rally()) == RIGHT


def test_left_keeps_control_on_its_side():
    assert next_active(LEFT, Ball(x=30, dx=6), _rally()) == LEFT
    assert next_active(LEFT, Ball(x=40, dx=-6), _rally()) == LEFT


def test_right_hands_back_over_the_net():
    assert next_active(RIGHT, Ball(x=30, dx=-6), _rally()) == LEFT
    assert next_active(RIGHT, Ball(x=38, dx=-6), _rally()) == LEFT
    assert next_active(RIGHT, Ball(x=45, dx=-6), _rally()) == RIGHT


def test_server_drives_between_points():
    match = MatchState(phase=PHASE_SERVE, serving=RIGHT)
    assert next_active(LEFT, Ball(x=10, dx=0), match) == RIGHT


def test_frame_delay_range():
    assert frame_delay_ms(SequenceSource([0.0])) == pytest.approx(40.0)
    assert frame_delay_ms(SequenceSource([0.5])) == pytest.approx(80.0)
    rng = RandomSource(11)
    for _ in range(200):
        assert 40.0 <= frame_delay_ms(rng) <= 120.0


def test_hand_off_when_ball_crosses_the_net(mid_rng):
    """Left drives a ball from x=30 to x=38 heading right → right takes over."""
    sim = Simulation(mid_rng, state=make_state(x=30.0, dx=8.0))
    scheduler = MatchScheduler(sim, RecordingDisplay(), pace=False)
    assert scheduler.active == LEFT

    scheduler.step()
    assert sim.ball.x == pytest.approx(court.NET_POSITION)
    assert scheduler.active == RIGHT
    assert scheduler.handoffs == 1
    assert scheduler.narrator == "PONG"


def test_first_frame_narrated_by_server():
    display = RecordingDisplay()
    scheduler = MatchScheduler(Simulation(RandomSource(3)), display, pace=False)
    scheduler.step()
    assert display.last.narrator == "PING"


def test_server_takes_control_after_points():
    sim = Simulation(RandomSource(5))
    display = RecordingDisplay()
    scheduler = MatchScheduler(sim, display, pace=False)

    while len(sim.match.history) < 2:
        scheduler.step()

    assert sim.match.serving == RIGHT
    assert scheduler.active == RIGHT
    assert sim.match.phase == PHASE_SERVE
    assert display.last.message == (
        f"score: ping {sim.match.score_ping} - {sim.match.score_pong} pong"
    )


def test_full_match_reaches_eleven():
    display = RecordingDisplay()
    sim, result = play_match(display, rng=RandomSource(42))

    assert result.completed
    assert result.winner in ("ping", "pong")
    assert max(result.score_ping, result.score_pong) == court.MAX_SCORE
    assert result.frames == len(display.snapshots)
    assert result.ticks >= len(sim.match.history)
    assert display.last.game_over


def test_every_point_is_announced():
    display = RecordingDisplay()
    sim, _ = play_match(display, rng=RandomSource(8))
    messages = display.messages()
    scores = [m for m in messages if m.startswith("score:")]
    calls = [m for m in messages if not m.startswith("score:")]

    assert len(scores) == len(sim.match.history)
    assert len(calls) == len(sim.match.history)
    assert all("point to" in m for m in calls)


def test_stops_at_max_ticks():
    scheduler = MatchScheduler(Simulation(RandomSource(1)), RecordingDisplay(),
                               pace=False, max_ticks=25)
    result = scheduler.run()
    assert not result.completed
    assert result.ticks == 25
    assert result.winner is None


def test_paced_run_sleeps_frame_delays_and_point_pauses():
    sleeps = []
    scheduler = MatchScheduler(Simulation(RandomSource(9)), RecordingDisplay(),
                               sleep=sleeps.append, max_ticks=300)
    scheduler.run()

    assert sleeps
    for seconds in sleeps:
        assert 0.04 <= seconds <= 0.12 or seconds == pytest.approx(court.POINT_PAUSE_MS / 1000)


def test_unpaced_run_never_sleeps():
    sleeps = []
    scheduler = MatchScheduler(Simulation(RandomSource(9)), RecordingDisplay(),
                               sleep=sleeps.append, pace=False, max_ticks=300)
    scheduler.run()
    assert sleeps == []


def test_pacing_does_not_change_play():
    """Frame delays come from their own source; play is identical for any pacing seed."""
    frames = []
    for pacing_seed in (1, 2):
        display = RecordingDisplay()
        scheduler = MatchScheduler(Simulation(RandomSource(77)), display, pace=False,
                                   pacing_rng=RandomSource(pacing_seed), max_ticks=500)
        scheduler.run()
        frames.append(display.snapshots)
    assert frames[0] == frames[1]


class _BrokenDisplay:
    def render(self, snapshot):
        raise RuntimeError("terminal gone")


def test_display_errors_propagate():
    scheduler = MatchScheduler(Simulation(RandomSource(1)), _BrokenDisplay(), pace=False)
    with pytest.raises(RuntimeError):
        scheduler.step()
