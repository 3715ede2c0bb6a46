"""Simulation state owner: runs one logical frame for the active side.

A tick under the active side:
- launches the serve when that side is due to serve
- moves both paddles (every tick, whichever side is active)
- advances the ball and applies the net-crossing guards
- kicks a stalled ball
- resolves paddle contact and detects the end of the point
"""

import logging
from typing import Optional

from pingpong.paddle_ai import update_paddles
from pingpong.physics import advance_tick, guard_active_crossing, recover_stall
from pingpong.rally import check_point, finish_point, launch_serve, reset_for_serve
from pingpong.rng import RandomSource, RngSource
from pingpong.types import (
    PHASE_POINT_END,
    PHASE_SERVE,
    Ball,
    MatchState,
    PointOutcome,
    SimState,
    Snapshot,
)
from pingpong import court

logger = logging.getLogger(__name__)

_SPEED_TOLERANCE = 1e-9


class Simulation:
    """Owns the ball, both paddles and the match state."""

    def __init__(self, rng: Optional[RngSource] = None, state: Optional[SimState] = None):
        self.rng = rng if rng is not None else RandomSource()
        if state is None:
            state = SimState()
            reset_for_serve(state)
        self.state = state
        self.last_events: list[str] = []

    @property
    def ball(self) -> Ball:
        return self.state.ball

    @property
    def match(self) -> MatchState:
        return self.state.match

    @property
    def game_over(self) -> bool:
        return self.state.match.game_over

    def tick(self, side: int) -> Optional[PointOutcome]:
        """Advance one frame with ``side`` driving. Returns the outcome if the point ended."""
        state = self.state
        match = state.match
        self.last_events = []

        if match.game_over or match.phase == PHASE_POINT_END:
            return None
        if match.phase == PHASE_SERVE and not launch_serve(state, side, self.rng):
            return None

        last_x, last_y = state.ball.x, state.ball.y

        update_paddles(state, self.rng)
        self.last_events = advance_tick(state, self.rng)
        if guard_active_crossing(state, side, last_x):
            self.last_events.append("active_guard")
        if recover_stall(state, last_x, last_y, self.rng):
            self.last_events.append("stall")
        if self.last_events:
            logger.debug("tick %d: %s", state.tick_count, ", ".join(self.last_events))

        outcome = check_point(state, side, self.rng)
        state.tick_count += 1

        self._check_invariants()
        return outcome

    def finish_point(self, outcome: PointOutcome) -> MatchState:
        """Score the finished point and park the ball for the next serve."""
        return finish_point(self.state, outcome)

    def _check_invariants(self) -> None:
        state = self.state
        speed = state.ball.speed()
        assert state.match.phase == PHASE_SERVE or (
            court.MIN_ALLOWED_SPEED - _SPEED_TOLERANCE
            <= speed
            <= court.MAX_ALLOWED_SPEED + _SPEED_TOLERANCE
        ), f"ball speed {speed:.3f} outside bounds"
        for paddle in (state.left, state.right):
            assert paddle.size <= paddle.y <= court.HEIGHT - paddle.size, (
                f"paddle at y={paddle.y:.2f} outside court"
            )
        assert state.match.score_ping <= court.MAX_SCORE
        assert state.match.score_pong <= court.MAX_SCORE

    def snapshot(self, narrator: str = "", message: Optional[str] = None) -> Snapshot:
        """Immutable view of the current frame for the display."""
        s = self.state
        m = s.match
        return Snapshot(
            ball_x=s.ball.x,
            ball_y=s.ball.y,
            ball_dx=s.ball.dx,
            ball_dy=s.ball.dy,
            left_paddle_y=s.left.y,
            right_paddle_y=s.right.y,
            score_ping=m.score_ping,
            score_pong=m.score_pong,
            serving=m.serving,
            rally_length=m.rally_length,
            longest_rally=m.longest_rally,
            phase=m.phase,
            game_over=m.game_over,
            narrator=narrator,
            message=message,
            tick=s.tick_count,
        )


def compute_match_stats(match: MatchState) -> dict:
    """Compute match statistics from the point history."""
    history = match.history
    rally_lengths = [p["rally"] for p in history]

    reasons = {}
    for p in history:
        reasons[p["reason"]] = reasons.get(p["reason"], 0) + 1

    ping_points = sum(1 for p in history if p["winner"] == 0)
    pong_points = sum(1 for p in history if p["winner"] == 1)

    winner = None
    if match.game_over:
        winner = "ping" if match.score_ping >= court.MAX_SCORE else "pong"

    return {
        "ping_points": ping_points,
        "pong_points": pong_points,
        "total_points": len(history),
        "avg_rally_length": round(sum(rally_lengths) / max(len(rally_lengths), 1), 1),
        "max_rally_length": max(rally_lengths) if rally_lengths else 0,
        "longest_rally": match.longest_rally,
        "ping_misses": sum(1 for p in history if p["winner"] == 1 and p["reason"] == "miss"),
        "pong_misses": sum(1 for p in history if p["winner"] == 0 and p["reason"] == "miss"),
        "reasons": reasons,
        "winner": winner,
    }
