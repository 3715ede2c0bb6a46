"""Rally controller: serve, return-or-miss decisions, scoring and serve rotation.

Phases run serve -> rally -> point_end -> serve. Rules:
- The server launches from its own paddle toward the opponent
- A ball reaching a paddle it covers is returned unless the miss roll fires
- A ball leaving the court on one side is a point for the other side
- Serve changes every 2 points
- First to 11 ends the match (no win-by-2)
"""

import logging
from typing import Optional

from pingpong.physics import ensure_minimum_speed, resolve_paddle_hit
from pingpong.rng import RngSource
from pingpong.types import (
    LEFT,
    PHASE_POINT_END,
    PHASE_RALLY,
    PHASE_SERVE,
    RIGHT,
    Ball,
    MatchState,
    Paddle,
    PointOutcome,
    SimState,
    opponent,
    side_label,
)
from pingpong import court

logger = logging.getLogger(__name__)


def create_match() -> MatchState:
    """Create a new match with default state."""
    return MatchState()


def launch_serve(state: SimState, side: int, rng: RngSource) -> bool:
    """Put the ball in play if ``side`` is due to serve.

    Returns True when the serve was launched.
    """
    match = state.match
    if match.phase != PHASE_SERVE or match.serving != side or match.game_over:
        return False

    ball = state.ball
    paddle = state.paddle(side)
    speed = rng.uniform_float(*court.SERVE_DX_RANGE)
    if side == LEFT:
        ball.x = court.LEFT_SERVE_X
        ball.dx = speed
    else:
        ball.x = court.RIGHT_SERVE_X
        ball.dx = -speed
    ball.y = paddle.y
    ball.dy = rng.uniform_float(*court.SERVE_DY_RANGE)

    match.phase = PHASE_RALLY
    ensure_minimum_speed(ball, rng)
    return True


def miss_probability(ball: Ball, paddle: Paddle) -> float:
    """Chance that ``paddle`` whiffs the ball, from speed and contact offset."""
    distance = abs(ball.y - paddle.y)
    prob = court.MISS_PROBABILITY_BASE
    prob += (ball.speed() - 1.0) * court.DIFFICULTY_SCALING

    if distance > paddle.size * 0.5:
        prob += (distance - paddle.size * 0.5) * court.OFFSET_SCALING

    return max(court.MISS_PROBABILITY_FLOOR, min(court.MISS_PROBABILITY_CEILING, prob))


def reached_paddle_plane(ball: Ball, side: int) -> bool:
    if side == LEFT:
        return ball.x <= court.LEFT_SERVE_X
    return ball.x >= court.RIGHT_SERVE_X


def attempt_return(state: SimState, side: int, rng: RngSource) -> bool:
    """Roll the miss check for ``side``. Returns True on a miss.

    A missed ball is moved just behind the paddle and pushed clear of it
    vertically so the whiff is visible on the board.
    """
    ball = state.ball
    paddle = state.paddle(side)

    if not rng.bernoulli(miss_probability(ball, paddle)):
        resolve_paddle_hit(state, side, rng)
        return False

    ball.x = -1.0 if side == LEFT else court.WIDTH + 1.0
    gap = rng.uniform_float(*court.MISS_OFFSET_RANGE)
    if ball.y < paddle.y:
        ball.y = max(court.TOP_WALL, paddle.y - gap)
    else:
        ball.y = min(court.BOTTOM_WALL, paddle.y + gap)
    return True


def check_point(state: SimState, side: int, rng: RngSource) -> Optional[PointOutcome]:
    """Resolve paddle contact for the active side and detect a finished point."""
    ball = state.ball
    paddle = state.paddle(side)
    outcome = None

    if reached_paddle_plane(ball, side) and paddle.covers(ball.y):
        if attempt_return(state, side, rng):
            outcome = PointOutcome(winner=opponent(side), is_miss=True, reason="miss")

    if outcome is None and ball.x < 0.0:
        outcome = PointOutcome(winner=RIGHT, is_miss=False, reason="out_left")
    if outcome is None and ball.x >= court.WIDTH:
        outcome = PointOutcome(winner=LEFT, is_miss=False, reason="out_right")

    if outcome is not None:
        outcome.ball_x = ball.x
        outcome.ball_y = ball.y
        state.match.phase = PHASE_POINT_END
    return outcome


def score_point(match: MatchState, winner: int, reason: str = "") -> MatchState:
    """Score a point for ``winner`` (LEFT=ping, RIGHT=pong).

    Returns a new MatchState; the input is left untouched. Scoring after the
    match is over changes nothing.
    """
    m = match.copy()

    if m.game_over:
        return m

    if winner == LEFT:
        m.score_ping += 1
    else:
        m.score_pong += 1

    m.longest_rally = max(m.longest_rally, m.rally_length)
    m.phase = PHASE_POINT_END

    m.history.append({
        "ping": m.score_ping,
        "pong": m.score_pong,
        "server": m.serving,
        "winner": winner,
        "rally": m.rally_length,
        "reason": reason,
    })

    if m.total_points % court.SERVE_ROTATION == 0:
        m.serving = opponent(m.serving)

    return m


def reset_for_serve(state: SimState) -> None:
    """Park the ball at the server's paddle and check for the end of the match."""
    match = state.match
    match.phase = PHASE_SERVE
    match.rally_length = 0

    ball = state.ball
    if match.serving == LEFT:
        ball.x = court.LEFT_SERVE_X
        ball.y = state.left.y
    else:
        ball.x = court.RIGHT_SERVE_X
        ball.y = state.right.y
    ball.dx = 0.0
    ball.dy = 0.0
    ball.spin = 0.0

    state.net_clip_cooldown = 0
    state.static_ticks = 0

    if match.score_ping >= court.MAX_SCORE or match.score_pong >= court.MAX_SCORE:
        match.game_over = True


def describe_outcome(outcome: PointOutcome, active: int) -> str:
    """One-line announcement for the end of a point."""
    winner = side_label(outcome.winner)
    if outcome.is_miss:
        if outcome.winner != active:
            return f"{side_label(active)} missed the ball. point to {winner}!"
        return f"point to {winner}, opponent missed the ball."
    if outcome.reason == "out_left":
        return "ball went out on pings side. point to pong!"
    if outcome.reason == "out_right":
        return "ball went out on pongs side. point to ping!"
    return f"point to {winner}!"


def finish_point(state: SimState, outcome: PointOutcome) -> MatchState:
    """Book the point described by ``outcome`` and set up the next serve."""
    state.match = score_point(state.match, outcome.winner, outcome.reason)
    logger.info(
        "point to %s (%s): ping %d - %d pong",
        side_label(outcome.winner), outcome.reason,
        state.match.score_ping, state.match.score_pong,
    )
    reset_for_serve(state)
    return state.match
