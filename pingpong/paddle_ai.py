"""Paddle AI: both paddles track the ball every tick.

A paddle whose half the ball is heading into predicts where the ball will
arrive by straight-line extrapolation; otherwise it drifts back toward the
middle of the court. Both targets carry a little jitter so the players
are beatable.
"""

from pingpong.rng import RngSource
from pingpong.types import LEFT, RIGHT, Ball, Paddle, SimState
from pingpong import court


def is_incoming(ball: Ball, side: int) -> bool:
    """Whether the ball is in ``side``'s half and moving toward its paddle."""
    half = court.WIDTH / 2
    if side == LEFT:
        return ball.dx < 0.0 and ball.x < half
    return ball.dx > 0.0 and ball.x > half


def time_to_reach(ball: Ball, side: int) -> float:
    """Ticks until the ball reaches ``side``'s baseline (0 if not moving)."""
    if ball.dx == 0.0:
        return 0.0
    if side == LEFT:
        return ball.x / -ball.dx
    return (court.WIDTH - ball.x) / ball.dx


def predict_target(ball: Ball, side: int, rng: RngSource) -> float:
    """Row the paddle for ``side`` should move toward this tick."""
    jitter = rng.uniform_float(-court.AI_JITTER, court.AI_JITTER)
    if is_incoming(ball, side):
        return ball.y + ball.dy * time_to_reach(ball, side) + jitter
    return court.PADDLE_CENTER + jitter


def step_toward(paddle: Paddle, target_y: float) -> None:
    if abs(paddle.y - target_y) > court.PADDLE_DEAD_ZONE:
        if paddle.y < target_y:
            paddle.y += court.PADDLE_SPEED
        else:
            paddle.y -= court.PADDLE_SPEED


def update_paddles(state: SimState, rng: RngSource) -> tuple[float, float]:
    """Move both paddles one step toward their targets, then clamp them.

    Returns the (left, right) targets used this tick.
    """
    targets = []
    for side in (LEFT, RIGHT):
        target_y = predict_target(state.ball, side, rng)
        step_toward(state.paddle(side), target_y)
        targets.append(target_y)

    state.left.clamp()
    state.right.clamp()
    return targets[0], targets[1]
