"""Ball physics: spin coupling, wall bounces, net clips, speed bounds, paddle hits."""

import logging
import math

from pingpong.rng import RngSource
from pingpong.types import LEFT, Ball, SimState
from pingpong import court

logger = logging.getLogger(__name__)


def _toward_far_half(x: float) -> float:
    """Horizontal direction pointing away from the half the ball is in."""
    return 1.0 if x < court.WIDTH / 2 else -1.0


def _nearest_column(x: float) -> int:
    # Halves round away from zero, unlike round()
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def is_near_net(x: float) -> bool:
    return abs(_nearest_column(x) - court.NET_POSITION) <= 1


def ensure_minimum_speed(ball: Ball, rng: RngSource) -> None:
    """Raise the ball speed to MIN_ALLOWED_SPEED, keeping its direction.

    A ball at rest is sent toward the far half with a small random vertical
    component. If the result is still almost vertical, a horizontal
    component of 80% of the minimum is forced so the ball cannot bounce
    between the walls forever.
    """
    speed = ball.speed()
    if speed >= court.MIN_ALLOWED_SPEED:
        return

    if speed > 0.0:
        norm_dx, norm_dy = ball.dx / speed, ball.dy / speed
    else:
        norm_dx, norm_dy = _toward_far_half(ball.x), rng.uniform_float(-0.5, 0.5)

    ball.dx = norm_dx * court.MIN_ALLOWED_SPEED
    ball.dy = norm_dy * court.MIN_ALLOWED_SPEED

    if abs(ball.dx) < 0.1:
        ball.dx = _toward_far_half(ball.x) * court.MIN_ALLOWED_SPEED * 0.8
        if ball.dy == 0.0:
            ball.dy = rng.uniform_float(-0.3, 0.3)


def limit_maximum_speed(ball: Ball) -> None:
    speed = ball.speed()
    if speed > court.MAX_ALLOWED_SPEED:
        scale = court.MAX_ALLOWED_SPEED / speed
        ball.dx *= scale
        ball.dy *= scale


def _bounce_walls(ball: Ball, rng: RngSource) -> bool:
    if ball.y < court.TOP_WALL:
        ball.y = court.TOP_WALL
    elif ball.y > court.BOTTOM_WALL:
        ball.y = court.BOTTOM_WALL
    else:
        return False

    ball.dy = -ball.dy * court.WALL_RESTITUTION
    ball.spin *= court.SPIN_BOUNCE_DECAY
    ensure_minimum_speed(ball, rng)
    return True


def _check_net_clip(state: SimState, started_left: bool, rng: RngSource) -> bool:
    """Maybe clip the net top. At most one clip per stay near the net."""
    ball = state.ball
    near_net = is_near_net(ball.x)

    if not (
        near_net
        and court.TOP_WALL < ball.y < court.BOTTOM_WALL
        and state.net_clip_cooldown < 1
        and rng.bernoulli(court.NET_CLIP_PROBABILITY)
    ):
        if not near_net:
            state.net_clip_cooldown = 0
        return False

    state.net_clip_cooldown += 1

    if rng.bernoulli(court.NET_REFLECT_PROBABILITY):
        ball.dx = -ball.dx * court.NET_REFLECT_DAMPING
    else:
        ball.dx *= court.NET_FORWARD_DAMPING

    if abs(ball.dx) < court.MIN_ALLOWED_SPEED:
        boosted = court.MIN_ALLOWED_SPEED * court.NET_MIN_DX_BOOST
        ball.dx = -boosted if ball.dx < 0.0 else boosted

    if started_left:
        ball.x = float(court.NET_POSITION + court.NET_TELEPORT)
        if ball.dx < 0.0 and rng.bernoulli(court.NET_WEAK_RETURN_PROBABILITY):
            ball.dx = -ball.dx
    else:
        ball.x = float(court.NET_POSITION - court.NET_TELEPORT)
        if ball.dx > 0.0 and rng.bernoulli(court.NET_WEAK_RETURN_PROBABILITY):
            ball.dx = -ball.dx

    ball.dy += rng.uniform_float(-court.NET_PERTURBATION, court.NET_PERTURBATION)
    ensure_minimum_speed(ball, rng)
    limit_maximum_speed(ball)
    logger.debug("net clip at x=%.1f y=%.1f dx=%.2f", ball.x, ball.y, ball.dx)
    return True


def _guard_crossing(ball: Ball, started_left: bool) -> bool:
    """Keep the ball from drifting back over the net it just crossed."""
    net = court.NET_POSITION
    if started_left and ball.x > net and ball.dx < 0.0:
        ball.dx = -ball.dx
        return True
    if not started_left and ball.x < net and ball.dx > 0.0:
        ball.dx = -ball.dx
        return True
    return False


def advance_tick(state: SimState, rng: RngSource) -> list[str]:
    """Advance the ball by one tick.

    Returns the names of the events that fired this tick, in order:
    ``"wall"``, ``"net_clip"`` and ``"crossing_guard"``.
    """
    ball = state.ball
    events: list[str] = []

    ball.dy += ball.spin * court.SPIN_COUPLING
    limit_maximum_speed(ball)
    ensure_minimum_speed(ball, rng)

    ball.x += ball.dx
    ball.y += ball.dy

    started_left = ball.x - ball.dx < court.NET_POSITION

    if _bounce_walls(ball, rng):
        events.append("wall")
    if _check_net_clip(state, started_left, rng):
        events.append("net_clip")
    if _guard_crossing(ball, started_left):
        events.append("crossing_guard")

    return events


def guard_active_crossing(state: SimState, side: int, last_x: float) -> bool:
    """Reflect a ball that crossed out of the active half but points back."""
    ball = state.ball
    net = court.NET_POSITION
    if side == LEFT:
        if ball.x > net and ball.dx < 0.0 and last_x <= net:
            ball.dx = -ball.dx
            return True
    elif ball.x < net and ball.dx > 0.0 and last_x >= net:
        ball.dx = -ball.dx
        return True
    return False


def recover_stall(state: SimState, last_x: float, last_y: float, rng: RngSource) -> bool:
    """Kick a ball that has not moved for more than STALL_TICKS ticks."""
    ball = state.ball
    if abs(ball.x - last_x) < court.STALL_EPSILON and abs(ball.y - last_y) < court.STALL_EPSILON:
        state.static_ticks += 1
        if state.static_ticks > court.STALL_TICKS:
            ensure_minimum_speed(ball, rng)
            ball.dx *= court.STALL_BOOST
            limit_maximum_speed(ball)
            state.static_ticks = 0
            logger.debug("stalled ball kicked at x=%.1f y=%.1f", ball.x, ball.y)
            return True
    else:
        state.static_ticks = 0
    return False


def resolve_paddle_hit(state: SimState, side: int, rng: RngSource) -> float:
    """Return the ball off ``side``'s paddle and count the hit.

    The hit offset (-1 at the top edge, +1 at the bottom) steers the
    return and sets its spin. The ball speeds up by 5% up to the maximum.
    Returns the hit offset.
    """
    ball = state.ball
    paddle = state.paddle(side)
    direction = 1.0 if side == LEFT else -1.0

    hit_offset = (ball.y - paddle.y) / paddle.size

    ball.dx = direction * abs(ball.dx)
    target_speed = min(ball.speed() * court.HIT_SPEEDUP, court.MAX_ALLOWED_SPEED)

    ball.dy += hit_offset * court.DY_FROM_OFFSET
    ball.spin = hit_offset * court.SPIN_FROM_OFFSET

    magnitude = ball.speed()
    if magnitude > 0.0:
        ball.dx = ball.dx / magnitude * target_speed
        ball.dy = ball.dy / magnitude * target_speed
    else:
        ball.dx = direction * target_speed
        ball.dy = rng.uniform_float(-0.3, 0.3)

    ball.dy += rng.uniform_float(-0.1, 0.1)
    ball.x = court.LEFT_RETURN_X if side == LEFT else court.RIGHT_RETURN_X

    ensure_minimum_speed(ball, rng)
    limit_maximum_speed(ball)

    state.match.rally_length += 1
    return hit_offset
