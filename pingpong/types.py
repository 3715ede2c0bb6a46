"""Core data types for the ping/pong simulation."""

import math
from dataclasses import dataclass, field
from typing import Optional

from pingpong import court

LEFT = 0
RIGHT = 1

PHASE_SERVE = "serve"
PHASE_RALLY = "rally"
PHASE_POINT_END = "point_end"

VALID_PHASES = [PHASE_SERVE, PHASE_RALLY, PHASE_POINT_END]

VALID_REASONS = [
    "miss",       # defending paddle whiffed
    "out_left",   # ball left the court past the left edge
    "out_right",  # ball left the court past the right edge
]


@dataclass
class Ball:
    """Ball position, velocity and spin in court cells per tick."""
    x: float = court.LEFT_SERVE_X
    y: float = court.PADDLE_CENTER
    dx: float = 0.0
    dy: float = 0.0
    spin: float = 0.0

    def speed(self) -> float:
        return math.sqrt(self.dx**2 + self.dy**2)

    def copy(self) -> "Ball":
        return Ball(self.x, self.y, self.dx, self.dy, self.spin)


@dataclass
class Paddle:
    """A paddle fixed to one column; y is its centre row."""
    x: int
    y: float = court.PADDLE_CENTER
    size: float = court.PADDLE_SIZE

    def clamp(self) -> None:
        self.y = max(self.size, min(court.HEIGHT - self.size, self.y))

    def covers(self, y: float) -> bool:
        return self.y - self.size <= y <= self.y + self.size


@dataclass
class MatchState:
    """Score, serve and rally bookkeeping."""
    score_ping: int = 0
    score_pong: int = 0
    rally_length: int = 0
    longest_rally: int = 0
    serving: int = LEFT
    phase: str = PHASE_SERVE
    game_over: bool = False
    history: list = field(default_factory=list)

    @property
    def total_points(self) -> int:
        return self.score_ping + self.score_pong

    def copy(self) -> "MatchState":
        return MatchState(
            score_ping=self.score_ping,
            score_pong=self.score_pong,
            rally_length=self.rally_length,
            longest_rally=self.longest_rally,
            serving=self.serving,
            phase=self.phase,
            game_over=self.game_over,
            history=list(self.history),
        )


@dataclass
class SimState:
    """Everything the simulation mutates, held by a single owner."""
    ball: Ball = field(default_factory=Ball)
    left: Paddle = field(default_factory=lambda: Paddle(x=court.LEFT_PADDLE_X))
    right: Paddle = field(default_factory=lambda: Paddle(x=court.RIGHT_PADDLE_X))
    match: MatchState = field(default_factory=MatchState)
    net_clip_cooldown: int = 0
    static_ticks: int = 0
    tick_count: int = 0

    def paddle(self, side: int) -> Paddle:
        return self.left if side == LEFT else self.right


@dataclass
class PointOutcome:
    """How a point ended."""
    winner: int  # LEFT or RIGHT
    is_miss: bool
    reason: str  # see VALID_REASONS
    ball_x: float = 0.0
    ball_y: float = 0.0


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of one frame, handed to the display sink."""
    ball_x: float
    ball_y: float
    ball_dx: float
    ball_dy: float
    left_paddle_y: float
    right_paddle_y: float
    score_ping: int
    score_pong: int
    serving: int
    rally_length: int
    longest_rally: int
    phase: str
    game_over: bool
    narrator: str
    message: Optional[str] = None
    tick: int = 0

    @property
    def ball_speed(self) -> float:
        return math.sqrt(self.ball_dx**2 + self.ball_dy**2)

    @property
    def winner_label(self) -> Optional[str]:
        if not self.game_over:
            return None
        return court.SIDE_LABELS[LEFT] if self.score_ping >= court.MAX_SCORE else court.SIDE_LABELS[RIGHT]


def side_label(side: int) -> str:
    return court.SIDE_LABELS[side]


def opponent(side: int) -> int:
    return RIGHT if side == LEFT else LEFT
