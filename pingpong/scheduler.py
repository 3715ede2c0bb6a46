"""Match scheduler: alternates which side drives the tick loop.

Two states, LEFT and RIGHT. The left side drives until the ball is past the
net heading right, then the right side drives until it is back over the net
heading left. After every point control goes to whoever serves next. The
loop renders a frame after every tick and sleeps a randomized frame delay;
that sleep is the only suspension point.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from pingpong.rally import describe_outcome
from pingpong.rng import RandomSource, RngSource
from pingpong.simulation import Simulation, compute_match_stats
from pingpong.types import (
    LEFT,
    PHASE_POINT_END,
    PHASE_SERVE,
    RIGHT,
    Ball,
    MatchState,
    Snapshot,
    side_label,
)
from pingpong import court

logger = logging.getLogger(__name__)

NARRATORS = ("PING", "PONG")


class DisplaySink(Protocol):
    """Anything that can draw a frame."""

    def render(self, snapshot: Snapshot) -> None:
        ...


def next_active(active: int, ball: Ball, match: MatchState) -> int:
    """Which side drives the next tick."""
    if match.phase in (PHASE_SERVE, PHASE_POINT_END):
        return match.serving
    if active == LEFT and ball.x >= court.NET_POSITION and ball.dx > 0.0:
        return RIGHT
    if active == RIGHT and ball.x <= court.NET_POSITION and ball.dx < 0.0:
        return LEFT
    return active


def frame_delay_ms(rng: RngSource) -> float:
    lo = max(0, court.BASE_FRAME_DELAY_MS - court.FRAME_VARIATION_MS)
    hi = court.BASE_FRAME_DELAY_MS + court.FRAME_VARIATION_MS
    return rng.uniform_float(lo, hi)


@dataclass
class MatchResult:
    """Summary returned when the scheduler stops."""
    completed: bool
    score_ping: int
    score_pong: int
    winner: Optional[str]
    longest_rally: int
    ticks: int
    frames: int
    handoffs: int
    stats: dict = field(default_factory=dict)


class MatchScheduler:
    """Runs a match by alternating control between the two sides."""

    def __init__(
        self,
        simulation: Simulation,
        display: DisplaySink,
        sleep: Callable[[float], None] = time.sleep,
        pace: bool = True,
        pacing_rng: Optional[RngSource] = None,
        max_ticks: Optional[int] = None,
    ):
        self.simulation = simulation
        self.display = display
        self.sleep = sleep
        self.pace = pace
        # Kept apart from the simulation's source so pacing never changes play
        self.pacing_rng = pacing_rng if pacing_rng is not None else RandomSource()
        self.max_ticks = max_ticks
        self.active = simulation.match.serving
        self.ticks = 0
        self.frames = 0
        self.handoffs = 0

    @property
    def narrator(self) -> str:
        return NARRATORS[self.active]

    def _pause(self, ms: float) -> None:
        if self.pace:
            self.sleep(ms / 1000.0)

    def _render(self, message: Optional[str] = None) -> None:
        self.display.render(self.simulation.snapshot(self.narrator, message))
        self.frames += 1

    def _hand_to(self, side: int) -> None:
        if side != self.active:
            logger.debug("hand-off %s -> %s", side_label(self.active), side_label(side))
            self.active = side
            self.handoffs += 1

    def step(self) -> bool:
        """Run one tick and its frame. Returns False once the match is over."""
        sim = self.simulation
        if sim.game_over:
            return False

        outcome = sim.tick(self.active)
        self.ticks += 1

        if outcome is not None:
            self._render(describe_outcome(outcome, self.active))
            self._pause(court.POINT_PAUSE_MS)
            match = sim.finish_point(outcome)
            self._render(f"score: ping {match.score_ping} - {match.score_pong} pong")
            self._pause(court.POINT_PAUSE_MS)
            self._hand_to(match.serving)
            return True

        self._render()
        self._pause(frame_delay_ms(self.pacing_rng))
        self._hand_to(next_active(self.active, sim.ball, sim.match))
        return True

    def run(self) -> MatchResult:
        """Drive the match to the end (or to ``max_ticks``) and report."""
        while not self.simulation.game_over:
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                logger.info("stopping after %d ticks without a winner", self.ticks)
                return self.result()
            self.step()

        self._render()
        self._pause(court.POINT_PAUSE_MS)
        result = self.result()
        logger.info(
            "match over: %s wins %d-%d (longest rally %d)",
            result.winner, result.score_ping, result.score_pong, result.longest_rally,
        )
        return result

    def result(self) -> MatchResult:
        match = self.simulation.match
        stats = compute_match_stats(match)
        return MatchResult(
            completed=match.game_over,
            score_ping=match.score_ping,
            score_pong=match.score_pong,
            winner=stats["winner"],
            longest_rally=match.longest_rally,
            ticks=self.ticks,
            frames=self.frames,
            handoffs=self.handoffs,
            stats=stats,
        )


def play_match(
    display: DisplaySink,
    rng: Optional[RngSource] = None,
    pace: bool = False,
    max_ticks: Optional[int] = None,
) -> tuple[Simulation, MatchResult]:
    """Run a whole match from a fresh simulation; unpaced by default."""
    simulation = Simulation(rng)
    scheduler = MatchScheduler(simulation, display, pace=pace, max_ticks=max_ticks)
    return simulation, scheduler.run()
