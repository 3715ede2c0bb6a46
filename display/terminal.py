"""Text-mode display — court, scoreboard and status lines drawn with blessed."""

import math
import sys
import time
from contextlib import contextmanager
from typing import Callable, Optional, TextIO

from blessed import Terminal

from pingpong.types import PHASE_POINT_END, PHASE_RALLY, PHASE_SERVE, Snapshot
from pingpong import court

TITLE = "ping pong"
RULE = "-" * 70
COURT_RULE = "-" * (court.WIDTH + 2)

LEFT_PADDLE_CHAR = "▌"
RIGHT_PADDLE_CHAR = "▐"
NET_CHAR = "│"
BALL_CHAR = "●"
SIDE_WALL = "║"

PHASE_LABELS = {
    PHASE_SERVE: "serving...",
    PHASE_RALLY: "in progress",
    PHASE_POINT_END: "point ended",
}


def _cell(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _direction_arrows(dx: float, dy: float) -> str:
    horizontal = "→" if dx > 0 else "←" if dx < 0 else "-"
    vertical = "↓" if dy > 0 else "↑" if dy < 0 else "-"
    return horizontal + vertical


def format_header(snap: Snapshot) -> list[str]:
    serving = "ping" if snap.serving == 0 else "pong"
    status = "game over!" if snap.game_over else PHASE_LABELS.get(snap.phase, "")
    bx, by = _cell(snap.ball_x), _cell(snap.ball_y)
    half = "pings" if bx < court.NET_POSITION else "pongs"
    return [
        f"{RULE[:22]} {TITLE} {RULE[:22]}",
        f"ping: {snap.score_ping:<2}  pong: {snap.score_pong:<2}  │  current: {snap.narrator:<4}"
        f"  │ serving: {serving:<4} │ rally: {snap.rally_length:<3}",
        f"{SIDE_WALL} ball speed: {snap.ball_speed:.2f} │ longest rally: {snap.longest_rally:<3}"
        f" │ {status:<24}",
        f"ball direction: {_direction_arrows(snap.ball_dx, snap.ball_dy)}"
        f" │ position: ({bx},{by}) │ ball in {half} side",
        RULE,
    ]


def format_court(snap: Snapshot) -> list[str]:
    """Court rows with paddles, net and ball. A ball off the court is not drawn."""
    bx, by = _cell(snap.ball_x), _cell(snap.ball_y)
    left_y, right_y = _cell(snap.left_paddle_y), _cell(snap.right_paddle_y)
    ball_in_bounds = 0 <= bx < court.WIDTH and 0 <= by < court.HEIGHT

    rows = [COURT_RULE]
    for y in range(court.HEIGHT):
        cells = []
        for x in range(court.WIDTH):
            if x == court.LEFT_PADDLE_X and left_y - 1 <= y <= left_y + 1:
                cells.append(LEFT_PADDLE_CHAR)
            elif x == court.RIGHT_PADDLE_X and right_y - 1 <= y <= right_y + 1:
                cells.append(RIGHT_PADDLE_CHAR)
            elif x == court.NET_POSITION:
                cells.append(NET_CHAR)
            elif ball_in_bounds and x == bx and y == by:
                cells.append(BALL_CHAR)
            else:
                cells.append(" ")
        rows.append(SIDE_WALL + "".join(cells) + SIDE_WALL)
    rows.append(COURT_RULE)
    return rows


def format_footer(snap: Snapshot) -> list[str]:
    lines = []
    if snap.message:
        lines.append(snap.message)
    if snap.game_over:
        lines.append(f"game is game. winner is {snap.winner_label}")
        lines.append(f"final score: ping {snap.score_ping} - {snap.score_pong} pong")
        lines.append(f"longest rally: {snap.longest_rally} hits")
    return lines


def format_board(snap: Snapshot) -> list[str]:
    return format_header(snap) + format_court(snap) + format_footer(snap)


class TerminalDisplay:
    """DisplaySink that redraws the whole board on every frame."""

    def __init__(self, term: Optional[Terminal] = None, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.term = term if term is not None else Terminal(stream=self.stream)
        self.frames = 0

    def render(self, snapshot: Snapshot) -> None:
        lines = format_board(snapshot)
        lines[1] = self.term.bold(lines[1])
        if snapshot.game_over:
            lines[-3] = self.term.bold(lines[-3])
        self.stream.write(self.term.home + self.term.clear + "\n".join(lines) + "\n")
        self.stream.flush()
        self.frames += 1

    @contextmanager
    def session(self):
        """Hide the cursor for the length of a match and restore it afterwards."""
        with self.term.hidden_cursor():
            yield self

    def banner(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Countdown shown before the first serve."""
        pause = court.BANNER_PAUSE_MS / 1000.0
        self.stream.write(self.term.home + self.term.clear + self.term.bold(TITLE) + "\n")
        self.stream.flush()
        for word in ("\nrdy...", "set...", "go!"):
            sleep(pause)
            self.stream.write(word + "\n")
            self.stream.flush()
        sleep(pause / 2)
