"""Matplotlib analysis charts — score progression, rally lengths, ball speed, point reasons."""

import os

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

from display.recorder import RecordingDisplay
from pingpong.rng import RandomSource
from pingpong.scheduler import play_match
from pingpong import court

PING_COLOR = "#4ecdc4"
PONG_COLOR = "#e94560"


def _style_chart(ax, title):
    """Apply dark theme styling to chart."""
    ax.set_facecolor("#0f0f1a")
    ax.set_title(title, color="#e0e0e0", fontsize=13, fontweight="bold", pad=12)
    ax.tick_params(colors="#888888", labelsize=9)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.spines["bottom"].set_color("#333333")
    ax.spines["left"].set_color("#333333")
    ax.xaxis.label.set_color("#aaaaaa")
    ax.yaxis.label.set_color("#aaaaaa")


def _finish(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
    return fig


def run_recorded_matches(n_matches=3, seed=0):
    """Play ``n_matches`` headless matches; returns [(simulation, recorder), ...]."""
    runs = []
    for i in range(n_matches):
        recorder = RecordingDisplay()
        simulation, _ = play_match(recorder, rng=RandomSource(seed + i))
        runs.append((simulation, recorder))
    return runs


def chart_score_progression(history, save_path=None):
    """Chart 1: both scores after every point, with the serving side shaded."""
    points = np.arange(1, len(history) + 1)
    ping = np.array([p["ping"] for p in history])
    pong = np.array([p["pong"] for p in history])

    fig, ax = plt.subplots(figsize=(8, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Score Progression")

    for i, p in enumerate(history):
        if p["server"] == 1:
            ax.axvspan(i + 0.5, i + 1.5, color="#222238", alpha=0.6, linewidth=0)

    ax.step(points, ping, where="post", color=PING_COLOR, linewidth=2, label="ping")
    ax.step(points, pong, where="post", color=PONG_COLOR, linewidth=2, label="pong")
    ax.axhline(y=court.MAX_SCORE, color="#ffc107", linestyle="--", linewidth=1, alpha=0.6)

    ax.set_xlabel("Point")
    ax.set_ylabel("Score")
    ax.set_ylim(0, court.MAX_SCORE + 1)
    ax.legend(facecolor="#1a1a2e", edgecolor="#333", labelcolor="#e0e0e0", fontsize=9)
    ax.grid(True, alpha=0.15)
    return _finish(fig, save_path)


def chart_rally_length_distribution(histories, save_path=None):
    """Chart 2: rally lengths across one or more matches."""
    lengths = np.array([p["rally"] for h in histories for p in h], dtype=int)

    fig, ax = plt.subplots(figsize=(8, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Rally Length Distribution")

    top = int(lengths.max()) if lengths.size else 1
    bins = np.arange(0, top + 2) - 0.5
    ax.hist(lengths, bins=bins, color=PING_COLOR, alpha=0.75, edgecolor="#0f0f1a")
    if lengths.size:
        mean = float(lengths.mean())
        ax.axvline(mean, color=PONG_COLOR, linestyle="--", linewidth=1.5)
        ax.text(mean, ax.get_ylim()[1] * 0.95, f" mean {mean:.1f}", color=PONG_COLOR, fontsize=9)

    ax.set_xlabel("Returns per point")
    ax.set_ylabel("Frequency")
    ax.grid(True, alpha=0.15, axis="y")
    return _finish(fig, save_path)


def chart_ball_speed(speeds, save_path=None):
    """Chart 3: ball speed on every rally frame, with the allowed band."""
    speeds = np.asarray(speeds, dtype=float)

    fig, ax = plt.subplots(figsize=(10, 4))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "Ball Speed per Frame")

    ax.plot(np.arange(speeds.size), speeds, color=PING_COLOR, linewidth=1)
    ax.axhspan(court.MIN_ALLOWED_SPEED, court.MAX_ALLOWED_SPEED, color="#28a745", alpha=0.08)
    ax.axhline(court.MIN_ALLOWED_SPEED, color="#28a745", linestyle="--", linewidth=1)
    ax.axhline(court.MAX_ALLOWED_SPEED, color="#dc3545", linestyle="--", linewidth=1)

    ax.set_xlabel("Frame")
    ax.set_ylabel("Speed (cells/tick)")
    ax.set_ylim(0, court.MAX_ALLOWED_SPEED + 1)
    ax.grid(True, alpha=0.15)
    return _finish(fig, save_path)


def chart_point_reasons(histories, save_path=None):
    """Chart 4: how points are won, split by winner."""
    reasons = ["miss", "out_left", "out_right"]
    counts = np.zeros((2, len(reasons)))
    for h in histories:
        for p in h:
            if p["reason"] in reasons:
                counts[p["winner"]][reasons.index(p["reason"])] += 1

    fig, ax = plt.subplots(figsize=(7, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, "How Points Are Won")

    y = np.arange(len(reasons))
    height = 0.38
    for row, (label, color) in enumerate((("ping", PING_COLOR), ("pong", PONG_COLOR))):
        bars = ax.barh(y + row * height, counts[row], height, color=color, alpha=0.85, label=label)
        for bar, count in zip(bars, counts[row]):
            ax.text(bar.get_width() + 0.2, bar.get_y() + bar.get_height() / 2,
                    f"{count:.0f}", va="center", fontsize=9, color="#e0e0e0")

    ax.set_yticks(y + height / 2)
    ax.set_yticklabels(reasons)
    ax.set_xlabel("Points")
    ax.invert_yaxis()
    ax.legend(facecolor="#1a1a2e", edgecolor="#333", labelcolor="#e0e0e0", fontsize=9)
    ax.grid(True, alpha=0.15, axis="x")
    return _finish(fig, save_path)


def generate_all_charts(output_dir=".", n_matches=3, seed=0):
    """Simulate matches and save every chart to ``output_dir``."""
    os.makedirs(output_dir, exist_ok=True)
    print(f"  Simulating {n_matches} matches (seed {seed})...")
    runs = run_recorded_matches(n_matches=n_matches, seed=seed)
    histories = [sim.match.history for sim, _ in runs]
    first_sim, first_recorder = runs[0]

    charts = [
        ("chart_score_progression.png", chart_score_progression, first_sim.match.history),
        ("chart_rally_distribution.png", chart_rally_length_distribution, histories),
        ("chart_ball_speed.png", chart_ball_speed, first_recorder.speeds()),
        ("chart_point_reasons.png", chart_point_reasons, histories),
    ]

    paths = []
    for filename, chart, data in charts:
        path = os.path.join(output_dir, filename)
        chart(data, save_path=path)
        paths.append(path)
        print(f"  Saved: {path}")

    plt.close("all")
    return paths
