#!/usr/bin/env python3
"""CLI entry point for the ping/pong match simulator.

Usage:
    python main.py play [seed]       Watch an AI match in the terminal
    python main.py game [seed]       Run an AI match headless and print stats
    python main.py analyze [seed]    Generate match analysis charts
    python main.py test              Run all tests

Add -v anywhere for INFO logging on stderr.
"""

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def _seed_arg():
    """First integer positional argument after the command, if any."""
    for arg in sys.argv[2:]:
        if arg.lstrip("-").isdigit():
            return int(arg)
    return None


def cmd_play():
    """Watch an AI match in the terminal."""
    from display.terminal import TerminalDisplay
    from pingpong.rng import RandomSource
    from pingpong.scheduler import MatchScheduler
    from pingpong.simulation import Simulation

    display = TerminalDisplay()
    simulation = Simulation(RandomSource(_seed_arg()))
    scheduler = MatchScheduler(simulation, display)

    try:
        with display.session():
            display.banner()
            result = scheduler.run()
    except KeyboardInterrupt:
        print("\nmatch aborted.")
        sys.exit(130)

    print(f"\n  FINAL SCORE: ping {result.score_ping} - {result.score_pong} pong")


def cmd_game():
    """Run an AI match headless and print stats."""
    from display.recorder import RecordingDisplay
    from pingpong.rng import RandomSource
    from pingpong.scheduler import play_match

    seed = _seed_arg()

    print("=" * 60)
    print("  AI PING PONG MATCH")
    print("=" * 60)
    print(f"\n  seed: {seed if seed is not None else 'random'}\n")

    simulation, result = play_match(RecordingDisplay(limit=1), rng=RandomSource(seed))
    s = result.stats

    for i, point in enumerate(simulation.match.history):
        winner = "ping" if point["winner"] == 0 else "pong"
        server = "ping" if point["server"] == 0 else "pong"
        print(f"  Point {i+1:2d}: {point['rally']:2d} returns, {winner} wins "
              f"({point['reason']}), {server} served  [{point['ping']}-{point['pong']}]")

    print()
    print(f"  FINAL SCORE: ping {result.score_ping} - {result.score_pong} pong")
    print(f"  WINNER: {result.winner}")
    print()
    print(f"  Total points: {s['total_points']}")
    print(f"  Avg rally length: {s['avg_rally_length']} returns")
    print(f"  Longest rally: {s['longest_rally']} returns")
    print(f"  Ping misses: {s['ping_misses']}  |  Pong misses: {s['pong_misses']}")
    print(f"  Point reasons: {dict(sorted(s['reasons'].items(), key=lambda x: -x[1]))}")
    print(f"  Ticks: {result.ticks}  |  Hand-offs: {result.handoffs}")
    print("=" * 60)


def cmd_analyze():
    """Generate match analysis charts."""
    print("Generating analysis charts...")
    print("-" * 60)
    from display.analysis import generate_all_charts
    output_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "output")
    seed = _seed_arg()
    paths = generate_all_charts(output_dir=output_dir, seed=seed if seed is not None else 0)
    print(f"\nDone! {len(paths)} charts saved to {output_dir}/")


def cmd_test():
    """Run all tests."""
    import subprocess
    print("Running tests...")
    print("-" * 60)
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "tests/", "-v"],
        cwd=os.path.dirname(os.path.abspath(__file__)),
    )
    sys.exit(result.returncode)


COMMANDS = {
    "play": cmd_play,
    "game": cmd_game,
    "analyze": cmd_analyze,
    "test": cmd_test,
}


def main():
    verbose = "-v" in sys.argv
    if verbose:
        sys.argv.remove("-v")
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(__doc__)
        print("Available commands:")
        for name, func in COMMANDS.items():
            print(f"  {name:12s} {func.__doc__}")
        sys.exit(1)

    COMMANDS[sys.argv[1]]()


if __name__ == "__main__":
    main()
