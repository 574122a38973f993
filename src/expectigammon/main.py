"""Command-line entrypoint for expectigammon.

Runs a benchmark match between the expectimax agent and a chosen opponent
and reports the agent's success rate, or with ``--interactive`` lets a
human play Max against the agent on the console.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import numpy as np

from expectigammon import __version__
from expectigammon.core.types import Side
from expectigammon.evaluation.agents import (
    Agent,
    expectimax_agent,
    greedy_agent,
    random_agent,
)
from expectigammon.evaluation.benchmark import evaluate_agents
from expectigammon.evaluation.search import SearchConfig
from expectigammon.simulation.interactive import play_interactive
from expectigammon.simulation.metrics import MetricsLogger


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="expectigammon",
        description="Play the expectimax backgammon agent against an opponent.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"expectigammon {__version__}",
    )
    parser.add_argument("--games", type=int, default=10, help="number of games to play")
    parser.add_argument("--depth", type=int, default=2, help="search depth of the agent")
    parser.add_argument(
        "--opponent",
        choices=["random", "greedy", "expectimax"],
        default="random",
        help="opponent agent",
    )
    parser.add_argument(
        "--opponent-depth", type=int, default=1,
        help="search depth of an expectimax opponent",
    )
    parser.add_argument("--workers", type=int, default=1, help="games played concurrently")
    parser.add_argument("--seed", type=int, default=None, help="seed for dice and random agents")
    parser.add_argument("--max-turns", type=int, default=2000, help="turn cap per game")
    parser.add_argument("--log-dir", default=None, help="write JSONL metrics to this directory")
    parser.add_argument(
        "--interactive", action="store_true",
        help="play Max yourself against the expectimax agent",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def build_opponent(name: str, depth: int, seed: Optional[int] = None) -> Agent:
    """Create the opponent selected on the command line."""
    if name == "random":
        return random_agent(seed)
    if name == "greedy":
        return greedy_agent()
    return expectimax_agent(SearchConfig(depth=depth), name=f"Opponent-{depth}ply")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint used by the `expectigammon` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.games < 1:
        parser.error("--games must be at least 1")

    try:
        agent = expectimax_agent(SearchConfig(depth=args.depth))
        opponent = build_opponent(args.opponent, args.opponent_depth, args.seed)
    except ValueError as exc:
        parser.error(str(exc))

    if args.interactive:
        play_interactive(
            agent,
            human_side=Side.MAX,
            rng=np.random.default_rng(args.seed),
            max_turns=args.max_turns,
        )
        return 0

    result = evaluate_agents(
        agent,
        opponent,
        num_games=args.games,
        seed=args.seed,
        workers=args.workers,
        max_turns=args.max_turns,
    )

    print(result.summary())
    print(f"Success rate is {result.win_rate * 100:.2f} %")
    stats = result.statistics
    print(
        f"Max won {stats['max_wins']}, Min won {stats['min_wins']}, "
        f"unfinished {stats['unfinished']}, passes {stats['passes']}"
    )

    if args.log_dir is not None:
        with MetricsLogger(log_dir=args.log_dir, console_interval=0) as metrics:
            metrics.log_hyperparams({
                "games": args.games,
                "depth": args.depth,
                "opponent": args.opponent,
                "opponent_depth": args.opponent_depth,
                "workers": args.workers,
                "seed": args.seed,
                "max_turns": args.max_turns,
            })
            metrics.log_metrics(result.to_dict(), step=0, prefix="eval/")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
