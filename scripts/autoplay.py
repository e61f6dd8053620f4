#!/usr/bin/env python3
"""
autosnake - Headless Autopilot Runner

Let the A* autopilot play rounds without a display and report how each
round ended.

Usage:
    python scripts/autoplay.py                          # One round with config.yaml
    python scripts/autoplay.py --rounds 20 --seed 7
    python scripts/autoplay.py --fallback random --json # Machine-readable output
"""
import sys
import json
import argparse
import random
import statistics
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rich.console import Console
from rich.table import Table

from autosnake.game.autopilot import Autopilot
from autosnake.game.snake_game import SnakeGame
from autosnake.solver.fallback import FALLBACKS
from autosnake.solver.pathfinder import Pathfinder
from autosnake.utils.config_loader import Config, apply_overrides, load_config
from autosnake.utils.logging_setup import setup_logging


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="autosnake - Run the autopilot headless",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/autoplay.py
  python scripts/autoplay.py --rounds 20 --seed 7
  python scripts/autoplay.py --width 30 --height 20 --no-obstacles --json
"""
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: config.yaml)"
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=1,
        help="Number of rounds to play (default: 1)"
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=5000,
        help="Stop a round after this many steps (default: 5000)"
    )
    parser.add_argument(
        "-W", "--width",
        type=int,
        default=None,
        help="Grid width (overrides config)"
    )
    parser.add_argument(
        "-H", "--height",
        type=int,
        default=None,
        help="Grid height (overrides config)"
    )
    parser.add_argument(
        "--obstacles",
        type=int,
        default=None,
        help="Number of obstacles (overrides config)"
    )
    parser.add_argument(
        "-n", "--no-obstacles",
        action="store_true",
        default=None,
        help="Don't place obstacles on the grid"
    )
    parser.add_argument(
        "--fallback",
        choices=sorted(FALLBACKS),
        default=None,
        help="Move choice when the food is unreachable (overrides config)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible rounds"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level, e.g. DEBUG (overrides config)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results in JSON format"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Minimal output"
    )

    return parser.parse_args(argv)


def build_config(args) -> Config:
    """Load the config file and apply command line overrides."""
    config = load_config(args.config)
    return apply_overrides(config, {
        "game": {
            "grid_width": args.width,
            "grid_height": args.height,
            "obstacles": args.obstacles,
            "no_obstacles": args.no_obstacles,
            "seed": args.seed,
            "autopilot": True,
        },
        "autopilot": {"fallback": args.fallback},
        "logging": {"level": args.log_level},
    })


def play_round(game: SnakeGame, max_steps: int) -> Dict:
    """Play one round until it ends or max_steps is reached."""
    game.reset()
    while not game.game_over and game.steps < max_steps:
        game.tick()

    if game.won:
        outcome = "won"
    elif game.crashed:
        outcome = "crashed"
    else:
        outcome = "stalled"

    return {
        "steps": game.steps,
        "length": game.length,
        "outcome": outcome,
        "replans": game.autopilot.replans,
    }


def run_rounds(config: Config, rounds: int, max_steps: int) -> List[Dict]:
    """Play several rounds sharing one seeded random source."""
    rng = random.Random(config.game.seed)
    autopilot = Autopilot(Pathfinder(fallback=config.autopilot.fallback, rng=rng))
    game = SnakeGame(config.game, rng=rng, autopilot=autopilot)

    results = []
    for index in range(rounds):
        result = play_round(game, max_steps)
        result["round"] = index + 1
        results.append(result)
    return results


def summarize(results: List[Dict]) -> Dict:
    """Aggregate per-round results."""
    lengths = [r["length"] for r in results]
    outcomes: Dict[str, int] = {}
    for r in results:
        outcomes[r["outcome"]] = outcomes.get(r["outcome"], 0) + 1

    return {
        "rounds": len(results),
        "length": {
            "mean": statistics.mean(lengths),
            "median": statistics.median(lengths),
            "min": min(lengths),
            "max": max(lengths),
        },
        "outcomes": outcomes,
    }


def print_table(console: Console, results: List[Dict], summary: Dict):
    """Print results as a rich table."""
    table = Table(title="Autopilot Rounds")
    table.add_column("Round", justify="right", style="cyan")
    table.add_column("Steps", justify="right")
    table.add_column("Length", justify="right", style="green")
    table.add_column("Replans", justify="right")
    table.add_column("Outcome")

    colors = {"won": "bold green", "crashed": "red", "stalled": "yellow"}
    for r in results:
        table.add_row(
            str(r["round"]),
            str(r["steps"]),
            str(r["length"]),
            str(r["replans"]),
            f"[{colors[r['outcome']]}]{r['outcome']}[/]",
        )

    console.print(table)
    console.print(
        f"Mean length: {summary['length']['mean']:.2f} | "
        f"Max length: {summary['length']['max']}"
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    console = Console()

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        if args.json:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/] {e}")
        return 1

    for option, value in (("--rounds", args.rounds), ("--max-steps", args.max_steps)):
        if value < 1:
            message = f"{option} must be at least 1, got {value}"
            if args.json:
                print(json.dumps({"error": message}))
            else:
                console.print(f"[red]Error:[/] {message}")
            return 1

    setup_logging(config.logging)

    if not args.quiet and not args.json:
        console.rule("autosnake - Autopilot")
        console.print(
            f"Grid: {config.game.grid_width}x{config.game.grid_height} | "
            f"Fallback: {config.autopilot.fallback} | Rounds: {args.rounds}"
        )

    results = run_rounds(config, args.rounds, args.max_steps)
    summary = summarize(results)

    if args.json:
        print(json.dumps({"success": True, "summary": summary, "rounds": results}, indent=2))
    elif args.quiet:
        console.print(f"{summary['length']['mean']:.2f}")
    else:
        print_table(console, results, summary)

    return 0


if __name__ == "__main__":
    sys.exit(main())
