"""
Performance benchmark script for Blockfall.

Tests the speed of the game engine with a random-command bot.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Dict, Any, Optional
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockfall.config import GameConfig, load_config
from blockfall.engine import play_random_game
from blockfall.logger import GameLogger, MetricsTracker


def benchmark_engine(
    config: GameConfig,
    num_games: int = 200,
    seed: int = 42,
    logger: Optional[GameLogger] = None,
) -> Dict[str, Any]:
    """
    Benchmark the game engine speed.

    Args:
        config: Session configuration
        num_games: Number of games to play
        seed: Random seed
        logger: Optional logger for per-game summaries

    Returns:
        Dictionary of benchmark results
    """
    tracker = MetricsTracker(keys=('score', 'lines', 'pieces_spawned'))
    total_ticks = 0

    start = time.perf_counter()
    for i in tqdm(range(num_games), desc="Benchmarking"):
        stats = play_random_game(seed=seed + i, config=config)
        total_ticks += stats['ticks']
        tracker.record(stats)
        if logger is not None:
            logger.log("game", stats, step=i)
    total_time = time.perf_counter() - start
    pieces = tracker.summary('pieces_spawned')

    return {
        'num_games': num_games,
        'total_ticks': total_ticks,
        'total_time': total_time,
        'ticks_per_second': total_ticks / total_time,
        'pieces_per_second': pieces['total'] / total_time,
        'games_per_second': num_games / total_time,
        'score': tracker.summary('score'),
        'lines': tracker.summary('lines'),
        'pieces': pieces,
    }


def print_results(title: str, results: Dict[str, Any]) -> None:
    """Print benchmark results."""
    print(f"\n{'='*60}")
    print(title)
    print('='*60)
    for key, value in results.items():
        if isinstance(value, float):
            print(f"  {key}: {value:.2f}")
        elif isinstance(value, dict):
            print(f"  {key}:")
            for k, v in value.items():
                if isinstance(v, float):
                    print(f"    {k}: {v:.2f}")
                else:
                    print(f"    {k}: {v}")
        else:
            print(f"  {key}: {value}")
    print('='*60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Benchmark Blockfall")
    parser.add_argument(
        "--games",
        type=int,
        default=200,
        help="Number of games to play"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML config"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Write per-game statistics as JSONL to this directory"
    )

    args = parser.parse_args()

    config = load_config(args.config) if args.config else GameConfig()
    logger = GameLogger(args.log_dir, name="benchmark") if args.log_dir else None

    results = benchmark_engine(config, num_games=args.games, seed=args.seed, logger=logger)
    print_results("GAME ENGINE BENCHMARK", results)

    if logger is not None:
        summary_file = logger.save_summary()
        print(f"Logs saved to {logger.log_file} and {summary_file}")


if __name__ == "__main__":
    main()
