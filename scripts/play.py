"""
Interactive play script for Blockfall.

Allows watching a random bot play or playing turn by turn in the terminal.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Optional
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockfall.config import GameConfig, load_config
from blockfall.engine import GameSession, play_random_game
from blockfall.logger import GameLogger
from blockfall.physics import Rotation
from blockfall.renderer import Renderer, clear_screen, legend


# Key -> session command for manual mode
MANUAL_KEYS = {
    "a": ("move_left", ()),
    "d": ("move_right", ()),
    "s": ("soft_drop_once", ()),
    "w": ("rotate", (Rotation.CLOCKWISE,)),
    "z": ("rotate", (Rotation.COUNTER_CLOCKWISE,)),
    "p": ("toggle_pause", ()),
    "r": ("reset", ()),
}


def watch_random_bot(
    config: GameConfig,
    num_games: int = 1,
    delay: float = 0.05,
    max_ticks: int = 20_000,
    seed: int = 42,
    use_color: bool = True,
    logger: Optional[GameLogger] = None,
) -> None:
    """
    Watch a bot that presses random keys.

    Args:
        config: Session configuration
        num_games: Number of games to play
        delay: Wall-clock delay per frame (seconds)
        max_ticks: Frame limit per game
        seed: Random seed
        use_color: Whether to paint cells with ANSI colours
        logger: Optional event logger
    """
    renderer = Renderer(use_color=use_color)
    frame_ms = 50.0

    for game_num in range(num_games):
        session = GameSession(config=config, seed=seed + game_num, logger=logger)
        commands = [session.move_left, session.move_right, session.rotate_cw,
                    session.soft_drop_once, None, None]

        tick = 0
        while not session.is_game_over() and tick < max_ticks:
            command = commands[int(session.rng.integers(len(commands)))]
            if command is not None:
                command()
            session.tick(frame_ms)
            tick += 1

            clear_screen()
            print(f"Game {game_num + 1}/{num_games} | Tick {tick}")
            print(renderer.render_session(session))
            time.sleep(delay)

        stats = session.get_statistics()
        print(f"\n{'='*40}")
        print("GAME OVER!" if session.is_game_over() else "Tick limit reached")
        print(f"{'='*40}")
        print(f"Final Score: {stats['score']:,}")
        print(f"Level: {stats['level']}")
        print(f"Lines Cleared: {stats['lines']}")
        print(f"Pieces: {stats['pieces_spawned']}")
        print(f"{'='*40}\n")

        if game_num < num_games - 1:
            input("Press Enter for next game...")


def play_manual(config: GameConfig, seed: int = 42, use_color: bool = True) -> None:
    """
    Play Blockfall turn by turn in the terminal.

    Each line of input is a string of command keys. Wall-clock time spent
    typing is fed to the gravity timer when the line is submitted.
    """
    session = GameSession(config=config, seed=seed)
    renderer = Renderer(use_color=use_color)

    print("\n" + "="*40)
    print("BLOCKFALL - Manual Play")
    print("="*40)
    print("\nControls (combine on one line, e.g. 'aaw'):")
    print("  a/d  move left/right")
    print("  s    soft drop")
    print("  w/z  rotate clockwise/counter-clockwise")
    print("  p    pause/resume")
    print("  r    restart")
    print("  q    quit")
    print("\nPieces:")
    for line in legend(use_color=use_color):
        print(f"  {line}")
    print("="*40 + "\n")
    input("Press Enter to start...")

    last = time.monotonic()
    while True:
        clear_screen()
        print(renderer.render_session(session))

        if session.is_game_over():
            print(f"\nFinal Score: {session.score:,}")
            answer = input("\nPlay again? (y/n): ").strip().lower()
            if answer == 'y':
                session.reset()
                last = time.monotonic()
                continue
            break

        keys = input("\nCommands: ").strip().lower()
        now = time.monotonic()
        elapsed_ms = (now - last) * 1000.0
        last = now

        if "q" in keys:
            print("Thanks for playing!")
            break

        for key in keys:
            if key not in MANUAL_KEYS:
                continue
            name, args = MANUAL_KEYS[key]
            getattr(session, name)(*args)
            if session.is_game_over():
                break

        session.tick(elapsed_ms)


def play_random(config: GameConfig, num_games: int = 10, seed: int = 42) -> None:
    """
    Play random games and show statistics.

    Args:
        config: Session configuration
        num_games: Number of games to play
        seed: Random seed
    """
    print(f"\nPlaying {num_games} random games...")

    scores = []
    pieces = []
    lines = []

    for i in range(num_games):
        stats = play_random_game(seed=seed + i, config=config)
        scores.append(stats['score'])
        pieces.append(stats['pieces_spawned'])
        lines.append(stats['lines'])

        print(f"Game {i+1}: Score={stats['score']:,}, "
              f"Pieces={stats['pieces_spawned']}, "
              f"Lines={stats['lines']}")

    print("\n" + "="*40)
    print("RANDOM BOT STATISTICS")
    print("="*40)
    print(f"Games: {num_games}")
    print(f"Mean Score: {np.mean(scores):.1f} ± {np.std(scores):.1f}")
    print(f"Max Score: {max(scores)}")
    print(f"Mean Pieces: {np.mean(pieces):.1f}")
    print(f"Mean Lines: {np.mean(lines):.1f}")
    print("="*40)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Play Blockfall")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["watch", "manual", "random"],
        default="watch",
        help="Play mode: watch a random bot, play manually, or collect random-bot stats"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML config (default: built-in 10x20 settings)"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of games to play"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.05,
        help="Delay between frames (seconds) for watch mode"
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=20_000,
        help="Frame limit per game for watch mode"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed"
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colours"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Write JSONL session events to this directory (watch mode)"
    )

    args = parser.parse_args()

    config = load_config(args.config) if args.config else GameConfig()
    use_color = not args.no_color

    if args.mode == "watch":
        logger = GameLogger(args.log_dir, name="watch") if args.log_dir else None
        watch_random_bot(
            config,
            num_games=args.games,
            delay=args.delay,
            max_ticks=args.max_ticks,
            seed=args.seed,
            use_color=use_color,
            logger=logger,
        )
        if logger is not None:
            print(f"Events saved to {logger.log_file}")

    elif args.mode == "manual":
        play_manual(config, seed=args.seed, use_color=use_color)

    elif args.mode == "random":
        play_random(config, num_games=args.games, seed=args.seed)


if __name__ == "__main__":
    main()
