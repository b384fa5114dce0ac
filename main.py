#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py play [--preset {beginner,intermediate,expert}]
                        [--width W --height H --mines N] [--cheats N]
                        [--seed S] [--load PATH]
    python main.py simulate [--games N] [--seed S]
"""
import argparse
import logging
import time
from typing import Optional

from minefield import (
    PRESETS,
    Board,
    BoardConfig,
    ClickAction,
    MinefieldEnv,
    Space,
    load_game,
    render_ansi,
    save_game,
)
from minefield.agents import RandomAgent


CLICK_COMMANDS = {
    "r": ClickAction.DEFAULT,
    "f": ClickAction.FLAG,
    "m": ClickAction.MARK,
    "c": ClickAction.CHEAT,
}

HELP_TEXT = """Commands:
  r X Y      reveal a space (on a number: chord)
  f X Y      flag / unflag a space
  m X Y      cycle mark colors
  c X Y      cheat: safely reveal a space
  new        start a new game
  restart    replay the current minefield
  save PATH  save the game
  quit       leave"""


def build_config(args: argparse.Namespace) -> BoardConfig:
    """Build a board configuration from a preset or custom sizes."""
    preset = PRESETS[args.preset]
    return BoardConfig(
        width=args.width if args.width is not None else preset.width,
        height=args.height if args.height is not None else preset.height,
        num_mines=args.mines if args.mines is not None else preset.num_mines,
        cheats=args.cheats,
    )


def print_board(board: Board) -> None:
    """Print the board with its status line."""
    print(render_ansi(board))
    status = f"Mines: {board.remaining_mines()}  Cheats: {board.cheats_remaining()}"
    if board.has_won():
        status += "  You won!"
    elif board.is_game_over():
        status += "  Game over."
    print(status)


def parse_space(parts: list) -> Optional[Space]:
    """Parse 'X Y' into a space, or None if malformed."""
    if len(parts) != 2:
        return None
    try:
        return Space(int(parts[0]), int(parts[1]))
    except ValueError:
        return None


def play(args: argparse.Namespace) -> None:
    """Play an interactive text game."""
    if args.load:
        board = load_game(args.load)
        if board is None:
            print(f"Could not load {args.load}")
            return
    else:
        board = Board.from_config(build_config(args), seed=args.seed)

    print(HELP_TEXT)
    print_board(board)

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue

        command, *rest = line.split()
        command = command.lower()

        if command == "quit":
            break
        if command == "new":
            board.new_game()
        elif command == "restart":
            board.restart()
        elif command == "save":
            if len(rest) != 1:
                print("Usage: save PATH")
                continue
            path = save_game(board, rest[0])
            print(f"Saved to {path}")
            continue
        elif command in CLICK_COMMANDS:
            space = parse_space(rest)
            if space is None:
                print(f"Usage: {command} X Y")
                continue
            board.handle_click(space, CLICK_COMMANDS[command])
        else:
            print(HELP_TEXT)
            continue

        board.drain_updates()
        print_board(board)


def simulate(args: argparse.Namespace) -> None:
    """Play random-agent games and report the win rate."""
    config = build_config(args)
    env = MinefieldEnv(config=config, max_steps=config.width * config.height)
    agent = RandomAgent(config.height, config.width, seed=args.seed)

    print(
        f"Simulating {args.games} games on {config.width}x{config.height} "
        f"with {config.num_mines} mines..."
    )

    wins = 0
    total_steps = 0
    start_time = time.time()

    for game in range(args.games):
        seed = args.seed + game if args.seed is not None else None
        obs, _ = env.reset(seed=seed)
        agent.reset()
        done = False

        while not done:
            action = agent.select_action(obs, env.get_action_mask())
            next_obs, reward, terminated, truncated, info = env.step(action)
            agent.update(obs, action, reward, next_obs, terminated or truncated)
            obs = next_obs
            done = terminated or truncated

        total_steps += info["steps"]
        if info["game_state"] == "WON":
            wins += 1

    elapsed = time.time() - start_time
    print(f"Win rate: {wins / args.games:.1%}")
    print(f"Avg steps: {total_steps / args.games:.1f}")
    print(f"Speed: {args.games / max(elapsed, 1e-9):.1f} games/s")


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the board size options shared by all commands."""
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="beginner",
        help="Difficulty preset",
    )
    parser.add_argument("--width", type=int, help="Custom board width")
    parser.add_argument("--height", type=int, help="Custom board height")
    parser.add_argument("--mines", type=int, help="Custom mine count")
    parser.add_argument(
        "--cheats", type=int, default=1, help="Cheat clicks per game"
    )
    parser.add_argument("--seed", type=int, help="Mine layout seed")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minefield - Play minesweeper in the terminal"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play an interactive game")
    add_board_arguments(play_parser)
    play_parser.add_argument("--load", help="Resume a saved game")

    # Simulate command
    simulate_parser = subparsers.add_parser(
        "simulate", help="Measure the random agent's win rate"
    )
    add_board_arguments(simulate_parser)
    simulate_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        play(args)
    elif args.command == "simulate":
        simulate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
