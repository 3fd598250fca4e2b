# cli_driver.py
# This file is intended to be run to play the 2048 game on the CLI

from argparse import ArgumentParser
from enum import Enum
from typing import List, Optional
import logging
import random

from core import Board, Direction
from session import (
    GameState,
    GameStatus,
    play_move,
    restart_game,
    start_game,
)


class Command(Enum):
    """Everything a key press can mean to the game loop."""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    RESTART = "RESTART"
    QUIT = "QUIT"
    UNRECOGNIZED = "UNRECOGNIZED"


KEY_BINDINGS = {
    'w': Command.UP,
    's': Command.DOWN,
    'a': Command.LEFT,
    'd': Command.RIGHT,
    'r': Command.RESTART,
    'q': Command.QUIT,
}

COMMAND_DIRECTIONS = {
    Command.UP: Direction.UP,
    Command.DOWN: Direction.DOWN,
    Command.LEFT: Direction.LEFT,
    Command.RIGHT: Direction.RIGHT,
}

MOVE_PROMPT = "Move with WASD (or q to quit, r to restart): "
GAME_OVER_PROMPT = "Press r to restart or q to quit: "


def parse_command(raw: str) -> Command:
    """Maps one line of keyboard input to a command; keys are case-insensitive."""
    key = raw.strip()
    if len(key) != 1:
        return Command.UNRECOGNIZED
    return KEY_BINDINGS.get(key.lower(), Command.UNRECOGNIZED)

def read_command(prompt: str) -> Command:
    try:
        return parse_command(input(prompt))
    except EOFError:
        # stdin closed
        return Command.QUIT

# --- Display Functions ---

def render_board(board: Board) -> str:
    """Formats the board as tab-separated rows, empty cells shown as '.'."""
    lines = []
    for row in board:
        lines.append("\t".join("." if value == 0 else str(value) for value in row))
    return "\n".join(lines)

def display_game_state(state: GameState):
    """Prints the board, score, and game status to the console."""
    print(f"\nScore: {state.score}")
    print(f"Status: {state.status.name}")
    print(render_board(state.board))
    print("-" * (len(state.board) * 8))

# --- Game Loop ---

def parse_args(argv: Optional[List[str]] = None):
    parser = ArgumentParser(description='Play 2048 in the terminal')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the tile generator')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging verbosity')
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    rng = random.Random(args.seed)
    state = start_game(rng)

    while True:
        display_game_state(state)

        if state.status == GameStatus.LOST:
            print("Game Over! No more moves possible.")
            command = read_command(GAME_OVER_PROMPT)
        else:
            command = read_command(MOVE_PROMPT)

        if command == Command.QUIT:
            print("Thanks for playing!")
            return 0

        if command == Command.RESTART:
            state = restart_game(rng)
            continue

        if command == Command.UNRECOGNIZED:
            print("Invalid key, use WASD, r to restart, or q to quit!")
            continue

        if state.status == GameStatus.LOST:
            # Only restart and quit mean anything once the game is lost.
            continue

        report = play_move(state, COMMAND_DIRECTIONS[command], rng)
        if not report.changed:
            print("Move did not change the board. Try a different direction.")
            continue

        if report.just_won:
            print("You win! Keep going for a higher score, or press q to quit.")
        state = report.state


if __name__ == "__main__":
    raise SystemExit(main())
