# session.py
# Game state wrapper around the stateless engine in core.py.
# A GameState is a plain value: every command returns a new one.

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional
import logging
import random

import core

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Represents the current progress state of the game."""
    PLAYING = "PLAYING"
    WON = "WON"  # Advisory, moves are still allowed
    LOST = "LOST"


class GameOverError(ValueError):
    """Raised when a move is attempted on a game that is already lost."""


@dataclass(frozen=True)
class GameState:
    board: core.Board
    score: int = 0
    status: GameStatus = GameStatus.PLAYING


class MoveReport(NamedTuple):
    """What a single move did to the game."""
    state: GameState
    changed: bool
    score_gained: int
    just_won: bool


def start_game(rng: Optional[random.Random] = None) -> GameState:
    """
    Starts a new session with a fresh board.
    Args:
        rng (Optional[random.Random]): Random source for the initial tiles.
    Returns:
        GameState: Fresh board, score 0, status PLAYING.
    """
    state = GameState(board=core.create_new_board(rng))
    logger.info("Started a new game")
    return state

def restart_game(rng: Optional[random.Random] = None) -> GameState:
    """Discards the current game and starts over."""
    logger.info("Restarting game")
    return start_game(rng)

def determine_status(board: core.Board, previous: GameStatus = GameStatus.PLAYING) -> GameStatus:
    """
    Determines the status of the game after a spawn.
    Args:
        board (core.Board): The board after the new tile was placed.
        previous (GameStatus): Status before the move; a win is kept once reached.
    Returns:
        GameStatus: LOST if no move is possible, WON if the winning tile was
                    ever reached, PLAYING otherwise.
    """
    if core.is_game_over(board):
        return GameStatus.LOST
    if previous == GameStatus.WON or core.check_for_win(board):
        return GameStatus.WON
    return GameStatus.PLAYING

def check_status(board: core.Board, status: GameStatus) -> None:
    """
    Checks that a status held outside the engine still agrees with its board.
    Tiles only grow, so a won game keeps a tile of at least the winning value.
    Args:
        board (core.Board): A validated board.
        status (GameStatus): The status claimed for that board.
    Raises:
        ValueError: If the status contradicts the board.
    """
    game_over = core.is_game_over(board)
    reached_win = core.max_tile(board) >= core.WIN_TILE

    if game_over and status != GameStatus.LOST:
        raise ValueError(f"Status {status.name} does not match the board: no move is possible, the game is LOST.")
    if not game_over and status == GameStatus.LOST:
        raise ValueError("Status LOST does not match the board: moves are still possible.")
    if status == GameStatus.WON and not reached_win:
        raise ValueError(f"Status WON does not match the board: no tile reaches {core.WIN_TILE}.")
    if status == GameStatus.PLAYING and reached_win:
        raise ValueError(f"Status PLAYING does not match the board: the {core.WIN_TILE} tile was already reached.")

def play_move(state: GameState, direction: core.Direction,
              rng: Optional[random.Random] = None) -> MoveReport:
    """
    Applies one directional move: slide and merge, then spawn a tile and
    re-evaluate the status if the board changed.
    Args:
        state (GameState): The current game.
        direction (core.Direction): Direction chosen by the player.
        rng (Optional[random.Random]): Random source for the spawned tile.
    Returns:
        MoveReport: The next state and what the move did. A move that leaves
                    the board unchanged returns the same state with changed=False.
    Raises:
        GameOverError: If the game is already lost.
    """
    if state.status == GameStatus.LOST:
        raise GameOverError("Game is over; start a new game to keep playing.")

    outcome = core.process_move(state.board, direction)
    if not outcome.changed:
        logger.debug("Move %s had no effect", direction.name)
        return MoveReport(state=state, changed=False, score_gained=0, just_won=False)

    board, _ = core.add_random_tile(outcome.board, rng)
    status = determine_status(board, state.status)

    reached_win = outcome.won or core.check_for_win(board)
    just_won = reached_win and state.status == GameStatus.PLAYING
    if just_won:
        logger.info("Winning tile %d reached with score %d", core.WIN_TILE, state.score + outcome.score)
    if status == GameStatus.LOST:
        logger.info("Game lost with score %d, best tile %d", state.score + outcome.score, core.max_tile(board))

    logger.debug("Move %s gained %d points", direction.name, outcome.score)
    next_state = GameState(board=board, score=state.score + outcome.score, status=status)
    return MoveReport(state=next_state, changed=True, score_gained=outcome.score, just_won=just_won)
