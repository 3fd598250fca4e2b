# core.py
# Stateless rules engine for the 2048 board: row transform, directional moves,
# tile spawning and terminal-state checks. Boards are never mutated in place.

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
import random

BOARD_SIZE = 4
WIN_TILE = 2048
INITIAL_TILE_COUNT = 2
SPAWN_FOUR_PROBABILITY = 0.1

Board = List[List[int]]
Cell = Tuple[int, int]

# Used whenever the caller does not inject its own generator.
_GENERATOR = random.Random()


class Direction(Enum):
    """Represents the possible move directions."""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class MoveOutcome(NamedTuple):
    """Result of sliding a board in one direction, before any tile is spawned."""
    board: Board
    score: int
    won: bool
    changed: bool

# --- Board Helper Functions ---

def validate_board(board: Board) -> None:
    """
    Checks that a board is a 4 x 4 grid of empty cells or powers of two.
    Args:
        board (Board): The board to check.
    Raises:
        ValueError: If the shape or any cell value is invalid.
    """
    if len(board) != BOARD_SIZE or not all(len(row) == BOARD_SIZE for row in board):
        raise ValueError(f"Board must be a {BOARD_SIZE}x{BOARD_SIZE} matrix.")
    for row in board:
        for value in row:
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Invalid tile value {value!r}: tiles must be non-negative integers.")
            if value != 0 and (value < 2 or value & (value - 1)):
                raise ValueError(f"Invalid tile value {value}: tiles must be 0 or a power of two.")

def copy_board(board: Board) -> Board:
    return [list(row) for row in board]

def get_empty_cells(board: Board) -> List[Cell]:
    """
    Get coordinates of empty (0-value) cells in the given board.
    Args:
        board (Board): The board to check.
    Returns:
        List[Cell]: List of (row, col) tuples for empty cells, in row-major order.
    """
    return [
        (row, col)
        for row, line in enumerate(board)
        for col, value in enumerate(line)
        if value == 0
    ]

def random_tile_value(rng: Optional[random.Random] = None) -> int:
    """Draws the value of a new tile: 4 with probability 0.1, otherwise 2."""
    rng = rng if rng is not None else _GENERATOR
    return 4 if rng.random() < SPAWN_FOUR_PROBABILITY else 2

def add_random_tile(board: Board, rng: Optional[random.Random] = None) -> Tuple[Board, bool]:
    """
    Adds a new tile (90% chance of 2, 10% chance of 4) to an empty cell on a copy of the board.
    Args:
        board (Board): The current game board.
        rng (Optional[random.Random]): Random source; the module generator is used when omitted.
    Returns:
        Tuple[Board, bool]: A new board with the added tile and a boolean
                            indicating if a tile was successfully added.
                            If no empty cells, returns an unchanged copy and False.
    """
    rng = rng if rng is not None else _GENERATOR
    new_board = copy_board(board)
    empty_cells = get_empty_cells(board)
    if not empty_cells:
        return new_board, False

    row, col = rng.choice(empty_cells)
    new_board[row][col] = random_tile_value(rng)
    return new_board, True

def create_new_board(rng: Optional[random.Random] = None) -> Board:
    """
    Builds the starting board: two tiles at distinct random cells, everything else empty.
    Args:
        rng (Optional[random.Random]): Random source; the module generator is used when omitted.
    Returns:
        Board: A fresh 4 x 4 board with exactly two non-zero cells.
    """
    rng = rng if rng is not None else _GENERATOR
    board = [[0] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    positions = [(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)]

    # Uniform sampling without replacement keeps the two positions distinct.
    for row, col in rng.sample(positions, INITIAL_TILE_COUNT):
        board[row][col] = random_tile_value(rng)
    return board

# --- Row Transform (compress, merge, pad) ---

def compress_row(row: List[int]) -> List[int]:
    """
    Drops the empty cells of a row, keeping the order of the tiles.
    Args:
        row (List[int]): The row to compress.
    Returns:
        List[int]: The non-zero values of the row.
    """
    return [value for value in row if value != 0]

def merge_row(values: List[int], win_tile: int = WIN_TILE) -> Tuple[List[int], int, bool]:
    """
    Merges equal neighbours of a compressed row, scanning left to right.
    A merged pair is skipped as a whole, so no tile takes part in two merges
    during the same move: [2, 2, 2] becomes [4, 2] and [2, 2, 2, 2] becomes [4, 4].
    Args:
        values (List[int]): Compressed row (no zeros).
        win_tile (int): Tile value that signals a win when produced by a merge.
    Returns:
        Tuple[List[int], int, bool]: Merged values, score gained from the merges,
                                     and whether a merge produced the winning tile.
    """
    merged: List[int] = []
    score = 0
    won = False
    read_idx = 0

    while read_idx < len(values):
        current_val = values[read_idx]
        if read_idx + 1 < len(values) and current_val == values[read_idx + 1]:
            merged_value = current_val * 2
            merged.append(merged_value)
            score += merged_value
            won = won or merged_value == win_tile
            read_idx += 2
        else:
            merged.append(current_val)
            read_idx += 1

    return merged, score, won

def pad_row(values: List[int], size: int = BOARD_SIZE) -> List[int]:
    """Appends zeros until the row holds `size` cells."""
    return values + [0] * (size - len(values))

def transform_row(row: List[int]) -> Tuple[List[int], int, bool]:
    """
    Applies compress, merge, then pad to a single row, moving left.
    Args:
        row (List[int]): The row to process; at most BOARD_SIZE cells.
    Returns:
        Tuple[List[int], int, bool]: The processed row (always BOARD_SIZE cells),
                                     score gained, and the winning-merge flag.
    Raises:
        ValueError: If the row is longer than the board.
    """
    if len(row) > BOARD_SIZE:
        raise ValueError(f"Row has {len(row)} cells, the board only has {BOARD_SIZE} columns.")

    merged, score, won = merge_row(compress_row(row))
    return pad_row(merged), score, won

# --- Board Transformations ---

def transpose_board(board: Board) -> Board:
    """
    Transposes a given board (swaps rows and columns). Applying it twice gives back the input.
    Args:
        board (Board): The board to transpose.
    Returns:
        Board: A new transposed board.
    """
    n = len(board)
    return [[board[j][i] for j in range(n)] for i in range(n)]

def reverse_rows(board: Board) -> Board:
    """
    Reverses each row in a given board.
    Args:
        board (Board): The board whose rows are to be reversed.
    Returns:
        Board: A new board with rows reversed.
    """
    return [row[::-1] for row in board]

# --- Core Game Move Processing ---

def move_left(board: Board) -> Tuple[Board, int, bool]:
    """
    Applies the row transform to every row of the board.
    Args:
        board (Board): The board to process.
    Returns:
        Tuple[Board, int, bool]: The processed board, total score gained,
                                 and whether any row produced the winning tile.
    """
    new_board: Board = []
    total_score = 0
    won = False

    for row in board:
        new_row, row_score, row_won = transform_row(row)
        new_board.append(new_row)
        total_score += row_score
        won = won or row_won

    return new_board, total_score, won

def process_move(board: Board, direction: Direction) -> MoveOutcome:
    """
    Slides the board in the given direction by turning that direction into "left".
    Args:
        board (Board): The current game board. It is not modified.
        direction (Direction): The direction to move.
    Returns:
        MoveOutcome: The new board, the score gained, the winning-merge flag and
                     whether the board differs from the input.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    if direction == Direction.LEFT:
        new_board, score, won = move_left(board)

    elif direction == Direction.RIGHT:
        moved, score, won = move_left(reverse_rows(board))
        new_board = reverse_rows(moved)

    elif direction == Direction.UP:
        moved, score, won = move_left(transpose_board(board))
        new_board = transpose_board(moved)

    elif direction == Direction.DOWN:
        moved, score, won = move_left(reverse_rows(transpose_board(board)))
        new_board = transpose_board(reverse_rows(moved))
    else:
        raise ValueError(f"Invalid direction specified for process_move: {direction!r}")

    # List equality compares the two boards cell by cell.
    changed = new_board != board
    return MoveOutcome(board=new_board, score=score, won=won, changed=changed)

# --- Game State Checks ---

def has_empty_cell(board: Board) -> bool:
    return any(value == 0 for row in board for value in row)

def can_merge_adjacent(board: Board) -> bool:
    """
    Checks whether two horizontally or vertically adjacent cells hold the same tile.
    Args:
        board (Board): The game board.
    Returns:
        bool: True if at least one equal, non-empty neighbour pair exists.
    """
    n = len(board)
    for r in range(n):
        for c in range(n - 1):
            if board[r][c] != 0 and board[r][c] == board[r][c + 1]:
                return True
    for r in range(n - 1):
        for c in range(n):
            if board[r][c] != 0 and board[r][c] == board[r + 1][c]:
                return True
    return False

def is_game_over(board: Board) -> bool:
    """
    The game is lost when the board is full and no neighbours can merge.
    Args:
        board (Board): The game board.
    Returns:
        bool: True if no move can change the board anymore.
    """
    return not has_empty_cell(board) and not can_merge_adjacent(board)

def check_for_win(board: Board, win_tile: int = WIN_TILE) -> bool:
    """
    Check if the game is won (a tile with win_tile value exists).
    Args:
        board (Board): The game board.
        win_tile (int): The tile value that signifies a win. Default is 2048.
    Returns:
        bool: True if the game is won, False otherwise.
    """
    return any(value == win_tile for row in board for value in row)

def max_tile(board: Board) -> int:
    return max(value for row in board for value in row)
