"""
Tests for the game state wrapper.
"""
import random

import pytest

from core import Direction
from session import (
    GameOverError,
    GameState,
    GameStatus,
    check_status,
    determine_status,
    play_move,
    restart_game,
    start_game,
)

# LEFT merges the two 16s and leaves a single empty cell at (0, 3); whatever
# spawns there (2 or 4) leaves the board without a possible move.
ONE_MOVE_FROM_LOSS = [
    [4, 8, 16, 16],
    [64, 128, 256, 512],
    [4, 8, 16, 32],
    [64, 128, 256, 1024],
]


@pytest.fixture
def rng():
    return random.Random(2048)


def test_start_game(rng):
    state = start_game(rng)
    assert state.score == 0
    assert state.status == GameStatus.PLAYING
    assert sum(1 for row in state.board for v in row if v) == 2


def test_restart_discards_state(rng):
    state = GameState(board=ONE_MOVE_FROM_LOSS, score=500, status=GameStatus.WON)
    fresh = restart_game(rng)
    assert fresh is not state
    assert fresh.score == 0
    assert fresh.status == GameStatus.PLAYING


def test_move_spawns_and_scores(rng):
    board = [[2, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    report = play_move(GameState(board=board), Direction.LEFT, rng)
    assert report.changed
    assert report.score_gained == 4
    assert report.state.score == 4
    assert report.state.board[0][0] == 4
    assert sum(1 for row in report.state.board for v in row if v) == 2
    assert report.state.status == GameStatus.PLAYING


def test_noop_move_keeps_state(rng):
    state = GameState(board=[[2, 4, 0, 0], [0] * 4, [0] * 4, [0] * 4], score=12)
    report = play_move(state, Direction.LEFT, rng)
    assert not report.changed
    assert report.state is state
    assert report.score_gained == 0


def test_win_is_surfaced_once(rng):
    board = [[1024, 1024, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    first = play_move(GameState(board=board), Direction.LEFT, rng)
    assert first.just_won
    assert first.state.status == GameStatus.WON
    assert first.state.score == 2048

    second = play_move(first.state, Direction.RIGHT, rng)
    assert second.changed
    assert not second.just_won
    assert second.state.status == GameStatus.WON


def test_board_holding_winning_tile_reports_win(rng):
    board = [[2048, 0, 0, 0], [2, 0, 0, 0], [0] * 4, [0] * 4]
    report = play_move(GameState(board=board), Direction.RIGHT, rng)
    assert report.just_won
    assert report.state.status == GameStatus.WON


def test_move_into_lost_state(rng):
    report = play_move(GameState(board=ONE_MOVE_FROM_LOSS), Direction.LEFT, rng)
    assert report.changed
    assert report.state.board[0][:3] == [4, 8, 32]
    assert report.state.board[0][3] in (2, 4)
    assert report.state.status == GameStatus.LOST


def test_lost_game_rejects_moves(rng):
    state = GameState(board=ONE_MOVE_FROM_LOSS, status=GameStatus.LOST)
    with pytest.raises(GameOverError):
        play_move(state, Direction.UP, rng)


def test_determine_status():
    full = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]
    assert determine_status(full) == GameStatus.LOST
    assert determine_status(full, GameStatus.WON) == GameStatus.LOST

    open_board = [[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    assert determine_status(open_board) == GameStatus.PLAYING
    assert determine_status(open_board, GameStatus.WON) == GameStatus.WON


def test_seeded_games_are_reproducible():
    def run(seed):
        rng = random.Random(seed)
        state = start_game(rng)
        for direction in [Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN] * 5:
            if state.status == GameStatus.LOST:
                break
            state = play_move(state, direction, rng).state
        return state

    assert run(99) == run(99)


def test_check_status_accepts_consistent_states():
    check_status([[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4], GameStatus.PLAYING)
    check_status([[2048, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4], GameStatus.WON)
    check_status([[4096, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4], GameStatus.WON)
    check_status([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]], GameStatus.LOST)


@pytest.mark.parametrize("board, status", [
    ([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]], GameStatus.PLAYING),
    ([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]], GameStatus.WON),
    ([[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4], GameStatus.WON),
    ([[2048, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4], GameStatus.PLAYING),
    ([[2, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4], GameStatus.LOST),
])
def test_check_status_rejects_contradictions(board, status):
    with pytest.raises(ValueError):
        check_status(board, status)
