from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List, Optional
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import logging
import random

import core
import session

logger = logging.getLogger(__name__)

RATE_LIMIT = "100/minute"

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="A stateless API for playing the 2048 game. "\
                "Manage your game state (board, score, status) on the client side.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    seed: Optional[int] = Field(
        default=None,
        description="Optional seed for the tile generator, for reproducible games."
    )

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    board: List[List[int]] = Field(..., description="The 4 x 4 game board, represented as a list of lists.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    status: session.GameStatus = Field(
        ...,
        description="Current status of the game (PLAYING, WON, LOST). WON does not stop play."
    )
    win_tile: int = Field(default=core.WIN_TILE, description="The tile value required to win.")
    board_size: int = Field(default=core.BOARD_SIZE, description="The dimension N of the N x N board.")


class MoveRequestData(BaseModel):
    """Data required to make a move."""
    board: List[List[int]] = Field(..., description="Current 4 x 4 game board state before the move.")
    score: int = Field(..., ge=0, description="Current score before the move.")
    status: session.GameStatus = Field(
        default=session.GameStatus.PLAYING,
        description="Status returned by the previous call."
    )
    direction: core.Direction = Field(
        ...,
        description="Direction of the move (UP, DOWN, LEFT, RIGHT)."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Optional seed for the tile spawned after the move."
    )

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    just_won: bool = Field(
        default=False,
        description="True only on the move that first reached the winning tile."
    )
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or the game was won."
    )


def _rng_from_seed(seed: Optional[int]) -> Optional[random.Random]:
    return random.Random(seed) if seed is not None else None

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(RATE_LIMIT)
async def start_new_game(request: Request, settings: NewGameSettings):
    """
    Starts (or restarts) a 2048 game.

    - **seed**: Optional seed making the initial tiles reproducible.

    Returns the initial game state: a 4 x 4 board with two random tiles,
    score 0 and status PLAYING.
    """
    try:
        state = session.start_game(_rng_from_seed(settings.seed))
        return GameStateData(board=state.board, score=state.score, status=state.status)
    except Exception as e:
        logger.error(f"Unexpected error in /game/new: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(RATE_LIMIT)
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    Requires the current `board`, `score` and `status` returned by the previous
    call, and the `direction` of the move.

    The API will:
    1. Slide and merge the tiles in the chosen direction.
    2. If the move changed the board, add a new random tile (2 or 4).
    3. Determine the new game status (PLAYING, WON, LOST).

    Returns the updated game state, whether the move was effective, and an optional message.
    """
    try:
        core.validate_board(request_data.board)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid board structure in request: {str(e)}")

    try:
        session.check_status(request_data.board, request_data.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Inconsistent game state in request: {str(e)}")

    state = session.GameState(
        board=request_data.board,
        score=request_data.score,
        status=request_data.status
    )
    message_for_client: Optional[str] = None

    try:
        report = session.play_move(state, request_data.direction, _rng_from_seed(request_data.seed))
    except ValueError as e:
        # GameOverError included: a lost game only accepts /game/new
        raise HTTPException(status_code=400, detail=f"Error processing move: {str(e)}")
    except Exception as e:
        logger.error(f"Unexpected error in /game/move: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")

    new_state = report.state
    if not report.changed:
        message_for_client = "Move was not effective; board state unchanged by slide."
    elif new_state.status == session.GameStatus.LOST:
        message_for_client = "Game Over. No more valid moves."
    elif report.just_won:
        message_for_client = "Congratulations! You won! You may keep playing."

    return MoveResponseData(
        board=new_state.board,
        score=new_state.score,
        status=new_state.status,
        move_was_effective=report.changed,
        just_won=report.just_won,
        message=message_for_client
    )
