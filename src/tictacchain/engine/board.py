from __future__ import annotations

from typing import Sequence

from .errors import InvalidPosition, InvalidState, NotYourTurn, PositionTaken
from .types import BOARD_SIZE, EMPTY, Cell, Game, Mark

# Zero-based cell indices; position p on the board is index p - 1.
WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)


def validate_move(game: Game, mover: str, position: int) -> None:
    """Raise the first rule a proposed move breaks; return None if it is legal.

    Checks run in a fixed order so the reported rejection is reproducible:
    status, range, occupancy, turn. The range check comes before the board is
    indexed.
    """
    if game.status != "in_progress":
        raise InvalidState("Game not in progress")
    if position < 1 or position > BOARD_SIZE:
        raise InvalidPosition(position)
    if game.board[position - 1] != EMPTY:
        raise PositionTaken(position)
    if game.next_turn != mover:
        raise NotYourTurn()


def detect_winner(board: Sequence[Cell]) -> Mark | None:
    """Return the mark filling any of the eight lines, or None.

    Called once per applied move, so at most one mark can have a line.
    """
    for a, b, c in WINNING_LINES:
        if board[a] != EMPTY and board[a] == board[b] == board[c]:
            return board[a]  # type: ignore[return-value]
    return None


def is_full(board: Sequence[Cell]) -> bool:
    return all(c != EMPTY for c in board)
