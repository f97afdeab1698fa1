"""Deterministic rules engine for tictacchain.

Every operation reads and writes only through the Store it is given.
"""

from .actions import CreateGame, JoinGame, Resign, SubmitMove
from .errors import (
    GameError,
    InvalidAddress,
    InvalidPosition,
    InvalidState,
    NotFound,
    NotYourTurn,
    PositionTaken,
    Unauthorized,
)
from .game import Response, create_game, instantiate, join_game, resign, step, submit_move
from .types import Game, GameStatus, Mark

__all__ = [
    "CreateGame",
    "Game",
    "GameError",
    "GameStatus",
    "InvalidAddress",
    "InvalidPosition",
    "InvalidState",
    "JoinGame",
    "Mark",
    "NotFound",
    "NotYourTurn",
    "PositionTaken",
    "Resign",
    "Response",
    "SubmitMove",
    "Unauthorized",
    "create_game",
    "instantiate",
    "join_game",
    "resign",
    "step",
    "submit_move",
]
