from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

Mark = Literal["X", "O"]
Cell = Literal["-", "X", "O"]
GameStatus = Literal["open", "in_progress", "completed"]

EMPTY: Cell = "-"
BOARD_SIZE = 9
MARKS: tuple[Mark, Mark] = ("X", "O")
STATUSES: tuple[GameStatus, ...] = ("open", "in_progress", "completed")


def _empty_board() -> list[Cell]:
    return [EMPTY for _ in range(BOARD_SIZE)]


@dataclass
class Game:
    """One tic-tac-toe game record.

    players[0] always holds "X" (the first mover) once the game has been joined.
    """

    id: int
    players: list[str]
    status: GameStatus = "open"
    board: list[Cell] = field(default_factory=_empty_board)
    next_turn: str | None = None
    winner: str | None = None

    def mark_of(self, player: str) -> Mark:
        return MARKS[self.players.index(player)]

    def opponent(self, player: str) -> str:
        return self.players[1] if self.players[0] == player else self.players[0]

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Game":
        gid = d.get("id")
        players = d.get("players")
        status = d.get("status")
        board = d.get("board")
        if not isinstance(gid, int) or not isinstance(players, list):
            raise ValueError("Invalid game record")
        if status not in STATUSES:
            raise ValueError(f"Invalid game status: {status!r}")
        if not isinstance(board, list) or len(board) != BOARD_SIZE:
            raise ValueError("Invalid game board")
        cells: list[Cell] = []
        for c in board:
            if c not in (EMPTY, "X", "O"):
                raise ValueError(f"Invalid board cell: {c!r}")
            cells.append(c)  # type: ignore[arg-type]
        next_turn = d.get("next_turn")
        winner = d.get("winner")
        return Game(
            id=gid,
            players=[str(p) for p in players],
            status=status,  # type: ignore[arg-type]
            board=cells,
            next_turn=str(next_turn) if next_turn is not None else None,
            winner=str(winner) if winner is not None else None,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "players": list(self.players),
            "status": self.status,
            "board": list(self.board),
            "next_turn": self.next_turn,
            "winner": self.winner,
        }


@dataclass(frozen=True)
class Config:
    owner: str

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Config":
        owner = d.get("owner")
        if not isinstance(owner, str):
            raise ValueError("Invalid config record")
        return Config(owner=owner)

    def to_dict(self) -> dict[str, object]:
        return {"owner": self.owner}


@dataclass(frozen=True)
class State:
    next_game_id: int = 0

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "State":
        nid = d.get("next_game_id")
        if not isinstance(nid, int) or nid < 0:
            raise ValueError("Invalid state record")
        return State(next_game_id=nid)

    def to_dict(self) -> dict[str, object]:
        return {"next_game_id": self.next_game_id}
