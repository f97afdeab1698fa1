from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Instantiate:
    owner: str | None = None


@dataclass(frozen=True)
class CreateGame:
    pass


@dataclass(frozen=True)
class JoinGame:
    game_id: int


@dataclass(frozen=True)
class SubmitMove:
    game_id: int
    # 1 is top-left, 9 is bottom-right
    position: int


@dataclass(frozen=True)
class Resign:
    game_id: int


@dataclass(frozen=True)
class QueryGame:
    game_id: int


@dataclass(frozen=True)
class QueryConfig:
    pass


@dataclass(frozen=True)
class QueryState:
    pass


Action = CreateGame | JoinGame | SubmitMove | Resign
Query = QueryGame | QueryConfig | QueryState
