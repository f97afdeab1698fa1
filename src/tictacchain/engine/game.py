from __future__ import annotations

from dataclasses import dataclass, field

from .actions import (
    Action,
    CreateGame,
    JoinGame,
    Query,
    QueryConfig,
    QueryGame,
    QueryState,
    Resign,
    SubmitMove,
)
from .board import detect_winner, is_full, validate_move
from .errors import InvalidState, Unauthorized
from .fairness import assign_first_mover
from .state import CONFIG, GAMES, STATE, Store, allocate_game_id, validate_address
from .types import Config, Game, State


@dataclass
class Response:
    """Success descriptor returned by every lifecycle operation."""

    action: str
    attributes: list[tuple[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value: object) -> "Response":
        self.attributes.append((key, str(value)))
        return self

    def get(self, key: str) -> str | None:
        for k, v in self.attributes:
            if k == key:
                return v
        return None

    def to_dict(self) -> dict[str, object]:
        return {"action": self.action, "attributes": [list(a) for a in self.attributes]}


def _response(action: str) -> Response:
    return Response(action=action).add_attribute("action", action)


def instantiate(store: Store, sender: str, owner: str | None = None) -> Response:
    if CONFIG.may_load(store) is not None or STATE.may_load(store) is not None:
        raise InvalidState("Already instantiated")
    config = Config(owner=validate_address(owner if owner is not None else sender))
    CONFIG.save(store, config)
    STATE.save(store, State(next_game_id=0))
    return _response("instantiate").add_attribute("owner", config.owner)


def create_game(store: Store, sender: str) -> Response:
    game_id = allocate_game_id(store)
    game = Game(id=game_id, players=[sender])
    GAMES.save(store, game)
    return (
        _response("create_game")
        .add_attribute("game_id", game.id)
        .add_attribute("players", game.players[0])
    )


def join_game(store: Store, sender: str, game_id: int) -> Response:
    game = GAMES.load(store, game_id)
    if game.status != "open":
        raise InvalidState("Cannot join a game that is not open")
    creator = game.players[0]
    if sender == creator:
        raise Unauthorized("Cannot join your own game")

    players, first = assign_first_mover(creator, sender)
    game.players = list(players)
    game.next_turn = first
    game.status = "in_progress"
    GAMES.save(store, game)
    return (
        _response("join_game")
        .add_attribute("game_id", game.id)
        .add_attribute("X", first)
        .add_attribute("mark", game.mark_of(sender))
    )


def submit_move(store: Store, sender: str, game_id: int, position: int) -> Response:
    game = GAMES.load(store, game_id)
    validate_move(game, sender, position)

    mark = game.mark_of(sender)
    game.board[position - 1] = mark

    # A line can be completed before the board is full, so check every move.
    if detect_winner(game.board) is not None:
        game.status = "completed"
        game.winner = sender
        game.next_turn = None
    elif is_full(game.board):
        game.status = "completed"
        game.next_turn = None
    else:
        game.next_turn = game.opponent(sender)
    GAMES.save(store, game)

    res = (
        _response("submit_move")
        .add_attribute("game_id", game.id)
        .add_attribute("position", position)
        .add_attribute("role", mark)
        .add_attribute("status", game.status)
    )
    if game.status == "completed":
        res.add_attribute("winner", game.winner or "")
    return res


def resign(store: Store, sender: str, game_id: int) -> Response:
    game = GAMES.load(store, game_id)
    if game.status != "in_progress":
        raise InvalidState("Game not in progress")
    if sender not in game.players:
        raise Unauthorized("Only a player can resign")

    game.status = "completed"
    game.winner = game.opponent(sender)
    game.next_turn = None
    GAMES.save(store, game)
    return (
        _response("resign")
        .add_attribute("game_id", game.id)
        .add_attribute("winner", game.winner)
    )


def step(store: Store, sender: str, action: Action) -> Response:
    """Apply one externally submitted action.

    Raises a GameError subclass on rejection; the caller discards the
    transaction so nothing written here survives a rejection.
    """
    if isinstance(action, CreateGame):
        return create_game(store, sender)
    if isinstance(action, JoinGame):
        return join_game(store, sender, action.game_id)
    if isinstance(action, SubmitMove):
        return submit_move(store, sender, action.game_id, action.position)
    if isinstance(action, Resign):
        return resign(store, sender, action.game_id)
    raise TypeError(f"Unknown action: {action!r}")


def query(store: Store, q: Query) -> dict[str, object]:
    if isinstance(q, QueryGame):
        return GAMES.load(store, q.game_id).to_dict()
    if isinstance(q, QueryConfig):
        return CONFIG.load(store).to_dict()
    if isinstance(q, QueryState):
        return STATE.load(store).to_dict()
    raise TypeError(f"Unknown query: {q!r}")
