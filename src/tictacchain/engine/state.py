from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Mapping, Protocol, TypeVar

from .errors import InvalidAddress, InvalidState, NotFound
from .types import Config, Game, State

T = TypeVar("T")


class Store(Protocol):
    """Key-value view the engine reads and writes through.

    Values are JSON-compatible objects. Implementations live in
    tictacchain.services.storage.
    """

    def get(self, key: str) -> object | None: ...

    def set(self, key: str, value: object) -> None: ...

    def keys(self, prefix: str) -> list[str]: ...


@dataclass(frozen=True)
class Item(Generic[T]):
    """A single-slot record."""

    key: str
    decode: Callable[[Mapping[str, object]], T]

    def may_load(self, store: Store) -> T | None:
        raw = store.get(self.key)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise ValueError(f"Corrupt record at {self.key}")
        return self.decode(raw)

    def load(self, store: Store) -> T:
        value = self.may_load(store)
        if value is None:
            raise InvalidState(f"{self.key} not initialized; instantiate first")
        return value

    def save(self, store: Store, value: T) -> None:
        store.set(self.key, value.to_dict())  # type: ignore[attr-defined]


@dataclass(frozen=True)
class GameMap:
    """Games keyed by integer id.

    Keys are zero-padded so lexical order equals id order.
    """

    namespace: str

    def key(self, game_id: int) -> str:
        return f"{self.namespace}/{game_id:020d}"

    def may_load(self, store: Store, game_id: int) -> Game | None:
        raw = store.get(self.key(game_id))
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise ValueError(f"Corrupt game record {game_id}")
        return Game.from_dict(raw)

    def load(self, store: Store, game_id: int) -> Game:
        game = self.may_load(store, game_id)
        if game is None:
            raise NotFound(game_id)
        return game

    def save(self, store: Store, game: Game) -> None:
        store.set(self.key(game.id), game.to_dict())

    def ids(self, store: Store) -> list[int]:
        prefix = f"{self.namespace}/"
        return sorted(int(k[len(prefix):]) for k in store.keys(prefix))


CONFIG: Item[Config] = Item("config", Config.from_dict)
STATE: Item[State] = Item("state", State.from_dict)
GAMES = GameMap("game_state")


def allocate_game_id(store: Store) -> int:
    """Hand out the next game id and advance the counter.

    Must run in the same transaction that saves the new game.
    """
    state = STATE.load(store)
    STATE.save(store, State(next_game_id=state.next_game_id + 1))
    return state.next_game_id


MAX_ADDRESS_LEN = 90


def validate_address(addr: str) -> str:
    """Accept normalized identities only: non-empty, lowercase, no whitespace."""
    if not addr or len(addr) < 3 or len(addr) > MAX_ADDRESS_LEN:
        raise InvalidAddress(f"Invalid address length: {addr!r}")
    if addr != addr.lower():
        raise InvalidAddress(f"Address not normalized: {addr!r}")
    if any(ch.isspace() for ch in addr):
        raise InvalidAddress(f"Address contains whitespace: {addr!r}")
    return addr
