from __future__ import annotations


from .actions import Action, CreateGame, JoinGame, Resign, SubmitMove
from .state import CONFIG, GAMES, STATE, Store


def action_to_dict(a: Action) -> dict[str, object]:
    """Encode an action in the externally tagged message shape."""
    if isinstance(a, CreateGame):
        return {"create_game": {}}
    if isinstance(a, JoinGame):
        return {"join_game": {"game_id": a.game_id}}
    if isinstance(a, SubmitMove):
        return {"submit_move": {"game_id": a.game_id, "position": a.position}}
    if isinstance(a, Resign):
        return {"resign": {"game_id": a.game_id}}
    raise TypeError(f"Unknown action: {a!r}")


def snapshot(store: Store) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of all contract state."""
    config = CONFIG.may_load(store)
    state = STATE.may_load(store)
    return {
        "config": config.to_dict() if config is not None else None,
        "state": state.to_dict() if state is not None else None,
        "games": [GAMES.load(store, gid).to_dict() for gid in GAMES.ids(store)],
    }
