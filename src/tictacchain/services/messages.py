from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from tictacchain.engine.actions import (
    Action,
    CreateGame,
    Instantiate,
    JoinGame,
    Query,
    QueryConfig,
    QueryGame,
    QueryState,
    Resign,
    SubmitMove,
)


class MessageError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise MessageError(f"Missing schema file: {path}") from e
    except json.JSONDecodeError as e:
        raise MessageError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise MessageError("\n".join(lines))


def _single_variant(raw: object, context: str) -> tuple[str, Mapping[str, object]]:
    # Schemas guarantee exactly one key holding an object.
    if not isinstance(raw, dict) or len(raw) != 1:
        raise MessageError(f"{context} must have exactly one variant")
    ((name, body),) = raw.items()
    if not isinstance(body, dict):
        raise MessageError(f"{context}.{name} must be an object")
    return name, body


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise MessageError(f"Expected int for {key}")
    return v


class MessageCodec:
    """Validates raw JSON messages against the shipped schemas and decodes them."""

    def __init__(self, schema_dir: Path) -> None:
        self._schema_dir = schema_dir
        self._schemas: dict[str, object] = {}

    def _schema(self, name: str) -> object:
        if name not in self._schemas:
            self._schemas[name] = _load_json(self._schema_dir / f"{name}.schema.json")
        return self._schemas[name]

    def parse_instantiate(self, raw: object) -> Instantiate:
        validate_json(raw, self._schema("instantiate_msg"), context="instantiate")
        assert isinstance(raw, dict)
        owner = raw.get("owner")
        return Instantiate(owner=owner if isinstance(owner, str) else None)

    def parse_execute(self, raw: object) -> Action:
        validate_json(raw, self._schema("execute_msg"), context="execute")
        name, body = _single_variant(raw, "execute")
        if name == "create_game":
            return CreateGame()
        if name == "join_game":
            return JoinGame(game_id=_require_int(body, "game_id"))
        if name == "submit_move":
            return SubmitMove(
                game_id=_require_int(body, "game_id"),
                position=_require_int(body, "position"),
            )
        if name == "resign":
            return Resign(game_id=_require_int(body, "game_id"))
        raise MessageError(f"Unknown execute variant: {name}")

    def parse_query(self, raw: object) -> Query:
        validate_json(raw, self._schema("query_msg"), context="query")
        name, body = _single_variant(raw, "query")
        if name == "game":
            return QueryGame(game_id=_require_int(body, "game_id"))
        if name == "config":
            return QueryConfig()
        if name == "state":
            return QueryState()
        raise MessageError(f"Unknown query variant: {name}")

    def validate_all(self) -> None:
        for name in ("instantiate_msg", "execute_msg", "query_msg"):
            Draft202012Validator.check_schema(self._schema(name))
