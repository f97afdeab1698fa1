from __future__ import annotations

import pytest

from tictacchain.engine.actions import QueryState
from tictacchain.engine.errors import InvalidAddress, InvalidState, NotFound
from tictacchain.engine.serialize import action_to_dict
from tictacchain.paths import get_paths
from tictacchain.services.config import HostConfig
from tictacchain.services.host import ContractHost
from tictacchain.services.messages import MessageError
from tictacchain.services.storage import MemoryStorage
from tictacchain.services.telemetry import TelemetryService


def _host(**kwargs) -> ContractHost:
    host = ContractHost(MemoryStorage(), **kwargs)
    host.instantiate("instantiator", {"owner": None})
    return host


def test_instantiate_and_query() -> None:
    host = ContractHost(MemoryStorage())
    res = host.instantiate("instantiator", {"owner": "admin"})
    assert res.get("owner") == "admin"
    assert host.query({"config": {}}) == {"owner": "admin"}
    assert host.query({"state": {}}) == {"next_game_id": 0}


def test_instantiate_rejects_bad_sender() -> None:
    host = ContractHost(MemoryStorage())
    with pytest.raises(InvalidAddress):
        host.instantiate("", {})
    assert host.snapshot()["config"] is None


def test_execute_success_descriptor() -> None:
    host = _host()
    result = host.execute("alice", {"create_game": {}})
    assert result.ok
    assert result.error is None
    assert result.response is not None
    assert result.response.to_dict() == {
        "action": "create_game",
        "attributes": [["action", "create_game"], ["game_id", "0"], ["players", "alice"]],
    }


def test_execute_rejection_keeps_state() -> None:
    host = _host()
    host.execute("alice", {"create_game": {}})
    before = host.snapshot()

    result = host.execute("alice", {"join_game": {"game_id": 0}})
    assert not result.ok
    assert result.error_kind == "Unauthorized"
    assert result.response is None

    result = host.execute("bob", {"resign": {"game_id": 0}})
    assert result.error_kind == "InvalidState"

    result = host.execute("bob", {"join_game": {"game_id": 4}})
    assert result.error_kind == "NotFound"

    result = host.execute("Bad Sender", {"join_game": {"game_id": 0}})
    assert result.error_kind == "InvalidAddress"

    assert host.snapshot() == before


def test_out_of_range_position_is_a_rule_rejection() -> None:
    host = _host()
    host.execute("alice", {"create_game": {}})
    host.execute("bob", {"join_game": {"game_id": 0}})
    x = host.query({"game": {"game_id": 0}})["next_turn"]
    assert isinstance(x, str)
    result = host.execute(x, {"submit_move": {"game_id": 0, "position": 10}})
    assert result.error_kind == "InvalidPosition"
    result = host.execute(x, {"submit_move": {"game_id": 0, "position": 0}})
    assert result.error_kind == "InvalidPosition"


@pytest.mark.parametrize(
    "msg",
    [
        {},
        {"create_game": {}, "resign": {"game_id": 0}},
        {"join_game": {}},
        {"join_game": {"game_id": -1}},
        {"join_game": {"game_id": "0"}},
        {"submit_move": {"game_id": 0, "position": 256}},
        {"submit_move": {"game_id": 0}},
        {"resign": {"game_id": 0, "extra": 1}},
        {"delete_game": {"game_id": 0}},
        ["create_game"],
    ],
)
def test_malformed_execute_raises(msg: object) -> None:
    host = _host()
    with pytest.raises(MessageError):
        host.execute("alice", msg)


def test_query_missing_game() -> None:
    host = _host()
    with pytest.raises(NotFound):
        host.query({"game": {"game_id": 3}})
    with pytest.raises(MessageError):
        host.query({"games": {}})


def test_telemetry_records_each_execution(tmp_path) -> None:
    telemetry = TelemetryService(tmp_path / "telemetry.jsonl")
    host = _host(telemetry=telemetry)
    host.execute("alice", {"create_game": {}})
    host.execute("alice", {"join_game": {"game_id": 0}})

    records = telemetry.read()
    assert [r["type"] for r in records] == ["instantiate", "execute_ok", "execute_rejected"]
    rejected = records[2]["payload"]
    assert isinstance(rejected, dict)
    assert rejected["kind"] == "Unauthorized"
    assert rejected["msg"] == {"join_game": {"game_id": 0}}


def test_from_config_with_file_storage(tmp_path) -> None:
    cfg = HostConfig(
        owner=None,
        state_path=tmp_path / "state.json",
        telemetry_path=tmp_path / "telemetry.jsonl",
    )
    host = ContractHost.from_config(cfg, paths=get_paths())
    host.instantiate("instantiator", {})
    assert host.execute("alice", {"create_game": {}}).ok

    reopened = ContractHost.from_config(cfg, paths=get_paths())
    assert reopened.query({"state": {}}) == {"next_game_id": 1}
    assert len(TelemetryService(tmp_path / "telemetry.jsonl").read()) == 2


def test_reinstantiate_keeps_live_games(tmp_path) -> None:
    cfg = HostConfig(owner=None, state_path=tmp_path / "state.json", telemetry_path=None)
    host = ContractHost.from_config(cfg, paths=get_paths())
    host.instantiate("instantiator", {})
    host.execute("alice", {"create_game": {}})
    host.execute("bob", {"join_game": {"game_id": 0}})
    before = host.snapshot()

    reopened = ContractHost.from_config(cfg, paths=get_paths())
    with pytest.raises(InvalidState):
        reopened.instantiate("mallory", {})
    assert reopened.snapshot() == before
    assert reopened.query({"config": {}}) == {"owner": "instantiator"}

    result = reopened.execute("carol", {"create_game": {}})
    assert result.response is not None
    assert result.response.get("game_id") == "1"
    game = reopened.query({"game": {"game_id": 0}})
    assert game["status"] == "in_progress"
    assert sorted(game["players"]) == ["alice", "bob"]  # type: ignore[arg-type]


def test_execute_before_instantiate_is_rejected() -> None:
    host = ContractHost(MemoryStorage())
    result = host.execute("alice", {"create_game": {}})
    assert not result.ok
    assert result.error_kind == "InvalidState"
    assert host.snapshot() == {"config": None, "state": None, "games": []}
    with pytest.raises(InvalidState):
        host.query({"state": {}})


def test_telemetry_failure_does_not_fail_committed_message(tmp_path) -> None:
    # A directory where the log file should be makes every append fail.
    blocked = tmp_path / "telemetry.jsonl"
    blocked.mkdir()
    host = _host(telemetry=TelemetryService(blocked))
    result = host.execute("alice", {"create_game": {}})
    assert result.ok
    assert host.query({"state": {}}) == {"next_game_id": 1}


def test_unknown_action_cannot_be_encoded() -> None:
    with pytest.raises(TypeError):
        action_to_dict(QueryState())  # type: ignore[arg-type]
