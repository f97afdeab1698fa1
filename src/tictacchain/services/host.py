from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from tictacchain.engine.errors import GameError
from tictacchain.engine.game import Response, instantiate, query, step
from tictacchain.engine.serialize import action_to_dict, snapshot
from tictacchain.engine.state import validate_address
from tictacchain.paths import Paths, get_paths
from tictacchain.services.config import HostConfig, load_host_config
from tictacchain.services.messages import MessageCodec
from tictacchain.services.storage import Backend, JsonFileStorage, MemoryStorage, Transaction
from tictacchain.services.telemetry import TelemetryService

logger = logging.getLogger(__name__)


@dataclass
class ExecuteResult:
    ok: bool
    response: Response | None = None
    error: str | None = None
    error_kind: str | None = None


class ContractHost:
    """Entry point for untrusted callers.

    Each instantiate/execute call runs in its own Transaction: it is committed
    when the engine returns and discarded when it raises, so a rejected
    message never changes stored state.
    """

    def __init__(
        self,
        storage: Backend,
        codec: MessageCodec | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self.storage = storage
        self.codec = codec or MessageCodec(get_paths().schema_dir)
        self.telemetry = telemetry

    @staticmethod
    def from_config(config: HostConfig | None = None, paths: Paths | None = None) -> "ContractHost":
        p = paths or get_paths()
        cfg = config or load_host_config(paths=p)
        storage: Backend = JsonFileStorage(cfg.state_path) if cfg.state_path else MemoryStorage()
        telemetry = TelemetryService(cfg.telemetry_path) if cfg.telemetry_path else None
        return ContractHost(storage, codec=MessageCodec(p.schema_dir), telemetry=telemetry)

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        # Called after commit.
        if self.telemetry is None:
            return
        try:
            self.telemetry.log(event_type, payload)
        except OSError as e:
            logger.warning("Telemetry write to %s failed: %s", self.telemetry.path, e)

    def instantiate(self, sender: str, msg: object) -> Response:
        parsed = self.codec.parse_instantiate(msg)
        txn = Transaction(self.storage)
        try:
            res = instantiate(txn, validate_address(sender), parsed.owner)
        except GameError:
            txn.discard()
            raise
        txn.commit()
        self._log("instantiate", {"sender": sender, "owner": res.get("owner")})
        logger.info("Instantiated with owner %s", res.get("owner"))
        return res

    def execute(self, sender: str, msg: object) -> ExecuteResult:
        action = self.codec.parse_execute(msg)
        txn = Transaction(self.storage)
        try:
            res = step(txn, validate_address(sender), action)
        except GameError as e:
            txn.discard()
            logger.info("Rejected %s from %s: %s", type(action).__name__, sender, e)
            self._log(
                "execute_rejected",
                {"sender": sender, "msg": action_to_dict(action), "kind": e.kind, "error": str(e)},
            )
            return ExecuteResult(ok=False, error=str(e), error_kind=e.kind)
        txn.commit()
        self._log("execute_ok", {"sender": sender, "msg": action_to_dict(action), "response": res.to_dict()})
        return ExecuteResult(ok=True, response=res)

    def query(self, msg: object) -> dict[str, object]:
        q = self.codec.parse_query(msg)
        return query(self.storage, q)

    def snapshot(self) -> dict[str, object]:
        return snapshot(self.storage)


def replay(
    instantiator: str,
    instantiate_msg: object,
    history: Iterable[tuple[str, object]],
    codec: MessageCodec | None = None,
) -> ContractHost:
    """Rebuild contract state from an ordered message history on a fresh store.

    Rejected messages are replayed too; they leave no trace in the state.
    """
    host = ContractHost(MemoryStorage(), codec=codec)
    host.instantiate(instantiator, instantiate_msg)
    for sender, msg in history:
        host.execute(sender, msg)
    return host
