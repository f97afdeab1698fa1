from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from tictacchain.paths import Paths, get_paths
from tictacchain.services.messages import MessageError, validate_json


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class HostConfig:
    owner: str | None
    # Resolved against Paths.userdata_dir; None keeps state in memory.
    state_path: Path | None
    telemetry_path: Path | None


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Missing config file: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def _optional_str(obj: dict[str, object], key: str) -> str | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ConfigError(f"Expected string for {key}")
    return v


def load_host_config(path: Path | None = None, paths: Paths | None = None) -> HostConfig:
    p = paths or get_paths()
    cfg_path = path or (p.data_dir / "host.json")
    raw = _load_json(cfg_path)
    schema = _load_json(p.schema_dir / "host.schema.json")
    try:
        validate_json(raw, schema, context=str(cfg_path))
    except MessageError as e:
        raise ConfigError(str(e)) from e
    if not isinstance(raw, dict):
        raise ConfigError("host.json must be an object")

    state_file = _optional_str(raw, "state_file")
    telemetry_file = _optional_str(raw, "telemetry_file")
    return HostConfig(
        owner=_optional_str(raw, "owner"),
        state_path=p.userdata_dir / state_file if state_file else None,
        telemetry_path=p.userdata_dir / telemetry_file if telemetry_file else None,
    )
