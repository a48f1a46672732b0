"""Configuration loading and merging for the lobby server."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .registry import DEFAULT_TIMEOUT


@dataclass
class LobbyConfig:
    # HTTP API
    host: str = "0.0.0.0"
    port: int = 8080

    # Expiration time (seconds) for game registrations
    timeout: float = DEFAULT_TIMEOUT

    # Keep the address sent by game hosts instead of the request's remote IP
    trust_addr: bool = False

    # Remote lobby whose games are listed alongside local registrations
    upstream: Optional[str] = None

    # Seconds to cache the upstream listing (0 disables the cache)
    upstream_cache: float = DEFAULT_TIMEOUT / 2

    # Periodically list all games so events are emitted for upstream games too
    poll: bool = False

    log_level: str = "INFO"
    user_agent: str = "nox-lobby"

    @property
    def poll_interval(self) -> float:
        return self.timeout / 2


def load_config(path: str | Path) -> LobbyConfig:
    """Load a LobbyConfig from a YAML file. Unknown keys are ignored."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    valid_fields = {f.name for f in fields(LobbyConfig)}
    filtered = {k.replace("-", "_"): v for k, v in data.items()}
    filtered = {k: v for k, v in filtered.items() if k in valid_fields}
    return LobbyConfig(**filtered)


def merge_cli_args(config: LobbyConfig, args) -> LobbyConfig:
    """Overlay CLI arguments onto an existing config. CLI values take precedence."""
    for f in fields(LobbyConfig):
        cli_val = getattr(args, f.name, None)
        if cli_val is not None:
            setattr(config, f.name, cli_val)
    return config


def config_to_yaml(config: LobbyConfig) -> str:
    """Serialize a LobbyConfig to YAML, e.g. to write a starting config file."""
    data: dict = {}
    for f in fields(LobbyConfig):
        value = getattr(config, f.name)
        if value is None:
            continue
        data[f.name] = value
    return yaml.dump(data, default_flow_style=False, sort_keys=False)
