"""Configuration loading for the status client."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from mcping.client import DEFAULT_PORT
from mcping.protocol import DEFAULT_PROTOCOL_VERSION

CONFIG_DIR = Path.home() / ".config" / "mcping"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for a single Minecraft server."""

    name: str
    host: str
    port: int = DEFAULT_PORT
    protocol_version: int | None = None

    def resolve_protocol_version(self, default: int) -> int:
        """Return the effective protocol version, falling back to the default."""
        if self.protocol_version is None:
            return default
        return self.protocol_version


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    default_server: str | None = None
    protocol_version: int = DEFAULT_PROTOCOL_VERSION
    timeout: float = DEFAULT_TIMEOUT
    servers: dict[str, ServerConfig] = field(default_factory=dict)


def load_config(path: Path = CONFIG_FILE) -> AppConfig:
    """Load and parse the configuration file.

    Returns the built-in defaults (no named servers) if no config file exists.
    """
    if not path.exists():
        return AppConfig()

    with path.open("rb") as f:
        raw = tomllib.load(f)

    defaults = raw.get("defaults", {})

    servers: dict[str, ServerConfig] = {}
    for key, val in raw.get("servers", {}).items():
        servers[key] = ServerConfig(
            name=val.get("name", key),
            host=val["host"],
            port=val.get("port", DEFAULT_PORT),
            protocol_version=val.get("protocol_version"),
        )

    return AppConfig(
        default_server=defaults.get("server"),
        protocol_version=defaults.get("protocol_version", DEFAULT_PROTOCOL_VERSION),
        timeout=float(defaults.get("timeout", DEFAULT_TIMEOUT)),
        servers=servers,
    )
