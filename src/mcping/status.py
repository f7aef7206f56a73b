"""Typed view of a server's status document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcping.formatting import component_to_legacy, strip_formatting


@dataclass(frozen=True)
class ServerStatus:
    """The parts of a status response shown to users.

    ``description`` keeps its ``§`` formatting codes; ``raw`` is the full
    decoded document.
    """

    version_name: str
    protocol: int | None
    players_online: int
    players_max: int
    player_sample: tuple[str, ...]
    description: str
    has_favicon: bool
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def motd(self) -> str:
        """The description with formatting codes removed."""
        return strip_formatting(self.description)

    @classmethod
    def from_document(cls, document: Any) -> ServerStatus:
        """Build a ServerStatus from a decoded status document.

        Missing or malformed sections fall back to empty values; servers
        (and proxies) are inconsistent about what they include.
        """
        doc = document if isinstance(document, dict) else {}
        version = _section(doc, "version")
        players = _section(doc, "players")

        sample = players.get("sample")
        if not isinstance(sample, list):
            sample = []
        names = tuple(
            str(entry["name"])
            for entry in sample
            if isinstance(entry, dict) and "name" in entry
        )

        protocol = version.get("protocol")
        return cls(
            version_name=component_to_legacy(version.get("name", "")),
            protocol=protocol if isinstance(protocol, int) else None,
            players_online=_as_int(players.get("online")),
            players_max=_as_int(players.get("max")),
            player_sample=names,
            description=component_to_legacy(doc.get("description", "")),
            has_favicon=bool(doc.get("favicon")),
            raw=doc,
        )


def _section(doc: dict[str, Any], key: str) -> dict[str, Any]:
    value = doc.get(key)
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0
