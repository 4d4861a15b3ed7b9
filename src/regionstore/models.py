from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from .flags import Flag
from .geometry import RegionGeometry


@dataclass
class Domain:
    """Players (by name or unique id) and groups attached to a region."""

    players: Set[str] = field(default_factory=set)
    unique_ids: Set[uuid.UUID] = field(default_factory=set)
    groups: Set[str] = field(default_factory=set)

    def add_player(self, name: str) -> None:
        self.players.add(name)

    def add_unique_id(self, unique_id: uuid.UUID) -> None:
        self.unique_ids.add(unique_id)

    def add_group(self, name: str) -> None:
        self.groups.add(name)

    def contains(self, player: Any) -> bool:
        if isinstance(player, uuid.UUID):
            return player in self.unique_ids
        return player in self.players

    def is_empty(self) -> bool:
        return not (self.players or self.unique_ids or self.groups)

    def size(self) -> int:
        return len(self.players) + len(self.unique_ids) + len(self.groups)


@dataclass
class Region:
    """A persisted region.

    ``parent`` is the id of the parent region once it has been resolved
    against the other regions of the same store. Regions hash by id, so a
    store's contents can be held in a plain ``set``.
    """

    id: str
    geometry: RegionGeometry
    priority: int = 0
    flags: Dict[Flag, Any] = field(default_factory=dict)
    owners: Domain = field(default_factory=Domain)
    members: Domain = field(default_factory=Domain)
    parent: Optional[str] = None

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class RegionDifference:
    """Regions changed or removed since the last full save."""

    changed: Set[Region] = field(default_factory=set)
    removed: Set[Region] = field(default_factory=set)
