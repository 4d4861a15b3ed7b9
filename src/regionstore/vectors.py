"""Integer block coordinates used by region geometry."""
from __future__ import annotations

import math
from typing import Dict, NamedTuple


class BlockVector3(NamedTuple):
    x: int
    y: int
    z: int

    @staticmethod
    def at(x: float, y: float, z: float) -> "BlockVector3":
        """Floor arbitrary numbers onto the block grid."""
        return BlockVector3(math.floor(x), math.floor(y), math.floor(z))

    def minimum(self, other: "BlockVector3") -> "BlockVector3":
        return BlockVector3(min(self.x, other.x), min(self.y, other.y), min(self.z, other.z))

    def maximum(self, other: "BlockVector3") -> "BlockVector3":
        return BlockVector3(max(self.x, other.x), max(self.y, other.y), max(self.z, other.z))

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}


class BlockVector2(NamedTuple):
    x: int
    z: int

    @staticmethod
    def at(x: float, z: float) -> "BlockVector2":
        return BlockVector2(math.floor(x), math.floor(z))

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "z": self.z}
