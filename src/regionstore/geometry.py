"""Region shapes and the factory that builds them from a type tag."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .errors import UnknownRegionTypeError
from .tree import TreeNode, require
from .vectors import BlockVector2, BlockVector3

logger = logging.getLogger(__name__)

CUBOID = "cuboid"
POLYGONAL = "poly2d"
GLOBAL = "global"


class RegionGeometry:
    """Base class for region shapes."""


@dataclass(frozen=True)
class Cuboid(RegionGeometry):
    """Axis-aligned box. Corners are stored as the true minimum and maximum."""

    min: BlockVector3
    max: BlockVector3

    def __post_init__(self) -> None:
        lo = BlockVector3(*self.min)
        hi = BlockVector3(*self.max)
        object.__setattr__(self, "min", lo.minimum(hi))
        object.__setattr__(self, "max", lo.maximum(hi))


@dataclass(frozen=True)
class Polygonal(RegionGeometry):
    """2D polygon extruded between two heights."""

    points: Tuple[BlockVector2, ...]
    min_y: int
    max_y: int

    def __post_init__(self) -> None:
        lo, hi = sorted((self.min_y, self.max_y))
        object.__setattr__(self, "points", tuple(BlockVector2(*p) for p in self.points))
        object.__setattr__(self, "min_y", lo)
        object.__setattr__(self, "max_y", hi)


@dataclass(frozen=True)
class Global(RegionGeometry):
    """Region without bounds; covers a whole world."""


def build_geometry(type_tag: str, node: TreeNode) -> RegionGeometry:
    """Construct the geometry for ``type_tag`` from an entry node.

    Raises:
        MissingValueError: a required field is absent or malformed.
        UnknownRegionTypeError: ``type_tag`` is not one of the known tags.
    """
    if type_tag == CUBOID:
        pt1 = BlockVector3.at(*require(node.get_vector("min"), "min"))
        pt2 = BlockVector3.at(*require(node.get_vector("max"), "max"))
        return Cuboid(pt1.minimum(pt2), pt1.maximum(pt2))
    if type_tag == POLYGONAL:
        min_y = require(node.get_int("min-y"), "min-y")
        max_y = require(node.get_int("max-y"), "max-y")
        points = node.get_block_vector2_list("points") or []
        return Polygonal(points, min_y, max_y)
    if type_tag == GLOBAL:
        return Global()
    raise UnknownRegionTypeError(type_tag)


def encode_geometry(geometry: RegionGeometry) -> Tuple[str, Dict[str, Any]]:
    """Return ``(type tag, fields)`` mirroring what :func:`build_geometry` reads."""
    if isinstance(geometry, Cuboid):
        return CUBOID, {"min": geometry.min.to_dict(), "max": geometry.max.to_dict()}
    if isinstance(geometry, Polygonal):
        return POLYGONAL, {
            "min-y": geometry.min_y,
            "max-y": geometry.max_y,
            "points": [p.to_dict() for p in geometry.points],
        }
    if isinstance(geometry, Global):
        return GLOBAL, {}
    cls = type(geometry)
    tag = f"{cls.__module__}.{cls.__qualname__}"
    logger.debug("No encoder for geometry %s; writing type tag only", tag)
    return tag, {}
