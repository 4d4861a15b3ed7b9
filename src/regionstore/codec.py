from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .domain import parse_domain, serialize_domain
from .flags import FlagRegistry, marshal_flags
from .geometry import build_geometry, encode_geometry
from .models import Region
from .tree import TreeNode, require


def decode_region(
    region_id: str,
    node: TreeNode,
    flag_registry: FlagRegistry,
    log: Optional[logging.Logger] = None,
) -> Region:
    """Decode one ``regions`` entry into a Region.

    The declared parent is not resolved here; read it from the node and
    link it once every entry is loaded.

    Raises:
        MissingValueError: the entry has no type or lacks a required field.
        UnknownRegionTypeError: the type tag is not recognised.
    """
    type_tag = require(node.get_string("type"), "type")
    geometry = build_geometry(type_tag, node)
    priority = require(node.get_int("priority"), "priority")

    region = Region(region_id, geometry, priority=priority)
    flags_node = node.get_node("flags")
    if flags_node is not None:
        region.flags = flag_registry.unmarshal(flags_node.to_dict(), create_unknown=True)
    region.owners = parse_domain(node.get_node("owners"), log)
    region.members = parse_domain(node.get_node("members"), log)
    return region


def encode_region(region: Region) -> Dict[str, Any]:
    """Encode a Region into the mapping stored under its id."""
    type_tag, fields = encode_geometry(region.geometry)
    data: Dict[str, Any] = {"type": type_tag}
    data.update(fields)
    data["priority"] = region.priority
    data["flags"] = marshal_flags(region.flags)
    data["owners"] = serialize_domain(region.owners)
    data["members"] = serialize_domain(region.members)
    if region.parent is not None:
        data["parent"] = region.parent
    return data
