"""Typed access to the generic mapping/sequence/scalar tree produced by PyYAML.

``yaml.safe_load`` hands back plain ``dict``/``list``/scalar values. The codec
never pokes at those directly; it goes through :class:`TreeNode`, whose getters
return ``None`` for anything absent or of the wrong shape. Callers that need a
value use :func:`require`, which turns that ``None`` into a
:class:`~regionstore.errors.MissingValueError` the loader can catch per entry.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypeVar

from .errors import MissingValueError
from .vectors import BlockVector2

T = TypeVar("T")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but YAML true/false is never a coordinate;
    # .inf and .nan cannot become block coordinates or priorities
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def require(value: Optional[T], key: str) -> T:
    if value is None:
        raise MissingValueError(key)
    return value


class TreeNode:
    """A mapping node of the loaded tree."""

    def __init__(self, data: Optional[Mapping[Any, Any]] = None) -> None:
        self.data: Dict[Any, Any] = dict(data) if data is not None else {}

    def get_string(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        if value is None:
            return None
        return str(value)

    def get_int(self, key: str) -> Optional[int]:
        value = self.data.get(key)
        if not _is_number(value):
            return None
        return int(value)

    def get_float(self, key: str) -> Optional[float]:
        value = self.data.get(key)
        if not _is_number(value):
            return None
        try:
            return float(value)
        except OverflowError:
            return None

    def get_vector(self, key: str) -> Optional[Tuple[float, float, float]]:
        """Read a ``{x, y, z}`` mapping. Any missing component yields None."""
        node = self.get_node(key)
        if node is None:
            return None
        x, y, z = node.get_float("x"), node.get_float("y"), node.get_float("z")
        if x is None or y is None or z is None:
            return None
        return (x, y, z)

    def get_block_vector2_list(self, key: str) -> Optional[List[BlockVector2]]:
        """Read a list of ``{x, z}`` mappings, skipping malformed points."""
        raw = self.data.get(key)
        if not isinstance(raw, list):
            return None
        points: List[BlockVector2] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            point = TreeNode(item)
            x, z = point.get_float("x"), point.get_float("z")
            if x is None or z is None:
                continue
            points.append(BlockVector2.at(x, z))
        return points

    def get_string_list(self, key: str) -> List[str]:
        """Read a list of scalars as strings. Absent or non-list gives []."""
        raw = self.data.get(key)
        if not isinstance(raw, list):
            return []
        return [str(item) for item in raw if item is not None]

    def get_node(self, key: str) -> Optional["TreeNode"]:
        value = self.data.get(key)
        if not isinstance(value, dict):
            return None
        return TreeNode(value)

    def get_nodes(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the raw children of a mapping-valued key, keyed by string.

        Children are left raw so that the caller can report entries that are
        not mappings themselves.
        """
        value = self.data.get(key)
        if not isinstance(value, dict):
            return None
        return {str(k): v for k, v in value.items()}

    def to_dict(self) -> Dict[Any, Any]:
        return self.data
