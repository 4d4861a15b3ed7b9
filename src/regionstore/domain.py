from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, Optional

from .models import Domain
from .tree import TreeNode

logger = logging.getLogger(__name__)


def parse_domain(node: Optional[TreeNode], log: Optional[logging.Logger] = None) -> Domain:
    """Build a Domain from an ``owners``/``members`` node.

    A missing node is an empty domain. Malformed unique ids are reported to
    ``log`` and skipped; the rest of the domain still loads.
    """
    log = log or logger
    domain = Domain()
    if node is None:
        return domain

    for name in node.get_string_list("players"):
        if name:
            domain.add_player(name)

    for string_id in node.get_string_list("unique-ids"):
        try:
            domain.add_unique_id(uuid.UUID(string_id))
        except ValueError as exc:
            log.warning("Failed to parse UUID '%s': %s", string_id, exc)

    for name in node.get_string_list("groups"):
        if name:
            domain.add_group(name)

    return domain


def _put_list(data: Dict[str, Any], key: str, values: Iterable[Any]) -> None:
    items = sorted(str(v) for v in values)
    if items:
        data[key] = items


def serialize_domain(domain: Domain) -> Dict[str, Any]:
    """Write only the non-empty parts of a domain."""
    data: Dict[str, Any] = {}
    _put_list(data, "players", domain.players)
    _put_list(data, "unique-ids", domain.unique_ids)
    _put_list(data, "groups", domain.groups)
    return data
