from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .models import Region

logger = logging.getLogger(__name__)


def relink_parents(
    regions: Mapping[str, Region],
    parent_ids: Mapping[str, str],
    log: Optional[logging.Logger] = None,
) -> None:
    """Resolve declared parent ids against the loaded regions.

    ``parent_ids`` maps child id to declared parent id, in load order. Links
    are assigned one at a time; a link to a region that is not loaded, or one
    that would close a cycle (a region naming itself included), is reported
    and left unset, so every assigned parent names a region in ``regions``.
    """
    log = log or logger
    ids: List[str] = list(regions)
    index: Dict[str, int] = {region_id: i for i, region_id in enumerate(ids)}
    parent_of: Dict[int, int] = {}

    for child_id, parent_id in parent_ids.items():
        child = index.get(child_id)
        if child is None:
            continue
        parent = index.get(parent_id)
        if parent is None:
            log.warning("Unknown region parent '%s' for region '%s'", parent_id, child_id)
            continue
        if _reaches(parent_of, parent, child):
            log.warning(
                "Circular inheritance detected: '%s' cannot have parent '%s'; parent not set",
                child_id,
                parent_id,
            )
            continue
        parent_of[child] = parent

    for i, region_id in enumerate(ids):
        parent = parent_of.get(i)
        regions[region_id].parent = ids[parent] if parent is not None else None


def _reaches(parent_of: Mapping[int, int], start: int, target: int) -> bool:
    node: Optional[int] = start
    while node is not None:
        if node == target:
            return True
        node = parent_of.get(node)
    return False
