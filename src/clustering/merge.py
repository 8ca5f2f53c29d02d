"""
Final clustering pass: merge neighboring geohash buckets.

Buckets are visited in ascending geohash order. Each bucket only looks at
its north-west, north, north-east and east cells, which are the only cells
that can still come later in that order. Merging is single-level: a bucket
that was absorbed is neither revisited nor used to reach its own neighbors
during the same pass.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Optional, Set

from ..spatial.distance import should_cluster
from ..spatial.geohash_utils import top_right_neighbors
from ..spatial.projection import resolution as zoom_resolution
from .exceptions import InvariantViolation
from .geohash_lengths import GEOCLUSTER_DEFAULT_DISTANCE
from .ordered_groups import OrderedGeohashGroups
from .point_group import PointGroup


logger = logging.getLogger(__name__)


def _require_ascending(groups: MutableMapping) -> None:
    if isinstance(groups, OrderedGeohashGroups):
        return
    keys = list(groups)
    if any(a >= b for a, b in zip(keys, keys[1:])):
        raise ValueError(
            "Geohash groups must iterate in ascending key order. "
            "Use OrderedGeohashGroups or insert keys in sorted order."
        )


def _geometry(group: PointGroup, key: str):
    try:
        return group.geometry
    except InvariantViolation as exc:
        raise InvariantViolation(f"Point group '{key}' has no representative geometry") from exc


def merge_by_neighbor_check(
    groups: MutableMapping[str, Optional[PointGroup]],
    zoom: int,
) -> Set[str]:
    """
    Merge overlapping neighbor buckets of ``groups`` in place.

    Args:
        groups: Geohash prefix -> point group, iterating in ascending key order
        zoom: Zoom level the groups are rendered at

    Returns:
        Keys that were merged into another group and removed from ``groups``

    Raises:
        ZoomOutOfRange: If zoom is outside [0, MAX_ZOOM]
        ValueError: If ``groups`` does not iterate in ascending key order
        InvariantViolation: If a group lost its representative geometry;
            no key is removed from ``groups`` in that case
    """
    res = zoom_resolution(zoom)
    _require_ascending(groups)

    removed: Set[str] = set()
    for item_hash in groups:
        if item_hash in removed:
            continue

        item = groups[item_hash]
        if item is None:
            continue

        for other_hash in top_right_neighbors(item_hash):
            if other_hash in removed:
                continue
            other = groups.get(other_hash)
            if other is None:
                continue

            if should_cluster(
                _geometry(item, item_hash),
                _geometry(other, other_hash),
                res,
                GEOCLUSTER_DEFAULT_DISTANCE,
            ):
                item.merge_in(other)
                _geometry(item, item_hash)
                removed.add(other_hash)

    for remove_hash in removed:
        del groups[remove_hash]

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Neighbor merge at zoom={zoom}: {len(removed)} merged, {len(groups)} remaining"
        )
    return removed


__all__ = ["merge_by_neighbor_check"]
