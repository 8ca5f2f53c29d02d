"""Geohash-keyed point groups kept in ascending key order."""

from __future__ import annotations

from bisect import bisect_left, insort
from collections.abc import Mapping, MutableMapping
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .point_group import PointGroup


class OrderedGeohashGroups(MutableMapping):
    """
    Mapping of geohash prefix -> point group iterated in ascending key order.

    Keys live in a sorted list next to a dict index, so lookups stay O(1)
    and iteration order never depends on insertion order. A stored value of
    ``None`` marks a bucket without a group.
    """

    def __init__(self, items: Optional[Iterable[Tuple[str, Optional[PointGroup]]]] = None):
        self._keys: List[str] = []
        self._groups: Dict[str, Optional[PointGroup]] = {}
        if items is not None:
            if isinstance(items, Mapping):
                items = items.items()
            for key, group in items:
                self[key] = group

    def __getitem__(self, key: str) -> Optional[PointGroup]:
        return self._groups[key]

    def __setitem__(self, key: str, group: Optional[PointGroup]) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Geohash keys must be strings, got {type(key).__name__}")
        if key not in self._groups:
            insort(self._keys, key)
        self._groups[key] = group

    def __delitem__(self, key: str) -> None:
        del self._groups[key]
        del self._keys[bisect_left(self._keys, key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._groups

    def is_sorted(self) -> bool:
        """Check that keys are in strictly ascending order."""
        return all(a < b for a, b in zip(self._keys, self._keys[1:]))

    def __repr__(self) -> str:
        return f"OrderedGeohashGroups({list(self._groups.items())!r})"
