"""
Point groups: a single source point or a merged cluster of points.

Every group carries one representative geometry. Merging another group in
moves the representative to the count-weighted centroid of both groups and
absorbs the other group's features.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..spatial.distance import GeoPoint
from .exceptions import InvariantViolation


class PointGroup:
    """A single point or a cluster of points with one representative geometry."""

    def __init__(
        self,
        geometry: Optional[GeoPoint],
        features: Optional[Iterable[Any]] = None,
        count: Optional[int] = None,
    ):
        self._geometry = geometry
        self.features: List[Any] = list(features) if features is not None else []
        if count is None:
            count = len(self.features) or 1
        if count < 1:
            raise InvariantViolation(f"Point group count must be at least 1, got {count}")
        self.count = count

    @classmethod
    def from_feature(cls, lat: float, lng: float, payload: Any = None) -> "PointGroup":
        """Create a singleton group for one source point."""
        return cls(GeoPoint(lat, lng), [payload], count=1)

    @classmethod
    def from_features(
        cls,
        records: Iterable[Mapping[str, Any]],
        *,
        lat_column: str = "lat",
        lng_column: str = "lng",
    ) -> "PointGroup":
        """
        Create a group from records sharing a bucket.

        The representative is the centroid of the records' coordinates.
        """
        records = list(records)
        if not records:
            raise InvariantViolation("Cannot build a point group without records")
        lat = sum(float(r[lat_column]) for r in records) / len(records)
        lng = sum(float(r[lng_column]) for r in records) / len(records)
        return cls(GeoPoint(lat, lng), records, count=len(records))

    @property
    def geometry(self) -> GeoPoint:
        if self._geometry is None:
            raise InvariantViolation("Point group has no representative geometry")
        return self._geometry

    @property
    def is_cluster(self) -> bool:
        return self.count > 1

    def merge_in(self, other: Optional["PointGroup"]) -> None:
        """
        Absorb ``other`` into this group.

        Raises:
            InvariantViolation: If ``other`` is missing, is this group, or
                either group lacks a representative geometry
        """
        if other is None:
            raise InvariantViolation("Cannot merge a missing point group")
        if other is self:
            raise InvariantViolation("Cannot merge a point group into itself")

        mine, theirs = self.geometry, other.geometry
        total = self.count + other.count
        self._geometry = GeoPoint(
            lat=(mine.lat * self.count + theirs.lat * other.count) / total,
            lng=(mine.lng * self.count + theirs.lng * other.count) / total,
        )
        self.features.extend(other.features)
        self.count = total

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for the hosting layer."""
        geometry = self.geometry
        return {
            "lat": geometry.lat,
            "lng": geometry.lng,
            "count": self.count,
            "features": list(self.features),
        }

    def __repr__(self) -> str:
        return f"PointGroup(geometry={self._geometry!r}, count={self.count})"
