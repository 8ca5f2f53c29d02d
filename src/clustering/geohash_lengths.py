"""
Geohash prefix lengths per zoom level for a distance threshold.

This module encapsulates the threshold -> lengths table logic, providing:
- The geohash length that buckets points closer than the threshold at a zoom
- A process-wide, lock-guarded cache of one table per threshold
- An admissible threshold range bounding how many tables can ever be cached

The range exists so callers cannot grow memory by requesting arbitrarily
many thresholds. With the default of 65 pixels the bounds are 8..260, which
caps the cache at 253 tables of 31 entries each.
"""

from __future__ import annotations

import logging
import numbers
import threading
from typing import Any, Dict, Optional

import numpy as np
from cachetools import LRUCache

from ..spatial.geohash_utils import lookup_hash_len_for_width_height
from ..spatial.projection import RESOLUTIONS, backward_mercator, resolution
from .exceptions import ThresholdOutOfRange


logger = logging.getLogger(__name__)


# -----------------------------
# Constants
# -----------------------------

GEOCLUSTER_DEFAULT_DISTANCE = 65  # pixels
MIN_DISTANCE_THRESHOLD = GEOCLUSTER_DEFAULT_DISTANCE // 8
MAX_DISTANCE_THRESHOLD = GEOCLUSTER_DEFAULT_DISTANCE * 4


# -----------------------------
# Length Computation
# -----------------------------

def length_from_distance(resolution: float, distance_threshold: float) -> int:
    """
    Geohash length for clustering points ``distance_threshold`` pixels apart.

    Args:
        resolution: Meters per pixel at the zoom level
        distance_threshold: Cluster distance in pixels

    Returns:
        Shortest geohash length whose cells are smaller than the cluster
        distance in both directions
    """
    cluster_distance_meters = distance_threshold * resolution
    width, height = backward_mercator(cluster_distance_meters, cluster_distance_meters)
    return lookup_hash_len_for_width_height(width, height)


def precompute_geohash_lengths(
    distance_threshold: int,
    resolutions: np.ndarray = RESOLUTIONS,
) -> np.ndarray:
    """
    Compute the geohash length for ``distance_threshold`` at every zoom level.

    The returned table is read-only.
    """
    table = np.array(
        [length_from_distance(float(res), float(distance_threshold)) for res in resolutions],
        dtype=np.int64,
    )
    table.setflags(write=False)
    return table


# -----------------------------
# Cache Management
# -----------------------------

class GeohashLengthCache:
    """Bounded cache of geohash length tables keyed by distance threshold."""

    def __init__(
        self,
        default_threshold: int = GEOCLUSTER_DEFAULT_DISTANCE,
        resolutions: np.ndarray = RESOLUTIONS,
    ):
        """Initialize the cache and seed it with the default threshold's table."""
        self.default_threshold = default_threshold
        self.min_threshold = default_threshold // 8
        self.max_threshold = default_threshold * 4
        self.resolutions = resolutions
        self.computations = 0

        # maxsize covers the whole admissible range so nothing is evicted
        self._tables: LRUCache = LRUCache(maxsize=self.max_threshold - self.min_threshold + 1)
        self._lock = threading.RLock()
        with self._lock:
            self._tables[default_threshold] = self._compute(default_threshold)

    def _compute(self, distance_threshold: int) -> np.ndarray:
        self.computations += 1
        table = precompute_geohash_lengths(distance_threshold, self.resolutions)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Geohash lengths for threshold={distance_threshold}px: {table.tolist()}"
            )
        return table

    def _validate(self, distance_threshold: Any) -> int:
        if isinstance(distance_threshold, bool) or not isinstance(distance_threshold, numbers.Integral):
            raise TypeError(
                f"Distance threshold must be an integer number of pixels, "
                f"got {type(distance_threshold).__name__}"
            )
        distance_threshold = int(distance_threshold)
        if not self.min_threshold <= distance_threshold <= self.max_threshold:
            raise ThresholdOutOfRange(
                distance_threshold,
                self.min_threshold,
                self.max_threshold,
                self.default_threshold,
            )
        return distance_threshold

    def length_for_distance_threshold(self, distance_threshold: int) -> np.ndarray:
        """
        Return the per-zoom geohash lengths for ``distance_threshold``.

        Tables are computed once per threshold and reused afterwards.

        Raises:
            ThresholdOutOfRange: If the threshold is outside the admissible range
            TypeError: If the threshold is not an integer
        """
        distance_threshold = self._validate(distance_threshold)

        with self._lock:
            table = self._tables.get(distance_threshold)
            if table is None:
                table = self._compute(distance_threshold)
                self._tables[distance_threshold] = table
                logger.info(
                    f"Cached geohash lengths for threshold={distance_threshold}px "
                    f"({len(self._tables)}/{self._tables.maxsize} tables)"
                )
            return table

    def __contains__(self, distance_threshold: object) -> bool:
        with self._lock:
            return distance_threshold in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "size": len(self._tables),
                "maxsize": self._tables.maxsize,
                "computations": self.computations,
                "default_threshold": self.default_threshold,
                "min_threshold": self.min_threshold,
                "max_threshold": self.max_threshold,
            }


# Global cache instance
_length_cache = GeohashLengthCache()


def get_length_cache() -> GeohashLengthCache:
    """Return the process-wide geohash length cache."""
    return _length_cache


def length_for_distance_threshold(distance_threshold: int) -> np.ndarray:
    """Per-zoom geohash lengths for ``distance_threshold`` from the global cache."""
    return _length_cache.length_for_distance_threshold(distance_threshold)


def geohash_length(zoom: int, distance_threshold: Optional[int] = None) -> int:
    """
    Geohash prefix length to bucket points at ``zoom``.

    Raises:
        ZoomOutOfRange: If zoom is outside [0, MAX_ZOOM]
        ThresholdOutOfRange: If the threshold is outside the admissible range
    """
    resolution(zoom)
    if distance_threshold is None:
        distance_threshold = GEOCLUSTER_DEFAULT_DISTANCE
    return int(length_for_distance_threshold(distance_threshold)[int(zoom)])


def get_cache_stats() -> Dict[str, Any]:
    """Get current geohash length cache statistics."""
    return _length_cache.stats()


__all__ = [
    "GEOCLUSTER_DEFAULT_DISTANCE",
    "MAX_DISTANCE_THRESHOLD",
    "MIN_DISTANCE_THRESHOLD",
    "GeohashLengthCache",
    "geohash_length",
    "get_cache_stats",
    "get_length_cache",
    "length_for_distance_threshold",
    "length_from_distance",
    "precompute_geohash_lengths",
]
