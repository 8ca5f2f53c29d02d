"""
src/clustering: Geohash bucketing and neighbor-merge clustering.

This module clusters map points per zoom level, with a bounded cache of
geohash prefix lengths per distance threshold.
"""

from .exceptions import (
    GeoclusterError,
    InvariantViolation,
    ThresholdOutOfRange,
    ZoomOutOfRange,
)
from .point_group import PointGroup
from .ordered_groups import OrderedGeohashGroups
from .geohash_lengths import (
    GEOCLUSTER_DEFAULT_DISTANCE,
    MAX_DISTANCE_THRESHOLD,
    MIN_DISTANCE_THRESHOLD,
    GeohashLengthCache,
    geohash_length,
    get_cache_stats,
    length_for_distance_threshold,
    length_from_distance,
)
from .merge import merge_by_neighbor_check
from .geocluster import (
    ClusteringConfig,
    ClusteringDiagnostics,
    bucket_points,
    cluster_points,
    load_clustering_config,
)

__all__ = [
    # Core functions
    "cluster_points",
    "bucket_points",
    "merge_by_neighbor_check",
    "length_for_distance_threshold",
    "length_from_distance",
    "geohash_length",
    "get_cache_stats",
    "load_clustering_config",

    # Data models
    "ClusteringConfig",
    "ClusteringDiagnostics",
    "GeohashLengthCache",
    "OrderedGeohashGroups",
    "PointGroup",

    # Errors
    "GeoclusterError",
    "InvariantViolation",
    "ThresholdOutOfRange",
    "ZoomOutOfRange",

    # Constants
    "GEOCLUSTER_DEFAULT_DISTANCE",
    "MAX_DISTANCE_THRESHOLD",
    "MIN_DISTANCE_THRESHOLD",
]
