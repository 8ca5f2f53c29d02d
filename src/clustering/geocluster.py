"""
Geohash clustering of map points for a zoom level.

This module provides:
1. Bucketing of points by geohash prefix sized for the zoom and threshold
2. A neighbor-merge pass collapsing buckets that overlap on screen
3. Diagnostics describing what happened to the input
4. Configuration profiles loaded from YAML

Typical use:
    >>> groups, diagnostics = cluster_points(places_df, zoom=10)
    >>> [group.count for group in groups.values()]
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Optional, Tuple

import pandas as pd

from ..spatial.geohash_utils import MAX_HASH_LENGTH, encode
from ..spatial.projection import resolution as zoom_resolution
from ..tools.config_loader import ConfigLoader
from .geohash_lengths import GEOCLUSTER_DEFAULT_DISTANCE, length_for_distance_threshold
from .merge import merge_by_neighbor_check
from .ordered_groups import OrderedGeohashGroups
from .point_group import PointGroup


logger = logging.getLogger(__name__)


@dataclass
class ClusteringConfig:
    """Configuration for geohash clustering."""

    distance_threshold: int = GEOCLUSTER_DEFAULT_DISTANCE
    """Pixel distance used to size the geohash buckets."""

    lat_column: str = "lat"
    """Name of the latitude field in the input records."""

    lng_column: str = "lng"
    """Name of the longitude field in the input records."""

    merge_neighbors: bool = True
    """Whether to run the neighbor-merge pass after bucketing."""


@dataclass
class ClusteringDiagnostics:
    """What a clustering run did with its input."""

    num_points: int
    """Total number of points provided."""

    num_dropped: int
    """Points skipped because a coordinate was missing."""

    num_buckets: int
    """Distinct geohash prefixes before merging."""

    num_groups: int
    """Groups left after merging."""

    num_merged: int
    """Buckets absorbed by a neighbor."""

    geohash_length: int
    """Geohash prefix length used for bucketing, at most ``MAX_HASH_LENGTH``."""

    zoom: int
    """Zoom level the points were clustered for."""

    distance_threshold: int
    """Pixel distance the geohash length was sized for."""

    resolution: float
    """Meters per pixel at ``zoom``."""


def _coerce_points_dataframe(points: Any, config: ClusteringConfig) -> pd.DataFrame:
    """Return a copy of ``points`` as a DataFrame with the coordinate columns."""

    if isinstance(points, pd.DataFrame):
        df = points.copy()
    else:
        df = pd.DataFrame(list(points))

    if df.empty:
        return pd.DataFrame(columns=[config.lat_column, config.lng_column])

    missing = [c for c in (config.lat_column, config.lng_column) if c not in df.columns]
    if missing:
        raise ValueError(
            f"Points are missing coordinate column(s): {', '.join(missing)}. "
            f"Available columns: {', '.join(map(str, df.columns))}"
        )
    return df


def bucket_points(
    points: Any,
    geohash_length: int,
    config: Optional[ClusteringConfig] = None,
) -> Tuple[OrderedGeohashGroups, int]:
    """
    Group points sharing a geohash prefix of ``geohash_length`` characters.

    Each bucket becomes a :class:`PointGroup` whose representative is the
    centroid of its points and whose features are the original records.

    Args:
        points: DataFrame or iterable of mappings with coordinate fields
        geohash_length: Prefix length to bucket by
        config: Clustering configuration (uses defaults if None)

    Returns:
        (groups, num_dropped) where num_dropped counts points without coordinates
    """
    if config is None:
        config = ClusteringConfig()

    df = _coerce_points_dataframe(points, config)
    groups = OrderedGeohashGroups()
    if df.empty:
        return groups, 0

    valid = df[config.lat_column].notna() & df[config.lng_column].notna()
    num_dropped = int((~valid).sum())
    if num_dropped:
        logger.warning(f"Dropping {num_dropped} point(s) without coordinates")
    df = df.loc[valid]
    if df.empty:
        return groups, num_dropped

    records = df.to_dict(orient="records")
    keys = [
        encode(float(r[config.lat_column]), float(r[config.lng_column]), geohash_length)
        for r in records
    ]

    buckets: dict = {}
    for key, record in zip(keys, records):
        buckets.setdefault(key, []).append(record)

    for key, bucket in buckets.items():
        groups[key] = PointGroup.from_features(
            bucket,
            lat_column=config.lat_column,
            lng_column=config.lng_column,
        )
    return groups, num_dropped


def cluster_points(
    points: Any,
    zoom: int,
    distance_threshold: Optional[int] = None,
    config: Optional[ClusteringConfig] = None,
) -> Tuple[OrderedGeohashGroups, ClusteringDiagnostics]:
    """
    Cluster ``points`` for display at ``zoom``.

    Args:
        points: DataFrame or iterable of mappings with at least latitude and
            longitude fields; every record is kept as a feature of its group
        zoom: Map zoom level (0..30)
        distance_threshold: Pixel distance for bucketing (overrides config)
        config: Clustering configuration (uses defaults if None)

    Returns:
        (groups, diagnostics) where groups maps geohash prefix to PointGroup

    Raises:
        ZoomOutOfRange: If zoom is outside [0, MAX_ZOOM]
        ThresholdOutOfRange: If the threshold is outside the admissible range
        ValueError: If the coordinate columns are missing
    """
    if config is None:
        config = ClusteringConfig()
    if distance_threshold is None:
        distance_threshold = config.distance_threshold

    res = zoom_resolution(zoom)
    geohash_length = int(length_for_distance_threshold(distance_threshold)[int(zoom)])
    if geohash_length > MAX_HASH_LENGTH:
        logger.debug(
            f"Capping geohash length {geohash_length} to {MAX_HASH_LENGTH} at zoom={zoom}"
        )
        geohash_length = MAX_HASH_LENGTH

    groups, num_dropped = bucket_points(points, geohash_length, config)
    num_points = sum(group.count for group in groups.values() if group is not None) + num_dropped
    num_buckets = len(groups)

    merged = set()
    if config.merge_neighbors and num_buckets > 1:
        merged = merge_by_neighbor_check(groups, zoom)

    diagnostics = ClusteringDiagnostics(
        num_points=num_points,
        num_dropped=num_dropped,
        num_buckets=num_buckets,
        num_groups=len(groups),
        num_merged=len(merged),
        geohash_length=geohash_length,
        zoom=int(zoom),
        distance_threshold=int(distance_threshold),
        resolution=res,
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Clustering diagnostics: {asdict(diagnostics)}")

    return groups, diagnostics


def load_clustering_config(profile: Optional[str] = None) -> ClusteringConfig:
    """
    Build a :class:`ClusteringConfig` from a YAML profile.

    Args:
        profile: Profile name; falls back to GEOCLUSTER_PROFILE, then "default"

    Raises:
        FileNotFoundError: If the profile doesn't exist
        ValueError: If the profile has unknown keys
    """
    if profile is None:
        values = ConfigLoader.load_default_or_env_profile()
    else:
        values = ConfigLoader.load_profile(profile)

    values = dict(values.get("clustering", values) or {})
    known = {f.name for f in fields(ClusteringConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(
            f"Unknown clustering option(s): {', '.join(unknown)}. "
            f"Expected any of: {', '.join(sorted(known))}"
        )
    return ClusteringConfig(**values)


__all__ = [
    "ClusteringConfig",
    "ClusteringDiagnostics",
    "bucket_points",
    "cluster_points",
    "load_clustering_config",
]
