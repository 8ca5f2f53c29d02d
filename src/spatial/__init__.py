"""
src/spatial: Map projection, pixel distance and geohash primitives.

This module provides the zoom resolution table, the backward Mercator
transform, latitude-corrected pixel distances and geohash adjacency helpers.
"""

from .distance import GeoPoint, distance_pixels, pixel_correction, should_cluster
from .exceptions import GeoclusterError, ZoomOutOfRange
from .geohash_utils import (
    cell_size,
    encode,
    lookup_hash_len_for_width_height,
    neighbor,
    top_right_neighbors,
)
from .projection import (
    MAX_RESOLUTION,
    MAX_ZOOM,
    RESOLUTIONS,
    ZOOMS,
    backward_mercator,
    earth_diameter,
    resolution,
)

__all__ = [
    "GeoPoint",
    "GeoclusterError",
    "ZoomOutOfRange",
    "MAX_RESOLUTION",
    "MAX_ZOOM",
    "RESOLUTIONS",
    "ZOOMS",
    "backward_mercator",
    "cell_size",
    "distance_pixels",
    "earth_diameter",
    "encode",
    "lookup_hash_len_for_width_height",
    "neighbor",
    "pixel_correction",
    "resolution",
    "should_cluster",
    "top_right_neighbors",
]
