"""
Zoom resolutions and Spherical Mercator helpers.

This module provides:
1. The meters-per-pixel table for every web-map zoom level (0..30)
2. The backward Spherical Mercator transform (meters -> degrees)
3. The WGS84 earth diameter used to derive the zoom-0 resolution

Resolutions follow the OpenStreetMap tile convention:
http://wiki.openstreetmap.org/wiki/Zoom_levels
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from .exceptions import ZoomOutOfRange


# -----------------------------
# Constants
# -----------------------------

MAX_ZOOM = 30
ZOOMS = MAX_ZOOM + 1

PIXELS_PER_TILE = 256
METERS_PER_KM = 1000

# WGS84 ellipsoid axes (meters)
WGS84_SEMI_MAJOR_AXIS = 6378137.0
WGS84_SEMI_MINOR_AXIS = 6356752.31420

RAD_TO_DEGREES = 180 / math.pi
EARTH_RADIUS_M = 6378137


def earth_diameter(latitude: float) -> float:
    """
    Return the geocentric diameter of the WGS84 ellipsoid at ``latitude``.

    Args:
        latitude: Latitude in degrees

    Returns:
        Diameter in kilometers (12756.274 at the equator)
    """
    lat = math.radians(latitude)
    a, b = WGS84_SEMI_MAJOR_AXIS, WGS84_SEMI_MINOR_AXIS
    numerator = (a * a * math.cos(lat)) ** 2 + (b * b * math.sin(lat)) ** 2
    denominator = (a * math.cos(lat)) ** 2 + (b * math.sin(lat)) ** 2
    return 2 * math.sqrt(numerator / denominator) / METERS_PER_KM


EARTH_DIAMETER = earth_diameter(0.0)

# Meters per pixel when the whole world fits one tile (zoom 0).
# circumference = 2*PI*r = PI * diameter
MAX_RESOLUTION = math.pi * EARTH_DIAMETER * METERS_PER_KM / PIXELS_PER_TILE


def _build_resolutions() -> np.ndarray:
    table = MAX_RESOLUTION / np.power(2.0, np.arange(ZOOMS))
    table.setflags(write=False)
    return table


RESOLUTIONS = _build_resolutions()


def resolution(zoom: int) -> float:
    """
    Meters represented by one pixel at ``zoom``.

    Raises:
        ZoomOutOfRange: If zoom is outside [0, MAX_ZOOM]
    """
    if isinstance(zoom, bool) or not 0 <= zoom <= MAX_ZOOM or int(zoom) != zoom:
        raise ZoomOutOfRange(zoom, MAX_ZOOM)
    return float(RESOLUTIONS[int(zoom)])


def backward_mercator(x: float, y: float) -> Tuple[float, float]:
    """
    Convert Spherical Mercator meters to EPSG:4326 degrees.

    Based on the SphericalMercator inverse used by OpenLayers and
    mapbox/clustr. Inputs are not bounded; extreme values give non-finite
    latitudes.

    Returns:
        (lng, lat) in degrees
    """
    lng = x * RAD_TO_DEGREES / EARTH_RADIUS_M
    lat = ((math.pi * 0.5) - 2.0 * math.atan(math.exp(-y / EARTH_RADIUS_M))) * RAD_TO_DEGREES
    return lng, lat


__all__ = [
    "EARTH_DIAMETER",
    "EARTH_RADIUS_M",
    "MAX_RESOLUTION",
    "MAX_ZOOM",
    "PIXELS_PER_TILE",
    "RESOLUTIONS",
    "ZOOMS",
    "backward_mercator",
    "earth_diameter",
    "resolution",
]
