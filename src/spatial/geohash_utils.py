"""Utility helpers for working with geohash prefixes."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Tuple

import numpy as np
import pygeohash as pgh


# Longest hash considered when sizing cells (same bound as spatial4j)
MAX_PRECISION = 24

# Longest hash pygeohash can encode or step across
MAX_HASH_LENGTH = 12

DIRECTIONS = ("top", "bottom", "left", "right")


def encode(lat: float, lng: float, precision: int) -> str:
    """Return the geohash of ``(lat, lng)`` truncated to ``precision`` characters."""
    return pgh.encode(lat, lng, precision=precision)


def neighbor(geohash: str, direction: str) -> Optional[str]:
    """
    Return the adjacent cell of ``geohash`` in ``direction``.

    Adjacency is computed on the string encoding alone. Cells on the
    north or south edge of the map have no neighbor beyond it, in which
    case ``None`` is returned. East and west wrap around the antimeridian.

    Raises:
        ValueError: If ``direction`` is unknown or ``geohash`` is not a valid
            geohash of 1 to MAX_HASH_LENGTH characters
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction '{direction}'. Expected one of: {', '.join(DIRECTIONS)}")
    if not pgh.is_valid_geohash(geohash):
        raise ValueError(
            f"Invalid geohash {geohash!r}. Expected 1 to {MAX_HASH_LENGTH} characters "
            f"from the geohash base32 alphabet."
        )
    if direction in ("top", "bottom") and _on_polar_edge(geohash, direction):
        return None
    return pgh.get_adjacent(geohash, direction)


def _on_polar_edge(geohash: str, direction: str) -> bool:
    lat, _, lat_err, _ = pgh.decode_exactly(geohash)
    if direction == "top":
        return lat + lat_err >= 90.0
    return lat - lat_err <= -90.0


def top_right_neighbors(geohash: str) -> List[str]:
    """
    Return the north-west, north, north-east and east cells of ``geohash``.

    Given ascending geohash order, cells that are visited after ``geohash``
    lie in one of these directions; the south and west ones were visited
    already.
    """
    top = neighbor(geohash, "top")
    candidates = []
    if top is not None:
        candidates.extend([neighbor(top, "left"), top, neighbor(top, "right")])
    candidates.append(neighbor(geohash, "right"))
    return [cell for cell in candidates if cell is not None]


def cell_size(length: int) -> Tuple[float, float]:
    """
    Width and height in degrees of a geohash cell of ``length`` characters.

    Characters alternate between longitude and latitude bits, starting with
    longitude, so odd lengths have one more longitude bit than latitude bits.
    """
    widths, heights = _cell_size_table()
    return float(widths[length]), float(heights[length])


@lru_cache(maxsize=1)
def _cell_size_table() -> Tuple[np.ndarray, np.ndarray]:
    bits = 5 * np.arange(MAX_PRECISION + 1)
    lat_bits = bits // 2
    lng_bits = bits - lat_bits
    widths = 360.0 / np.power(2.0, lng_bits)
    heights = 180.0 / np.power(2.0, lat_bits)
    widths.setflags(write=False)
    heights.setflags(write=False)
    return widths, heights


def lookup_hash_len_for_width_height(width: float, height: float) -> int:
    """
    Return the shortest hash length whose cells fit inside ``width`` x ``height``.

    Both cell dimensions must be strictly smaller than the requested ones.
    ``MAX_PRECISION`` is returned when no length below it qualifies.
    """
    widths, heights = _cell_size_table()
    for length in range(1, MAX_PRECISION):
        if heights[length] < height and widths[length] < width:
            return length
    return MAX_PRECISION


__all__ = [
    "DIRECTIONS",
    "MAX_HASH_LENGTH",
    "MAX_PRECISION",
    "cell_size",
    "encode",
    "lookup_hash_len_for_width_height",
    "neighbor",
    "top_right_neighbors",
]
