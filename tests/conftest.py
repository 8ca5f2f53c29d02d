"""
Pytest configuration and shared fixtures for geocluster tests.

This file provides:
- Sample point data around San Francisco and New York
- Fresh geohash length caches isolated from the process-wide one
- Helpers for building point groups
"""

from typing import Any, Dict, List

import pytest
import pandas as pd

from src.clustering.geohash_lengths import GeohashLengthCache
from src.clustering.point_group import PointGroup


# ==============================================================================
# Sample Points
# ==============================================================================

@pytest.fixture
def sample_points() -> List[Dict[str, Any]]:
    """Sample points: two co-located in San Francisco, one in New York."""
    return [
        {
            "id": "sf_city_hall",
            "name": "San Francisco City Hall",
            "lat": 37.7793,
            "lng": -122.4193,
        },
        {
            "id": "sf_city_hall_cafe",
            "name": "City Hall Cafe",
            "lat": 37.7793,
            "lng": -122.4193,
        },
        {
            "id": "nyc_city_hall",
            "name": "New York City Hall",
            "lat": 40.7128,
            "lng": -74.0060,
        },
    ]


@pytest.fixture
def sample_points_df(sample_points) -> pd.DataFrame:
    """Sample points as DataFrame."""
    return pd.DataFrame(sample_points)


# ==============================================================================
# Caches
# ==============================================================================

@pytest.fixture
def length_cache() -> GeohashLengthCache:
    """A fresh cache seeded with the default threshold only."""
    return GeohashLengthCache()


# ==============================================================================
# Helpers
# ==============================================================================

def make_group(lat: float, lng: float, name: str = "point") -> PointGroup:
    """Build a singleton point group carrying ``name`` as its payload."""
    return PointGroup.from_feature(lat, lng, {"name": name})


@pytest.fixture
def group_factory():
    """Factory fixture for singleton point groups."""
    return make_group
