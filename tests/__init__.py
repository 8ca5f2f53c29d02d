"""Test package for geocluster.

This package contains:
- Unit tests (test_projection.py, test_distance.py, test_geohash_utils.py,
  test_geohash_lengths.py, test_point_group.py, test_merge.py)
- Integration tests (test_geocluster.py)
- Test configuration (conftest.py)
"""
