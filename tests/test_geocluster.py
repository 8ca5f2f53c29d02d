"""
Integration Tests for the Clustering Entry Point (src/clustering/geocluster.py)

Tests bucketing, merging and diagnostics end to end, plus YAML profiles.
"""

import math

import pytest
import pandas as pd

from src.clustering.exceptions import ThresholdOutOfRange, ZoomOutOfRange
from src.clustering.geocluster import (
    ClusteringConfig,
    ClusteringDiagnostics,
    bucket_points,
    cluster_points,
    load_clustering_config,
)
from src.clustering.ordered_groups import OrderedGeohashGroups
from src.spatial.geohash_utils import MAX_HASH_LENGTH
from src.tools.config_loader import ConfigLoader


# ==============================================================================
# Bucketing Tests
# ==============================================================================

class TestBucketPoints:
    """Test grouping points by geohash prefix."""

    def test_buckets_by_prefix(self, sample_points):
        groups, dropped = bucket_points(sample_points, 5)

        assert isinstance(groups, OrderedGeohashGroups)
        assert list(groups) == ["9q8yy", "dr5re"]
        assert groups["9q8yy"].count == 2
        assert groups["dr5re"].count == 1
        assert dropped == 0

    def test_payload_preserved(self, sample_points):
        groups, _ = bucket_points(sample_points, 5)

        ids = {feature["id"] for feature in groups["9q8yy"].features}
        assert ids == {"sf_city_hall", "sf_city_hall_cafe"}

    def test_dataframe_input(self, sample_points_df):
        groups, _ = bucket_points(sample_points_df, 5)

        assert list(groups) == ["9q8yy", "dr5re"]
        assert groups["dr5re"].features[0]["name"] == "New York City Hall"

    def test_representative_is_centroid(self):
        points = [
            {"lat": 37.7790, "lng": -122.4190},
            {"lat": 37.7796, "lng": -122.4196},
        ]

        groups, _ = bucket_points(points, 5)

        geometry = groups["9q8yy"].geometry
        assert geometry.lat == pytest.approx(37.7793)
        assert geometry.lng == pytest.approx(-122.4193)

    def test_missing_coordinates_dropped(self, sample_points):
        points = sample_points + [{"id": "nowhere", "lat": None, "lng": None}]

        groups, dropped = bucket_points(points, 5)

        assert dropped == 1
        assert sum(group.count for group in groups.values()) == 3

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="lat"):
            bucket_points([{"latitude": 1.0, "lng": 2.0}], 5)

    def test_custom_columns(self):
        config = ClusteringConfig(lat_column="latitude", lng_column="longitude")
        points = [{"latitude": 37.7793, "longitude": -122.4193}]

        groups, _ = bucket_points(points, 5, config)

        assert list(groups) == ["9q8yy"]

    def test_empty_input(self):
        groups, dropped = bucket_points([], 5)

        assert len(groups) == 0
        assert dropped == 0


# ==============================================================================
# Clustering Tests
# ==============================================================================

class TestClusterPoints:
    """Test the full clustering run."""

    def test_zoom_ten(self, sample_points):
        groups, diagnostics = cluster_points(sample_points, zoom=10)

        assert list(groups) == ["9q8yy", "dr5re"]
        assert groups["9q8yy"].count == 2
        assert isinstance(diagnostics, ClusteringDiagnostics)
        assert diagnostics.num_points == 3
        assert diagnostics.num_buckets == 2
        assert diagnostics.num_groups == 2
        assert diagnostics.num_merged == 0
        assert diagnostics.geohash_length == 5
        assert diagnostics.zoom == 10
        assert diagnostics.distance_threshold == 65
        assert diagnostics.resolution == pytest.approx(152.874, rel=1e-5)

    def test_zoom_zero_merges_across_continent(self, sample_points):
        """At zoom 0 San Francisco and New York are ~37 px apart."""
        groups, diagnostics = cluster_points(sample_points, zoom=0)

        assert diagnostics.geohash_length == 1
        assert diagnostics.num_buckets == 2
        assert diagnostics.num_merged == 1
        assert list(groups) == ["9"]
        assert groups["9"].count == 3

    def test_merge_disabled(self, sample_points):
        config = ClusteringConfig(merge_neighbors=False)

        groups, diagnostics = cluster_points(sample_points, zoom=0, config=config)

        assert list(groups) == ["9", "d"]
        assert diagnostics.num_merged == 0

    def test_keys_ascending(self, sample_points):
        groups, _ = cluster_points(sample_points, zoom=14)

        assert list(groups) == sorted(groups)
        assert groups.is_sorted()

    @pytest.mark.parametrize("zoom", [29, 30])
    def test_deepest_zooms_cap_geohash_length(self, sample_points, zoom):
        """Length tables reach past 12 characters; buckets stop at 12."""
        groups, diagnostics = cluster_points(sample_points, zoom=zoom, distance_threshold=8)

        assert diagnostics.geohash_length == MAX_HASH_LENGTH
        assert all(len(key) == MAX_HASH_LENGTH for key in groups)
        assert sorted(group.count for group in groups.values()) == [1, 2]

    def test_explicit_threshold_overrides_config(self, sample_points):
        config = ClusteringConfig(distance_threshold=40)

        _, diagnostics = cluster_points(sample_points, zoom=10, distance_threshold=200, config=config)

        assert diagnostics.distance_threshold == 200

    def test_counts_conserved(self, sample_points):
        groups, diagnostics = cluster_points(sample_points, zoom=3)

        assert sum(group.count for group in groups.values()) == diagnostics.num_points

    def test_bad_zoom_checked_before_data(self):
        """Zoom errors surface even when the points themselves are unusable."""
        with pytest.raises(ZoomOutOfRange):
            cluster_points([{"x": 1}], zoom=31)

    def test_bad_threshold_checked_before_data(self):
        with pytest.raises(ThresholdOutOfRange):
            cluster_points([{"x": 1}], zoom=10, distance_threshold=500)

    def test_nan_coordinates_reported(self, sample_points_df):
        df = pd.concat(
            [sample_points_df, pd.DataFrame([{"id": "x", "lat": math.nan, "lng": 1.0}])],
            ignore_index=True,
        )

        _, diagnostics = cluster_points(df, zoom=10)

        assert diagnostics.num_dropped == 1
        assert diagnostics.num_points == 4

    def test_empty_input(self):
        groups, diagnostics = cluster_points([], zoom=10)

        assert len(groups) == 0
        assert diagnostics.num_points == 0
        assert diagnostics.num_groups == 0

    def test_to_dict_results(self, sample_points):
        groups, _ = cluster_points(sample_points, zoom=10)

        records = [group.to_dict() for group in groups.values()]

        assert [r["count"] for r in records] == [2, 1]
        assert all({"lat", "lng", "count", "features"} <= set(r) for r in records)


# ==============================================================================
# Configuration Tests
# ==============================================================================

class TestClusteringConfig:
    """Test clustering configuration and YAML profiles."""

    def test_default_config(self):
        config = ClusteringConfig()

        assert config.distance_threshold == 65
        assert config.lat_column == "lat"
        assert config.lng_column == "lng"
        assert config.merge_neighbors is True

    def test_available_profiles(self):
        assert {"default", "dense", "sparse"} <= set(ConfigLoader.available_profiles())

    def test_load_default_profile(self, monkeypatch):
        monkeypatch.delenv("GEOCLUSTER_PROFILE", raising=False)

        config = load_clustering_config()

        assert config.distance_threshold == 65

    def test_load_named_profile(self):
        assert load_clustering_config("dense").distance_threshold == 40
        assert load_clustering_config("sparse").distance_threshold == 120

    def test_profile_from_env(self, monkeypatch):
        monkeypatch.setenv("GEOCLUSTER_PROFILE", "sparse")

        assert load_clustering_config().distance_threshold == 120

    def test_unknown_profile(self):
        with pytest.raises(FileNotFoundError, match="Available profiles"):
            load_clustering_config("does-not-exist")

    def test_unknown_option(self, tmp_path, monkeypatch):
        (tmp_path / "broken.yaml").write_text("clustering:\n  cluster_radius: 10\n")
        monkeypatch.setattr(ConfigLoader, "CONFIG_DIR", tmp_path)

        with pytest.raises(ValueError, match="cluster_radius"):
            load_clustering_config("broken")

    def test_profile_thresholds_are_admissible(self):
        """Shipped profiles stay inside the cacheable threshold range."""
        for name in ConfigLoader.available_profiles():
            config = load_clustering_config(name)
            assert 8 <= config.distance_threshold <= 260
