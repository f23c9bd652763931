"""
Unit tests for statistics collectors.

Tests reading exported statistics and failure reporting.
"""

import os
import tempfile

import pytest
import yaml

from asset_usage.collectors import CollectionError, FileCollector, StatsCollector


class TestFileCollector:
    """Test the file-backed collector."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, content, filename: str = "usage.yaml") -> str:
        path = os.path.join(self.temp_dir, filename)
        with open(path, 'w', encoding='utf-8') as f:
            if isinstance(content, str):
                f.write(content)
            else:
                yaml.dump(content, f)
        return path

    def test_collect_flat_statistics(self):
        path = self._write({
            "streamLocal": 5,
            "variantsUsage": {"public": {"images": 1}, "hero": {"images": 2}}
        })

        snapshot = FileCollector(path).collect("CloudflareAssets")

        assert snapshot.count("streamLocal") == 5
        assert snapshot.variants_usage["hero"]["images"] == 2

    def test_collect_statistics_under_scope(self):
        path = self._write({
            "CloudflareAssets": {"imagesLocal": 3},
            "OtherModule": {"imagesLocal": 99}
        })

        snapshot = FileCollector(path).collect("CloudflareAssets")

        assert snapshot.count("imagesLocal") == 3

    def test_collect_json_file(self):
        path = self._write('{"streamLocal": 7, "variantsUsage": {"public": {}}}', "usage.json")

        assert FileCollector(path).collect("CloudflareAssets").count("streamLocal") == 7

    def test_missing_file_raises_collection_error(self):
        collector = FileCollector(os.path.join(self.temp_dir, "missing.yaml"))

        with pytest.raises(CollectionError, match="Cannot read"):
            collector.collect("CloudflareAssets")

    def test_invalid_yaml_raises_collection_error(self):
        path = self._write("streamLocal: [unclosed")

        with pytest.raises(CollectionError, match="Invalid usage statistics"):
            FileCollector(path).collect("CloudflareAssets")

    def test_empty_file_raises_collection_error(self):
        path = self._write("")

        with pytest.raises(CollectionError, match="empty"):
            FileCollector(path).collect("CloudflareAssets")

    def test_invalid_counts_raise_collection_error(self):
        path = self._write({"streamLocal": -3})

        with pytest.raises(CollectionError, match="cannot be negative"):
            FileCollector(path).collect("CloudflareAssets")

    def test_path_required(self):
        with pytest.raises(ValueError, match="path is required"):
            FileCollector("")


class TestStatsCollector:
    def test_base_collector_is_abstract(self):
        with pytest.raises(NotImplementedError):
            StatsCollector().collect("CloudflareAssets")
