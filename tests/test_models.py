"""
Unit tests for the usage snapshot model.

Tests validation, immutability and conversion of raw statistics.
"""

import pytest

from asset_usage.storage.models import PUBLIC_VARIANT, UsageSnapshot


class TestUsageSnapshot:
    """Test snapshot construction and access."""

    def test_from_dict_splits_counts_and_variants(self):
        """Test that counts and variant usage are separated."""
        snapshot = UsageSnapshot.from_dict({
            "streamLocal": 120,
            "imagesCount": 7,
            "variantsUsage": {
                "public": {"images": 2},
                "thumbnail": {"images": 5, "gallery": 1}
            }
        })

        assert snapshot.count("streamLocal") == 120
        assert snapshot.count("imagesCount") == 7
        assert "variantsUsage" not in snapshot.counts
        assert dict(snapshot.variants_usage["thumbnail"]) == {"images": 5, "gallery": 1}
        assert dict(snapshot.public_usage) == {"images": 2}

    def test_missing_count_reads_as_zero(self):
        """Test that absent counts are treated as zero."""
        snapshot = UsageSnapshot.from_dict({"streamLocal": 1})

        assert snapshot.count("streamDuplicate") == 0

    def test_public_variant_always_present(self):
        """Test that the public variant is added when missing."""
        snapshot = UsageSnapshot.from_dict({
            "variantsUsage": {"thumbnail": {"images": 1}}
        })

        assert PUBLIC_VARIANT in snapshot.variants_usage
        assert dict(snapshot.public_usage) == {}

    def test_empty_variant_usage_is_allowed(self):
        """Test that a variant with no usage keeps an empty mapping."""
        snapshot = UsageSnapshot.from_dict({
            "variantsUsage": {"public": {}, "unused": None}
        })

        assert dict(snapshot.variants_usage["unused"]) == {}

    @pytest.mark.parametrize("value", [-1, 1.5, "3", True, None])
    def test_invalid_counts_rejected(self, value):
        """Test that counts must be non-negative integers."""
        with pytest.raises(ValueError, match="streamLocal"):
            UsageSnapshot.from_dict({"streamLocal": value})

    def test_negative_variant_count_rejected(self):
        """Test that variant usage counts are validated too."""
        with pytest.raises(ValueError, match="thumbnail.images"):
            UsageSnapshot.from_dict({
                "variantsUsage": {"thumbnail": {"images": -2}}
            })

    def test_non_mapping_rejected(self):
        """Test that the raw structure must be a mapping."""
        with pytest.raises(ValueError, match="must be a mapping"):
            UsageSnapshot.from_dict([1, 2, 3])

        with pytest.raises(ValueError, match="variantsUsage"):
            UsageSnapshot.from_dict({"variantsUsage": [1]})

    def test_snapshot_is_immutable(self):
        """Test that neither the snapshot nor its mappings can be modified."""
        snapshot = UsageSnapshot.from_dict({
            "streamLocal": 1,
            "variantsUsage": {"thumbnail": {"images": 1}}
        })

        with pytest.raises(AttributeError):
            snapshot.counts = {}
        with pytest.raises(TypeError):
            snapshot.counts["streamLocal"] = 2
        with pytest.raises(TypeError):
            snapshot.variants_usage["thumbnail"]["images"] = 2

    def test_from_dict_does_not_alias_input(self):
        """Test that later changes to the raw data do not leak in."""
        raw = {"streamLocal": 1, "variantsUsage": {"thumbnail": {"images": 1}}}
        snapshot = UsageSnapshot.from_dict(raw)

        raw["streamLocal"] = 99
        raw["variantsUsage"]["thumbnail"]["images"] = 99

        assert snapshot.count("streamLocal") == 1
        assert snapshot.variants_usage["thumbnail"]["images"] == 1

    def test_to_dict_restores_raw_structure(self):
        """Test conversion back to plain dictionaries."""
        raw = {
            "imagesLocal": 10,
            "variantsUsage": {"public": {"images": 1}, "hero": {"images": 3}}
        }

        result = UsageSnapshot.from_dict(raw).to_dict()

        assert result == raw
        assert type(result["variantsUsage"]["hero"]) is dict

    def test_equal_snapshots_compare_equal(self):
        """Test value equality between independently built snapshots."""
        raw = {"streamLocal": 4, "variantsUsage": {"hero": {"images": 2}}}

        assert UsageSnapshot.from_dict(raw) == UsageSnapshot.from_dict(raw)
