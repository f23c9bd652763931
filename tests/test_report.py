"""
Unit tests for usage report composition.
"""

from asset_usage.core.report import build_usage_report
from asset_usage.core.variants import IntensityTier
from asset_usage.storage.models import UsageSnapshot


class TestUsageReport:
    """Test that the report combines every section."""

    def test_report_sections(self):
        snapshot = UsageSnapshot.from_dict({
            "streamCount": 2,
            "streamLocal": 2,
            "imagesCount": 10,
            "imagesAllowed": 100,
            "imagesLocal": 12,
            "imagesMissed": 1,
            "variantsCount": 5,
            "variantsAllowed": 100,
            "variantsUsage": {"public": {"images": 1}, "hero": {"images": 4}}
        })

        report = build_usage_report(snapshot)

        assert report.stream_description == "Cloudflare Stream contains **2** videos."
        assert report.stream_notes == "There are currently **2** unique records in the database."
        assert report.images_description.startswith("You are currently using **10** of **100** images")
        assert report.images_notes.endswith("**1** of these are not connected to Cloudflare Images.")
        assert report.variant_table.rows[-1] == ("Total", 4, 4)
        assert report.variant_table.tier == IntensityTier.EMPTY

    def test_report_without_variants(self):
        report = build_usage_report(UsageSnapshot.from_dict({"streamLocal": 1}))

        assert report.variant_table is None
        assert report.images_notes == "There are currently **0** unique records in the database."
