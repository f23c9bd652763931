"""
Usage report composition.

Combines category descriptions, notes and the variant table into the
structure handed to the presentation layer.
"""

from dataclasses import dataclass
from typing import Optional

from asset_usage.storage.models import UsageSnapshot
from .notes import IMAGES, STREAM, build_notes, describe_images, describe_stream
from .variants import VariantUsageTable, build_variant_table


@dataclass(frozen=True)
class UsageReport:
    """Display-ready usage statistics."""
    stream_description: str
    stream_notes: str
    images_description: str
    images_notes: str
    variant_table: Optional[VariantUsageTable] = None


def build_usage_report(snapshot: UsageSnapshot) -> UsageReport:
    """Derive the full usage report from a snapshot without modifying it."""
    return UsageReport(
        stream_description=describe_stream(snapshot),
        stream_notes=build_notes(snapshot, STREAM),
        images_description=describe_images(snapshot),
        images_notes=build_notes(snapshot, IMAGES),
        variant_table=build_variant_table(snapshot)
    )
