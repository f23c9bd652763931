"""
Image variant usage tabulation.

Cross-tabulates image variants against the fields that reference them.

Layout:
- Columns: fields, ordered by total usage (descending, stable on the
  order in which fields were first seen)
- Rows: variants other than "public", ordered by name
- Last column: row total; last row: column totals and grand total
- Headers carry the "public" variant's count for each field
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from asset_usage.storage.models import PUBLIC_VARIANT, UsageSnapshot

TOTAL_LABEL = "Total"
VARIANT_HEADER = f"Variant [{PUBLIC_VARIANT}]"

# Usage ratio thresholds for the intensity tiers
HALF_TIER_THRESHOLD = 0.1
FULL_TIER_THRESHOLD = 0.8


class IntensityTier(Enum):
    """Display bucket for variant allowance usage, valued by its icon."""
    EMPTY = "star-o"
    HALF = "star-half-o"
    FULL = "star"


@dataclass(frozen=True)
class VariantUsageTable:
    """Display-ready variant usage pivot table.

    Each row starts with its label (variant name or "Total"), followed by
    one count per column and the row total.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Tuple, ...]
    fields: Tuple[str, ...]
    used_ratio: float
    tier: IntensityTier

    @property
    def grand_total(self) -> int:
        """Sum of every column total."""
        return self.rows[-1][-1]


def usage_ratio(used: int, allowed: int) -> float:
    """Ratio of used to allowed, zero when nothing is allowed."""
    if allowed <= 0:
        return 0.0
    return used / allowed


def intensity_tier(ratio: float) -> IntensityTier:
    """Map a usage ratio to its intensity tier."""
    if ratio < HALF_TIER_THRESHOLD:
        return IntensityTier.EMPTY
    if ratio < FULL_TIER_THRESHOLD:
        return IntensityTier.HALF
    return IntensityTier.FULL


def _column_totals(snapshot: UsageSnapshot) -> Dict[str, int]:
    """Total usage per field over every non-public variant, in discovery order.

    Fields only referenced by the public variant are appended with a zero
    total so they still get a column.
    """
    totals: Dict[str, int] = {}
    for variant, usage in snapshot.variants_usage.items():
        if variant == PUBLIC_VARIANT:
            continue
        for field_name, count in usage.items():
            totals[field_name] = totals.get(field_name, 0) + count

    public = snapshot.public_usage
    for field_name in public:
        totals.setdefault(field_name, 0)

    return {
        field_name: total for field_name, total in totals.items()
        if total > 0 or field_name in public
    }


def build_variant_table(snapshot: UsageSnapshot) -> Optional[VariantUsageTable]:
    """Build the variant usage pivot table for a snapshot.

    Args:
        snapshot: Usage snapshot holding ``variantsUsage`` and the
            ``variantsCount``/``variantsAllowed`` counts

    Returns:
        VariantUsageTable, or None when no variants are in use
    """
    variants_count = snapshot.count("variantsCount")
    if not variants_count:
        return None

    ratio = usage_ratio(variants_count, snapshot.count("variantsAllowed"))

    totals = _column_totals(snapshot)
    # sorted() is stable, so equal totals keep their discovery order
    fields = [
        field_name for field_name, _ in
        sorted(totals.items(), key=lambda item: item[1], reverse=True)
    ]
    variants = sorted(v for v in snapshot.variants_usage if v != PUBLIC_VARIANT)

    rows: List[Tuple] = []
    for variant in variants:
        usage = snapshot.variants_usage[variant]
        counts = [usage.get(field_name, 0) for field_name in fields]
        rows.append((variant, *counts, sum(counts)))

    column_totals = [totals[field_name] for field_name in fields]
    rows.append((TOTAL_LABEL, *column_totals, sum(column_totals)))

    public = snapshot.public_usage
    headers = (
        VARIANT_HEADER,
        *(f"{field_name} [{public.get(field_name, 0)}]" for field_name in fields),
        TOTAL_LABEL,
    )

    return VariantUsageTable(
        headers=headers,
        rows=tuple(rows),
        fields=tuple(fields),
        used_ratio=ratio,
        tier=intensity_tier(ratio)
    )
