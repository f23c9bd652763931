"""
Data models for storage layer.

Defines the usage snapshot captured from the remote asset service.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

VARIANTS_USAGE_KEY = "variantsUsage"
PUBLIC_VARIANT = "public"


def _validate_count(name: str, value: Any) -> int:
    """Return value if it is a non-negative integer, otherwise raise ValueError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Count '{name}' must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"Count '{name}' cannot be negative")
    return value


@dataclass(frozen=True)
class UsageSnapshot:
    """Immutable point-in-time capture of usage counts.

    Counts are keyed by category-prefixed names such as ``streamLocal`` or
    ``imagesDuplicate``. Variant usage maps each image variant to the number
    of times it is referenced per field. Once built, a snapshot is never
    modified: aggregation only derives new structures from it.
    """
    counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    variants_usage: Mapping[str, Mapping[str, int]] = field(
        default_factory=lambda: MappingProxyType({PUBLIC_VARIANT: MappingProxyType({})})
    )

    def count(self, name: str) -> int:
        """Count for name, with missing keys read as zero."""
        return self.counts.get(name, 0)

    @property
    def public_usage(self) -> Mapping[str, int]:
        """Usage of the reference ``public`` variant."""
        return self.variants_usage.get(PUBLIC_VARIANT, MappingProxyType({}))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "UsageSnapshot":
        """Build a snapshot from the flat raw statistics structure.

        Every key except ``variantsUsage`` is a count. The ``public`` variant
        is added with no usage when the raw data lacks it.

        Args:
            raw: Mapping of count names to values plus ``variantsUsage``

        Returns:
            Validated UsageSnapshot

        Raises:
            ValueError: If any count is not a non-negative integer or the
                variant usage is malformed
        """
        if not isinstance(raw, Mapping):
            raise ValueError("Usage statistics must be a mapping")

        counts = {}
        for name, value in raw.items():
            if name == VARIANTS_USAGE_KEY:
                continue
            counts[str(name)] = _validate_count(str(name), value)

        variants_raw = raw.get(VARIANTS_USAGE_KEY) or {}
        if not isinstance(variants_raw, Mapping):
            raise ValueError(f"'{VARIANTS_USAGE_KEY}' must be a mapping")

        variants = {}
        for variant, usage in variants_raw.items():
            usage = usage or {}
            if not isinstance(usage, Mapping):
                raise ValueError(f"Usage for variant '{variant}' must be a mapping")
            variants[str(variant)] = MappingProxyType({
                str(field_name): _validate_count(f"{variant}.{field_name}", count)
                for field_name, count in usage.items()
            })
        variants.setdefault(PUBLIC_VARIANT, MappingProxyType({}))

        return cls(
            counts=MappingProxyType(counts),
            variants_usage=MappingProxyType(variants)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flat, plain-dict form suitable for JSON or YAML."""
        raw: Dict[str, Any] = dict(self.counts)
        raw[VARIANTS_USAGE_KEY] = {
            variant: dict(usage) for variant, usage in self.variants_usage.items()
        }
        return raw
