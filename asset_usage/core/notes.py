"""
Summary notes for usage statistics.

Builds the narrative lines shown under each asset category. Emphasis uses
lightweight ``**bold**`` markup that the presentation layer renders.
"""

from typing import List

from asset_usage.storage.models import UsageSnapshot

STREAM = "stream"
IMAGES = "images"
CATEGORIES = (STREAM, IMAGES)


def _format_count(value: int) -> str:
    """Format a count with thousands separators."""
    return f"{value:,}"


def build_note_lines(snapshot: UsageSnapshot, key: str) -> List[str]:
    """Build the ordered note lines for one asset category.

    Lines, in order:
    1. Number of unique local records (always present)
    2. How many are variations (only when > 0)
    3. How many are duplicates (only when > 0)
    4. How many are not connected to the remote service (only when > 0)

    Missing counts read as zero, so an absent key and a zero count both
    suppress their line.

    Args:
        snapshot: Usage snapshot to describe
        key: Asset category prefix, e.g. "stream" or "images"

    Returns:
        Note lines in display order
    """
    if key not in CATEGORIES:
        raise ValueError(f"Unknown category '{key}', expected one of: {list(CATEGORIES)}")

    lines = [
        f"There are currently **{_format_count(snapshot.count(f'{key}Local'))}** "
        "unique records in the database."
    ]

    variations = snapshot.count(f"{key}Variations")
    if variations > 0:
        lines.append(f"**{_format_count(variations)}** of these are variations.")

    duplicates = snapshot.count(f"{key}Duplicate")
    if duplicates > 0:
        lines.append(f"**{_format_count(duplicates)}** of these are duplicates.")

    missed = snapshot.count(f"{key}Missed")
    if missed > 0:
        lines.append(
            f"**{_format_count(missed)}** of these are not connected to "
            f"Cloudflare {key.capitalize()}."
        )

    return lines


def build_notes(snapshot: UsageSnapshot, key: str) -> str:
    """Note lines for category key joined with line breaks."""
    return "\n".join(build_note_lines(snapshot, key))


def describe_stream(snapshot: UsageSnapshot) -> str:
    """Describe how many videos the stream account holds."""
    count = snapshot.count("streamCount")
    noun = "video" if count == 1 else "videos"
    return f"Cloudflare Stream contains **{_format_count(count)}** {noun}."


def describe_images(snapshot: UsageSnapshot) -> str:
    """Describe image and image variant usage against the account allowance."""
    return (
        f"You are currently using **{_format_count(snapshot.count('imagesCount'))}** "
        f"of **{_format_count(snapshot.count('imagesAllowed'))}** images, "
        f"and **{_format_count(snapshot.count('variantsCount'))}** "
        f"of **{_format_count(snapshot.count('variantsAllowed'))}** image variants."
    )
