"""
Script: version_tools/patch.py
What: Picks the next unused patch number for one `major.minor` line.
Doing: Takes the highest patch among matching tags and adds one.
Why: Release tags must only move forward and never reuse an existing version.
Goal: Provide a monotonic patch number for the version composer.
"""

from __future__ import annotations

from collections.abc import Iterable

from version_tools.tags import TagRecord


def resolve_patch(tags: Iterable[TagRecord]) -> int:
    """
    Return `1 + max(patch)` over the given tags, or `0` when there are none.

    Duplicate tag values are fine; only the maximum matters.
    """
    patches = [record.patch for record in tags]
    if not patches:
        return 0
    return max(patches) + 1
