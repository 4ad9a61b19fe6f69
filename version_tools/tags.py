"""
Script: version_tools/tags.py
What: Reads existing release tags for one `major.minor` line.
Doing: Lists git tags, keeps only exact `<prefix><major>.<minor>.<patch>` matches, and prints them.
Why: The next patch number must be derived from real tag history, never guessed.
Goal: Give the patch resolver a clean, parsed set of matching tags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from version_tools.common import (
    TagScanError,
    VersionToolError,
    optional_env,
    parse_non_negative_int,
    require_env,
    run_cmd,
    write_github_outputs,
)


# Takes a glob hint (as understood by `git tag --list`) and returns tag names.
# The hint only narrows the listing; exact matching always happens here.
TagLister = Callable[[str], list[str]]


@dataclass(frozen=True)
class TagRecord:
    """One existing tag plus the version numbers parsed from it."""

    raw: str
    major: int
    minor: int
    patch: int


def tag_pattern(tag_prefix: str, major: int, minor: int) -> re.Pattern[str]:
    """
    Build the exact-match pattern for tags on one `major.minor` line.

    The prefix is matched literally, so a prefix like `v.` does not turn into
    a regex wildcard. Nothing may follow the patch digits.
    """
    return re.compile(rf"^{re.escape(tag_prefix)}{major}\.{minor}\.([0-9]+)$")


def tag_glob(tag_prefix: str, major: int, minor: int) -> str:
    """Glob hint passed to the tag lister, e.g. `v1.2.*`."""
    return f"{tag_prefix}{major}.{minor}.*"


def parse_tag(raw: str, *, tag_prefix: str, major: int, minor: int) -> TagRecord | None:
    """Return a `TagRecord` for a matching tag, or None for anything else."""
    match = tag_pattern(tag_prefix, major, minor).match(raw)
    if not match:
        return None
    return TagRecord(raw=raw, major=major, minor=minor, patch=int(match.group(1)))


def find_version_tags(
    tag_names: list[str],
    *,
    tag_prefix: str,
    major: int,
    minor: int,
) -> list[TagRecord]:
    """Keep only tags that match the version line; malformed names are skipped."""
    records: list[TagRecord] = []
    for name in tag_names:
        record = parse_tag(name.strip(), tag_prefix=tag_prefix, major=major, minor=minor)
        if record is not None:
            records.append(record)
    return records


def git_tag_lister(glob: str) -> list[str]:
    """
    List local tags with `git tag --list`.

    Any git failure (not a repository, git missing) is a scan failure. Falling
    back to "no tags" here would restart patch numbering at 0 and could collide
    with history we simply failed to read.
    """
    try:
        output = run_cmd(["git", "tag", "--list", glob])
    except VersionToolError as exc:
        raise TagScanError(f"Failed to list git tags: {exc}") from exc
    return [line for line in output.splitlines() if line.strip()]


def is_shallow_repository() -> bool:
    """True when the checkout is shallow, so some tags may not be visible."""
    try:
        output = run_cmd(["git", "rev-parse", "--is-shallow-repository"])
    except VersionToolError:
        return False
    return output.strip() == "true"


def read_version_tags(
    lister: TagLister,
    *,
    tag_prefix: str,
    major: int,
    minor: int,
) -> list[TagRecord]:
    """List tags through `lister` and return the parsed matches."""
    tag_names = lister(tag_glob(tag_prefix, major, minor))
    return find_version_tags(tag_names, tag_prefix=tag_prefix, major=major, minor=minor)


def main() -> None:
    tag_prefix = optional_env("TAG_PREFIX")
    major = parse_non_negative_int("VERSION_MAJOR", require_env("VERSION_MAJOR"))
    minor = parse_non_negative_int("VERSION_MINOR", require_env("VERSION_MINOR"))

    records = read_version_tags(git_tag_lister, tag_prefix=tag_prefix, major=major, minor=minor)
    records.sort(key=lambda record: record.patch)

    write_github_outputs(
        {
            "matching_tags": " ".join(record.raw for record in records),
            "matching_tag_count": str(len(records)),
        }
    )
    print(f"Tags matching {tag_glob(tag_prefix, major, minor)}: {len(records)}")
    for record in records:
        print(record.raw)


if __name__ == "__main__":
    main()
