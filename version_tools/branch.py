"""
Script: version_tools/branch.py
What: Classifies the current branch as main or prerelease and derives its version suffix.
Doing: Compares `BRANCH_NAME` with the main branch, sanitizes and length-limits the suffix, and writes outputs.
Why: Branch builds need a prerelease marker that is valid in version strings and tag names.
Goal: Provide a stable, repeatable suffix so dry runs and real runs agree byte-for-byte.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass

from version_tools.common import (
    InvalidInputError,
    build_id_from_env,
    normalize_build_id,
    optional_env,
    parse_non_negative_int,
    write_github_outputs,
)


UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9]+")
DEFAULT_MAX_SUFFIX_LENGTH = 40


@dataclass(frozen=True)
class BranchInfo:
    """Branch classification used by the version composer."""

    is_prerelease: bool
    suffix: str
    revision: str


def sanitize_suffix(branch_name: str, max_length: int) -> str:
    """
    Convert a branch name into a version-safe prerelease suffix.

    Example: `feature/New_Auth!!` with `max_length=10` becomes `feature-ne`.
    """
    if max_length <= 0:
        raise InvalidInputError(f"max suffix length must be positive, got {max_length}")
    # Collapse every unsupported run into one '-' before lowercasing.
    safe = UNSAFE_CHARS_RE.sub("-", branch_name).lower()
    # Truncation can leave a dangling '-' at the cut point.
    return safe[:max_length].rstrip("-")


def classify_branch(
    *,
    branch_name: str,
    main_branch: str,
    build_id: str,
    max_suffix_length: int,
) -> BranchInfo:
    """
    Decide whether this build is a prerelease.

    The main branch gets no suffix and no revision. Every other branch gets a
    sanitized suffix plus the build id as revision. The suffix can be empty
    (e.g. `_` or `功能`); the composer reports that case as a field issue.
    """
    if branch_name == main_branch:
        return BranchInfo(is_prerelease=False, suffix="", revision="")

    suffix = sanitize_suffix(branch_name, max_suffix_length)
    return BranchInfo(is_prerelease=True, suffix=suffix, revision=build_id)


def current_branch_name() -> str:
    """Return `BRANCH_NAME`, falling back to the ref GitHub set for this run."""
    branch_name = optional_env("BRANCH_NAME") or optional_env("GITHUB_REF_NAME")
    if not branch_name:
        raise InvalidInputError(
            "Missing required environment variable: BRANCH_NAME (or GITHUB_REF_NAME)"
        )
    return branch_name


def main() -> None:
    branch_name = current_branch_name()
    main_branch = optional_env("MAIN_BRANCH", "main")
    max_suffix_length = parse_non_negative_int(
        "MAX_SUFFIX_LENGTH",
        optional_env("MAX_SUFFIX_LENGTH", str(DEFAULT_MAX_SUFFIX_LENGTH)),
    )
    # Same defaulting as `resolve-version`, so both commands agree on the revision.
    build_id, build_id_defaulted = normalize_build_id(build_id_from_env())
    if build_id_defaulted:
        print(f"Warning: build_id defaulted: build id was empty; using {build_id}", file=sys.stderr)

    branch = classify_branch(
        branch_name=branch_name,
        main_branch=main_branch,
        build_id=build_id,
        max_suffix_length=max_suffix_length,
    )
    if branch.is_prerelease and not branch.suffix:
        print(
            f"Warning: suffix invalid: branch name '{branch_name}' has no ASCII letters or digits",
            file=sys.stderr,
        )

    write_github_outputs(
        {
            "suffix": branch.suffix,
            "revision": branch.revision,
            "is_prerelease": "true" if branch.is_prerelease else "false",
        }
    )
    print(f"Branch {branch_name}: prerelease={branch.is_prerelease} suffix={branch.suffix}")


if __name__ == "__main__":
    main()
