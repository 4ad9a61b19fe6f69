"""
Script: version_tools/compose.py
What: Builds the version request and assembles the final version strings.
Doing: Validates raw inputs, then derives core/full/assembly/tag-ready strings from patch and branch info.
Why: Every downstream consumer (tags, packages, build properties) must see the same computed values.
Goal: Produce one immutable `ResolvedVersion` per run, with any per-field problems recorded on it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from version_tools.branch import DEFAULT_MAX_SUFFIX_LENGTH, BranchInfo
from version_tools.common import (
    DEFAULT_BUILD_ID,
    InvalidInputError,
    NumericCoercionError,
    normalize_build_id,
    parse_non_negative_int,
)


NUMERIC_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class VersionRequest:
    """Validated caller inputs for one version calculation."""

    major: int
    minor: int
    tag_prefix: str
    main_branch: str
    build_id: str
    branch_name: str
    max_suffix_length: int = DEFAULT_MAX_SUFFIX_LENGTH
    # True when `build_id` was blank and replaced with `DEFAULT_BUILD_ID`.
    build_id_defaulted: bool = False


@dataclass(frozen=True)
class FieldIssue:
    """
    One reported problem with a single output field.

    `kind` is `invalid` when the field could not be produced in a usable form,
    or `defaulted` when a fallback value was substituted and should be visible
    in logs.
    """

    field: str
    message: str
    kind: str = "invalid"


@dataclass(frozen=True)
class ResolvedVersion:
    major: int
    minor: int
    patch: int
    suffix: str
    revision: str
    is_prerelease: bool
    core: str
    full: str
    # None when the build id could not be used as a numeric component.
    assembly: str | None
    for_tag: str
    branch_name: str
    tag_prefix: str
    build_id: str
    issues: tuple[FieldIssue, ...] = ()

    @property
    def assembly_valid(self) -> bool:
        return self.assembly is not None


def build_request(
    *,
    major: str | int,
    minor: str | int,
    branch_name: str,
    main_branch: str = "main",
    tag_prefix: str = "",
    build_id: str = "",
    max_suffix_length: str | int = DEFAULT_MAX_SUFFIX_LENGTH,
) -> VersionRequest:
    """
    Validate raw inputs (usually env strings) into a `VersionRequest`.

    Raises `InvalidInputError` for anything that makes a version impossible.
    This runs before any tag scan.
    """
    major_value = parse_non_negative_int("major", str(major))
    minor_value = parse_non_negative_int("minor", str(minor))
    suffix_length = parse_non_negative_int("max_suffix_length", str(max_suffix_length))
    if suffix_length == 0:
        raise InvalidInputError("max_suffix_length must be a positive integer, got '0'")
    if not branch_name.strip():
        raise InvalidInputError("branch name must not be empty")
    if not main_branch.strip():
        raise InvalidInputError("main branch name must not be empty")

    build_id, build_id_defaulted = normalize_build_id(build_id)
    return VersionRequest(
        major=major_value,
        minor=minor_value,
        tag_prefix=tag_prefix,
        main_branch=main_branch,
        build_id=build_id,
        branch_name=branch_name,
        max_suffix_length=suffix_length,
        build_id_defaulted=build_id_defaulted,
    )


def assembly_version(major: int, minor: int, patch: int, build_id: str) -> str:
    """
    Return the strict four-part numeric version.

    Raises `NumericCoercionError` for a non-numeric build id rather than
    inventing a number for it.
    """
    if not NUMERIC_RE.match(build_id):
        raise NumericCoercionError(
            f"build id '{build_id}' is not numeric; assembly version needs four numeric parts"
        )
    return f"{major}.{minor}.{patch}.{int(build_id)}"


def compose_version(request: VersionRequest, patch: int, branch: BranchInfo) -> ResolvedVersion:
    issues: list[FieldIssue] = []
    if request.build_id_defaulted:
        issues.append(
            FieldIssue(
                field="build_id",
                message=f"build id was empty; using {DEFAULT_BUILD_ID}",
                kind="defaulted",
            )
        )

    core = f"{request.major}.{request.minor}.{patch}"
    full = f"{core}-{branch.suffix}.{branch.revision}" if branch.is_prerelease else core
    if branch.is_prerelease and not branch.suffix:
        issues.append(
            FieldIssue(
                field="suffix",
                message=f"branch name '{request.branch_name}' has no ASCII letters or digits; suffix is empty",
            )
        )

    # Assembly failure is recorded and the remaining fields are still produced.
    assembly: str | None
    try:
        assembly = assembly_version(request.major, request.minor, patch, request.build_id)
    except NumericCoercionError as exc:
        assembly = None
        issues.append(FieldIssue(field="assembly", message=str(exc)))

    return ResolvedVersion(
        major=request.major,
        minor=request.minor,
        patch=patch,
        suffix=branch.suffix,
        revision=branch.revision,
        is_prerelease=branch.is_prerelease,
        core=core,
        full=full,
        assembly=assembly,
        for_tag=f"{request.tag_prefix}{full}",
        branch_name=request.branch_name,
        tag_prefix=request.tag_prefix,
        build_id=request.build_id,
        issues=tuple(issues),
    )
