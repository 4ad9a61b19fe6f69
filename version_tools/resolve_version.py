"""
Script: version_tools/resolve_version.py
What: Computes the release version for this run and publishes it.
Doing: Validates inputs, reads matching tags, picks the next patch, classifies the branch, composes strings, and writes outputs.
Why: Release tags, package versions, and build properties must all come from one deterministic calculation.
Goal: Provide `core`, `full`, `assembly`, and `for_tag` (plus the parts they are built from) to later steps.
"""

from __future__ import annotations

import sys

from version_tools.branch import DEFAULT_MAX_SUFFIX_LENGTH, classify_branch, current_branch_name
from version_tools.common import (
    VersionToolError,
    build_id_from_env,
    optional_env,
    require_env,
    write_github_outputs,
)
from version_tools.compose import ResolvedVersion, VersionRequest, build_request, compose_version
from version_tools.outputs import (
    FileWriter,
    field_text,
    materialize_outputs,
    parse_output_targets,
    version_fields,
    write_file,
)
from version_tools.patch import resolve_patch
from version_tools.tags import TagLister, git_tag_lister, is_shallow_repository, read_version_tags


def resolve_version(request: VersionRequest, tag_lister: TagLister) -> ResolvedVersion:
    """
    Run the branch, tag, patch, and compose steps for one request.

    The branch is classified before the tag scan so a bad suffix length fails
    before any git call. Tag scan failures propagate; there is no fallback
    patch number.
    """
    branch = classify_branch(
        branch_name=request.branch_name,
        main_branch=request.main_branch,
        build_id=request.build_id,
        max_suffix_length=request.max_suffix_length,
    )
    tags = read_version_tags(
        tag_lister,
        tag_prefix=request.tag_prefix,
        major=request.major,
        minor=request.minor,
    )
    patch = resolve_patch(tags)
    return compose_version(request, patch, branch)


def request_from_env() -> VersionRequest:
    return build_request(
        major=require_env("VERSION_MAJOR"),
        minor=require_env("VERSION_MINOR"),
        tag_prefix=optional_env("TAG_PREFIX"),
        main_branch=optional_env("MAIN_BRANCH", "main"),
        build_id=build_id_from_env(),
        branch_name=current_branch_name(),
        max_suffix_length=optional_env("MAX_SUFFIX_LENGTH", str(DEFAULT_MAX_SUFFIX_LENGTH)),
    )


def step_outputs(version: ResolvedVersion) -> dict[str, str]:
    """Flatten the version into string step outputs."""
    values = {name: field_text(value) for name, value in version_fields(version).items()}
    values["assembly_valid"] = "true" if version.assembly_valid else "false"
    return values


def run(
    *,
    tag_lister: TagLister | None = None,
    writer: FileWriter = write_file,
) -> ResolvedVersion:
    # Parse everything first so bad input never reaches the tag scan.
    request = request_from_env()
    targets = parse_output_targets(optional_env("OUTPUT_TARGETS"))

    # Only the real git listing can be affected by a shallow checkout.
    if tag_lister is None:
        tag_lister = git_tag_lister
        if is_shallow_repository():
            print(
                "Warning: shallow clone detected; tags outside the fetched history are not visible "
                "and the computed patch number may collide with them.",
                file=sys.stderr,
            )

    version = resolve_version(request, tag_lister)

    for issue in version.issues:
        print(f"Warning: {issue.field} {issue.kind}: {issue.message}", file=sys.stderr)

    failures = materialize_outputs(version, targets, writer=writer)
    write_github_outputs(step_outputs(version))

    print(f"Resolved version: {version.full}")
    print(f"Core version: {version.core}")
    print(f"Assembly version: {version.assembly or '(invalid)'}")
    print(f"Tag name: {version.for_tag}")

    if failures:
        joined = "\n".join(str(error) for _target, error in failures)
        raise VersionToolError(f"Failed to write {len(failures)} output target(s):\n{joined}")
    return version


def main() -> None:
    run()


if __name__ == "__main__":
    main()
