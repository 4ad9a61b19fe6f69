"""
Script: tests/test_compose.py
What: Tests request validation and version string assembly in `version_tools/compose.py`.
Doing: Builds requests from raw strings and checks every composed field.
Why: These strings end up in tags and package registries, where mistakes are permanent.
Goal: Keep version composition strict and stable.
"""

from __future__ import annotations

import dataclasses
import unittest

from version_tools.branch import BranchInfo
from version_tools.common import InvalidInputError, NumericCoercionError
from version_tools.compose import (
    VersionRequest,
    assembly_version,
    build_request,
    compose_version,
)

RELEASE = BranchInfo(is_prerelease=False, suffix="", revision="")


def _request(**overrides: object) -> VersionRequest:
    values: dict[str, object] = {
        "major": "1",
        "minor": "0",
        "branch_name": "main",
        "main_branch": "main",
        "tag_prefix": "v",
        "build_id": "15",
    }
    values.update(overrides)
    return build_request(**values)  # type: ignore[arg-type]


class BuildRequestTests(unittest.TestCase):
    def test_parses_strings(self) -> None:
        request = _request(major=" 2 ", minor="10", max_suffix_length="12")
        self.assertEqual((request.major, request.minor, request.max_suffix_length), (2, 10, 12))
        self.assertFalse(request.build_id_defaulted)

    def test_accepts_ints(self) -> None:
        request = _request(major=3, minor=0)
        self.assertEqual((request.major, request.minor), (3, 0))

    def test_default_suffix_length(self) -> None:
        self.assertEqual(_request().max_suffix_length, 40)

    def test_rejects_bad_major_minor(self) -> None:
        for bad in ("", "-1", "1.5", "abc", "+2", "²"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInputError):
                    _request(major=bad)
                with self.assertRaises(InvalidInputError):
                    _request(minor=bad)

    def test_rejects_non_positive_suffix_length(self) -> None:
        for bad in ("0", "-3", "ten"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInputError):
                    _request(max_suffix_length=bad)

    def test_rejects_blank_branch_names(self) -> None:
        with self.assertRaises(InvalidInputError):
            _request(branch_name="  ")
        with self.assertRaises(InvalidInputError):
            _request(main_branch="")

    def test_blank_build_id_is_flagged_default(self) -> None:
        request = _request(build_id="  ")
        self.assertEqual(request.build_id, "0")
        self.assertTrue(request.build_id_defaulted)


class ComposeVersionTests(unittest.TestCase):
    def test_main_branch_full_equals_core(self) -> None:
        version = compose_version(_request(), 3, RELEASE)
        self.assertEqual(version.core, "1.0.3")
        self.assertEqual(version.full, "1.0.3")
        self.assertEqual(version.for_tag, "v1.0.3")
        self.assertEqual(version.assembly, "1.0.3.15")
        self.assertFalse(version.is_prerelease)
        self.assertEqual(version.issues, ())

    def test_prerelease_full_format(self) -> None:
        branch = BranchInfo(is_prerelease=True, suffix="feature-x", revision="15")
        version = compose_version(_request(branch_name="feature/x"), 6, branch)
        self.assertEqual(version.full, "1.0.6-feature-x.15")
        self.assertEqual(version.full, version.core + "-" + version.suffix + "." + version.revision)
        self.assertEqual(version.for_tag, "v1.0.6-feature-x.15")
        self.assertTrue(version.is_prerelease)

    def test_non_numeric_build_id_only_invalidates_assembly(self) -> None:
        branch = BranchInfo(is_prerelease=True, suffix="feature", revision="abc")
        version = compose_version(_request(branch_name="feature", build_id="abc"), 2, branch)
        self.assertIsNone(version.assembly)
        self.assertFalse(version.assembly_valid)
        self.assertEqual(version.core, "1.0.2")
        self.assertEqual(version.full, "1.0.2-feature.abc")
        self.assertEqual(version.for_tag, "v1.0.2-feature.abc")
        self.assertEqual([issue.field for issue in version.issues], ["assembly"])
        self.assertEqual(version.issues[0].kind, "invalid")

    def test_empty_prerelease_suffix_is_reported(self) -> None:
        branch = BranchInfo(is_prerelease=True, suffix="", revision="15")
        version = compose_version(_request(branch_name="_"), 4, branch)
        self.assertEqual(version.full, "1.0.4-.15")
        self.assertEqual(version.assembly, "1.0.4.15")
        self.assertEqual([(issue.field, issue.kind) for issue in version.issues], [("suffix", "invalid")])

    def test_defaulted_build_id_is_reported(self) -> None:
        version = compose_version(_request(build_id=""), 0, RELEASE)
        self.assertEqual(version.assembly, "1.0.0.0")
        self.assertEqual([(issue.field, issue.kind) for issue in version.issues], [("build_id", "defaulted")])

    def test_resolved_version_is_immutable(self) -> None:
        version = compose_version(_request(), 1, RELEASE)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            version.patch = 2  # type: ignore[misc]


class AssemblyVersionTests(unittest.TestCase):
    def test_four_numeric_parts(self) -> None:
        self.assertEqual(assembly_version(4, 1, 0, "0099"), "4.1.0.99")

    def test_rejects_non_numeric(self) -> None:
        for bad in ("abc", "1.2", "-1", "12a"):
            with self.subTest(value=bad):
                with self.assertRaises(NumericCoercionError):
                    assembly_version(1, 0, 0, bad)


if __name__ == "__main__":
    unittest.main()
