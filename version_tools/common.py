"""
Script: version_tools/common.py
What: Shared helper functions and error types used by all `version_tools` modules.
Doing: Wraps env reads, command execution, and GitHub step output writes.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import os
import subprocess
from typing import Mapping, Sequence


class VersionToolError(RuntimeError):
    """Raised when a version helper hits a known error condition."""


class InvalidInputError(VersionToolError):
    """Raised when caller inputs cannot describe a valid version request."""


class TagScanError(VersionToolError):
    """Raised when existing tags cannot be read."""


class NumericCoercionError(VersionToolError):
    """Raised when a strictly numeric version field gets a non-numeric value."""


class OutputWriteError(VersionToolError):
    """Raised when one output file cannot be written."""


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise InvalidInputError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def run_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
) -> str:
    """Run a command and return stdout, raising a readable error on failure."""
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=capture_output,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or str(exc)
        raise VersionToolError(f"Command failed: {' '.join(args)}\n{details}") from exc
    except FileNotFoundError as exc:
        raise VersionToolError(f"Command not found: {args[0]}") from exc

    if not capture_output:
        return ""
    return result.stdout


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job.
    Outside of Actions (local runs) the variable is unset and nothing is written.
    """
    output_file = optional_env("GITHUB_OUTPUT")
    if not output_file:
        return
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


def parse_non_negative_int(name: str, raw: str) -> int:
    """Parse a plain decimal integer input, rejecting signs, blanks, and text."""
    value = raw.strip()
    if not value.isascii() or not value.isdigit():
        raise InvalidInputError(f"{name} must be a non-negative integer, got '{raw}'")
    return int(value)


DEFAULT_BUILD_ID = "0"


def build_id_from_env() -> str:
    """Return `BUILD_ID`, falling back to the run number GitHub set for this run."""
    return optional_env("BUILD_ID") or optional_env("GITHUB_RUN_NUMBER")


def normalize_build_id(raw: str) -> tuple[str, bool]:
    """
    Return `(build_id, defaulted)`.

    A blank build id becomes `DEFAULT_BUILD_ID` and `defaulted` is True, so
    callers can report the substitution instead of hiding it.
    """
    build_id = raw.strip()
    if not build_id:
        return DEFAULT_BUILD_ID, True
    return build_id, False
