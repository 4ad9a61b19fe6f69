"""
Script: version_tools/outputs.py
What: Renders a resolved version into text, build-property XML, and JSON files.
Doing: Builds one ordered field list, serializes it per format, and writes each requested target.
Why: Different consumers (shell steps, MSBuild, scripts) need the same values in their own format.
Goal: Produce byte-identical files for the same version, and keep one bad target from blocking the rest.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from version_tools.common import InvalidInputError, OutputWriteError
from version_tools.compose import ResolvedVersion


OUTPUT_KINDS = ("text", "props", "json")

# Writes the full content to the path, replacing whatever was there.
FileWriter = Callable[[Path, str], None]


@dataclass(frozen=True)
class OutputTarget:
    kind: str
    path: Path


def version_fields(version: ResolvedVersion) -> dict[str, str | int | bool | None]:
    """
    Return every rendered field in a stable order.

    All three formats are built from this one mapping so they never disagree.
    """
    return {
        "major": version.major,
        "minor": version.minor,
        "patch": version.patch,
        "suffix": version.suffix,
        "revision": version.revision,
        "build_id": version.build_id,
        "branch_name": version.branch_name,
        "tag_prefix": version.tag_prefix,
        "is_prerelease": version.is_prerelease,
        "core": version.core,
        "full": version.full,
        "assembly": version.assembly,
        "for_tag": version.for_tag,
    }


def field_text(value: str | int | bool | None) -> str:
    """Format one field value for text-based outputs."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def property_name(field: str) -> str:
    """Convert `for_tag` style names into MSBuild style `ForTag`."""
    return "".join(part.capitalize() for part in field.split("_"))


def render_text(version: ResolvedVersion) -> str:
    """
    One `KEY=VALUE` line per field.

    Values are written verbatim, not shell-quoted. Git allows characters like
    `;` and `$` in branch names, so read this file as data; do not `source` it.
    """
    lines = [f"{name.upper()}={field_text(value)}" for name, value in version_fields(version).items()]
    return "\n".join(lines) + "\n"


def render_props(version: ResolvedVersion) -> str:
    """
    Render an MSBuild property file.

    Shape:
        <Project>
          <PropertyGroup>
            <Major>1</Major>
            ...
          </PropertyGroup>
        </Project>
    """
    project = ET.Element("Project")
    group = ET.SubElement(project, "PropertyGroup")
    for name, value in version_fields(version).items():
        element = ET.SubElement(group, property_name(name))
        element.text = field_text(value)
    ET.indent(project, space="  ")
    body = ET.tostring(project, encoding="unicode", short_empty_elements=False)
    return '<?xml version="1.0" encoding="utf-8"?>\n' + body + "\n"


def render_json(version: ResolvedVersion) -> str:
    return json.dumps(version_fields(version), indent=2) + "\n"


RENDERERS: dict[str, Callable[[ResolvedVersion], str]] = {
    "text": render_text,
    "props": render_props,
    "json": render_json,
}


def render_output(kind: str, version: ResolvedVersion) -> str:
    renderer = RENDERERS.get(kind)
    if renderer is None:
        raise InvalidInputError(
            f"Unknown output kind '{kind}'. Expected one of: {', '.join(OUTPUT_KINDS)}"
        )
    return renderer(version)


def parse_output_targets(raw: str) -> list[OutputTarget]:
    """
    Parse `kind:path` entries separated by newlines or commas.

    Example: `json:artifacts/version.json, props:Directory.Build.props`.
    Blank entries are ignored so trailing separators are harmless.
    """
    targets: list[OutputTarget] = []
    for entry in raw.replace(",", "\n").splitlines():
        entry = entry.strip()
        if not entry:
            continue
        kind, separator, path = entry.partition(":")
        kind = kind.strip().lower()
        path = path.strip()
        if not separator or not path:
            raise InvalidInputError(f"Output target '{entry}' must look like kind:path")
        if kind not in OUTPUT_KINDS:
            raise InvalidInputError(
                f"Unknown output kind '{kind}' in '{entry}'. Expected one of: {', '.join(OUTPUT_KINDS)}"
            )
        targets.append(OutputTarget(kind=kind, path=Path(path)))
    return targets


def write_file(path: Path, content: str) -> None:
    """Create parent directories and overwrite `path` with `content`."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps '\n' on every platform so reruns stay byte-identical.
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {path}: {exc}") from exc


def materialize_outputs(
    version: ResolvedVersion,
    targets: list[OutputTarget],
    *,
    writer: FileWriter = write_file,
) -> list[tuple[OutputTarget, OutputWriteError]]:
    """
    Write every target and return the ones that failed.

    A failing target does not stop the remaining targets from being written.
    """
    failures: list[tuple[OutputTarget, OutputWriteError]] = []
    for target in targets:
        content = render_output(target.kind, version)
        try:
            writer(target.path, content)
        except OutputWriteError as exc:
            failures.append((target, exc))
            continue
        print(f"Wrote {target.kind} output: {target.path}")
    return failures
