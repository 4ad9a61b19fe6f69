from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping

from version_tools.common import VersionToolError


ENV_HELP = """\
environment inputs:
  VERSION_MAJOR, VERSION_MINOR  version line (resolve-version, list-version-tags)
  TAG_PREFIX                    tag prefix, e.g. "v" (default: empty)
  BRANCH_NAME                   current branch (default: GITHUB_REF_NAME)
  MAIN_BRANCH                   release branch name (default: main)
  BUILD_ID                      build counter (default: GITHUB_RUN_NUMBER, then 0)
  MAX_SUFFIX_LENGTH             prerelease suffix limit (default: 40)
  OUTPUT_TARGETS                kind:path list, kinds: text, props, json
  GITHUB_OUTPUT                 step output file, written when set
"""


def command_map() -> dict[str, Callable[[], None]]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main()` function from one version helper module.
    """
    from version_tools.branch import main as compute_branch_suffix
    from version_tools.resolve_version import main as resolve_version
    from version_tools.tags import main as list_version_tags

    return {
        "resolve-version": resolve_version,
        "list-version-tags": list_version_tags,
        "compute-branch-suffix": compute_branch_suffix,
    }


def build_parser(commands: Mapping[str, Callable[[], None]]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = argparse.ArgumentParser(
        prog="python3 -m version_tools.cli",
        description="Run one release version helper command. Inputs are read from environment variables.",
        epilog=ENV_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    return parser


def run_command(command: str, commands: Mapping[str, Callable[[], None]]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command]()


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    try:
        run_command(args.command, commands)
    except VersionToolError as exc:
        # Keep failures short and readable in workflow logs.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
