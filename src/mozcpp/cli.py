"""
Command-line interface for mozcpp.

This module provides the `mozcpp` CLI tool for inspecting the compiler
configuration of files in a mach source tree.
"""

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from mozcpp import __version__
from mozcpp.build import Build, BuildStage
from mozcpp.cli_utils import ErrorFormatter, SourceTreeDetector, setup_logging
from mozcpp.config import Settings, SettingsError
from mozcpp.shell import ShellParseError

STAGE_MESSAGES = {
    BuildStage.NO_MACH: "No mach found in the source tree.",
    BuildStage.ENVIRONMENT_FAILED: "Unable to get a usable environment from mach.",
    BuildStage.COMPILERS_FAILED: "Unable to use the build's compilers.",
}


@dataclass
class CommonArgs:
    """Arguments shared by all commands."""

    root: Optional[Path] = None
    settings: Optional[Path] = None
    verbose: bool = False


def load_build(args: CommonArgs, start: Path) -> Build:
    """Create the Build for the tree containing start, or exit with an error."""
    root = SourceTreeDetector.detect_root(start, args.root)
    try:
        settings = Settings.load(root, args.settings)
    except SettingsError as e:
        ErrorFormatter.print_error("Invalid settings", str(e))
        sys.exit(1)

    stage, build = Build.probe(root, settings)
    if build is None:
        ErrorFormatter.print_error(f"Unsupported source tree: {root}", STAGE_MESSAGES.get(stage, stage.value))
        sys.exit(1)
    return build


def config_command(args: CommonArgs, source: Path) -> None:
    """Print the resolved configuration of a file as JSON.

    Examples:
        mozcpp config dom/base/Element.cpp
        mozcpp --root ~/mozilla-central config js/src/jsapi.cpp
    """
    build = load_build(args, source)
    try:
        config = build.resolve_source_configuration(source)
    except ShellParseError as e:
        ErrorFormatter.print_error("Invalid compiler flags", str(e))
        sys.exit(1)

    if config is None:
        ErrorFormatter.print_warning(f"No configuration available for {source}")
        sys.exit(1)

    print(json.dumps(config.to_dict(), indent=2))


def compile_command(args: CommonArgs, source: Path) -> None:
    """Compile a file with its resolved configuration and show the output.

    Examples:
        mozcpp compile dom/base/Element.cpp
    """
    build = load_build(args, source)
    build.test_compile(source)


def includes_command(args: CommonArgs) -> None:
    """Print every include directory of the build, one per line."""
    build = load_build(args, args.root or Path.cwd())
    for path in build.get_include_paths():
        print(path)


def state_command(args: CommonArgs) -> None:
    """Print the build's diagnostic state as JSON."""
    build = load_build(args, args.root or Path.cwd())
    print(json.dumps(build.to_state(), indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    """mozcpp - compiler configuration for mach source trees."""
    parser = argparse.ArgumentParser(
        prog="mozcpp",
        description="mozcpp - compiler configuration for mach source trees",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mozcpp {__version__}",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Top of the source tree (default: nearest directory containing mach)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings file (default: <root>/.mozcpp.ini)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logging to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    config_parser = subparsers.add_parser(
        "config",
        help="Print the compiler configuration for a file as JSON",
    )
    config_parser.add_argument("source", type=Path, help="Source or header file")

    compile_parser = subparsers.add_parser(
        "compile",
        help="Compile a file with its resolved configuration",
    )
    compile_parser.add_argument("source", type=Path, help="Source file")

    subparsers.add_parser(
        "includes",
        help="Print all include directories of the build",
    )
    subparsers.add_parser(
        "state",
        help="Print the build's diagnostic state as JSON",
    )

    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    setup_logging(parsed_args.verbose, parsed_args.log_file)

    common = CommonArgs(
        root=parsed_args.root,
        settings=parsed_args.settings,
        verbose=parsed_args.verbose,
    )

    try:
        if parsed_args.command == "config":
            config_command(common, parsed_args.source)
        elif parsed_args.command == "compile":
            compile_command(common, parsed_args.source)
        elif parsed_args.command == "includes":
            includes_command(common)
        elif parsed_args.command == "state":
            state_command(common)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, parsed_args.verbose)


if __name__ == "__main__":
    main()
