#!/usr/bin/env python3
"""
CLI entry for fmake (thin wrapper).
"""

import argparse
import sys
from pathlib import Path

from fmake import __version__ as FMAKE_VERSION
from fmake.build_config import BuildConfig, is_assignment
from fmake.build_result import BuildResult, Colors, MessageTag
from fmake.errors import FmakeError, RecipeError
from fmake.exit_status import ExitStatus
from fmake.project_builder import ProjectBuilder
from fmake.recipe_loader import RecipeLoader
from fmake.targets import BuildRecipe


def get_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Gets and returns command line arguments.
    """
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="fmake",
        description="fmake - Incremental build orchestrator for Fortran programs",
        epilog=(
            "Targets: 'all' (default), 'clean', a declared executable or "
            "'<stem>.o'.\nVariables: FC=<compiler> FFLAGS=<flags>"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "goals",
        nargs="*",
        default=[],
        metavar="TARGET",
        help="Targets to build, in order, and FC/FFLAGS assignments",
    )
    parser.add_argument(
        "-C",
        "--directory",
        type=Path,
        default=Path("."),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Print the commands that would run without running them",
    )
    parser.add_argument(
        "--compiler",
        help="Fortran compiler to use, same as FC=... (default: gfortran)",
    )
    parser.add_argument(
        "--flags",
        help="Compiler flags, same as FFLAGS=... (default: -g); use --flags=-O2",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"fmake {FMAKE_VERSION}",
        help="Show program's version number and exit",
    )
    return parser.parse_intermixed_args(argv)


def load_configuration(args: argparse.Namespace) -> tuple[BuildRecipe, BuildConfig]:
    """
    Loads the recipe and applies command line variables.

    Precedence, lowest first: defaults, fmake.toml, --compiler/--flags,
    FC=/FFLAGS= assignments.
    """
    recipe, config = RecipeLoader(args.verbose).load(args.directory)

    options: dict[str, str] = {}
    if args.compiler is not None:
        options["FC"] = args.compiler
    if args.flags is not None:
        options["FFLAGS"] = args.flags
    config = config.with_variables(options)

    assignments: list[str] = [g for g in args.goals if is_assignment(g)]
    return recipe, config.with_assignments(assignments)


def print_error(message: str) -> None:
    print(
        f"{Colors.RED.value}{MessageTag.ERROR.value} {message}{Colors.RESET.value}",
        file=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main function for CLI.
    """
    args = get_arguments(argv)

    if not args.directory.is_dir():
        print_error(f"{args.directory}: No such directory")
        return ExitStatus.USAGE.value

    try:
        recipe, config = load_configuration(args)
    except RecipeError as e:
        print_error(str(e))
        return ExitStatus.USAGE.value

    if args.verbose:
        print(f"FC={config.compiler} FFLAGS={config.flags}")

    builder = ProjectBuilder(
        recipe,
        config,
        verbose=args.verbose,
        dry_run=args.dry_run,
    )
    goals: list[str] = [g for g in args.goals if not is_assignment(g)]

    try:
        for goal in goals or [recipe.default_goal]:
            if goal == recipe.CLEAN:
                builder.clean()
                continue

            results: list[BuildResult] = builder.build(goal)
            if not any(r.executed for r in results):
                print(f"{MessageTag.INFO.value} Nothing to be done for '{goal}'.")

    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW.value}Build interrupted by user{Colors.RESET.value}")
        return ExitStatus.ERROR.value

    except FmakeError as e:
        print_error(str(e))
        return ExitStatus.ERROR.value

    return ExitStatus.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
