"""
Module for compiling and linking the targets of a Fortran project.
"""

import shlex
import subprocess
import sys
from pathlib import Path

from fmake.build_config import BuildConfig
from fmake.build_result import BuildResult
from fmake.errors import ActionFailure
from fmake.target_resolver import TargetResolver
from fmake.targets import BuildRecipe, Target, TargetKind
from fmake.utilities import deduplicate, modification_time


class ProjectBuilder:
    """
    Builds targets of a Fortran project incrementally.

    Targets are built one at a time in plan order. A target's command only
    runs when its artifact is missing or older than one of its inputs.
    """

    def __init__(
        self,
        recipe: BuildRecipe,
        config: BuildConfig | None = None,
        verbose: bool = False,
        dry_run: bool = False,
        resolver: TargetResolver | None = None,
    ) -> None:
        """
        Initialize the project builder.

        Parameters
        ----------
        recipe : BuildRecipe
            Recipe describing the project
        config : BuildConfig | None, optional
            FC and FFLAGS, by default gfortran with -g
        verbose : bool, optional
            Enable verbose output, by default False
        dry_run : bool, optional
            Print commands without running them, by default False
        resolver : TargetResolver | None, optional
            Target resolver instance, by default None (creates new one)
        """
        self.recipe: BuildRecipe = recipe
        self.config: BuildConfig = config or BuildConfig()
        self.verbose: bool = verbose
        self.dry_run: bool = dry_run
        self.resolver: TargetResolver = resolver or TargetResolver(recipe, verbose)

    @property
    def project_dir(self) -> Path:
        return self.recipe.project_dir

    def build(self, name: str) -> list[BuildResult]:
        """
        Build a target and everything it depends on.

        Parameters
        ----------
        name : str
            Target name, e.g. 'all', 'efficient' or 'efficient.o'

        Returns
        -------
        list[BuildResult]
            One result per planned target, in plan order

        Raises
        ------
        UnresolvedTarget
            If the target or one of its dependencies cannot be resolved
        ActionFailure
            If a compile or link command fails; later steps are skipped
        """
        plan: list[Target] = self.resolver.resolve(name)
        results: list[BuildResult] = []
        rebuilt: set[str] = set()

        for target in plan:
            if target.kind is TargetKind.AGGREGATE:
                results.append(BuildResult(target.name))
                continue

            command: list[str] = self.command_for(target)
            if not self.is_stale(target, rebuilt):
                if self.verbose:
                    print(f"Target '{target.name}' is up to date")
                results.append(BuildResult(target.name, command, executed=False))
                continue

            self._run(target, command)
            rebuilt.add(target.name)
            results.append(BuildResult(target.name, command, executed=True))

        return results

    def is_stale(self, target: Target, rebuilt: set[str] | None = None) -> bool:
        """
        Check whether a target's artifact needs to be regenerated.

        Parameters
        ----------
        target : Target
            Object or executable target
        rebuilt : set[str] | None, optional
            Targets already rebuilt in the current run

        Returns
        -------
        bool
            True if the artifact is missing, an input has a strictly later
            modification time, or an input was rebuilt in this run
        """
        if target.output is None:
            return True

        output_time: int | None = modification_time(self.project_dir / target.output)
        if output_time is None:
            if self.verbose:
                print(f"Target '{target.name}' does not exist")
            return True

        for name in target.inputs:
            if rebuilt and name in rebuilt:
                if self.verbose:
                    print(f"Prerequisite '{name}' of '{target.name}' was rebuilt")
                return True

            input_time: int | None = modification_time(self.project_dir / name)
            if input_time is None or input_time > output_time:
                if self.verbose:
                    print(f"Prerequisite '{name}' is newer than target '{target.name}'")
                return True

        return False

    def command_for(self, target: Target) -> list[str]:
        """
        Compile or link command of a target.

        Parameters
        ----------
        target : Target
            Object or executable target

        Returns
        -------
        list[str]
            ``FC -c -o <obj> <src> FFLAGS`` for objects,
            ``FC -o <exe> <objs...> FFLAGS`` for executables
        """
        if target.output is None:
            return []

        command: list[str] = self.config.compiler_command()
        if target.kind is TargetKind.OBJECT:
            command.extend(["-c", "-o", target.output, target.inputs[0]])
        else:
            command.extend(["-o", target.output, *target.inputs])
        command.extend(self.config.flag_list())
        return command

    def clean(self) -> list[Path]:
        """
        Delete every generated artifact.

        Removes all object, module and submodule interface files in the project
        directory plus the declared objects and executables. Files that are
        already absent are skipped. Sources are never removed.

        Returns
        -------
        list[Path]
            Paths that were removed (or, in dry-run mode, would be)
        """
        candidates: list[Path] = [
            *sorted(self.project_dir.glob(f"*{self.recipe.OBJECT_SUFFIX}")),
            *sorted(self.project_dir.glob(f"*{self.recipe.MODULE_SUFFIX}")),
            *sorted(self.project_dir.glob(f"*{self.recipe.SUBMODULE_SUFFIX}")),
            *[self.project_dir / obj for obj in self.recipe.declared_objects()],
            *[self.project_dir / exe for exe in self.recipe.executables],
        ]

        removed: list[Path] = []
        for path in deduplicate(candidates):
            if path.suffix == self.recipe.SOURCE_SUFFIX:
                continue
            if self.dry_run:
                if path.exists():
                    removed.append(path)
                continue
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed.append(path)

        if removed:
            print(shlex.join(["rm", "-f", *[p.name for p in removed]]))
        elif self.verbose:
            print("Nothing to clean")
        return removed

    def _run(self, target: Target, command: list[str]) -> None:
        """
        Echo and run a command in the project directory.

        The command inherits stdout and stderr, so its output streams through
        unchanged while it runs.

        Parameters
        ----------
        target : Target
            Target the command builds
        command : list[str]
            Command to run

        Raises
        ------
        ActionFailure
            If the command cannot be started or exits with a non-zero status
        """
        print(shlex.join(command), flush=True)
        if self.dry_run:
            return

        try:
            result = subprocess.run(
                command,
                cwd=self.project_dir,
            )
        except OSError as e:
            print(f"{command[0]}: {e.strerror}", file=sys.stderr)
            raise ActionFailure(target.name, command, 127) from e

        if result.returncode != 0:
            raise ActionFailure(target.name, command, result.returncode)
