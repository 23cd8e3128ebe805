"""
Module holding the two variables substituted into every build command.
"""

import shlex
from dataclasses import dataclass, replace
from typing import ClassVar

from fmake.errors import RecipeError


@dataclass(frozen=True)
class BuildConfig:
    """
    Compiler command and flags used for compiling and linking.

    Attributes
    ----------
    compiler : str
        Value of FC, the compiler/linker command
    flags : str
        Value of FFLAGS, appended to every compile and link command
    """
    compiler: str = "gfortran"
    flags: str = "-g"

    # Variable names accepted in recipes and on the command line.
    VARIABLES: ClassVar[dict[str, str]] = {
        "FC": "compiler",
        "FFLAGS": "flags",
    }

    def with_variables(self, variables: dict[str, str]) -> "BuildConfig":
        """
        Return a copy with FC and/or FFLAGS replaced.

        Parameters
        ----------
        variables : dict[str, str]
            Mapping of variable name to value

        Returns
        -------
        BuildConfig
            New configuration

        Raises
        ------
        RecipeError
            If a variable other than FC or FFLAGS is given, a value is not a
            string, has unbalanced quotes, or FC is empty
        """
        changes: dict[str, str] = {}
        for name, value in variables.items():
            if name not in self.VARIABLES:
                raise RecipeError(
                    f"Unknown variable '{name}' (expected one of: "
                    f"{', '.join(self.VARIABLES)})"
                )
            if not isinstance(value, str):
                raise RecipeError(
                    f"Variable '{name}' must be a string, got {type(value).__name__}"
                )
            try:
                words: list[str] = shlex.split(value)
            except ValueError as e:
                raise RecipeError(f"Invalid value for '{name}': {e}") from e
            if name == "FC" and not words:
                raise RecipeError("FC must not be empty")
            changes[self.VARIABLES[name]] = value
        return replace(self, **changes)

    def with_assignments(self, assignments: list[str]) -> "BuildConfig":
        """
        Apply make-style ``NAME=value`` assignments.

        Parameters
        ----------
        assignments : list[str]
            Assignments such as ``FC=ifort`` or ``FFLAGS=-O2 -g``

        Returns
        -------
        BuildConfig
            New configuration
        """
        variables: dict[str, str] = {}
        for assignment in assignments:
            name, sep, value = assignment.partition("=")
            if not sep or not name:
                raise RecipeError(f"Invalid variable assignment '{assignment}'")
            variables[name.strip()] = value
        return self.with_variables(variables)

    def compiler_command(self) -> list[str]:
        """
        FC split into words, so that e.g. ``FC="mpif90 -fcoarray=lib"`` works.
        """
        return shlex.split(self.compiler)

    def flag_list(self) -> list[str]:
        """
        FFLAGS split with shell quoting rules.
        """
        return shlex.split(self.flags)


def is_assignment(argument: str) -> bool:
    """
    Check whether a command line argument is a ``NAME=value`` assignment.

    Parameters
    ----------
    argument : str
        Command line argument

    Returns
    -------
    bool
        True if the text before the first '=' is a plain identifier
    """
    name, sep, _ = argument.partition("=")
    return bool(sep) and name.isidentifier()
