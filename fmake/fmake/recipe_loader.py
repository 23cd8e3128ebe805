"""
Module for loading the build recipe of a project directory.
"""

import tomllib
from pathlib import Path
from typing import Any, ClassVar

from fmake.build_config import BuildConfig
from fmake.errors import RecipeError
from fmake.targets import BuildRecipe


class RecipeLoader:
    """
    Loads the build recipe for a project directory.

    Looks for an optional fmake.toml in the project directory. Without one,
    the recipe links 'efficient' and 'inefficient' from their same-stem
    object files.
    """
    RECIPE_FILE: ClassVar[str] = "fmake.toml"

    # Executable names with these suffixes would shadow the '%.o: %.f90' rule
    # or collide with sources and interface files.
    RESERVED_SUFFIXES: ClassVar[set[str]] = {
        BuildRecipe.SOURCE_SUFFIX,
        BuildRecipe.OBJECT_SUFFIX,
        BuildRecipe.MODULE_SUFFIX,
        BuildRecipe.SUBMODULE_SUFFIX,
    }

    DEFAULT_EXECUTABLES: ClassVar[dict[str, tuple[str, ...]]] = {
        "efficient": ("efficient.o",),
        "inefficient": ("inefficient.o",),
    }

    def __init__(self, verbose: bool = False) -> None:
        """
        Initialize the recipe loader.

        Parameters
        ----------
        verbose : bool, optional
            Enable verbose output, by default False
        """
        self._verbose: bool = verbose


    def detect(self, project_dir: Path) -> Path | None:
        """
        Find the recipe file of a project.

        Parameters
        ----------
        project_dir : Path
            Project directory

        Returns
        -------
        Path | None
            Path to fmake.toml if present, None otherwise
        """
        recipe_file: Path = project_dir / self.RECIPE_FILE
        if recipe_file.is_file():
            if self._verbose:
                print(f"Using recipe {recipe_file}")
            return recipe_file

        if self._verbose:
            print(f"No {self.RECIPE_FILE} in {project_dir}, using default recipe")
        return None


    def load(
        self,
        project_dir: Path,
        config: BuildConfig | None = None,
    ) -> tuple[BuildRecipe, BuildConfig]:
        """
        Load the recipe and merge its variables into a configuration.

        Parameters
        ----------
        project_dir : Path
            Project directory
        config : BuildConfig | None, optional
            Base configuration, by default the built-in FC/FFLAGS

        Returns
        -------
        tuple[BuildRecipe, BuildConfig]
            The recipe and the configuration with recipe variables applied

        Raises
        ------
        RecipeError
            If fmake.toml cannot be parsed or has an unexpected layout
        """
        config = config or BuildConfig()
        recipe_file: Path | None = self.detect(project_dir)
        if recipe_file is None:
            return BuildRecipe(project_dir, dict(self.DEFAULT_EXECUTABLES)), config

        try:
            with open(recipe_file, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RecipeError(f"{recipe_file}: {e}") from e

        variables = data.get("variables", {})
        if not isinstance(variables, dict):
            raise RecipeError(f"{recipe_file}: [variables] must be a table")
        config = config.with_variables(variables)

        executables = self._parse_executables(recipe_file, data.get("executables"))
        return BuildRecipe(project_dir, executables), config


    def _parse_executables(
        self,
        recipe_file: Path,
        table: Any,
    ) -> dict[str, tuple[str, ...]]:
        """
        Validate the [executables] table.

        Parameters
        ----------
        recipe_file : Path
            Recipe file, for error messages
        table : Any
            Parsed table, or None when absent

        Returns
        -------
        dict[str, tuple[str, ...]]
            Executable name mapped to its object files
        """
        if table is None:
            return dict(self.DEFAULT_EXECUTABLES)
        if not isinstance(table, dict) or not table:
            raise RecipeError(f"{recipe_file}: [executables] must be a non-empty table")

        executables: dict[str, tuple[str, ...]] = {}
        for name, objects in table.items():
            if name in (BuildRecipe.ALL, BuildRecipe.CLEAN):
                raise RecipeError(f"{recipe_file}: '{name}' is a reserved target name")
            if Path(name).suffix in self.RESERVED_SUFFIXES:
                raise RecipeError(
                    f"{recipe_file}: executable '{name}' must not end in "
                    f"{Path(name).suffix}, which names a source or build artifact"
                )
            if isinstance(objects, str):
                objects = [objects]
            if not isinstance(objects, list) or not objects:
                raise RecipeError(
                    f"{recipe_file}: executable '{name}' needs a list of object files"
                )
            for obj in objects:
                if not isinstance(obj, str) or not obj.endswith(BuildRecipe.OBJECT_SUFFIX):
                    raise RecipeError(
                        f"{recipe_file}: executable '{name}' lists '{obj}', "
                        f"expected a {BuildRecipe.OBJECT_SUFFIX} file"
                    )
            executables[name] = tuple(objects)

        if self._verbose:
            print(f"Declared executables: {', '.join(executables)}")
        return executables
