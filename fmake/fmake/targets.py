"""
Module defining targets and the build recipe they are derived from.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar


class TargetKind(Enum):
    """
    Kinds of build targets.
    """
    OBJECT = "object"
    EXECUTABLE = "executable"
    AGGREGATE = "aggregate"


@dataclass(frozen=True)
class Target:
    """
    A named build goal.

    Attributes
    ----------
    name : str
        Target name, e.g. 'efficient' or 'efficient.o'
    kind : TargetKind
        Object, executable or aggregate
    inputs : tuple[str, ...]
        Source file for objects, object files for executables,
        target names for aggregates
    output : str | None
        Artifact produced by the target, None for aggregates
    """
    name: str
    kind: TargetKind
    inputs: tuple[str, ...] = ()
    output: str | None = None


@dataclass(frozen=True)
class BuildRecipe:
    """
    Everything needed to resolve targets in a project directory.

    Attributes
    ----------
    project_dir : Path
        Directory holding sources and artifacts
    executables : dict[str, tuple[str, ...]]
        Declared executables and the object files linked into each
    default_goal : str
        Target built when none is requested
    """
    project_dir: Path
    executables: dict[str, tuple[str, ...]] = field(default_factory=dict)
    default_goal: str = "all"

    SOURCE_SUFFIX: ClassVar[str] = ".f90"
    OBJECT_SUFFIX: ClassVar[str] = ".o"
    MODULE_SUFFIX: ClassVar[str] = ".mod"
    SUBMODULE_SUFFIX: ClassVar[str] = ".smod"
    ALL: ClassVar[str] = "all"
    CLEAN: ClassVar[str] = "clean"

    def declared_objects(self) -> list[str]:
        """
        Object files named by the declared executables, in declaration order.
        """
        objects: list[str] = []
        for inputs in self.executables.values():
            for obj in inputs:
                if obj not in objects:
                    objects.append(obj)
        return objects

    def source_for(self, object_name: str) -> str | None:
        """
        Source file the pattern rule derives an object from.

        Parameters
        ----------
        object_name : str
            Object file name such as 'efficient.o'

        Returns
        -------
        str | None
            Same-stem source name, or None if the name is not an object file
        """
        if not object_name.endswith(self.OBJECT_SUFFIX):
            return None
        stem: str = object_name[: -len(self.OBJECT_SUFFIX)]
        if not stem:
            return None
        return stem + self.SOURCE_SUFFIX

    def object_for(self, source_name: str) -> str:
        """
        Object file produced from a source file.
        """
        return str(Path(source_name).with_suffix(self.OBJECT_SUFFIX))
