"""
fmake - Incremental build orchestrator for Fortran programs.

Compiles '<stem>.f90' sources into objects and links them into executables,
running only the commands whose artifacts are out of date.
"""

__version__ = "0.1.0"

from fmake.project_builder import ProjectBuilder
from fmake.target_resolver import TargetResolver

__all__ = ["ProjectBuilder", "TargetResolver"]
