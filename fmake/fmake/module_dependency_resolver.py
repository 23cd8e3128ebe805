"""
Module for resolving Fortran module dependencies between sources.
"""

import re
from pathlib import Path
from typing import ClassVar


class ModuleDependencyResolver:
    """
    Resolves module dependencies between Fortran sources of a project.

    Analyzes 'module' and 'use' statements so that the object of a source
    providing a module is compiled before the objects of sources using it.
    """
    # Fortran intrinsic modules
    INTRINSIC_MODULES: ClassVar[set[str]] = {
        "iso_fortran_env",
        "iso_c_binding",
        "ieee_arithmetic",
        "ieee_exceptions",
        "ieee_features",
        "omp_lib",
        "omp_lib_kinds",
    }

    SOURCE_PATTERN: ClassVar[str] = "*.f90"

    def __init__(self, verbose: bool = False) -> None:
        """
        Initialize the module dependency resolver.

        Parameters
        ----------
        verbose : bool, optional
            Enable verbose output, by default False
        """
        self.verbose: bool = verbose
        self._providers: dict[Path, dict[str, str]] = {}


    def find_module_dependencies(self, source_file: Path) -> list[str]:
        """
        Find the sources providing the modules a source file uses.

        Only sources in the same directory are considered. Intrinsic
        modules and modules defined by the source itself are skipped, as are
        modules no project source defines (e.g. from an external library).

        Parameters
        ----------
        source_file : Path
            Path to the Fortran source

        Returns
        -------
        list[str]
            Names of the providing source files, in order of first use
        """
        providers: dict[str, str] = self.module_providers(source_file.parent)
        own_modules: list[str] = self.extract_module_names(source_file)
        dependencies: list[str] = []

        used: list[str] = self.extract_use_statements(source_file)
        used += [p for p in self.extract_submodule_parents(source_file) if p not in used]

        for module_name in used:
            if module_name in self.INTRINSIC_MODULES or module_name in own_modules:
                continue

            provider: str | None = providers.get(module_name)
            if provider is None:
                if self.verbose:
                    print(f"Module {module_name} used by {source_file.name} is not defined in the project")
                continue

            if provider == source_file.name or provider in dependencies:
                continue

            dependencies.append(provider)
            if self.verbose:
                print(f"Found dependency: {provider} (provides {module_name})")

        return dependencies


    def module_providers(self, project_dir: Path) -> dict[str, str]:
        """
        Map each module defined in a directory to the source defining it.

        The map is computed once per directory and resolver instance.

        Parameters
        ----------
        project_dir : Path
            Directory to scan

        Returns
        -------
        dict[str, str]
            Lowercase module name mapped to source file name
        """
        key: Path = project_dir.resolve()
        if key not in self._providers:
            providers: dict[str, str] = {}
            for source in sorted(project_dir.glob(self.SOURCE_PATTERN)):
                for module_name in self.extract_module_names(source):
                    providers.setdefault(module_name, source.name)
            self._providers[key] = providers
        return self._providers[key]


    def extract_use_statements(self, file_path: Path) -> list[str]:
        """
        Extract module names from 'use' statements in a Fortran file.

        Parameters
        ----------
        file_path : Path
            Path to the Fortran file

        Returns
        -------
        list[str]
            List of module names used in the file (lowercase, unique)
        """
        content: str | None = self._read_without_comments(file_path)
        if content is None:
            return []

        # Find use statements with flexible whitespace handling:
        # - use module_name
        # - use :: module_name
        # - use, intrinsic :: module_name
        # - use module_name, only: ...
        pattern: str = r"^\s*use\s*(?:,\s*(?:non_)?intrinsic\s*)?(?:::\s*)?(\w+)"
        matches: list[str] = re.findall(pattern, content, re.IGNORECASE | re.MULTILINE)

        # Normalize to lowercase and remove duplicates
        unique_modules: list[str] = []
        seen: set[str] = set()
        for m in matches:
            name = m.lower()
            if name not in seen:
                seen.add(name)
                unique_modules.append(name)

        return unique_modules


    def extract_submodule_parents(self, file_path: Path) -> list[str]:
        """
        Extract the ancestor modules of submodules defined in a Fortran file.

        Both 'submodule (parent) name' and 'submodule (parent:ancestor_sub) name'
        depend on the module 'parent'.

        Parameters
        ----------
        file_path : Path
            Path to the Fortran file

        Returns
        -------
        list[str]
            Ancestor module names in lowercase (unique)
        """
        content: str | None = self._read_without_comments(file_path)
        if content is None:
            return []

        matches: list[str] = re.findall(
            r"^\s*submodule\s*\(\s*(\w+)\s*(?::\s*\w+\s*)?\)",
            content,
            re.IGNORECASE | re.MULTILINE,
        )
        return list(dict.fromkeys(m.lower() for m in matches))


    def extract_module_names(self, file_path: Path) -> list[str]:
        """
        Extract the names of modules defined in a Fortran file.

        'module procedure', 'module subroutine' and 'module function'
        statements are not module definitions and are ignored.

        Parameters
        ----------
        file_path : Path
            Path to the Fortran file

        Returns
        -------
        list[str]
            Module names in lowercase, empty if the file defines none
        """
        content: str | None = self._read_without_comments(file_path)
        if content is None:
            return []

        matches: list[str] = re.findall(
            r"^\s*module\s+(?!(?:procedure|subroutine|function)\b)(\w+)",
            content,
            re.IGNORECASE | re.MULTILINE,
        )
        names: list[str] = []
        for m in matches:
            if m.lower() not in names:
                names.append(m.lower())
        return names


    def _read_without_comments(self, file_path: Path) -> str | None:
        """
        Read a Fortran file, strip '!' comments and put each
        ';'-separated statement on its own line.

        Parameters
        ----------
        file_path : Path
            Path to the Fortran file

        Returns
        -------
        str | None
            File content, or None if the file could not be read
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content: str = f.read()
        except (UnicodeDecodeError, OSError):
            # Skip files with encoding issues or read errors
            if self.verbose:
                print(f"Warning: Could not read {file_path}")
            return None

        content = re.sub(r"!.*$", "", content, flags=re.MULTILINE)
        return content.replace(";", "\n")
