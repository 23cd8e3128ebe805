"""
Module for turning a requested target name into an ordered build plan.
"""

from pathlib import Path

from fmake.errors import UnresolvedTarget
from fmake.module_dependency_resolver import ModuleDependencyResolver
from fmake.targets import BuildRecipe, Target, TargetKind


class TargetResolver:
    """
    Resolves target names against a build recipe.

    Known targets are the 'all' aggregate, the declared executables, and
    '<stem>.o' objects derived from an existing '<stem>.f90' source.
    Objects also depend on the objects of sources providing the Fortran
    modules they use.
    """

    def __init__(
        self,
        recipe: BuildRecipe,
        verbose: bool = False,
        resolver: ModuleDependencyResolver | None = None,
    ) -> None:
        """
        Initialize the target resolver.

        Parameters
        ----------
        recipe : BuildRecipe
            Recipe describing the project
        verbose : bool, optional
            Enable verbose output, by default False
        resolver : ModuleDependencyResolver | None, optional
            Module dependency resolver instance, by default None (creates new one)
        """
        self.recipe: BuildRecipe = recipe
        self.verbose: bool = verbose
        self.resolver: ModuleDependencyResolver = resolver or ModuleDependencyResolver(verbose)


    def resolve(self, name: str) -> list[Target]:
        """
        Build the ordered plan for a target.

        Parameters
        ----------
        name : str
            Requested target name

        Returns
        -------
        list[Target]
            Targets to consider, every dependency before its dependents.
            Empty if the name is an existing file with no rule.

        Raises
        ------
        UnresolvedTarget
            If the name, or one of its dependencies, has no rule and no
            existing file, or if the dependencies form a cycle
        """
        plan: list[Target] = []
        done: set[str] = set()
        self._visit(name, None, plan, done, [])

        if self.verbose:
            print(f"Plan for '{name}': {', '.join(t.name for t in plan) or '(nothing)'}")
        return plan


    def target(self, name: str) -> Target | None:
        """
        Look up the rule for a name.

        Parameters
        ----------
        name : str
            Target name

        Returns
        -------
        Target | None
            The target, or None if the name is an existing file with no rule

        Raises
        ------
        UnresolvedTarget
            If there is neither a rule nor a file
        """
        if name == self.recipe.ALL:
            return Target(name, TargetKind.AGGREGATE, tuple(self.recipe.executables))

        if name in self.recipe.executables:
            return Target(
                name,
                TargetKind.EXECUTABLE,
                tuple(self._link_objects(name)),
                name,
            )

        source: str | None = self.recipe.source_for(name)
        if source is not None and self._path(source).is_file():
            providers: list[str] = self.resolver.find_module_dependencies(self._path(source))
            return Target(
                name,
                TargetKind.OBJECT,
                (source, *[self.recipe.object_for(p) for p in providers]),
                name,
            )

        if self._path(name).exists():
            return None

        raise UnresolvedTarget(name)


    def _visit(
        self,
        name: str,
        needed_by: str | None,
        plan: list[Target],
        done: set[str],
        stack: list[str],
    ) -> None:
        """
        Depth-first post-order walk appending targets to the plan.
        """
        if name in done:
            return
        if name in stack:
            cycle: str = " -> ".join([*stack[stack.index(name):], name])
            raise UnresolvedTarget(name, f"Circular dependency {cycle}")

        try:
            target: Target | None = self.target(name)
        except UnresolvedTarget:
            if needed_by is None:
                raise
            raise UnresolvedTarget(
                name,
                f"No rule to make target '{name}', needed by '{needed_by}'",
            ) from None

        if target is None:
            done.add(name)
            return

        stack.append(name)
        for dependency in target.inputs:
            self._visit(dependency, name, plan, done, stack)
        stack.pop()

        done.add(name)
        plan.append(target)


    def _link_objects(self, executable: str) -> list[str]:
        """
        Declared objects of an executable plus, transitively, the objects
        providing the modules they use.
        """
        objects: list[str] = []
        pending: list[str] = list(self.recipe.executables[executable])
        seen: set[str] = set()

        while pending:
            obj: str = pending.pop(0)
            if obj in seen:
                continue
            seen.add(obj)
            objects.append(obj)

            source: str | None = self.recipe.source_for(obj)
            if source is None or not self._path(source).is_file():
                continue
            for provider in self.resolver.find_module_dependencies(self._path(source)):
                pending.append(self.recipe.object_for(provider))

        return objects


    def _path(self, name: str) -> Path:
        return self.recipe.project_dir / name
