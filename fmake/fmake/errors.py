"""
Exceptions raised while resolving and building targets.
"""


class FmakeError(Exception):
    """
    Base class of all errors reported by fmake.
    """


class UnresolvedTarget(FmakeError):
    """
    A requested or dependency target has no rule and no source file.

    Attributes
    ----------
    target : str
        Name of the target that could not be resolved
    reason : str
        Human readable explanation
    """
    def __init__(self, target: str, reason: str = "") -> None:
        self.target: str = target
        self.reason: str = reason or f"No rule to make target '{target}'"
        super().__init__(self.reason)


class ActionFailure(FmakeError):
    """
    An external compile or link command exited with a non-zero status.

    Attributes
    ----------
    target : str
        Name of the target whose action failed
    command : list[str]
        The command that was run
    returncode : int
        Exit status of the command
    """
    def __init__(self, target: str, command: list[str], returncode: int) -> None:
        self.target: str = target
        self.command: list[str] = command
        self.returncode: int = returncode
        super().__init__(f"[{target}] Error {returncode}")


class RecipeError(FmakeError):
    """
    The recipe file or a variable assignment is invalid.
    """
