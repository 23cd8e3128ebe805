"""
Module defining build result structures and enums.
"""

from enum import Enum


class Colors(Enum):
    """
    ANSI color codes for terminal output.
    """
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


class MessageTag(Enum):
    """
    Prefixes for messages printed by fmake itself.
    """
    INFO = "fmake:"
    ERROR = "fmake: ***"


class BuildResult:
    """
    Container for the outcome of one planned target.

    Attributes
    ----------
    name : str
        Name of the target
    command : list[str]
        Command associated with the target (empty for aggregates)
    executed : bool
        Whether the command was run (or, in dry-run mode, printed)
    """
    def __init__(self,
        name: str,
        command: list[str] | None = None,
        executed: bool = False,
    ) -> None:
        self.name: str = name
        self.command: list[str] = command or []
        self.executed: bool = executed

    def __repr__(self) -> str:
        return (
            f"BuildResult(name={self.name!r}, executed={self.executed!r})"
        )
