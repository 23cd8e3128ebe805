"""
Module providing exit status enum.
"""
from enum import Enum


class ExitStatus(Enum):
    """
    Enum of exit status returned by the fmake command.
    """
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
