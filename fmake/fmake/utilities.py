"""
A module providing functions for general purposes.
"""

import os
from pathlib import Path
from typing import TypeVar, Iterable

T = TypeVar("T")


def deduplicate(input_list: Iterable[T]) -> list[T]:
    """
    Returns a list of unique elements while preserving original order.

    Parameters
    ----------
    input_list : Iterable[T]
        The sequence of elements to be filtered.
    
    Returns
    -------
    list[T]
        A new list with unique elements in their original order.
    """
    return list(dict.fromkeys(input_list))


def modification_time(path: Path) -> int | None:
    """
    Returns the modification time of a file in nanoseconds.

    Parameters
    ----------
    path : Path
        File to inspect.

    Returns
    -------
    int | None
        Modification time, or None if the file does not exist.
    """
    try:
        return os.stat(path).st_mtime_ns
    except FileNotFoundError:
        return None
