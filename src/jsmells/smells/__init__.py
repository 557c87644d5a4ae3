"""Smell registry.

Public API:
    ALL_SMELLS: every available smell, in report order
    get_smell(name) -> Smell
    select_smells(names=None) -> list[Smell]
"""

from __future__ import annotations

from collections.abc import Iterable

from jsmells.smells.ast_smells import DUPLICATE_CODE, LONG_FUNCTION, NESTED_CALLBACKS
from jsmells.smells.base import Occurrence, Smell
from jsmells.smells.line_smells import (
    DEBUGGING_CODE,
    EMPTY_CATCH_BLOCK,
    INSECURE_FILE_HANDLING,
    LARGE_OBJECTS,
    LENGTHY_LINES,
    LONG_PARAMETER_LIST,
    MISSING_DEFAULT_CASE,
    SENSITIVE_INFORMATION,
)

ALL_SMELLS: tuple[Smell, ...] = (
    LENGTHY_LINES,
    LONG_PARAMETER_LIST,
    NESTED_CALLBACKS,
    DUPLICATE_CODE,
    EMPTY_CATCH_BLOCK,
    LONG_FUNCTION,
    MISSING_DEFAULT_CASE,
    LARGE_OBJECTS,
    SENSITIVE_INFORMATION,
    DEBUGGING_CODE,
    INSECURE_FILE_HANDLING,
)

_BY_NAME: dict[str, Smell] = {smell.name: smell for smell in ALL_SMELLS}


class UnknownSmellError(KeyError):
    """A smell was requested by a name that is not registered."""


def get_smell(name: str) -> Smell:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownSmellError(name) from None


def select_smells(names: Iterable[str] | None = None) -> list[Smell]:
    """Resolve smell names in registry order; None selects every smell."""
    if names is None:
        return list(ALL_SMELLS)
    wanted = set(names)
    for name in wanted:
        get_smell(name)
    return [smell for smell in ALL_SMELLS if smell.name in wanted]


__all__ = [
    "ALL_SMELLS",
    "Occurrence",
    "Smell",
    "UnknownSmellError",
    "get_smell",
    "select_smells",
]
