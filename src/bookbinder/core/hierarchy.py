"""Nesting level rules for the page sequence."""

from collections.abc import Iterable

from bookbinder.errors import InvalidHierarchyError, InvalidLevelError


def validate_level(level: object) -> int:
    """Check that a level is a non-negative integer and return it.

    Booleans, floats (including NaN) and strings are rejected.
    """
    if isinstance(level, bool) or not isinstance(level, int) or level < 0:
        raise InvalidLevelError(level)
    return level


def validate_transition(level: int, previous_level: int) -> None:
    """Check one step of the sequence.

    Going deeper by more than one level is rejected; going up by any
    amount closes that many nesting levels and is always allowed.
    """
    if level > previous_level + 1:
        raise InvalidHierarchyError(level, previous_level)


def validate_levels(levels: Iterable[int]) -> None:
    """Check a complete level sequence in document order.

    The first page must sit at level 0 so every nested page has a parent.
    """
    previous: int | None = None
    for level in levels:
        validate_level(level)
        if previous is None:
            if level != 0:
                raise InvalidHierarchyError(level, None)
        else:
            validate_transition(level, previous)
        previous = level
