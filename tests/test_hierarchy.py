"""Tests for nesting level rules."""

import pytest

from bookbinder.core.hierarchy import validate_level, validate_levels, validate_transition
from bookbinder.errors import InvalidHierarchyError, InvalidLevelError, ValidationError


@pytest.mark.parametrize("level", [0, 1, 7])
def test_validate_level_accepts_non_negative_ints(level):
    assert validate_level(level) == level


@pytest.mark.parametrize("level", [-1, 1.0, float("nan"), "1", None, True, False])
def test_validate_level_rejects_everything_else(level):
    with pytest.raises(InvalidLevelError):
        validate_level(level)


def test_invalid_level_is_a_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        validate_level(-3)
    assert exc_info.value.field == "level"


@pytest.mark.parametrize("previous", range(0, 4))
@pytest.mark.parametrize("level", range(0, 6))
def test_transition_fails_iff_more_than_one_deeper(previous, level):
    if level > previous + 1:
        with pytest.raises(InvalidHierarchyError) as exc_info:
            validate_transition(level, previous)
        assert exc_info.value.level == level
        assert exc_info.value.previous_level == previous
    else:
        validate_transition(level, previous)


def test_sequence_must_start_at_zero():
    with pytest.raises(InvalidHierarchyError) as exc_info:
        validate_levels([1, 2])
    assert exc_info.value.previous_level is None
    assert "first page" in str(exc_info.value)


def test_sequence_allows_large_decreases():
    validate_levels([0, 1, 2, 3, 0, 1])


def test_empty_sequence_is_valid():
    validate_levels([])


def test_message_names_both_levels():
    with pytest.raises(InvalidHierarchyError, match="level 3 cannot follow level 1"):
        validate_levels([0, 1, 3])
