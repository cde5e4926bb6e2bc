"""Tests for rule kinds and return-shape contracts."""

import pytest

from span_rules.rules import (
    SPAN_COLORING,
    SPAN_GROUPING,
    RuleKindNotFoundError,
    describe_type,
    get_rule_kind,
    is_string_pair,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (("a", "b"), True),
        (["a", "b"], True),
        (("a",), False),
        (("a", "b", "c"), False),
        (("a", 1), False),
        ("ab", False),
        (None, False),
    ],
)
def test_is_string_pair(value: object, expected: bool) -> None:
    """Only two-element sequences of strings are pairs."""
    assert is_string_pair(value) is expected


def test_describe_type() -> None:
    """Sequences are described with element types."""
    assert describe_type(("a", 1)) == "tuple[str, int]"
    assert describe_type([]) == "list[]"
    assert describe_type(3.5) == "float"


def test_remediation_names_export() -> None:
    """Remediation text names the function and its return shape."""
    assert '"groupBy"' in SPAN_GROUPING.remediation
    assert "two strings" in SPAN_GROUPING.remediation


def test_get_rule_kind() -> None:
    """Rule kinds are looked up by key."""
    assert get_rule_kind("span-coloring") is SPAN_COLORING


def test_get_rule_kind_unknown() -> None:
    """Unknown keys list the available kinds."""
    with pytest.raises(RuleKindNotFoundError) as exc_info:
        get_rule_kind("span-sorting")

    assert "span-sorting" in str(exc_info.value)
    assert "Available rule kinds" in str(exc_info.value)
