"""Unit tests for atomic rules: bounds, membership, ranges and predicates."""

from __future__ import annotations

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strongtypes.rules import (
    CharSet,
    ExactLength,
    Length,
    NonEmpty,
    Pattern,
    Predicate,
    Range,
    Trimmed,
)
from strongtypes.rules.atomic import predicate

ANY_VALUE = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(),
    st.text(),
    st.binary(),
    st.lists(st.integers(), max_size=3),
)


def test_length_counts_characters_for_text_and_bytes_for_bytes() -> None:
    rule = Length(2, 3)
    assert rule.evaluate("éé")
    assert not rule.evaluate("éé".encode("utf-8"))
    assert rule.evaluate(b"abc")


def test_length_bounds_are_inclusive() -> None:
    rule = Length(3, 16)
    assert not rule.evaluate("ab")
    assert rule.evaluate("abc")
    assert rule.evaluate("a" * 16)
    assert not rule.evaluate("a" * 17)


def test_length_with_single_bound() -> None:
    assert Length(min=1).evaluate("a" * 1000)
    assert not Length(max=2).evaluate("abc")
    assert Length(min=1).constraint == "min_length[1]"
    assert Length(max=2).constraint == "max_length[2]"
    assert Length(3, 16).constraint == "length[3,16]"


@pytest.mark.parametrize(
    "kwargs",
    [{}, {"min": 5, "max": 2}, {"min": -1}, {"max": 1.5}, {"min": True}],
)
def test_length_rejects_inconsistent_parameters(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        Length(**kwargs)


def test_exact_length_and_non_empty() -> None:
    assert ExactLength(4).evaluate("abcd")
    assert not ExactLength(4).evaluate("abc")
    assert NonEmpty().evaluate(" ")
    assert not NonEmpty().evaluate("")
    assert not NonEmpty().evaluate(b"")
    with pytest.raises(ValueError):
        ExactLength(-1)


def test_trimmed_rejects_surrounding_whitespace() -> None:
    rule = Trimmed()
    assert rule.evaluate("inner space ok")
    assert not rule.evaluate(" leading")
    assert not rule.evaluate("trailing\n")
    assert not rule.evaluate(b"\tbytes")


def test_trimmed_only_considers_ascii_whitespace() -> None:
    rule = Trimmed()
    assert rule.evaluate("\u00a0padded\u2003")
    assert rule.evaluate("\x0bvertical-tab")
    assert not rule.evaluate("\rcarriage")
    assert not rule.evaluate("form-feed\x0c")
    assert rule.evaluate("\u00a0".encode())
    assert not rule.evaluate(b"bytes\r")


def test_pattern_uses_full_match_by_default() -> None:
    assert Pattern(r"[a-z]+").evaluate("abc")
    assert not Pattern(r"[a-z]+").evaluate("abc1")
    assert Pattern(r"[a-z]+", full_match=False).evaluate("abc1")


def test_pattern_rejects_invalid_regex() -> None:
    with pytest.raises(ValueError, match="invalid regex"):
        Pattern("(unclosed")


def test_pattern_instances_compare_by_parameters() -> None:
    assert Pattern(r"\d+") == Pattern(r"\d+")
    assert hash(Pattern(r"\d+")) == hash(Pattern(r"\d+"))
    assert Pattern(r"\d+") != Pattern(r"\d+", full_match=False)


def test_charset_combines_classes_and_literals() -> None:
    rule = CharSet(classes=("alnum", "underscore"))
    assert rule.evaluate("valid_user1")
    assert not rule.evaluate("bad name!")
    assert rule.evaluate("")
    assert CharSet("ab-").evaluate("a-b")
    assert CharSet("ab", ("digit",)).evaluate("a1b2")


def test_charset_rejects_unknown_class_and_empty_set() -> None:
    with pytest.raises(ValueError, match="unknown character classes"):
        CharSet(classes=("emoji",))
    with pytest.raises(ValueError, match="empty"):
        CharSet()


def test_range_inclusive_and_exclusive_bounds() -> None:
    inclusive = Range(1, 65535)
    assert not inclusive.evaluate(0)
    assert inclusive.evaluate(1)
    assert inclusive.evaluate(65535)
    assert not inclusive.evaluate(70000)

    exclusive = Range(0, 10, exclusive_min=True, exclusive_max=True)
    assert not exclusive.evaluate(0)
    assert exclusive.evaluate(5)
    assert not exclusive.evaluate(10)
    assert exclusive.constraint == "range(0,10)"
    assert Range(min=0).constraint == "range[0,inf]"


def test_range_compares_across_numeric_types() -> None:
    rule = Range(Decimal("0.5"), 2)
    assert rule.evaluate(1.0)
    assert rule.evaluate(Decimal("2"))
    assert not rule.evaluate(0)


def test_range_never_accepts_booleans() -> None:
    assert not Range(0, 10).evaluate(True)
    assert not Range(0, 10).applies_to(bool)
    assert Range(0, 10).applies_to(int)


def test_range_rejects_inconsistent_parameters() -> None:
    with pytest.raises(ValueError):
        Range(10, 1)
    with pytest.raises(ValueError):
        Range()
    with pytest.raises(ValueError):
        Range("a", "z")


def test_predicate_exception_counts_as_rejection() -> None:
    inverse = Predicate(lambda v: 1 / v > 0, "inverse_positive")
    assert inverse.evaluate(2)
    assert not inverse.evaluate(-2)
    assert not inverse.evaluate(0)
    assert not inverse.evaluate("text")
    assert inverse.constraint == "predicate[inverse_positive]"


def test_predicate_decorator_names_rule_after_function() -> None:
    @predicate()
    def even(n: int) -> bool:
        return n % 2 == 0

    assert isinstance(even, Predicate)
    assert even.name == "even"
    assert even.evaluate(4)
    assert not even.evaluate(3)


def test_applies_to_reflects_inspectable_types() -> None:
    assert Length(1).applies_to(str)
    assert Length(1).applies_to(bytes)
    assert not Length(1).applies_to(int)
    assert not Pattern("x").applies_to(bytes)
    assert Predicate(bool).applies_to(bytes)


def test_json_schema_fragments() -> None:
    assert Length(3, 16).json_schema() == {"minLength": 3, "maxLength": 16}
    assert Range(1, 10, exclusive_max=True).json_schema() == {"minimum": 1, "exclusiveMaximum": 10}
    assert Pattern(r"\d+").json_schema() == {"pattern": r"^(?:\d+)$"}
    assert Predicate(bool).json_schema() == {}


@given(ANY_VALUE)
def test_atomic_rules_are_total(value: object) -> None:
    rules = [
        Length(1, 5),
        ExactLength(2),
        NonEmpty(),
        Trimmed(),
        Pattern(r"\w+"),
        CharSet(classes=("alnum",)),
        Range(-5, 5),
        Predicate(lambda v: v.undefined_attribute),
    ]
    for rule in rules:
        assert rule.evaluate(value) is (rule.explain(value) is None)
