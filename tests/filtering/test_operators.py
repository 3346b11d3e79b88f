"""Tests for the built-in filter operators."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

import pytest
from pydantic import BaseModel

from cleanbase_filtering import (
    AllOf,
    Bounds,
    ConversionError,
    Contains,
    EndsWith,
    Equals,
    FieldNotFoundError,
    FieldPredicate,
    FilterValidationError,
    GreaterThan,
    In,
    LessThan,
    NotEquals,
    NotIn,
    Range,
    SingleValue,
    StartsWith,
    ValueSet,
)


class Status(Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class Person(BaseModel):
    name: str
    age: int
    nickname: str | None = None
    score: Decimal | None = None
    status: Status = Status.ACTIVE
    joined: date | None = None
    is_admin: bool = False


class Tagged(BaseModel):
    tags: list[int]


JOHN = Person(name="John", age=25, nickname="Johnny")
AMY = Person(name="Amy", age=22, status=Status.BLOCKED)


# -- comparison --------------------------------------------------------------


def test_equals_coerces_to_field_type():
    assert Equals("age", "30").build(Person) == FieldPredicate("age", "=", 30)
    assert Equals("status", "blocked").build(Person) == FieldPredicate(
        "status", "=", Status.BLOCKED
    )


def test_equals_on_a_collection_field():
    tagged = Tagged(tags=[1, 2])

    same = Equals("tags", ["1", "2"]).build(Tagged)
    different = NotEquals("tags", [1, 2]).build(Tagged)

    assert same == FieldPredicate("tags", "=", [1, 2])
    assert same(tagged)
    assert not different(tagged)
    assert not same(Tagged(tags=[2, 1]))


def test_not_equals():
    pred = NotEquals("name", "Amy").build(Person)

    assert pred == FieldPredicate("name", "!=", "Amy")
    assert pred(JOHN)
    assert not pred(AMY)


def test_comparison_requires_a_value():
    with pytest.raises(FilterValidationError):
        Equals("age").build(Person)


def test_ordering_operators():
    assert GreaterThan("age", "18").build(Person) == FieldPredicate("age", ">", 18)
    assert LessThan("joined", "2024-01-01").build(Person) == FieldPredicate(
        "joined", "<", date(2024, 1, 1)
    )
    assert GreaterThan("score", "1.5").build(Person) == FieldPredicate(
        "score", ">", Decimal("1.5")
    )
    assert GreaterThan("status", "active").build(Person) == FieldPredicate(
        "status", ">", Status.ACTIVE
    )


@pytest.mark.parametrize("field", ["name", "is_admin"])
def test_ordering_rejects_non_comparable_fields(field):
    with pytest.raises(FilterValidationError, match="comparable"):
        GreaterThan(field, "x").build(Person)


def test_unparseable_value():
    with pytest.raises(ConversionError):
        Equals("age", "old").build(Person)


def test_missing_field_name():
    with pytest.raises(FilterValidationError):
        Equals(None, 1).build(Person)
    with pytest.raises(FilterValidationError):
        Contains("  ", "x").build(Person)


def test_unknown_field():
    with pytest.raises(FieldNotFoundError):
        Equals("nope", 1).build(Person)


# -- range -------------------------------------------------------------------


def test_range_with_both_bounds():
    pred = Range("age", "18", 30).build(Person)

    assert pred == AllOf(
        (FieldPredicate("age", ">=", 18), FieldPredicate("age", "<=", 30))
    )
    assert pred(JOHN)
    assert pred(AMY)
    assert not pred(Person(name="Joanna", age=35))


def test_range_with_one_bound():
    assert Range("age", start_value=18).build(Person) == FieldPredicate(
        "age", ">=", 18
    )
    assert Range("age", end_value=30).build(Person) == FieldPredicate(
        "age", "<=", 30
    )


def test_range_without_bounds():
    with pytest.raises(FilterValidationError):
        Range("age").build(Person)


def test_range_over_text_field():
    pred = Range("name", "A", "K").build(Person)

    assert pred(JOHN)
    assert not pred(Person(name="Zoe", age=1))


# -- text --------------------------------------------------------------------


def test_contains_folds_case_by_default():
    pred = Contains("name", "Jo").build(Person)

    assert pred == FieldPredicate("name", "icontains", "jo")
    assert pred(JOHN)


def test_contains_case_sensitive():
    pred = Contains("name", "jo", ignore_case=False).build(Person)

    assert pred == FieldPredicate("name", "contains", "jo")
    assert not pred(JOHN)


def test_text_on_optional_field_guards_null():
    pred = StartsWith("nickname", "joh").build(Person)

    assert pred == AllOf(
        (
            FieldPredicate("nickname", "is_not_null"),
            FieldPredicate("nickname", "istartswith", "joh"),
        )
    )
    assert pred(JOHN)
    assert not pred(AMY)


def test_ends_with():
    assert EndsWith("name", "MY").build(Person)(AMY)


def test_text_operator_rejects_non_text_field():
    with pytest.raises(FilterValidationError, match="string"):
        Contains("age", "1").build(Person)


@pytest.mark.parametrize("value", [None, "", "   "])
def test_text_operator_rejects_blank_value(value):
    with pytest.raises(FilterValidationError):
        Contains("name", value).build(Person)


# -- membership --------------------------------------------------------------


def test_in_coerces_each_element():
    assert In("age", ["1", 2]).build(Person) == FieldPredicate("age", "in", (1, 2))


def test_in_skips_null_elements():
    assert In("age", [None, "3"]).build(Person) == FieldPredicate("age", "in", (3,))


def test_in_aborts_on_bad_element():
    with pytest.raises(ConversionError):
        In("age", ["1", "x"]).build(Person)


def test_in_requires_values():
    with pytest.raises(FilterValidationError):
        In("age", []).build(Person)


def test_not_in():
    pred = NotIn("status", ["blocked"]).build(Person)

    assert pred(JOHN)
    assert not pred(AMY)


# -- payloads ----------------------------------------------------------------


def test_assign_checks_payload_shape():
    with pytest.raises(FilterValidationError):
        Equals("age").assign(Bounds(1, 2))
    with pytest.raises(FilterValidationError):
        Range("age").assign(SingleValue(1))


def test_assign_stores_payload():
    op = Range("age")
    op.assign(Bounds(18, 30))
    assert (op.start_value, op.end_value) == (18, 30)

    members = In("age")
    members.assign(ValueSet([1, 2]))
    assert members.values == [1, 2]


# -- determinism -------------------------------------------------------------


@pytest.mark.parametrize(
    "make",
    [
        lambda: Equals("age", "30"),
        lambda: NotEquals("status", "active"),
        lambda: GreaterThan("age", 1),
        lambda: LessThan("score", "2.5"),
        lambda: Range("age", 1, 9),
        lambda: Contains("name", "jo"),
        lambda: StartsWith("nickname", "jo"),
        lambda: EndsWith("name", "na", ignore_case=False),
        lambda: In("age", [3, "1", 2]),
        lambda: NotIn("status", ["blocked"]),
    ],
)
def test_building_is_deterministic(make):
    first, second = make().build(Person), make().build(Person)

    assert first == second
    assert first.to_dict() == second.to_dict()
