"""Tests for FilterAssembler."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Annotated

import pytest
from pydantic import BaseModel

from cleanbase_filtering import (
    AllOf,
    ConversionError,
    DataRange,
    FieldPredicate,
    FilterAssemblyError,
    FilterBinding,
    FilterField,
    FilterRequest,
    FilterValidationError,
    MatchAll,
    OperatorNotFoundError,
)
from cleanbase_filtering.operators import Contains, GreaterThan, In, Range, StartsWith


class Status(Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class Person(BaseModel):
    name: str
    age: int
    nickname: str | None = None
    status: Status = Status.ACTIVE


class PersonFilter(FilterRequest):
    name: Annotated[str | None, FilterField("Contains")] = None
    age: Annotated[DataRange[int] | None, FilterField("Range")] = None
    min_age: Annotated[int | None, FilterField("GreaterThan", target="age")] = None
    statuses: Annotated[list[str] | None, FilterField("In", target="status")] = None
    nick: Annotated[
        str | None, FilterField("StartsWith", target="nickname", ignore_case=False)
    ] = None
    page: int = 1


def test_no_request(assembler):
    assert assembler.assemble(None) == []
    assert assembler.build_predicate(None, Person) == MatchAll()


def test_unset_fields_are_skipped(assembler):
    assert assembler.assemble(PersonFilter(page=3)) == []
    assert assembler.build_predicate(PersonFilter(), Person) == MatchAll()


def test_text_field(assembler):
    [op] = assembler.assemble(PersonFilter(name="jo"))

    assert isinstance(op, Contains)
    assert (op.field_name, op.value, op.ignore_case) == ("name", "jo", True)


def test_target_and_case_flag(assembler):
    ops = assembler.assemble(PersonFilter(min_age=21, nick="Jo"))

    assert [type(op) for op in ops] == [GreaterThan, StartsWith]
    assert ops[0].field_name == "age"
    assert ops[0].value == 21
    assert ops[1].field_name == "nickname"
    assert ops[1].ignore_case is False


def test_range_field(assembler):
    [op] = assembler.assemble(PersonFilter(age=DataRange[int](start=18, end=30)))

    assert isinstance(op, Range)
    assert (op.start_value, op.end_value) == (18, 30)


def test_operators_follow_declaration_order(assembler):
    request = PersonFilter(
        statuses=["active"], name="jo", age=DataRange[int](end=40)
    )

    ops = assembler.assemble(request)

    assert [op.field_name for op in ops] == ["name", "age", "status"]


def test_set_field_builds_typed_membership(assembler):
    request = PersonFilter(statuses=["active", "BLOCKED"])

    [op] = assembler.assemble(request)
    assert isinstance(op, In)
    assert op.values == ["active", "BLOCKED"]

    assert assembler.build_predicate(request, Person) == FieldPredicate(
        "status", "in", (Status.ACTIVE, Status.BLOCKED)
    )


def test_set_element_type_comes_from_first_value(assembler):
    bindings = {"ids": FilterBinding("ids", "In", "age")}

    [op] = assembler.assemble({"ids": [1, "2", None]}, bindings)

    assert op.values == [1, 2, None]


def test_set_conversion_failure_is_wrapped(assembler):
    bindings = {"ids": FilterBinding("ids", "In", "age")}

    with pytest.raises(FilterAssemblyError) as exc_info:
        assembler.assemble({"ids": [1, "x"]}, bindings)

    assert exc_info.value.field == "ids"
    assert isinstance(exc_info.value.__cause__, ConversionError)


@pytest.mark.parametrize("value", [[None], "1,2", 5])
def test_set_field_needs_a_collection_of_values(assembler, value):
    bindings = {"ids": FilterBinding("ids", "In", "age")}

    with pytest.raises(FilterAssemblyError) as exc_info:
        assembler.assemble({"ids": value}, bindings)

    assert isinstance(exc_info.value.__cause__, FilterValidationError)


def test_range_needs_start_and_end(assembler):
    bindings = {"page": FilterBinding("page", "Range", "age")}

    with pytest.raises(FilterAssemblyError) as exc_info:
        assembler.assemble(PersonFilter(page=2), bindings)

    err = exc_info.value
    assert (err.field, err.operator) == ("page", "Range")
    assert isinstance(err.__cause__, FilterValidationError)


def test_text_needs_a_string(assembler):
    bindings = {"page": FilterBinding("page", "Contains", "name")}

    with pytest.raises(FilterAssemblyError):
        assembler.assemble(PersonFilter(page=2), bindings)


def test_unknown_filter_type(assembler):
    bindings = {"q": FilterBinding("q", "Fuzzy", "name")}

    with pytest.raises(FilterAssemblyError) as exc_info:
        assembler.assemble({"q": "jo"}, bindings)

    assert isinstance(exc_info.value.__cause__, OperatorNotFoundError)
    assert "Fuzzy" in str(exc_info.value)


def test_build_errors_are_wrapped(assembler):
    bindings = {"q": FilterBinding("q", "GreaterThan", "name")}

    with pytest.raises(FilterAssemblyError) as exc_info:
        assembler.build_predicates({"q": "x"}, Person, bindings)

    err = exc_info.value
    assert (err.field, err.operator) == ("q", "GreaterThan")
    assert err.to_dict()["request_field"] == "q"
    assert isinstance(exc_info.value.__cause__, FilterValidationError)


def test_build_predicate_combines_with_and(assembler):
    request = PersonFilter(name="jo", min_age=18)

    predicate = assembler.build_predicate(request, Person)

    assert predicate == AllOf(
        (
            FieldPredicate("name", "icontains", "jo"),
            FieldPredicate("age", ">", 18),
        )
    )


def test_custom_registration_is_used(registry, assembler):
    registry.register("Like", Contains)
    bindings = {"q": FilterBinding("q", "like", "name")}

    [op] = assembler.assemble({"q": "am"}, bindings)

    assert isinstance(op, Contains)


def test_assembly_is_logged(assembler, caplog):
    caplog.set_level(logging.DEBUG, logger="cleanbase.filtering")

    assembler.assemble(PersonFilter(name="jo"))

    assert "Assembled Contains on name from request field name" in caplog.text


class Visit(BaseModel):
    seen: datetime


class VisitFilter(FilterRequest):
    seen_at: Annotated[int | None, FilterField("Equals", target="seen")] = None


def test_out_of_range_timestamp_is_wrapped_at_build(assembler):
    with pytest.raises(FilterAssemblyError) as exc_info:
        assembler.build_predicates(VisitFilter(seen_at=10**20), Visit)

    err = exc_info.value
    assert (err.field, err.operator) == ("seen_at", "Equals")
    assert isinstance(err.__cause__, ConversionError)
