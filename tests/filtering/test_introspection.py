"""Tests for entity field type resolution."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

import pytest
from pydantic import BaseModel
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cleanbase_filtering import (
    FieldNotFoundError,
    FieldPredicate,
    GreaterThan,
    field_names,
    resolve_field_type,
)
from cleanbase_filtering.values import unwrap_optional

if TYPE_CHECKING:
    from pathlib import Path


class Person(BaseModel):
    name: str
    age: int | None = None


@dataclass
class Item:
    title: str
    quantity: int = 0


class Plain:
    kind: ClassVar[str] = "plain"
    code: str
    _secret: int


class Base(DeclarativeBase):
    pass


class PersonRow(Base):
    __tablename__ = "introspection_people"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True)
    age: Mapped[int]
    nickname: Mapped[str | None]
    legacy = Column(String(40), nullable=True)


class LegacyRow(Base):
    __tablename__ = "introspection_legacy"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True)
    code: Any = Column(String(10), nullable=False)


@dataclass
class Pet:
    name: str
    age: int
    photo: Path | None = None


def test_pydantic_fields():
    assert resolve_field_type(Person, "name") is str
    assert unwrap_optional(resolve_field_type(Person, "age")) == (int, True)


def test_dataclass_and_annotated_class_fields():
    assert resolve_field_type(Item, "title") is str
    assert resolve_field_type(Plain, "code") is str


def test_private_and_classvar_members_are_not_fields():
    with pytest.raises(FieldNotFoundError):
        resolve_field_type(Plain, "_secret")
    with pytest.raises(FieldNotFoundError):
        resolve_field_type(Plain, "kind")


def test_mapped_annotations_are_unwrapped():
    assert resolve_field_type(PersonRow, "age") is int
    assert resolve_field_type(PersonRow, "id") is uuid.UUID
    assert unwrap_optional(resolve_field_type(PersonRow, "nickname")) == (str, True)


def test_plain_columns_use_the_column_type():
    assert unwrap_optional(resolve_field_type(PersonRow, "legacy")) == (str, True)


def test_unknown_field_suggests_close_matches():
    with pytest.raises(FieldNotFoundError) as exc_info:
        resolve_field_type(Person, "nmae")

    err = exc_info.value
    assert err.model_name == "Person"
    assert "name" in err.suggestions
    assert "did you mean: name" in str(err)


def test_field_names():
    assert field_names(Person) == ["name", "age"]
    assert field_names(Item) == ["title", "quantity"]
    assert {"id", "age", "nickname", "legacy"} <= set(field_names(PersonRow))


def test_resolution_is_cached():
    resolve_field_type(Item, "quantity")
    hits = resolve_field_type.cache_info().hits
    resolve_field_type(Item, "quantity")
    assert resolve_field_type.cache_info().hits == hits + 1


def test_unresolvable_annotation_only_degrades_itself():
    assert resolve_field_type(Pet, "name") is str
    assert resolve_field_type(Pet, "age") is int
    assert resolve_field_type(Pet, "photo") is Any
    assert field_names(Pet) == ["name", "age", "photo"]
    assert GreaterThan("age", "3").build(Pet) == FieldPredicate("age", ">", 3)


def test_any_annotation_falls_back_to_the_column_type():
    assert resolve_field_type(LegacyRow, "code") is str
