"""Reflection based mapping: the target mapper is inspected on every call."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect

from mappers_battle.models import Book
from mappers_battle.schemas import BookDto

T = TypeVar("T")


def reflect(source: BaseModel, target: type[T]) -> T:
    """Copy every attribute of ``source`` that the ``target`` mapper also declares.

    Relationships are mapped recursively into the related mapper's class.
    """
    mapper = inspect(target)
    fields = type(source).model_fields
    values: dict[str, Any] = {}

    for attr in mapper.column_attrs:
        if attr.key in fields:
            values[attr.key] = getattr(source, attr.key)

    for relationship in mapper.relationships:
        if relationship.key not in fields:
            continue
        nested = getattr(source, relationship.key)
        if nested is None:
            raise ValueError(
                f"Cannot map {type(source).__name__}.{relationship.key}: value is None"
            )
        values[relationship.key] = reflect(nested, relationship.mapper.class_)

    return target(**values)


def map_reflection(dto: BookDto) -> Book:
    return reflect(dto, Book)
