"""Mapping with accessors compiled once at import time.

Each DTO type gets an ``operator.attrgetter`` over its scalar fields; nested DTOs are
mapped by their own compiled mapper.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Any, Callable

from pydantic import BaseModel

from mappers_battle.models import Author, Book
from mappers_battle.schemas import AuthorDto, BookDto

DOMAIN_TYPES: dict[type[BaseModel], type[Any]] = {
    AuthorDto: Author,
    BookDto: Book,
}


def compile_mapper(source: type[BaseModel]) -> Callable[[BaseModel], Any]:
    target = DOMAIN_TYPES[source]
    scalars: list[str] = []
    nested: list[tuple[str, Callable[[BaseModel], Any]]] = []

    for name, info in source.model_fields.items():
        if info.annotation in DOMAIN_TYPES:
            nested.append((name, compile_mapper(info.annotation)))
        else:
            scalars.append(name)

    names = tuple(scalars)
    accessor = attrgetter(*names)
    # attrgetter returns a bare value instead of a tuple for a single name
    getter = accessor if len(names) > 1 else (lambda obj: (accessor(obj),))

    def mapper(obj: BaseModel) -> Any:
        values = dict(zip(names, getter(obj)))
        for name, nested_mapper in nested:
            values[name] = nested_mapper(getattr(obj, name))
        return target(**values)

    mapper.__name__ = f"map_{source.__name__}"
    return mapper


map_attrgetter: Callable[[BookDto], Book] = compile_mapper(BookDto)  # type: ignore[assignment]
