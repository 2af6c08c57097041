"""Mapping through pydantic's serializer: the dumped dict feeds the ORM constructors."""

from __future__ import annotations

from mappers_battle.models import Author, Book
from mappers_battle.schemas import BookDto


def map_dump(dto: BookDto) -> Book:
    book = Book(**dto.model_dump(exclude={"author"}))
    book.author = Author(**dto.author.model_dump())
    return book
