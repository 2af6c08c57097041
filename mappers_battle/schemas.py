from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from mappers_battle import models


# Author DTO (nested in BookDto)
class AuthorDto(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    name: str = Field(min_length=1)


# Book DTO, the shape every strategy maps from
class BookDto(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    title: str = Field(min_length=1)
    author: AuthorDto
    published_date: str = Field(min_length=1)  # yyyy-MM-dd
    isbn: str = Field(min_length=1)
    pages: int
    publisher: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    price: Decimal
    is_ebook: bool
    language: str = Field(min_length=1)
    rating: float

    def to_domain(self) -> models.Book:
        """Hand-written field by field copy into the domain model."""
        return models.Book(
            title=self.title,
            author=models.Author(name=self.author.name),
            published_date=self.published_date,
            isbn=self.isbn,
            pages=self.pages,
            publisher=self.publisher,
            genre=self.genre,
            price=self.price,
            is_ebook=self.is_ebook,
            language=self.language,
            rating=self.rating,
        )


__all__ = [
    "AuthorDto",
    "BookDto",
]
