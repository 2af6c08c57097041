from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Float, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase): ...


# Author (1-M with Book)
class Author(Base):
    __tablename__ = "author"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    books: Mapped[list[Book]] = relationship(
        back_populates="author",
        uselist=True,
        cascade="save-update, merge, delete, delete-orphan",
    )


# Book (M-1 with Author)
class Book(Base):
    __tablename__ = "book"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)

    author_id: Mapped[int] = mapped_column(
        ForeignKey("author.id", ondelete="CASCADE"),
        nullable=False,
    )
    author: Mapped[Author] = relationship(back_populates="books", uselist=False)

    published_date: Mapped[str] = mapped_column(String(10), nullable=False)  # yyyy-MM-dd
    isbn: Mapped[str] = mapped_column(String(13), nullable=False)
    pages: Mapped[int] = mapped_column(Integer, nullable=False)
    publisher: Mapped[str] = mapped_column(String(100), nullable=False)
    genre: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_ebook: Mapped[bool] = mapped_column(Boolean, nullable=False)
    language: Mapped[str] = mapped_column(String(16), nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False)


__all__ = [
    "Base",
    "Author",
    "Book",
]
