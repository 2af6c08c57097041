from __future__ import annotations

from mappers_battle.models import Book
from mappers_battle.schemas import BookDto


def map_manual(dto: BookDto) -> Book:
    return dto.to_domain()
