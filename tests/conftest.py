from __future__ import annotations

import random
from datetime import date
from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine

from mappers_battle.config import BattleConfig
from mappers_battle.fixture import FixtureGenerator
from mappers_battle.models import Base
from mappers_battle.schemas import AuthorDto, BookDto

SEED = 42


@pytest.fixture
def book_dto() -> BookDto:
    """The fixed book every strategy must copy field for field."""
    return BookDto(
        title="T",
        author=AuthorDto(name="A"),
        published_date="2020-01-01",
        isbn="1234567890123",
        pages=300,
        publisher="P",
        genre="Fiction",
        price=Decimal("19.99"),
        is_ebook=False,
        language="en",
        rating=4.5,
    )


@pytest.fixture
def random_book() -> BookDto:
    """A generated book from a seeded random source."""
    return FixtureGenerator(random.Random(SEED), today=date(2024, 6, 1)).generate()


@pytest.fixture
def quick_config() -> BattleConfig:
    """Small iteration counts so the runner finishes instantly."""
    return BattleConfig(iterations=25, warmup_iterations=3, seed=SEED)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    sqlite_engine = create_engine("sqlite://", future=True)
    Base.metadata.create_all(sqlite_engine)
    try:
        yield sqlite_engine
    finally:
        sqlite_engine.dispose()
