from __future__ import annotations

import random
from datetime import date

import pytest

from mappers_battle.fixture import FixtureGenerator
from mappers_battle.schemas import BookDto

SEED = 42


@pytest.fixture(scope="session")
def book_dto() -> BookDto:
    """One generated book shared by every benchmark (once per session)."""
    return FixtureGenerator(random.Random(SEED), today=date(2024, 6, 1)).generate()
