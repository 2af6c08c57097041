"""
Fixture generation for the mapper battle.

A single ``BookDto`` is generated per run and shared by every strategy. The random
source is injected so a seeded ``random.Random`` yields the same fixture every time.
"""

from __future__ import annotations

import logging
import random
import string
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from mappers_battle.schemas import AuthorDto, BookDto

logger = logging.getLogger(__name__)

LOREM_WORDS = [
    "lorem",
    "ipsum",
    "dolor",
    "sit",
    "amet",
    "consectetur",
    "adipiscing",
    "elit",
    "sed",
    "eiusmod",
    "tempor",
    "incididunt",
    "labore",
    "dolore",
    "magna",
    "aliqua",
    "veniam",
    "nostrud",
    "exercitation",
    "ullamco",
]
FIRST_NAMES = [
    "Isaac",
    "Arthur",
    "Ursula",
    "Robert",
    "Frank",
    "William",
    "Octavia",
    "Ray",
    "Larry",
    "Neal",
    "Philip",
    "Cixin",
]
LAST_NAMES = [
    "Asimov",
    "Clarke",
    "Le Guin",
    "Heinlein",
    "Herbert",
    "Gibson",
    "Butler",
    "Bradbury",
    "Niven",
    "Stephenson",
    "Dick",
    "Liu",
]
COMPANY_SUFFIXES = ["LLC", "Group", "Inc", "and Sons", "Press", "Publishing"]
ISBN_ALPHABET = string.ascii_lowercase + string.digits
LOCALE = "en"


class FixtureGenerationError(RuntimeError):
    """The random source could not produce a valid fixture."""


class FixtureGenerator:
    def __init__(
        self, rng: Optional[random.Random] = None, today: Optional[date] = None
    ) -> None:
        """
        Args:
            rng: Random source to draw from (default: an unseeded ``random.Random``)
            today: Reference date for the published date (default: ``date.today()``)
        """
        self.rng = rng if rng is not None else random.Random()
        self.today = today

    def generate(self) -> BookDto:
        try:
            return self._generate()
        except Exception as e:
            raise FixtureGenerationError(
                f"Unable to generate a book fixture from {self.rng!r}: {e}"
            ) from e

    def _generate(self) -> BookDto:
        rng = self.rng
        today = self.today or date.today()

        published = today - timedelta(days=rng.randint(1, 365))
        price = Decimal(str(round(rng.uniform(10, 100), 2))).quantize(Decimal("0.01"))

        book = BookDto(
            title=self._sentence(),
            author=AuthorDto(
                name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
            ),
            published_date=published.strftime("%Y-%m-%d"),
            isbn="".join(rng.choice(ISBN_ALPHABET) for _ in range(13)),
            pages=rng.randint(100, 1000),
            publisher=f"{rng.choice(LAST_NAMES)} {rng.choice(COMPANY_SUFFIXES)}",
            genre=rng.choice(LOREM_WORDS),
            price=price,
            is_ebook=rng.random() < 0.5,
            language=LOCALE,
            rating=rng.uniform(0, 5),
        )
        logger.debug("Generated fixture %r", book)
        return book

    def _sentence(self) -> str:
        words = [self.rng.choice(LOREM_WORDS) for _ in range(self.rng.randint(3, 8))]
        return " ".join(words).capitalize() + "."
