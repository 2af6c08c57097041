from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, TypeVar

if TYPE_CHECKING:
    from mappers_battle.models import Book
    from mappers_battle.schemas import BookDto

Invoke = Callable[["BookDto"], "Book"]
F = TypeVar("F", bound=Callable[..., object])


@dataclass(frozen=True)
class StrategyDescriptor:
    """One competitor: a report label, the mapping callable and its declaration position."""

    name: str
    invoke: Invoke
    index: int = 0


class StrategyRegistry:
    """Ordered, name keyed set of mapping strategies.

    Iteration yields descriptors in declaration order, which is the order the
    runner measures them in and the tie-break used by the ranking.
    """

    def __init__(self) -> None:
        self._descriptors: dict[str, StrategyDescriptor] = {}

    def __iter__(self) -> Iterator[StrategyDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: str) -> bool:
        return name in self._descriptors

    def __getitem__(self, name: str) -> StrategyDescriptor:
        return self._descriptors[name]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._descriptors)!r})"

    @property
    def names(self) -> list[str]:
        return list(self._descriptors)

    def register(self, name: str, invoke: Invoke) -> StrategyDescriptor:
        if name in self._descriptors:
            raise RuntimeError(
                f"Strategy {name!r} is already blessed in {self.__class__.__name__}"
            )
        descriptor = StrategyDescriptor(
            name=name, invoke=invoke, index=len(self._descriptors)
        )
        self._descriptors[name] = descriptor
        return descriptor

    def bless(self, name: str):
        """Register the decorated mapping function under ``name``."""

        def decorator(func: F) -> F:
            self.register(name, func)  # type: ignore[arg-type]
            return func

        return decorator
