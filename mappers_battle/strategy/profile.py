"""Configuration driven mapping.

Type pairs are registered on a ``MappingProfile`` up front; the member plan of each
pair is worked out on first use and cached, so later calls only copy values.
Every registered pair can be mapped in both directions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect

from mappers_battle.models import Author, Book
from mappers_battle.schemas import AuthorDto, BookDto

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")


class ProfileConfigurationError(ValueError):
    """The profile cannot map between the requested types."""


class BidirectionalDict(dict, Generic[K, V]):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._reverse: BidirectionalDict[V, K] | None = None

    @property
    def reverse(self) -> BidirectionalDict[V, K]:
        if self._reverse is None:
            self._reverse = BidirectionalDict({v: k for k, v in self.items()})
            self._reverse._reverse = self
        return self._reverse

    def __setitem__(self, key: K, value: V) -> None:
        super().__setitem__(key, value)
        if self._reverse is not None:
            dict.__setitem__(self._reverse, value, key)

    def __delitem__(self, key: K) -> None:
        value = self[key]
        super().__delitem__(key)
        if self._reverse is not None:
            dict.__delitem__(self._reverse, value)


@dataclass(frozen=True)
class Member:
    name: str
    nested: Optional[type]
    # primary keys, foreign keys and back-populated collections need no source
    required: bool = True


def members(cls: type) -> dict[str, Member]:
    """Mappable members of a pydantic model or a SQLAlchemy mapped class."""
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        result: dict[str, Member] = {}
        for name, info in cls.model_fields.items():
            annotation = info.annotation
            nested = (
                annotation
                if isinstance(annotation, type) and issubclass(annotation, BaseModel)
                else None
            )
            result[name] = Member(name, nested)
        return result

    mapper = inspect(cls, raiseerr=False)
    if mapper is None:
        raise ProfileConfigurationError(
            f"{cls!r} is neither a pydantic model nor a mapped class"
        )

    result = {}
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        required = not (column.primary_key or column.foreign_keys)
        result[attr.key] = Member(attr.key, None, required)
    for relationship in mapper.relationships:
        if relationship.uselist:
            # collections are back references, never copied
            continue
        result[relationship.key] = Member(relationship.key, relationship.mapper.class_)
    return result


class MappingProfile:
    formulars: BidirectionalDict[type, type]

    def __init__(self) -> None:
        self.formulars = BidirectionalDict()
        self._plans: dict[tuple[type, type], tuple[tuple[str, Optional[type]], ...]] = {}

    def __contains__(self, cls: type) -> bool:
        return cls in self.formulars or cls in self.formulars.reverse

    def counterpart(self, cls: type) -> type:
        if cls in self.formulars:
            return self.formulars[cls]
        if cls in self.formulars.reverse:
            return self.formulars.reverse[cls]
        raise ProfileConfigurationError(f"No map registered for {cls.__name__}")

    def create_map(self, source: type, target: type) -> MappingProfile:
        if source in self:
            if self.counterpart(source) is target:
                return self
            raise ProfileConfigurationError(
                f"{source.__name__} is already mapped to {self.counterpart(source).__name__}"
            )
        if target in self:
            raise ProfileConfigurationError(
                f"{target.__name__} is already mapped to {self.counterpart(target).__name__}"
            )
        self.formulars[source] = target
        return self

    def remove_map(self, cls: type) -> MappingProfile:
        """Forget the pair ``cls`` belongs to, from either side."""
        other = self.counterpart(cls)
        if cls in self.formulars:
            del self.formulars[cls]
        else:
            del self.formulars.reverse[cls]
        self._plans = {
            key: plan
            for key, plan in self._plans.items()
            if cls not in key and other not in key
        }
        return self

    def plan(self, source: type, target: type) -> tuple[tuple[str, Optional[type]], ...]:
        key = (source, target)
        if (cached := self._plans.get(key)) is not None:
            return cached

        source_members = members(source)
        steps: list[tuple[str, Optional[type]]] = []
        for name in members(target):
            if name not in source_members:
                continue
            nested = source_members[name].nested
            steps.append((name, self.counterpart(nested) if nested else None))

        self._plans[key] = plan = tuple(steps)
        return plan

    def map(self, obj: Any, target: Optional[type[T]] = None) -> T:
        source = type(obj)
        if target is None:
            target = self.counterpart(source)
        elif self.counterpart(source) is not target:
            raise ProfileConfigurationError(
                f"No map registered from {source.__name__} to {target.__name__}"
            )

        values: dict[str, Any] = {}
        for name, nested in self.plan(source, target):
            value = getattr(obj, name)
            if nested is not None:
                if value is None:
                    raise ValueError(
                        f"Cannot map {source.__name__}.{name}: value is None"
                    )
                value = self.map(value, nested)
            values[name] = value
        return target(**values)

    def assert_configuration_is_valid(self) -> None:
        unmapped: list[str] = []
        pairs = list(self.formulars.items()) + list(self.formulars.reverse.items())
        for source, target in pairs:
            source_members = members(source)
            for name, member in members(target).items():
                if member.required and name not in source_members:
                    unmapped.append(f"{target.__name__}.{name}")
        if unmapped:
            raise ProfileConfigurationError(
                f"Unmapped members: {', '.join(sorted(unmapped))}"
            )


profile = MappingProfile()
profile.create_map(AuthorDto, Author)
profile.create_map(BookDto, Book)


def map_profile(dto: BookDto) -> Book:
    return profile.map(dto, Book)
