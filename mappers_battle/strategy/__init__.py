"""Mapping strategies competing in the battle, in declaration order."""

from mappers_battle.strategy.attrgetter import map_attrgetter
from mappers_battle.strategy.base import StrategyDescriptor, StrategyRegistry
from mappers_battle.strategy.dump import map_dump
from mappers_battle.strategy.manual import map_manual
from mappers_battle.strategy.profile import (
    MappingProfile,
    ProfileConfigurationError,
    map_profile,
)
from mappers_battle.strategy.reflection import map_reflection

strategies = StrategyRegistry()
strategies.register("Reflection", map_reflection)
strategies.register("Profile", map_profile)
strategies.register("Manual", map_manual)
strategies.register("PydanticDump", map_dump)
strategies.register("Attrgetter", map_attrgetter)

__all__ = [
    "MappingProfile",
    "ProfileConfigurationError",
    "StrategyDescriptor",
    "StrategyRegistry",
    "strategies",
]
