"""
mappers_battle - Benchmark harness pitting object mappers against each other.

Maps a pydantic ``BookDto`` into its SQLAlchemy ``Book`` domain model with several
interchangeable strategies, measures them and renders a ranked report.
"""

__version__ = "0.1.0"
__author__ = "mappers_battle"
__email__ = "mappers_battle@example.com"

from mappers_battle.config import BattleConfig, OrderPolicy
from mappers_battle.fixture import FixtureGenerationError, FixtureGenerator
from mappers_battle.ranking import excluded, rank
from mappers_battle.report import RenderError, ReportOptions, ReportRenderer
from mappers_battle.runner import AggregateStat, BenchmarkRunner, Sample
from mappers_battle.strategy import StrategyDescriptor, StrategyRegistry, strategies

__all__ = [
    "AggregateStat",
    "BattleConfig",
    "BenchmarkRunner",
    "FixtureGenerationError",
    "FixtureGenerator",
    "OrderPolicy",
    "RenderError",
    "ReportOptions",
    "ReportRenderer",
    "Sample",
    "StrategyDescriptor",
    "StrategyRegistry",
    "excluded",
    "rank",
    "strategies",
]
