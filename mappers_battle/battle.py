"""End to end pipeline: fixture, measurement, ranking and report."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from mappers_battle.config import BattleConfig
from mappers_battle.fixture import FixtureGenerator
from mappers_battle.ranking import excluded, rank
from mappers_battle.report import ReportOptions, ReportRenderer, format_summary
from mappers_battle.runner import AggregateStat, BenchmarkRunner
from mappers_battle.schemas import BookDto
from mappers_battle.strategy import StrategyDescriptor, strategies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BattleResult:
    fixture: BookDto
    stats: list[AggregateStat]
    ranked: list[AggregateStat]
    excluded: list[AggregateStat]
    show_allocations: bool = True

    @property
    def summary(self) -> str:
        return format_summary(self.ranked, self.excluded, self.show_allocations)


def run_battle(
    config: Optional[BattleConfig] = None,
    competitors: Optional[Iterable[StrategyDescriptor]] = None,
    rng: Optional[random.Random] = None,
) -> BattleResult:
    """Generate the fixture, measure every competitor and rank the results.

    Raises:
        FixtureGenerationError: the fixture could not be generated, nothing was measured.
    """
    config = config or BattleConfig()
    competitors = list(strategies if competitors is None else competitors)
    if rng is None:
        rng = random.Random(config.seed)

    fixture = FixtureGenerator(rng).generate()
    logger.info(
        "Battle of %d strategies: %s",
        len(competitors),
        ", ".join(descriptor.name for descriptor in competitors),
    )

    stats = BenchmarkRunner(config).run(fixture, competitors)
    result = BattleResult(
        fixture=fixture,
        stats=stats,
        ranked=rank(stats, config.order_policy),
        excluded=excluded(stats),
        show_allocations=config.memory_diagnoser,
    )
    logger.info("%s\n%s", config.title, result.summary)
    return result


def render_battle(result: BattleResult, config: Optional[BattleConfig] = None) -> Path:
    """Write the report of ``result``. Raises ``RenderError``, ``result`` stays valid."""
    config = config or BattleConfig()
    renderer = ReportRenderer(
        ReportOptions(
            title=config.title,
            highlight_fastest=config.highlight_fastest,
            show_allocations=config.memory_diagnoser,
        )
    )
    return renderer.render(
        result.ranked, config.resolved_output_path, excluded=result.excluded
    )
