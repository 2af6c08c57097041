from __future__ import annotations

from typing import Iterable

from mappers_battle.config import OrderPolicy
from mappers_battle.runner import AggregateStat


def _fastest_first(stat: AggregateStat) -> tuple[bool, float, int]:
    # stats without samples go last, ties fall back to declaration order
    return (not stat.has_data, stat.mean_time_ns or 0.0, stat.index)


def rank(
    stats: Iterable[AggregateStat],
    policy: OrderPolicy = OrderPolicy.FASTEST_TO_SLOWEST,
) -> list[AggregateStat]:
    """Order the measured stats for the report. Excluded strategies are dropped."""
    policy = OrderPolicy(policy)
    measured = [stat for stat in stats if not stat.excluded]
    if policy is OrderPolicy.DECLARED:
        return sorted(measured, key=lambda stat: stat.index)
    return sorted(measured, key=_fastest_first)


def excluded(stats: Iterable[AggregateStat]) -> list[AggregateStat]:
    return sorted((stat for stat in stats if stat.excluded), key=lambda stat: stat.index)
