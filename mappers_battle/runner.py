"""
Benchmark runner: drives each strategy through a warm-up and a measured phase.

Strategies are measured one after another on the calling thread. Within the
measured phase the timer brackets exactly one invocation; allocation tracing, when
enabled, is snapshotted outside that window. tracemalloc hooks every allocation, so
absolute times are inflated for all strategies alike while it is on.
"""

from __future__ import annotations

import gc
import logging
import statistics
import tracemalloc
from dataclasses import dataclass
from time import perf_counter_ns
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from mappers_battle.config import BattleConfig
from mappers_battle.schemas import BookDto
from mappers_battle.strategy import StrategyDescriptor

logger = logging.getLogger(__name__)


class StrategyInvocationError(RuntimeError):
    """A strategy kept failing after every allowed retry."""

    def __init__(self, strategy: str, attempts: int, cause: BaseException):
        super().__init__(
            f"{strategy} failed {attempts} consecutive attempts: "
            f"{type(cause).__name__}: {cause}"
        )
        self.strategy = strategy
        self.attempts = attempts
        self.cause = cause


@dataclass(frozen=True)
class Sample:
    elapsed_ns: int
    allocated_bytes: Optional[int] = None


class AggregateStat(BaseModel):
    """Summary of one strategy's measured phase."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    strategy_name: str
    index: int = Field(ge=0, description="Declaration position of the strategy")
    mean_time_ns: Optional[float] = None
    stddev_time_ns: Optional[float] = None
    mean_allocated_bytes: Optional[float] = None
    sample_count: int = Field(default=0, ge=0)
    excluded: bool = False
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.sample_count > 0 and self.mean_time_ns is not None

    @classmethod
    def aggregate(
        cls, descriptor: StrategyDescriptor, samples: list[Sample]
    ) -> AggregateStat:
        if not samples:
            return cls(strategy_name=descriptor.name, index=descriptor.index)

        times = [sample.elapsed_ns for sample in samples]
        allocations = [
            sample.allocated_bytes
            for sample in samples
            if sample.allocated_bytes is not None
        ]
        return cls(
            strategy_name=descriptor.name,
            index=descriptor.index,
            mean_time_ns=statistics.fmean(times),
            stddev_time_ns=statistics.stdev(times) if len(times) > 1 else 0.0,
            mean_allocated_bytes=statistics.fmean(allocations) if allocations else None,
            sample_count=len(samples),
        )

    @classmethod
    def exclusion(cls, descriptor: StrategyDescriptor, error: str) -> AggregateStat:
        return cls(
            strategy_name=descriptor.name,
            index=descriptor.index,
            excluded=True,
            error=error,
        )


class BenchmarkRunner:
    def __init__(self, config: Optional[BattleConfig] = None) -> None:
        self.config = config or BattleConfig()

    def run(
        self, fixture: BookDto, strategies: Iterable[StrategyDescriptor]
    ) -> list[AggregateStat]:
        stats: list[AggregateStat] = []
        for descriptor in strategies:
            stats.append(self.measure(fixture, descriptor))
            if self.config.collect_garbage:
                gc.collect()
        return stats

    def measure(self, fixture: BookDto, descriptor: StrategyDescriptor) -> AggregateStat:
        config = self.config
        try:
            logger.info(
                "Warming up %s (%d iterations)", descriptor.name, config.warmup_iterations
            )
            for _ in range(config.warmup_iterations):
                self._sample(fixture, descriptor, trace=False)

            logger.info(
                "Measuring %s (%d iterations)", descriptor.name, config.iterations
            )
            samples = self._measured_phase(fixture, descriptor)
        except StrategyInvocationError as e:
            logger.warning("Excluding %s from the report: %s", descriptor.name, e)
            return AggregateStat.exclusion(descriptor, str(e))

        stat = AggregateStat.aggregate(descriptor, samples)
        logger.debug("%s: %r", descriptor.name, stat)
        return stat

    def _measured_phase(
        self, fixture: BookDto, descriptor: StrategyDescriptor
    ) -> list[Sample]:
        trace = self.config.memory_diagnoser
        # leave tracing alone if somebody else (python -X tracemalloc) started it
        owns_tracing = trace and not tracemalloc.is_tracing()
        if owns_tracing:
            tracemalloc.start()
        try:
            return [
                self._sample(fixture, descriptor, trace=trace)
                for _ in range(self.config.iterations)
            ]
        finally:
            if owns_tracing:
                tracemalloc.stop()

    def _sample(
        self, fixture: BookDto, descriptor: StrategyDescriptor, trace: bool
    ) -> Sample:
        invoke = descriptor.invoke
        failures = 0
        while True:
            baseline = 0
            if trace:
                tracemalloc.reset_peak()
                baseline = tracemalloc.get_traced_memory()[0]

            try:
                start = perf_counter_ns()
                result = invoke(fixture)
                elapsed = perf_counter_ns() - start
            except Exception as e:
                failures += 1
                if failures > self.config.max_retries:
                    raise StrategyInvocationError(descriptor.name, failures, e) from e
                logger.debug(
                    "%s attempt %d failed, retrying: %s", descriptor.name, failures, e
                )
                continue

            # result stays referenced until the peak is read
            allocated = tracemalloc.get_traced_memory()[1] - baseline if trace else None
            del result
            return Sample(elapsed_ns=elapsed, allocated_bytes=allocated)
