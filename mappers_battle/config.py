from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMAGE_FORMATS = {".png", ".svg", ".pdf", ".jpg", ".jpeg"}
TEXT_FORMATS = {".md", ".txt"}


class OrderPolicy(str, Enum):
    FASTEST_TO_SLOWEST = "fastest"
    DECLARED = "declared"


class BattleConfig(BaseModel):
    """Settings of one battle run. Unset options take the defaults below.

    Attributes:
        iterations: Measured invocations per strategy.
        warmup_iterations: Unmeasured invocations run before measuring. They absorb
            SQLAlchemy mapper configuration, cached plans and the interpreter's
            adaptive specialization.
        output_path: Report destination, relative paths resolve against the
            working directory. The suffix picks the format.
        title: Report title.
        memory_diagnoser: Trace allocations of every measured invocation.
        order_policy: Report order, fastest to slowest or declaration order.
        max_retries: Retries of a failing invocation before the strategy is excluded.
        seed: Seed of the fixture's random source, random when unset.
        collect_garbage: Run ``gc.collect()`` between strategies.
        highlight_fastest: Highlight the fastest row of the report.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    iterations: int = Field(default=10_000, ge=0)
    warmup_iterations: int = Field(default=1_000, ge=0)
    output_path: Path = Field(default=Path("Benchmark.png"))
    title: str = Field(default="Mappers battle Benchmark", min_length=1)
    memory_diagnoser: bool = True
    order_policy: OrderPolicy = OrderPolicy.FASTEST_TO_SLOWEST
    max_retries: int = Field(default=3, ge=0)
    seed: Optional[int] = None
    collect_garbage: bool = True
    highlight_fastest: bool = True

    @field_validator("output_path")
    @classmethod
    def known_format(cls, path: Path) -> Path:
        suffix = path.suffix.lower()
        if suffix not in IMAGE_FORMATS | TEXT_FORMATS:
            known = ", ".join(sorted(IMAGE_FORMATS | TEXT_FORMATS))
            raise ValueError(
                f"unsupported report format {suffix or '(none)'!r}, use one of {known}"
            )
        return path

    @property
    def resolved_output_path(self) -> Path:
        if self.output_path.is_absolute():
            return self.output_path
        return Path.cwd() / self.output_path
