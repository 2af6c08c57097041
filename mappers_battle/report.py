"""
Report rendering.

The ranked stats become one static artifact: a matplotlib table image (``.png``,
``.svg``, ``.pdf``, ``.jpg``) or a Markdown table (``.md``, ``.txt``), chosen by the
destination's suffix. Excluded strategies are listed without a rank.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from pydantic import BaseModel, ConfigDict, Field  # noqa: E402

from mappers_battle.config import IMAGE_FORMATS, TEXT_FORMATS  # noqa: E402
from mappers_battle.runner import AggregateStat  # noqa: E402

logger = logging.getLogger(__name__)

NO_DATA = "no data"
EXCLUDED = "excluded"

HEADER_COLOR = "#40466e"
FASTEST_COLOR = "#d9f2d9"
EXCLUDED_COLOR = "#eeeeee"


class RenderError(RuntimeError):
    """The report could not be written to its destination."""

    def __init__(self, destination: Path, reason: str):
        super().__init__(f"Cannot render report to {destination}: {reason}")
        self.destination = destination


class ReportOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(default="Mappers battle Benchmark", min_length=1)
    highlight_fastest: bool = True
    show_allocations: bool = True
    dpi: int = Field(default=150, gt=0)


def format_time(ns: Optional[float]) -> str:
    if ns is None:
        return NO_DATA
    if ns < 1_000:
        return f"{ns:.1f} ns"
    if ns < 1_000_000:
        return f"{ns / 1_000:.3f} μs"
    if ns < 1_000_000_000:
        return f"{ns / 1_000_000:.3f} ms"
    return f"{ns / 1_000_000_000:.3f} s"


def format_bytes(size: Optional[float]) -> str:
    if size is None:
        return "-"
    if size < 1024:
        return f"{size:.0f} B"
    return f"{size / 1024:.2f} KB"


def header(show_allocations: bool = True) -> list[str]:
    columns = ["Rank", "Method", "Ratio", "Mean", "StdDev"]
    if show_allocations:
        columns.append("Allocated")
    columns.append("Samples")
    return columns


def table_rows(
    ranked: Sequence[AggregateStat],
    excluded: Sequence[AggregateStat] = (),
    show_allocations: bool = True,
) -> list[list[str]]:
    """One row per ranked stat, followed by one row per excluded strategy."""
    measured = sorted(
        (stat for stat in ranked if stat.has_data),
        key=lambda stat: (stat.mean_time_ns, stat.index),
    )
    positions = {
        stat.strategy_name: position for position, stat in enumerate(measured, 1)
    }
    fastest = measured[0].mean_time_ns if measured else None

    rows: list[list[str]] = []
    for stat in ranked:
        if stat.has_data:
            ratio = f"{stat.mean_time_ns / fastest:.2f}" if fastest else "-"
            row = [
                str(positions[stat.strategy_name]),
                stat.strategy_name,
                ratio,
                format_time(stat.mean_time_ns),
                format_time(stat.stddev_time_ns),
            ]
        else:
            row = ["-", stat.strategy_name, "-", NO_DATA, "-"]
        if show_allocations:
            row.append(format_bytes(stat.mean_allocated_bytes))
        row.append(str(stat.sample_count))
        rows.append(row)

    for stat in excluded:
        row = ["-", stat.strategy_name, "-", EXCLUDED, "-"]
        if show_allocations:
            row.append("-")
        row.append("0")
        rows.append(row)
    return rows


def row_colors(
    rows: Sequence[Sequence[str]], highlight_fastest: bool = True
) -> list[Optional[str]]:
    """Background of each table row, ``None`` keeps the default."""
    colors: list[Optional[str]] = []
    for row in rows:
        if row[3] == EXCLUDED:
            colors.append(EXCLUDED_COLOR)
        elif highlight_fastest and row[0] == "1":
            colors.append(FASTEST_COLOR)
        else:
            colors.append(None)
    return colors


def format_summary(
    ranked: Sequence[AggregateStat],
    excluded: Sequence[AggregateStat] = (),
    show_allocations: bool = True,
) -> str:
    """Markdown table of the results, also used as the console summary."""
    columns = header(show_allocations)
    rows = table_rows(ranked, excluded, show_allocations)
    if not rows:
        return f"_{NO_DATA}_"

    widths = [
        max(len(cell) for cell in column) for column in zip(columns, *rows)
    ]
    lines = [
        "| " + " | ".join(cell.ljust(width) for cell, width in zip(row, widths)) + " |"
        for row in [columns, *rows]
    ]
    lines.insert(1, "|" + "|".join("-" * (width + 2) for width in widths) + "|")
    return "\n".join(lines)


class ReportRenderer:
    def __init__(self, options: Optional[ReportOptions] = None) -> None:
        self.options = options or ReportOptions()

    def render(
        self,
        ranked: Sequence[AggregateStat],
        destination: str | Path,
        excluded: Iterable[AggregateStat] = (),
    ) -> Path:
        destination = Path(destination)
        suffix = destination.suffix.lower()
        excluded = list(excluded)

        if suffix in IMAGE_FORMATS:
            self._render_image(ranked, excluded, destination)
        elif suffix in TEXT_FORMATS:
            self._render_text(ranked, excluded, destination)
        else:
            raise RenderError(destination, f"unsupported format {suffix or '(none)'!r}")

        logger.info("Report written to %s", destination)
        return destination

    def _render_text(
        self,
        ranked: Sequence[AggregateStat],
        excluded: Sequence[AggregateStat],
        destination: Path,
    ) -> None:
        summary = format_summary(ranked, excluded, self.options.show_allocations)
        try:
            destination.write_text(
                f"# {self.options.title}\n\n{summary}\n", encoding="utf-8"
            )
        except (OSError, ValueError) as e:
            raise RenderError(destination, str(e)) from e

    def _render_image(
        self,
        ranked: Sequence[AggregateStat],
        excluded: Sequence[AggregateStat],
        destination: Path,
    ) -> None:
        options = self.options
        columns = header(options.show_allocations)
        rows = table_rows(ranked, excluded, options.show_allocations)

        fig, ax = plt.subplots(
            figsize=(1.6 * len(columns), 1.2 + 0.4 * (len(rows) + 1))
        )
        try:
            ax.axis("off")
            ax.set_title(options.title, fontweight="bold")

            if rows:
                table = ax.table(
                    cellText=rows, colLabels=columns, loc="center", cellLoc="center"
                )
                table.auto_set_font_size(False)
                table.set_fontsize(10)
                table.scale(1, 1.4)

                for col in range(len(columns)):
                    cell = table[0, col]
                    cell.set_facecolor(HEADER_COLOR)
                    cell.get_text().set_color("white")
                    cell.get_text().set_fontweight("bold")

                colors = row_colors(rows, options.highlight_fastest)
                for row_number, color in enumerate(colors, 1):
                    if color is None:
                        continue
                    for col in range(len(columns)):
                        table[row_number, col].set_facecolor(color)
            else:
                ax.text(
                    0.5, 0.5, NO_DATA, ha="center", va="center", transform=ax.transAxes
                )

            fig.savefig(destination, dpi=options.dpi, bbox_inches="tight")
        except (OSError, ValueError) as e:
            raise RenderError(destination, str(e)) from e
        finally:
            plt.close(fig)
