from __future__ import annotations

import random
from pathlib import Path
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from mappers_battle.battle import render_battle, run_battle
from mappers_battle.cli import EXIT_RENDER_ERROR, main
from mappers_battle.config import BattleConfig, OrderPolicy
from mappers_battle.fixture import FixtureGenerationError
from mappers_battle.models import Book
from mappers_battle.report import RenderError
from mappers_battle.schemas import BookDto
from mappers_battle.strategy import StrategyRegistry, strategies


def test_full_battle(tmp_path: Path, quick_config: BattleConfig):
    config = quick_config.model_copy(update={"output_path": tmp_path / "Benchmark.png"})

    result = run_battle(config)
    written = render_battle(result, config)

    assert written == tmp_path / "Benchmark.png"
    assert written.exists()
    assert len(result.ranked) == len(strategies)
    assert result.excluded == []
    means = [stat.mean_time_ns for stat in result.ranked]
    assert means == sorted(means)


def test_seed_gives_the_same_fixture(quick_config: BattleConfig):
    config = quick_config.model_copy(update={"iterations": 0, "warmup_iterations": 0})

    assert run_battle(config).fixture == run_battle(config).fixture


def test_failing_strategy_is_listed_as_excluded(tmp_path: Path):
    registry = StrategyRegistry()
    for descriptor in strategies:
        registry.register(descriptor.name, descriptor.invoke)

    @registry.bless("AlwaysThrows")
    def always_throws(dto: BookDto) -> Book:
        raise ValueError("no author")

    config = BattleConfig(
        iterations=10,
        warmup_iterations=1,
        order_policy=OrderPolicy.DECLARED,
        output_path=tmp_path / "Benchmark.md",
    )

    result = run_battle(config, registry)
    render_battle(result, config)

    assert [stat.strategy_name for stat in result.ranked] == strategies.names
    assert [stat.strategy_name for stat in result.excluded] == ["AlwaysThrows"]
    assert all(stat.sample_count == 10 for stat in result.ranked)

    report = (tmp_path / "Benchmark.md").read_text(encoding="utf-8")
    assert "| AlwaysThrows" in report
    assert "excluded" in report


def test_zero_iterations_render_no_data(tmp_path: Path):
    config = BattleConfig(
        iterations=0, warmup_iterations=0, output_path=tmp_path / "Benchmark.png"
    )

    result = run_battle(config)
    render_battle(result, config)

    assert all(stat.sample_count == 0 for stat in result.stats)
    assert "no data" in result.summary
    assert (tmp_path / "Benchmark.png").exists()


def test_render_failure_keeps_results(tmp_path: Path, quick_config: BattleConfig):
    config = quick_config.model_copy(
        update={"output_path": tmp_path / "missing" / "Benchmark.png"}
    )
    result = run_battle(config)

    with pytest.raises(RenderError):
        render_battle(result, config)

    assert len(result.ranked) == len(strategies)
    assert all(stat.has_data for stat in result.ranked)


def test_broken_random_source_aborts_before_measuring():
    measured: list[BookDto] = []
    registry = StrategyRegistry()

    @registry.bless("Spy")
    def spy(dto: BookDto) -> Book:
        measured.append(dto)
        return dto.to_domain()

    class ExhaustedRandom(random.Random):
        def choice(self, seq):
            raise IndexError("entropy exhausted")

    with pytest.raises(FixtureGenerationError):
        run_battle(BattleConfig(), registry, rng=ExhaustedRandom())

    assert measured == []


class TestCli:
    def test_runs_end_to_end(self, tmp_path: Path):
        destination = tmp_path / "Benchmark.md"

        code = main(
            [
                "--iterations",
                "5",
                "--warmup",
                "1",
                "--seed",
                "3",
                "--order",
                "declared",
                "--title",
                "Battle",
                "--no-memory",
                "--output",
                str(destination),
            ]
        )

        assert code == 0
        report = destination.read_text(encoding="utf-8")
        assert report.startswith("# Battle\n")
        assert "Allocated" not in report
        assert report.index("Reflection") < report.index("Attrgetter")

    def test_relative_output_resolves_against_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        code = main(["--iterations", "2", "--warmup", "0", "--output", "out.md"])

        assert code == 0
        assert (tmp_path / "out.md").exists()

    def test_render_error_exit_code(self, tmp_path: Path):
        code = main(
            [
                "--iterations",
                "2",
                "--warmup",
                "0",
                "--output",
                str(tmp_path / "missing" / "Benchmark.png"),
            ]
        )

        assert code == EXIT_RENDER_ERROR

    def test_unsupported_format_is_rejected_before_measuring(
        self, tmp_path: Path, monkeypatch
    ):
        calls: list[BattleConfig] = []
        monkeypatch.setattr(
            "mappers_battle.cli.run_battle", lambda config: calls.append(config)
        )

        with pytest.raises(SystemExit) as exc_info:
            main(["--output", str(tmp_path / "Benchmark.gif")])

        assert exc_info.value.code == 2
        assert calls == []
        assert list(tmp_path.iterdir()) == []

    def test_gc_and_highlight_can_be_disabled(self, tmp_path: Path, monkeypatch):
        collected: list[int] = []
        monkeypatch.setattr(
            "mappers_battle.runner.gc",
            SimpleNamespace(collect=lambda: collected.append(1) or 0),
        )
        destination = tmp_path / "Benchmark.png"

        code = main(
            [
                "--iterations",
                "2",
                "--warmup",
                "0",
                "--no-gc",
                "--no-highlight",
                "--output",
                str(destination),
            ]
        )

        assert code == 0
        assert collected == []
        assert destination.exists()

    def test_invalid_option_is_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--iterations", "-1"])

        assert exc_info.value.code == 2


def test_default_config():
    config = BattleConfig()

    assert config.iterations == 10_000
    assert config.warmup_iterations == 1_000
    assert config.output_path == Path("Benchmark.png")
    assert config.title == "Mappers battle Benchmark"
    assert config.memory_diagnoser is True
    assert config.order_policy is OrderPolicy.FASTEST_TO_SLOWEST
    assert config.max_retries == 3
    assert config.resolved_output_path == Path.cwd() / "Benchmark.png"


@pytest.mark.parametrize("name", ["Benchmark.gif", "Benchmark", "report.PNG.bak"])
def test_config_rejects_unknown_formats(name: str):
    with pytest.raises(ValidationError):
        BattleConfig(output_path=name)


@pytest.mark.parametrize("name", ["Benchmark.svg", "Benchmark.JPG", "out/report.md"])
def test_config_accepts_known_formats(name: str):
    assert BattleConfig(output_path=name).output_path == Path(name)
