from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from mappers_battle.battle import render_battle, run_battle
from mappers_battle.config import BattleConfig, OrderPolicy
from mappers_battle.fixture import FixtureGenerationError
from mappers_battle.report import RenderError

logger = logging.getLogger(__name__)

EXIT_RENDER_ERROR = 1
EXIT_FIXTURE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mappers-battle",
        description="Benchmark object mappers copying a BookDto into its domain model.",
    )
    parser.add_argument(
        "--iterations", type=int, help="measured invocations per strategy"
    )
    parser.add_argument(
        "--warmup",
        type=int,
        dest="warmup_iterations",
        help="warm-up invocations per strategy",
    )
    parser.add_argument(
        "--output",
        type=Path,
        dest="output_path",
        help="report path, the suffix picks the format",
    )
    parser.add_argument("--title", help="report title")
    parser.add_argument(
        "--no-memory",
        action="store_false",
        dest="memory_diagnoser",
        default=None,
        help="skip allocation tracing",
    )
    parser.add_argument(
        "--order",
        dest="order_policy",
        choices=[policy.value for policy in OrderPolicy],
        help="report order",
    )
    parser.add_argument(
        "--max-retries", type=int, help="retries of a failing invocation"
    )
    parser.add_argument("--seed", type=int, help="seed of the fixture's random source")
    parser.add_argument(
        "--no-gc",
        action="store_false",
        dest="collect_garbage",
        default=None,
        help="no gc.collect() between strategies",
    )
    parser.add_argument(
        "--no-highlight",
        action="store_false",
        dest="highlight_fastest",
        default=None,
        help="do not highlight the fastest row",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def parse_config(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> BattleConfig:
    overrides = {
        name: value
        for name, value in vars(args).items()
        if name != "verbose" and value is not None
    }
    try:
        return BattleConfig(**overrides)
    except ValidationError as e:
        parser.error(str(e))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = parse_config(parser, args)

    try:
        result = run_battle(config)
    except FixtureGenerationError as e:
        logger.error("Aborting before measurement: %s", e)
        return EXIT_FIXTURE_ERROR

    try:
        render_battle(result, config)
    except RenderError as e:
        logger.error("%s (results above are still valid)", e)
        return EXIT_RENDER_ERROR
    return 0
