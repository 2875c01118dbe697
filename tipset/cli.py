"""Command-line entry point.

Usage:
    tipset optimize stryktipset --half 2 --full 1
    tipset optimize stryktipset --file draw.json --half 3 --full 0 --seed 7
    tipset sweep europatipset --target 2:1 --target 4:0 --seed 1
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from tipset.config import settings
from tipset.formatters import format_round, format_system
from tipset.models import RoundDataError, TipsetError, stake_cost
from tipset.optimizer import OptimizerConfig, optimize, optimize_targets
from tipset.rounds import PRODUCTS, Round, RoundClient, parse_draw

logger = logging.getLogger(__name__)


async def load_round(product: str, path: str | None = None) -> Round:
    """Read a saved draws response from disk, or fetch the live one."""
    if path:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RoundDataError(f"Cannot read draw file {path}: {e}") from e
        return parse_draw(data)

    async with RoundClient(settings.api_base_url, timeout=settings.http_timeout) as client:
        return await client.fetch_round(product)


def _parse_target(value: str) -> tuple[int, int]:
    try:
        half, full = value.split(":")
        return int(half), int(full)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Target must look like HALF:FULL, got {value!r}")


def _config_from_args(args) -> OptimizerConfig:
    config = OptimizerConfig.from_settings(settings)
    if args.iterations is not None:
        config.max_iterations = args.iterations
    if args.seed is not None:
        config.seed = args.seed
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tipset",
        description="Find the highest expected value hedged system for a 1X2 pool",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("product", choices=sorted(PRODUCTS))
    common.add_argument("--file", default=None, help="Saved draws JSON instead of the live API")
    common.add_argument("--iterations", type=int, default=None, help="Annealing iterations")
    common.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    common.add_argument("--json", action="store_true", help="Print results as JSON")

    opt = sub.add_parser("optimize", parents=[common], help="Optimize one hedge budget")
    opt.add_argument("--half", type=int, default=0, help="Number of half hedges")
    opt.add_argument("--full", type=int, default=0, help="Number of full hedges")

    sweep = sub.add_parser("sweep", parents=[common], help="Optimize several hedge budgets")
    sweep.add_argument(
        "--target", type=_parse_target, action="append", required=True,
        help="HALF:FULL hedge budget, repeatable",
    )
    return parser


async def run(args) -> int:
    draw = await load_round(args.product, args.file)
    config = _config_from_args(args)

    if args.command == "optimize":
        result = await asyncio.to_thread(
            optimize, draw.events, draw.turnover, args.half, args.full, config,
        )
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(format_round(draw))
            print()
            print(format_system(result, draw.events))
        return 0

    results = await optimize_targets(draw.events, draw.turnover, args.target, config)
    if args.json:
        print(json.dumps([r.to_dict() for r in results.values()], indent=2))
        return 0

    print(format_round(draw))
    for (half, full), result in sorted(results.items(), key=lambda kv: -kv[1].expected_value):
        print()
        print(f"== half={half} full={full} ({stake_cost(half, full)} kr)")
        print(format_system(result, draw.events))
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except TipsetError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
