"""Main entry point for Windesk"""

import asyncio
import argparse
import json
from pathlib import Path

from config import settings
from core.exceptions import WindeskError
from estimates import EstimateReceiver, calculate_estimate
from utils.log import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Windesk - window installation estimate tools"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Extract an estimate workbook and price it")
    parse_cmd.add_argument("file", type=Path, help="Estimate workbook (.xlsx, .xls, .csv)")
    parse_cmd.add_argument(
        "--supply-cost",
        type=int,
        default=None,
        help="Purchase cost (defaults to the workbook total)"
    )
    parse_cmd.add_argument("--multiplier", type=float, default=settings.PRICE_MULTIPLIER)
    parse_cmd.add_argument("--discount-rate", type=float, default=settings.DEFAULT_DISCOUNT_RATE)
    parse_cmd.add_argument("--extra-discount", type=int, default=0)

    serve_cmd = commands.add_parser("serve", help="Run the API server")
    serve_cmd.add_argument("--host", default="0.0.0.0")
    serve_cmd.add_argument("--port", type=int, default=8000)

    return parser


def run_parse(args) -> int:
    if not args.file.exists():
        print(f"Error: File not found: {args.file}")
        return 1

    try:
        estimate = asyncio.run(EstimateReceiver().parse_file(args.file))
    except WindeskError as e:
        print(f"\n✗ Parse failed: {e}")
        return 1

    supply_cost = estimate.total_sum if args.supply_cost is None else args.supply_cost
    calculation = calculate_estimate(
        total_sum=estimate.total_sum,
        supply_cost=supply_cost,
        total_etc=estimate.total_etc,
        price_multiplier=args.multiplier,
        discount_rate=args.discount_rate,
        extra_discount=args.extra_discount
    )

    print(json.dumps(
        {"estimate": estimate.model_dump(), "calculation": calculation.model_dump()},
        ensure_ascii=False,
        indent=2
    ))
    return 0


def run_serve(args) -> int:
    import uvicorn

    uvicorn.run("web.api:app", host=args.host, port=args.port, log_level=settings.LOG_LEVEL.lower())
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging()
    if args.command == "parse":
        return run_parse(args)
    return run_serve(args)


if __name__ == "__main__":
    exit(main())
