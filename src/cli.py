"""
Command line entry point

    python -m src.cli ledger      # ledger + агрегат + отчёты
    python -m src.cli reconcile   # то же + сверка с пулом

Конфигурация — переменные окружения (и .env в текущем каталоге).
Exit code 1 при расхождении сверки или любой фатальной ошибке.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv

from src.core.config import PipelineConfig
from src.core.errors import PipelineError, ReconciliationMismatchError
from src.pipeline import ContributionPipeline


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sui-contribution-reconciler",
        description="Build a contribution ledger for a Sui address and reconcile it with the pool state",
    )
    parser.add_argument("--env-file", type=Path, default=None, help="Path to .env file")
    parser.add_argument("--output-dir", type=Path, default=None, help="Directory for JSON reports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("ledger", help="Fetch, validate and aggregate contributions")
    subparsers.add_parser("reconcile", help="Also reconcile the aggregate with the on-chain pool")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    load_dotenv(args.env_file or find_dotenv(usecwd=True))

    try:
        config = PipelineConfig.from_env()
        if args.output_dir is not None:
            config = replace(config, output_dir=args.output_dir)

        pipeline = ContributionPipeline(config)
        try:
            if args.command == "reconcile":
                report = pipeline.run()
                logger.info("Funding allowed: %s", report.funding_allowed)
                if not report.funding_allowed:
                    logger.error(
                        "Funding is blocked: ledger total %d, aggregated total %d",
                        report.aggregation.ledger_total,
                        report.aggregation.aggregated_total,
                    )
                    return 1
            else:
                pipeline.run_ledger()
        finally:
            pipeline.close()
    except ReconciliationMismatchError as e:
        logger.error("Reconciliation failed, funding is blocked: %s", e)
        return 1
    except PipelineError as e:
        logger.error("Pipeline aborted: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
