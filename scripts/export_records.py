#!/usr/bin/env python3
"""
Export farm records from the stored state document as CSV.

Usage:
    python3 scripts/export_records.py transactions
    python3 scripts/export_records.py egg-sales --output sales.csv
    python3 scripts/export_records.py feed-purchases --database-url sqlite:///farm.db

The database URL and document name come from the active configuration
unless overridden on the command line.
"""

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

import yaml  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from poultry_config import get_active_config  # noqa: E402
from poultry_config.bridges import apply_logging_config, build_state_store  # noqa: E402
from poultry_kernel.domain.clock import SystemClock  # noqa: E402
from poultry_kernel.domain.records import default_state  # noqa: E402
from poultry_kernel.exceptions import PoultryLedgerError  # noqa: E402
from poultry_reports.export import EXPORTERS  # noqa: E402

logger = logging.getLogger("poultry_kernel.scripts.export_records")


def _records(state, kind: str):
    if kind == "transactions":
        return state.transactions
    if kind == "egg-sales":
        return state.egg_sales
    return state.feed_purchases


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Export farm records as CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/export_records.py transactions\n"
            "  python3 scripts/export_records.py egg-sales --output sales.csv\n"
        ),
    )
    parser.add_argument("kind", choices=sorted(EXPORTERS), help="Record kind to export")
    parser.add_argument(
        "--database-url", type=str, default=None,
        help="Database URL (default: storage.database_url from configuration)",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Configuration YAML (default: packaged defaults.yaml)",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Write to this file instead of stdout",
    )
    args = parser.parse_args(argv)

    try:
        config = get_active_config(args.config)
    except (OSError, KeyError, ValueError, yaml.YAMLError) as exc:
        print(f"  ERROR: Invalid configuration: {exc}", file=sys.stderr)
        return 1
    apply_logging_config(config)

    clock = SystemClock()
    try:
        store = build_state_store(config, clock=clock, database_url=args.database_url)
        state = store.get(
            default_state(clock.now(), config.pricing.default_egg_price_per_peti)
        )
    except (PoultryLedgerError, SQLAlchemyError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    text = EXPORTERS[args.kind](_records(state, args.kind))

    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        args.output.write_text(text, encoding="utf-8")
        logger.info(
            "records_exported",
            extra={"kind": args.kind, "output": str(args.output)},
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
