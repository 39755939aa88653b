#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from timebank.db import SessionLocal
from timebank.errors import ApiError
from timebank.logging_utils import setup_json_logging
from timebank.services.recalculation import recalculate_months
from timebank.services.store import SqlBalanceStore
from timebank.settings import get_settings

logger = logging.getLogger("timebank.recalculation")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recompute monthly balances so the carry-over chain is rebuilt in order.")
    parser.add_argument("--name", required=True, help="Employee name (case-insensitive)")
    parser.add_argument("--year", required=True)
    parser.add_argument("--first-month", default="1")
    parser.add_argument("--last-month", default="12")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict[str, Any]:
    report: dict[str, Any] = {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "employee": args.name,
        "year": args.year,
        "months": [],
    }
    db = SessionLocal()
    try:
        results = recalculate_months(
            SqlBalanceStore(db),
            employee_name=args.name,
            year=args.year,
            first_month=args.first_month,
            last_month=args.last_month,
        )
    finally:
        db.close()

    for result in results:
        logger.info(
            "balance_recalculated",
            extra={
                "employee_id": result.employee_id,
                "period_key": result.period_key.isoformat(),
                "total_difference": result.total_difference,
                "new_carry_over": result.new_carry_over,
            },
        )
        report["months"].append(
            {
                "period_key": result.period_key.isoformat(),
                "previous_carry_over": result.previous_carry_over,
                "total_expected": result.total_expected,
                "total_actual": result.total_actual,
                "total_difference": result.total_difference,
                "new_carry_over": result.new_carry_over,
            }
        )
    return report


def main(argv: list[str] | None = None) -> int:
    setup_json_logging(get_settings().log_level)
    args = parse_args(argv)
    try:
        report = run(args)
    except ApiError as exc:
        logger.error("balance_recalculation_failed", extra={"code": exc.code, "error_message": exc.message})
        print(json.dumps({"error": {"code": exc.code, "message": exc.message}}, ensure_ascii=False, indent=2))
        return 1
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
