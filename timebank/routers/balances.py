from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from timebank.db import get_db
from timebank.errors import ApiError
from timebank.schemas import PeriodBalanceResponse
from timebank.services.balance import calculate_monthly_balance, calculate_period_balance
from timebank.services.store import BalanceStore, SqlBalanceStore

router = APIRouter(prefix="/api/balances", tags=["balances"])
logger = logging.getLogger("timebank.balance")


def get_balance_store(db: Session = Depends(get_db)) -> BalanceStore:
    return SqlBalanceStore(db)


def _log_result(request: Request, result: PeriodBalanceResponse) -> None:
    request.state.employee_id = result.employee_id
    logger.info(
        "balance_computed",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "employee_id": result.employee_id,
            "period_type": result.period_type,
            "period_key": result.period_key.isoformat(),
            "prior_period_key": result.prior_period_key.isoformat(),
            "previous_carry_over": result.previous_carry_over,
            "total_expected": result.total_expected,
            "total_actual": result.total_actual,
            "total_difference": result.total_difference,
            "new_carry_over": result.new_carry_over,
        },
    )


def _log_failure(request: Request, exc: ApiError, **context: object) -> None:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "balance_failed",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "code": exc.code,
            "error_message": exc.message,
            **context,
        },
    )


@router.get("/monthly", response_model=PeriodBalanceResponse)
def get_monthly_balance(
    request: Request,
    name: str = Query(..., min_length=1),
    year: str = Query(...),
    month: str = Query(...),
    store: BalanceStore = Depends(get_balance_store),
) -> PeriodBalanceResponse:
    try:
        result = calculate_monthly_balance(store, employee_name=name, year=year, month=month)
    except ApiError as exc:
        _log_failure(request, exc, period_type="MONTH", year=year, month=month)
        raise
    _log_result(request, result)
    return result


@router.get("/period", response_model=PeriodBalanceResponse)
def get_period_balance(
    request: Request,
    name: str = Query(..., min_length=1),
    year: str = Query(...),
    period_type: str = Query(...),
    period_value: str | None = Query(default=None),
    store: BalanceStore = Depends(get_balance_store),
) -> PeriodBalanceResponse:
    try:
        result = calculate_period_balance(
            store,
            employee_name=name,
            year=year,
            period_type=period_type,
            period_value=period_value,
        )
    except ApiError as exc:
        _log_failure(request, exc, period_type=period_type, year=year, period_value=period_value)
        raise
    _log_result(request, result)
    return result
