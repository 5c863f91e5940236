"""Projection operations exposed to the host application"""

import logging
import time
import uuid
from typing import Optional

from treasury_engine.api.v1.schemas import (
    CashProjectionRequest,
    CashProjectionResponse,
    DailyBalanceSchema,
    DebtSummarySchema,
    EventSchema,
    GapReportRequest,
    GapReportResponse,
    SkippedItemSchema,
    SplitRequest,
    SplitResponse,
)
from treasury_engine.domain.cashflow import build_cash_overview
from treasury_engine.domain.exceptions import DomainException
from treasury_engine.domain.gap import aggregate
from treasury_engine.domain.money_split import split, verify_split
from treasury_engine.infrastructure.observability.logging import (
    log_gap_report,
    log_simulation,
    log_skipped_item,
    log_split,
)
from treasury_engine.infrastructure.observability.metrics import (
    projection_duration_histogram,
    record_gap_report,
    record_simulation,
    record_skipped_item,
)


def _report_skipped(request_id: str, skipped) -> None:
    for item in skipped:
        record_skipped_item(item.source_kind)
        log_skipped_item(request_id, item)


def project_cash(request_body: CashProjectionRequest, request_id: Optional[str] = None) -> CashProjectionResponse:
    """
    Project cash over the horizon and find the first insolvency day.

    Flow:
    1. Convert records to domain objects
    2. Expand obligations and debt installments, simulate day by day
    3. Report skipped records, record metrics and log the outcome
    """
    start_time = time.time()
    request_id = request_id or str(uuid.uuid4())

    try:
        overview = build_cash_overview(
            position=request_body.position(),
            obligations=[o.to_domain() for o in request_body.obligations],
            debt_plans=[p.to_domain() for p in request_body.debt_plans],
            horizon_days=request_body.horizon_days,
            settled_keys={s.key() for s in request_body.settled},
        )
    except DomainException as e:
        logging.warning(f"Cash projection rejected: {e}", extra={"request_id": request_id})
        raise

    _report_skipped(request_id, overview.skipped)

    duration = time.time() - start_time
    projection_duration_histogram.labels(operation="cash_projection").observe(duration)
    record_simulation(overview.insolvency_day_offset)
    log_simulation(
        request_id,
        overview.as_of_date.isoformat(),
        overview.horizon_days,
        overview.insolvency_day_offset,
        overview.end_period_balance_cents,
        duration * 1000,
    )

    return CashProjectionResponse(
        as_of_date=overview.as_of_date,
        horizon_days=overview.horizon_days,
        current_balance_cents=overview.current_balance_cents,
        insolvency_day_offset=overview.insolvency_day_offset,
        insolvency_date=overview.insolvency_date,
        end_period_balance_cents=overview.end_period_balance_cents,
        total_expenses_cents=overview.total_expenses_cents,
        total_certain_income_cents=overview.total_certain_income_cents,
        required_revenue_cents=overview.required_revenue_cents,
        status=overview.status,
        upcoming_expenses=[EventSchema.model_validate(e) for e in overview.upcoming_expenses],
        upcoming_incomes=[EventSchema.model_validate(e) for e in overview.upcoming_incomes],
        daily_balances=[DailyBalanceSchema.model_validate(d) for d in overview.simulation.daily_balances],
        debt=DebtSummarySchema.model_validate(overview.debt),
        skipped=[SkippedItemSchema.model_validate(s) for s in overview.skipped],
    )


def report_funding_gap(request_body: GapReportRequest, request_id: Optional[str] = None) -> GapReportResponse:
    """
    Build the yearly funding gap report.

    Returns:
        12 monthly snapshots, year totals and the records left out
    """
    start_time = time.time()
    request_id = request_id or str(uuid.uuid4())

    try:
        report = aggregate(
            obligations=[o.to_domain() for o in request_body.obligations],
            debt_plans=[p.to_domain() for p in request_body.debt_plans],
            sales_commitments=[s.to_domain() for s in request_body.sales_commitments],
            year=request_body.year,
            commission_rate_percent=request_body.commission_rate_percent,
        )
    except DomainException as e:
        logging.warning(f"Gap report rejected: {e}", extra={"request_id": request_id})
        raise

    _report_skipped(request_id, report.skipped)

    duration = time.time() - start_time
    projection_duration_histogram.labels(operation="gap_report").observe(duration)
    record_gap_report(report.totals.required_gross_revenue_cents)
    log_gap_report(
        request_id,
        report.year,
        report.totals.gap_cents,
        report.totals.coverage_percent,
        len(report.skipped),
        duration * 1000,
    )

    return GapReportResponse.model_validate(report)


def split_amount(request_body: SplitRequest, request_id: Optional[str] = None) -> SplitResponse:
    """Split a gross amount into tax reserve, commission, partner shares and available cash"""
    start_time = time.time()
    request_id = request_id or str(uuid.uuid4())

    result = split(request_body.gross_amount_cents, request_body.commission_rate_percent)
    response = SplitResponse.model_validate(result)
    response.balanced = verify_split(result)

    duration = time.time() - start_time
    projection_duration_histogram.labels(operation="split").observe(duration)
    log_split(
        request_id,
        result.gross_amount_cents,
        request_body.commission_rate_percent,
        result.available_amount_cents,
        response.balanced,
        duration * 1000,
    )

    return response
