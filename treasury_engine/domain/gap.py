"""Monthly funding gap: what must be billed each month to cover planned outflows"""

from dataclasses import fields
from decimal import Decimal
from typing import Dict, List, Sequence

from treasury_engine.domain.exceptions import (
    InvalidAmountError,
    UnsupportedFrequencyError,
    UnsupportedPaymentPlanTypeError,
)
from treasury_engine.domain.installments import generate_debt_installments, schedule
from treasury_engine.domain.models import (
    DebtInstallmentPlan,
    EventKind,
    GapReport,
    GapTotals,
    MonthlyGapSnapshot,
    RecurringObligation,
    Reliability,
    SalesCommitment,
    SalesStatus,
    SkippedItem,
)
from treasury_engine.domain.money_split import parse_rate, required_gross, round_cents, split
from treasury_engine.domain.recurrence import check_amount, occurrences_by_month

MONTHS = range(1, 13)


def _month_grid() -> Dict[int, int]:
    return {m: 0 for m in MONTHS}


def coverage_percent(available_cents: int, gap_cents: int) -> int:
    """Share of the gap already covered by sales, capped at 100"""
    if gap_cents <= 0:
        return 100
    return min(100, round_cents(Decimal(100 * available_cents) / gap_cents))


class _YearGrid:
    """Per-month accumulators for one aggregation run"""

    def __init__(self):
        self.obligation_outflow = _month_grid()
        self.inflow_gross = _month_grid()
        self.inflow_available = _month_grid()
        self.debt = _month_grid()
        self.sales_gross = _month_grid()
        self.sales_available = _month_grid()
        self.sales_commission = _month_grid()
        self.closed_gross = _month_grid()
        self.closed_available = _month_grid()
        self.sales_count = _month_grid()


def _add_obligations(
    grid: _YearGrid, obligations: Sequence[RecurringObligation], year: int, skipped: List[SkippedItem]
) -> None:
    for obligation in obligations:
        try:
            check_amount(obligation)
            months = occurrences_by_month(obligation, year)
        except (UnsupportedFrequencyError, InvalidAmountError) as e:
            skipped.append(SkippedItem(EventKind.OBLIGATION.value, obligation.id, str(e)))
            continue

        amount = obligation.gross_amount_cents
        if not obligation.is_income:
            for month, count in months.items():
                grid.obligation_outflow[month] += amount * count
            continue

        # Only high-reliability income counts toward the plan
        if obligation.reliability != Reliability.HIGH:
            continue
        available = split(amount).available_amount_cents
        for month, count in months.items():
            grid.inflow_gross[month] += amount * count
            grid.inflow_available[month] += available * count


def _add_debt(
    grid: _YearGrid, debt_plans: Sequence[DebtInstallmentPlan], year: int, skipped: List[SkippedItem]
) -> None:
    for plan in debt_plans:
        if not plan.active:
            continue
        try:
            installments = generate_debt_installments(plan)
        except InvalidAmountError as e:
            skipped.append(SkippedItem(EventKind.DEBT_INSTALLMENT.value, plan.id, str(e)))
            continue
        for inst in installments:
            if not inst.paid and inst.due_date.year == year:
                grid.debt[inst.due_date.month] += inst.amount_cents


def _add_sales(
    grid: _YearGrid, commitments: Sequence[SalesCommitment], year: int, skipped: List[SkippedItem]
) -> None:
    for sale in commitments:
        if sale.status == SalesStatus.LOST:
            continue
        try:
            installments = schedule(
                sale.gross_amount_cents, sale.payment_plan_type, sale.target_month, sale.target_year
            )
            shares = [(inst, split(inst.amount_cents, sale.commission_rate_percent)) for inst in installments]
        except (UnsupportedPaymentPlanTypeError, InvalidAmountError) as e:
            skipped.append(SkippedItem(EventKind.SALES_INSTALLMENT.value, sale.id, str(e)))
            continue

        if sale.target_year == year:
            grid.sales_count[sale.target_month] += 1

        won = sale.status == SalesStatus.WON
        for inst, share in shares:
            # Installments spilling into other years belong to those years
            if inst.year != year:
                continue
            grid.sales_gross[inst.month] += inst.amount_cents
            grid.sales_available[inst.month] += share.available_amount_cents
            grid.sales_commission[inst.month] += share.commission_cents
            if won:
                grid.closed_gross[inst.month] += inst.amount_cents
                grid.closed_available[inst.month] += share.available_amount_cents


def _snapshot(grid: _YearGrid, month: int, year: int, commission_rate_percent) -> MonthlyGapSnapshot:
    outflow = grid.obligation_outflow[month] + grid.debt[month]
    inflow_available = grid.inflow_available[month]
    committed = grid.sales_available[month]

    # Sales are reported as progress against the gap, not netted into it
    gap = max(0, outflow - inflow_available)
    remaining_gap = max(0, gap - committed)

    return MonthlyGapSnapshot(
        month=month,
        year=year,
        expected_outflow_cents=outflow,
        expected_inflow_available_cents=inflow_available,
        debt_installment_cents=grid.debt[month],
        gap_cents=gap,
        required_gross_revenue_cents=required_gross(gap, commission_rate_percent),
        committed_available_cents=committed,
        closed_available_cents=grid.closed_available[month],
        coverage_percent=coverage_percent(committed, gap),
        obligation_outflow_cents=grid.obligation_outflow[month],
        expected_inflow_gross_cents=grid.inflow_gross[month],
        sales_gross_cents=grid.sales_gross[month],
        sales_commission_cents=grid.sales_commission[month],
        closed_gross_cents=grid.closed_gross[month],
        sales_count=grid.sales_count[month],
        remaining_gap_cents=remaining_gap,
        remaining_target_gross_cents=required_gross(remaining_gap, commission_rate_percent),
    )


def year_totals(months: Sequence[MonthlyGapSnapshot]) -> GapTotals:
    """Sum every GapTotals field over the snapshots; coverage is recomputed, not averaged"""
    summed = {
        f.name: sum(getattr(m, f.name) for m in months)
        for f in fields(GapTotals)
        if f.name != "coverage_percent"
    }
    summed["coverage_percent"] = coverage_percent(summed["committed_available_cents"], summed["gap_cents"])
    return GapTotals(**summed)


def aggregate(
    obligations: Sequence[RecurringObligation],
    debt_plans: Sequence[DebtInstallmentPlan],
    sales_commitments: Sequence[SalesCommitment],
    year: int,
    commission_rate_percent=0,
) -> GapReport:
    """
    Build the 12-month funding gap report for a year.

    Per month:
    1. Outflow = expense obligations active that month (checked per month,
       not per due date) + unpaid debt installments
    2. Inflow = available share of high-reliability expected incomes
    3. Sales = installments of every non-lost commitment landing in the month
       (won commitments are also tallied as closed)
    4. gap = max(0, outflow - inflow); the gross revenue needed to cover it
       and the sales coverage percentage are derived from it

    Records that cannot be expanded or scheduled are listed in
    GapReport.skipped and left out; the rest of the report is still built.

    Raises:
        InvalidAmountError: commission rate outside 0-100
        UnreachableTargetError: 100% commission with a non-zero gap
    """
    parse_rate(commission_rate_percent)

    grid = _YearGrid()
    skipped: List[SkippedItem] = []
    _add_obligations(grid, obligations, year, skipped)
    _add_debt(grid, debt_plans, year, skipped)
    _add_sales(grid, sales_commitments, year, skipped)

    months = [_snapshot(grid, m, year, commission_rate_percent) for m in MONTHS]

    return GapReport(
        year=year,
        commission_rate_percent=commission_rate_percent,
        months=months,
        totals=year_totals(months),
        skipped=skipped,
    )
