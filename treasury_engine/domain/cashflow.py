"""Short-horizon cash overview: survival day, period totals and next payments"""

from datetime import date, timedelta
from typing import Collection, Iterable, List, Optional, Sequence, Tuple

from treasury_engine.config import settings
from treasury_engine.domain.exceptions import (
    InvalidAmountError,
    UnsupportedFrequencyError,
)
from treasury_engine.domain.installments import generate_debt_installments, remaining_debt
from treasury_engine.domain.models import (
    BusinessStatus,
    CashOverview,
    CashPosition,
    DatedEvent,
    DebtInstallmentPlan,
    DebtSummary,
    EventKind,
    FlowDirection,
    Priority,
    RecurringObligation,
    SimulationResult,
    SkippedItem,
)
from treasury_engine.domain.money_split import required_gross
from treasury_engine.domain.recurrence import expand_events
from treasury_engine.domain.simulation import counts_toward_cash, simulate, usable_amount

EventKey = Tuple[str, str, date]


def debt_events(plan: DebtInstallmentPlan, window_start: date, window_end: date) -> List[DatedEvent]:
    """Unpaid installments of an active plan falling in the window, as expense events"""
    if not plan.active:
        return []
    return [
        DatedEvent(
            date=inst.due_date,
            amount_cents=-inst.amount_cents,
            source_id=plan.id,
            source_kind=EventKind.DEBT_INSTALLMENT,
            tags=("debt",),
            label=f"Debt: {plan.creditor}",
            priority=Priority.ESSENTIAL,  # repayment plans are never optional
            direction=FlowDirection.EXPENSE,
        )
        for inst in generate_debt_installments(plan)
        if not inst.paid and window_start <= inst.due_date <= window_end
    ]


def collect_events(
    obligations: Iterable[RecurringObligation],
    debt_plans: Iterable[DebtInstallmentPlan],
    window_start: date,
    window_end: date,
    settled_keys: Collection[EventKey] = (),
) -> Tuple[List[DatedEvent], List[SkippedItem]]:
    """
    Expand obligations and debt plans into the events of a window.

    Events whose key appears in settled_keys are marked as paid/received.
    A record that cannot be expanded is reported as skipped; the others are
    still returned.
    """
    events: List[DatedEvent] = []
    skipped: List[SkippedItem] = []

    for obligation in obligations:
        try:
            events.extend(expand_events(obligation, window_start, window_end))
        except (UnsupportedFrequencyError, InvalidAmountError) as e:
            skipped.append(SkippedItem(EventKind.OBLIGATION.value, obligation.id, str(e)))

    for plan in debt_plans:
        try:
            events.extend(debt_events(plan, window_start, window_end))
        except InvalidAmountError as e:
            skipped.append(SkippedItem(EventKind.DEBT_INSTALLMENT.value, plan.id, str(e)))

    if settled_keys:
        for event in events:
            if event.key in settled_keys:
                event.settled = True

    return events, skipped


def prioritize_expenses(expenses: Iterable[DatedEvent]) -> List[DatedEvent]:
    """Unsettled first, then essential, then largest amount, then earliest date"""
    return sorted(
        expenses,
        key=lambda e: (
            e.settled,
            e.priority != Priority.ESSENTIAL,
            -abs(e.amount_cents),
            e.date,
        ),
    )


def summarize_debt(debt_plans: Iterable[DebtInstallmentPlan]) -> DebtSummary:
    """Totals across active repayment plans"""
    active = [p for p in debt_plans if p.active]
    return DebtSummary(
        total_cents=sum(p.total_amount_cents for p in active),
        remaining_cents=sum(remaining_debt(p) for p in active),
        plans_count=len(active),
        plans_without_schedule=sum(1 for p in active if not p.has_schedule),
    )


def classify_status(simulation: SimulationResult, end_balance_cents: int) -> BusinessStatus:
    """
    Map a projection onto the business phase.

    - defense:        cash runs out inside the defense window (30 days)
    - stabilization:  solvent, but end balance under the threshold (1000.00)
    - growth:         otherwise
    """
    day = simulation.insolvency_day_offset
    if day is not None and day < settings.defense_window_days:
        return BusinessStatus.DEFENSE
    if end_balance_cents < settings.stabilization_threshold_cents:
        return BusinessStatus.STABILIZATION
    return BusinessStatus.GROWTH


def build_cash_overview(
    position: CashPosition,
    obligations: Sequence[RecurringObligation],
    debt_plans: Sequence[DebtInstallmentPlan],
    horizon_days: Optional[int] = None,
    settled_keys: Collection[EventKey] = (),
) -> CashOverview:
    """
    Build the short-horizon cash dashboard.

    Flow:
    1. Expand obligations and unpaid debt installments over the horizon
    2. Simulate the cash day by day
    3. Total unpaid expenses and certain (high-reliability) income
    4. Work out the gross billing needed to end the period at zero or above
    5. Pick the business status and the payments due in the next days
    """
    if horizon_days is None:
        horizon_days = settings.default_horizon_days

    as_of = position.as_of_date
    window_end = as_of + timedelta(days=max(horizon_days - 1, 0))
    if horizon_days > 0:
        events, skipped = collect_events(obligations, debt_plans, as_of, window_end, settled_keys)
    else:
        events, skipped = [], []

    simulation = simulate(position.starting_balance_cents, events, horizon_days, as_of)

    eligible = [e for e in events if counts_toward_cash(e)]
    total_expenses = sum(e.amount_cents for e in eligible if not e.is_income)
    total_certain_income = sum(usable_amount(e) for e in eligible if e.is_income)
    end_balance = simulation.ending_balance_cents

    # Billing needed to bring the end balance back to zero
    required_revenue = required_gross(-end_balance) if end_balance < 0 else 0

    upcoming_end = as_of + timedelta(days=settings.upcoming_window_days)
    upcoming_expenses = prioritize_expenses(
        e for e in events if not e.is_income and not e.settled and e.date <= upcoming_end
    )
    upcoming_incomes = sorted((e for e in events if e.is_income and not e.settled), key=lambda e: e.date)

    return CashOverview(
        as_of_date=as_of,
        horizon_days=horizon_days,
        current_balance_cents=position.starting_balance_cents,
        simulation=simulation,
        total_expenses_cents=total_expenses,
        total_certain_income_cents=total_certain_income,
        end_period_balance_cents=end_balance,
        required_revenue_cents=required_revenue,
        status=classify_status(simulation, end_balance),
        upcoming_expenses=upcoming_expenses[: settings.upcoming_limit],
        upcoming_incomes=upcoming_incomes[: settings.upcoming_limit],
        debt=summarize_debt(debt_plans),
        skipped=skipped,
    )
