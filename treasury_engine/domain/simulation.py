"""Day-by-day cash simulation - finds the first day the business runs out of cash"""

from datetime import date, timedelta
from typing import Dict, Iterable, List

from treasury_engine.domain.exceptions import InvalidDateRangeError
from treasury_engine.domain.models import DailyBalance, DatedEvent, Reliability, SimulationResult
from treasury_engine.domain.money_split import split
from treasury_engine.utils.date_utils import generate_date_range


def counts_toward_cash(event: DatedEvent) -> bool:
    """
    Pessimistic eligibility rule.

    - Expenses count until they are paid
    - Incomes count only when high-reliability and not yet received
    """
    if event.settled:
        return False
    if event.is_income:
        return event.reliability == Reliability.HIGH
    return event.amount_cents < 0


def usable_amount(event: DatedEvent) -> int:
    """Signed cash effect: expenses in full, incomes at their available share"""
    if event.is_income:
        return split(event.amount_cents).available_amount_cents
    return event.amount_cents


def simulate(
    starting_balance_cents: int,
    events: Iterable[DatedEvent],
    horizon_days: int,
    as_of_date: date,
) -> SimulationResult:
    """
    Walk the horizon one day at a time and report the first insolvency day.

    Each day's credits and debits are applied together before the balance
    is tested, so same-day ordering never changes the outcome. A day is
    flagged when it carries at least one expense and the balance after it
    is negative. Payments are never blocked: the balance keeps going down
    and only the first flagged day is reported.

    Returns:
        SimulationResult with insolvency offset/date (None when solvent),
        ending balance after the full horizon and the daily balances
    """
    if horizon_days < 0:
        raise InvalidDateRangeError(f"horizon_days must be non-negative, got {horizon_days}")

    # Bucket eligible events by day
    credits_by_date: Dict[date, int] = {}
    debits_by_date: Dict[date, int] = {}
    for event in events:
        if not counts_toward_cash(event):
            continue
        amount = usable_amount(event)
        bucket = credits_by_date if event.is_income else debits_by_date
        bucket[event.date] = bucket.get(event.date, 0) + amount

    running_balance = starting_balance_cents
    insolvency_day = None
    daily_balances: List[DailyBalance] = []

    if horizon_days == 0:
        return SimulationResult(None, None, running_balance, daily_balances)

    last_day = as_of_date + timedelta(days=horizon_days - 1)
    for offset, day in enumerate(generate_date_range(as_of_date, last_day)):
        credits = credits_by_date.get(day, 0)
        debits = debits_by_date.get(day, 0)
        running_balance += credits + debits

        # First occurrence wins
        if insolvency_day is None and day in debits_by_date and running_balance < 0:
            insolvency_day = offset

        daily_balances.append(
            DailyBalance(date=day, credits_cents=credits, debits_cents=debits, balance_cents=running_balance)
        )

    return SimulationResult(
        insolvency_day_offset=insolvency_day,
        insolvency_date=as_of_date + timedelta(days=insolvency_day) if insolvency_day is not None else None,
        ending_balance_cents=running_balance,
        daily_balances=daily_balances,
    )
