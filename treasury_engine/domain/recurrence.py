"""Expansion of recurring obligations into concrete due dates"""

from datetime import date
from typing import Callable, Dict, List

from treasury_engine.domain.exceptions import (
    InvalidAmountError,
    InvalidDateRangeError,
    UnsupportedFrequencyError,
)
from treasury_engine.domain.models import (
    DatedEvent,
    EventKind,
    Frequency,
    MonthTotals,
    RecurringObligation,
)
from treasury_engine.utils.date_utils import clamp_day, iter_months, month_bounds, months_between

# Month offset (from the obligation's first month) -> occurs that month?
MONTH_RULES: Dict[Frequency, Callable[[int], bool]] = {
    Frequency.MONTHLY: lambda offset: True,
    Frequency.QUARTERLY: lambda offset: offset % 3 == 0,
    Frequency.SEMIANNUAL: lambda offset: offset % 6 == 0,
    Frequency.ANNUAL: lambda offset: offset % 12 == 0,
    Frequency.ONE_TIME: lambda offset: offset == 0,
}


def resolve_frequency(value) -> Frequency:
    """Map a raw frequency value onto the known set"""
    try:
        return Frequency(value)
    except ValueError:
        raise UnsupportedFrequencyError(value) from None


def expand(obligation: RecurringObligation, window_start: date, window_end: date) -> List[date]:
    """
    List the due dates of an obligation inside [window_start, window_end].

    Months are counted from the month of valid_from; the due day is the
    anchor day pulled back to the end of short months (31 -> Feb 28/29).
    Dates outside the window or the validity interval are dropped, so a
    reversed validity interval simply yields nothing.

    Raises:
        InvalidDateRangeError: window_end before window_start
        UnsupportedFrequencyError: frequency outside the known set
    """
    if window_end < window_start:
        raise InvalidDateRangeError(f"Window ends ({window_end}) before it starts ({window_start})")

    occurs = MONTH_RULES[resolve_frequency(obligation.frequency)]

    valid_until = obligation.valid_until or window_end
    first = max(obligation.valid_from, window_start)
    last = min(valid_until, window_end)
    if last < first:
        return []

    dates = []
    for year, month in iter_months(first, last):
        offset = months_between(obligation.valid_from, date(year, month, 1))
        if not occurs(offset):
            continue
        due = clamp_day(year, month, obligation.anchor_day)
        if first <= due <= last:
            dates.append(due)

    return dates


def check_amount(obligation: RecurringObligation) -> None:
    if obligation.gross_amount_cents < 0:
        raise InvalidAmountError(
            f"Obligation {obligation.id} has a negative amount: {obligation.gross_amount_cents}"
        )


def expand_events(
    obligation: RecurringObligation, window_start: date, window_end: date
) -> List[DatedEvent]:
    """Expand an obligation into signed events (expenses negative, incomes positive)"""
    check_amount(obligation)
    sign = 1 if obligation.is_income else -1
    tags = (obligation.tag,) if obligation.tag else ()
    return [
        DatedEvent(
            date=due,
            amount_cents=sign * obligation.gross_amount_cents,
            source_id=obligation.id,
            source_kind=EventKind.OBLIGATION,
            tags=tags,
            label=obligation.label,
            reliability=obligation.reliability if obligation.is_income else None,
            priority=None if obligation.is_income else obligation.priority,
            direction=obligation.direction,
        )
        for due in expand(obligation, window_start, window_end)
    ]


def occurrences_by_month(obligation: RecurringObligation, year: int) -> MonthTotals:
    """
    Months (1-12) of a calendar year in which the obligation is active.

    Evaluated per month rather than per due date: a month counts once when
    it lies between valid_from's month and valid_until's month (inclusive)
    and the frequency rule holds for its offset, whatever the anchor day.
    An obligation starting on the 25th with anchor day 5 still counts in
    its first month.
    """
    occurs = MONTH_RULES[resolve_frequency(obligation.frequency)]
    counts: MonthTotals = {}
    for month in range(1, 13):
        month_start, month_end = month_bounds(year, month)
        if month_end < obligation.valid_from:
            continue
        if obligation.valid_until is not None and obligation.valid_until < month_start:
            continue
        if occurs(months_between(obligation.valid_from, month_start)):
            counts[month] = 1
    return counts
