"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Iterator, List, Tuple

from dateutil.relativedelta import relativedelta


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, pulling day 29-31 back to the last day of short months"""
    return date(year, month, 1) + relativedelta(day=day)


def add_months(from_date: date, months: int) -> date:
    """Same day-of-month N months later, clamped to month end"""
    return from_date + relativedelta(months=months)


def roll_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Shift (year, month) by offset months, carrying into the year"""
    shifted = add_months(date(year, month, 1), offset)
    return shifted.year, shifted.month


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month (days ignored)"""
    delta = relativedelta(end.replace(day=1), start.replace(day=1))
    return delta.years * 12 + delta.months


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month"""
    first = date(year, month, 1)
    return first, first + relativedelta(day=31)


def iter_months(start: date, end: date) -> Iterator[Tuple[int, int]]:
    """Yield (year, month) for every calendar month touched by [start, end]"""
    current = start.replace(day=1)
    while current <= end:
        yield current.year, current.month
        current += relativedelta(months=1)
