"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Tuple

from dateutil.relativedelta import relativedelta

DAYS_PER_MONTH = 30


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of a month (both inclusive)"""
    first = date(year, month, 1)
    return first, first + relativedelta(day=31)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day to the month length"""
    return from_date + relativedelta(months=months)


def with_day(month_date: date, day: int) -> date:
    """Same month, given day of month (clamped to the last day)"""
    return month_date + relativedelta(day=day)


def months_elapsed(start: date, as_of: date) -> int:
    """Whole 30-day months between two dates, never negative"""
    return max(0, (as_of - start).days // DAYS_PER_MONTH)


def add_thirty_day_months(from_date: date, months: int) -> date:
    """Approximate payoff date: every month counts as 30 days"""
    return from_date + timedelta(days=months * DAYS_PER_MONTH)


def parse_month(value: str) -> date:
    """Parse YYYY-MM (or a full ISO date) into the first day of that month"""
    if len(value) == 7:
        value = f"{value}-01"
    return start_of_month(date.fromisoformat(value))
