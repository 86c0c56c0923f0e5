"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end (negative when end precedes start)"""
    return (end - start).days


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length (Jan 31 + 1 -> Feb 28/29)"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def format_gstr3b_period(deadline: date) -> str:
    """
    GSTR-3B filing period in which a reversal for this deadline is reported.

    The reversal falls in the return for the month after the deadline,
    e.g. deadline 2025-06-30 -> "Jul 2025".
    """
    reporting_month = add_months(deadline, 1)
    return f"{MONTH_ABBREVIATIONS[reporting_month.month - 1]} {reporting_month.year}"
