# backend/stockledger/utils/date_utils.py
"""
Date utility functions for Stock Ledger.

Centralizes calendar arithmetic and ISO-8601 parsing so the ledger,
the valuation calculators and the chart sampler agree on one date model.
Dates are always `datetime.date`; the `yyyy-MM-dd` string form only
appears at the edges (CSV files, API payloads, crossover results).

Usage:
    from stockledger.utils.date_utils import parse_iso_date, add_months

    d = parse_iso_date("2024-01-31")
    add_months(d, 1)  # date(2024, 2, 29)
"""

import calendar
from datetime import date

ISO_DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: str | date) -> date:
    """
    Parse a `yyyy-MM-dd` string into a date.

    Dates pass through unchanged so callers can accept either form.

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid date: '{value}'. Expected format yyyy-MM-dd")


def format_iso_date(d: date) -> str:
    """Format a date as `yyyy-MM-dd` (zero padded)."""
    return d.strftime(ISO_DATE_FORMAT)


def last_day_of_month(d: date) -> date:
    """Return the last calendar day of d's month."""
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def last_day_of_year(d: date) -> date:
    """Return December 31 of d's year."""
    return d.replace(month=12, day=31)


def add_months(d: date, months: int) -> date:
    """
    Add a number of months, clamping the day to the target month's length.

    Example:
        >>> add_months(date(2024, 1, 31), 1)
        date(2024, 2, 29)
    """
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_years(d: date, years: int) -> date:
    """Add a number of years; February 29 becomes February 28 when needed."""
    return add_months(d, 12 * years)

