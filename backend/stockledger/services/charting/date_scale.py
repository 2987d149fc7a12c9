# backend/stockledger/services/charting/date_scale.py
"""
Chart granularity: how far apart the rows of a chart are.

The span of the requested range picks a unit (day, month, year) and a
step so that a chart comes out at roughly 20 rows:

    span <= 5 days         every day
    span <= 150 days       every span/20 days
    span < 900 days        every month
    span < 1825 days       every span/600 months
    span < 10950 days      every year
    otherwise              every span/7300 years

Month and year steps land on the last day of the month or year, which is
what the row labels ("Mar 2024", "2024") describe.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from stockledger.services.constants import (
    DAILY_SPAN_LIMIT,
    MONTHLY_SPAN_LIMIT,
    STEPPED_DAILY_SPAN_LIMIT,
    STEPPED_MONTHLY_SPAN_LIMIT,
    TARGET_CHART_ROWS,
    YEARLY_SPAN_LIMIT,
)
from stockledger.services.exceptions import InvalidRangeError
from stockledger.utils.date_utils import (
    add_months,
    add_years,
    last_day_of_month,
    last_day_of_year,
)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class GranularityUnit(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class Granularity:
    """
    A sampling resolution: `step` units between consecutive chart rows.

    Attributes:
        unit: DAY, MONTH or YEAR
        step: Number of units per row, at least 1
    """

    unit: GranularityUnit
    step: int = 1

    def __post_init__(self) -> None:
        if self.step < 1:
            raise ValueError(f"step must be at least 1, got {self.step}")

    def advance(self, current: date, end: date) -> date:
        """
        Next candidate date after `current`, never past `end`.

        Month and year steps snap to the last day of the month/year reached.
        """
        if self.unit is GranularityUnit.DAY:
            candidate = current + timedelta(days=self.step)
        elif self.unit is GranularityUnit.MONTH:
            candidate = last_day_of_month(add_months(current, self.step))
        else:
            candidate = last_day_of_year(add_years(current, self.step))
        return min(candidate, end)


def choose_granularity(start: date, end: date) -> Granularity:
    """
    Pick the granularity for charting [start, end].

    Raises:
        InvalidRangeError: start > end
    """
    if start > end:
        raise InvalidRangeError(start, end)

    span = (end - start).days

    if span <= DAILY_SPAN_LIMIT:
        return Granularity(GranularityUnit.DAY, 1)
    if span <= STEPPED_DAILY_SPAN_LIMIT:
        return Granularity(GranularityUnit.DAY, max(1, span // TARGET_CHART_ROWS))
    if span < MONTHLY_SPAN_LIMIT:
        return Granularity(GranularityUnit.MONTH, 1)
    if span < STEPPED_MONTHLY_SPAN_LIMIT:
        return Granularity(GranularityUnit.MONTH, max(1, span // 30 // TARGET_CHART_ROWS))
    if span < YEARLY_SPAN_LIMIT:
        return Granularity(GranularityUnit.YEAR, 1)
    return Granularity(GranularityUnit.YEAR, max(1, span // 365 // TARGET_CHART_ROWS))


def format_label(granularity: Granularity, d: date) -> str:
    """
    Row label for a sample date.

    Example:
        YEAR  -> "2024"
        MONTH -> "Jan 2024"
        DAY   -> "Jan 5, 2024"
    """
    month = MONTH_ABBREVIATIONS[d.month - 1]
    if granularity.unit is GranularityUnit.YEAR:
        return str(d.year)
    if granularity.unit is GranularityUnit.MONTH:
        return f"{month} {d.year}"
    return f"{month} {d.day}, {d.year}"
