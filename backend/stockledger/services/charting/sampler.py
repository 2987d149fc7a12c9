# backend/stockledger/services/charting/sampler.py
"""
Turn a date range into the trading days a chart is drawn at.

The range is first clamped to the ticker's known history. Candidate
dates then come from Granularity.advance and are moved onto the trading
calendar: forward for daily charts, backward for monthly and yearly ones
(so "end of March" means the last trading day of March). The resolved
end of the range is always the final sample.
"""

import logging
from datetime import date

from stockledger.services.charting.date_scale import Granularity, GranularityUnit
from stockledger.services.exceptions import InvalidRangeError, NoDataInRangeError
from stockledger.services.market_data.base import Direction, PriceProvider

logger = logging.getLogger(__name__)


def sample_dates(
        start: date,
        end: date,
        ticker: str,
        granularity: Granularity,
        prices: PriceProvider,
) -> list[date]:
    """
    Ordered, distinct trading dates of `ticker` between start and end.

    Raises:
        InvalidRangeError: start > end
        NoDataInRangeError: The range holds no trading day of the ticker
    """
    if start > end:
        raise InvalidRangeError(start, end)

    oldest, newest = prices.date_bounds(ticker)
    low, high = max(start, oldest), min(end, newest)
    if low > high:
        raise NoDataInRangeError(ticker, start)

    first = prices.get_or_nearest(ticker, low, Direction.FORWARD).date
    last = prices.get_or_nearest(ticker, high, Direction.BACKWARD).date
    if first > last:
        raise NoDataInRangeError(ticker, start)

    direction = Direction.FORWARD if granularity.unit is GranularityUnit.DAY else Direction.BACKWARD

    samples = [first]
    cursor = first
    while True:
        candidate = granularity.advance(cursor, last)
        if candidate >= last:
            break

        resolved = prices.get_or_nearest(ticker, candidate, direction).date
        if samples[-1] < resolved < last:
            samples.append(resolved)

        # A backward walk can land on or before the cursor; step from the
        # candidate instead so the walk always moves on
        cursor = resolved if resolved > cursor else candidate

    if samples[-1] != last:
        samples.append(last)

    logger.debug(
        f"Sampled {len(samples)} dates for {ticker} between {first} and {last} "
        f"({granularity.unit.value} x{granularity.step})"
    )
    return samples
