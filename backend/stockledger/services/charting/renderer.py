# backend/stockledger/services/charting/renderer.py
"""
Text bar charts.

A Scale maps a value to a number of symbols: `base` is the value drawn
as a single symbol and every `units_per_symbol` above it adds one more.
Absolute charts start at 0; relative charts start at the smallest value
so that small movements stay visible.

Example output:

    Performance of stock 'AAPL' from 2024-01-01 to 2024-03-31:

    Jan 2024: ******
    Feb 2024: ********
    Mar 2024: *******

    Scale: * = 5
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real

from stockledger.services.constants import CHART_SYMBOL, DEFAULT_CHART_SYMBOLS
from stockledger.services.exceptions import ValidationError


@dataclass(frozen=True)
class Scale:
    """
    Attributes:
        base: Value drawn as one symbol
        units_per_symbol: Value covered by each additional symbol (>= 1)
    """

    base: int
    units_per_symbol: int

    def __post_init__(self) -> None:
        if self.units_per_symbol < 1:
            raise ValueError(f"units_per_symbol must be at least 1, got {self.units_per_symbol}")


def default_scale(
        values: list[Decimal | Real],
        is_absolute: bool,
        max_symbols: int = DEFAULT_CHART_SYMBOLS,
) -> Scale:
    """
    Fit a scale so the largest value takes about `max_symbols` symbols.

    Raises:
        ValidationError: No values to scale
    """
    if not values:
        raise ValidationError("Cannot scale a chart without values", field="values")

    highest = max(values)
    if is_absolute:
        base = 0
        units = math.floor(highest / max_symbols)
    else:
        lowest = min(values)
        base = math.floor(lowest)
        units = math.floor((highest - lowest) / max_symbols)

    return Scale(base=base, units_per_symbol=max(1, units))


def render_row(value: Decimal | Real, scale: Scale, symbol: str = CHART_SYMBOL) -> str:
    """Bar for one value: always at least one symbol."""
    count = math.floor((value - scale.base) / scale.units_per_symbol)
    return symbol * (max(count, 0) + 1)


def render_chart(
        title: str,
        rows: list[tuple[str, Decimal | Real]],
        scale: Scale,
        is_absolute: bool,
        symbol: str = CHART_SYMBOL,
) -> str:
    """
    Full chart text: title, one `label: bar` line per row, then the legend.

    The base value line only appears on relative charts.
    """
    lines = [title, ""]
    lines.extend(f"{label}: {render_row(value, scale, symbol)}" for label, value in rows)
    lines.append("")
    if not is_absolute:
        lines.append(f"Base value: {scale.base}")
    lines.append(f"Scale: {symbol} = {scale.units_per_symbol}")
    return "\n".join(lines)
