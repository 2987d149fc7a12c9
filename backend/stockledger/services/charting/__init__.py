# backend/stockledger/services/charting/__init__.py
"""
Text performance charts.

Usage:
    from stockledger.services.charting import PerformanceChartService

Architecture:
    charting/
    ├── date_scale.py   # Granularity, choose_granularity, format_label
    ├── sampler.py      # sample_dates (trading-calendar walk)
    ├── renderer.py     # Scale, default_scale, render_row, render_chart
    └── service.py      # PerformanceChartService, ChartResult
"""

from stockledger.services.charting.date_scale import (
    Granularity,
    GranularityUnit,
    MONTH_ABBREVIATIONS,
    choose_granularity,
    format_label,
)
from stockledger.services.charting.renderer import (
    Scale,
    default_scale,
    render_chart,
    render_row,
)
from stockledger.services.charting.sampler import sample_dates
from stockledger.services.charting.service import (
    ChartResult,
    ChartRow,
    PerformanceChartService,
)

__all__ = [
    "Granularity",
    "GranularityUnit",
    "MONTH_ABBREVIATIONS",
    "choose_granularity",
    "format_label",
    "Scale",
    "default_scale",
    "render_chart",
    "render_row",
    "sample_dates",
    "ChartResult",
    "ChartRow",
    "PerformanceChartService",
]
