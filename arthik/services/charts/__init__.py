"""
Chart Services Package

The chart backend capability and its Plotly implementation. The dashboard
chart renderer lives in `arthik.services.charts.renderer`.
"""

from arthik.services.charts.interface import (
    ChartBackend,
    ChartConfig,
    ChartKind,
    ChartName,
    ChartSeries,
)
from arthik.services.charts.plotly_backend import PlotlyChart, PlotlyChartBackend

__all__ = [
    "ChartBackend",
    "ChartConfig",
    "ChartKind",
    "ChartName",
    "ChartSeries",
    "PlotlyChart",
    "PlotlyChartBackend",
]
