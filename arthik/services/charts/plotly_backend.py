"""
Plotly Chart Backend

Builds Plotly figures from ChartConfig. Handles wrap the figure so a
release can be observed and a released figure is never shown again.
"""

from dataclasses import dataclass, field
from typing import Optional

import plotly.graph_objects as go
import structlog

from arthik.services.charts.interface import (
    ChartBackend,
    ChartConfig,
    ChartKind,
    ChartName,
)


logger = structlog.get_logger(__name__)

LIGHT_GRID = "rgba(0, 0, 0, 0.05)"
DARK_GRID = "rgba(255, 255, 255, 0.08)"


@dataclass
class PlotlyChart:
    """Handle for one rendered Plotly figure."""

    name: ChartName
    figure: Optional[go.Figure]
    message: Optional[str] = None
    released: bool = field(default=False)

    @property
    def is_placeholder(self) -> bool:
        return self.message is not None


class PlotlyChartBackend(ChartBackend):
    """Renders charts as `plotly.graph_objects.Figure` instances."""

    def __init__(self):
        self._live = 0

    @property
    def live_count(self) -> int:
        """Handles rendered and not yet released."""
        return self._live

    def render(self, config: ChartConfig) -> PlotlyChart:
        if config.is_placeholder:
            chart = PlotlyChart(
                name=config.name,
                figure=self._placeholder_figure(config),
                message=config.message,
            )
        else:
            builders = {
                ChartKind.DOUGHNUT: self._pie_figure,
                ChartKind.PIE: self._pie_figure,
                ChartKind.BAR: self._bar_figure,
                ChartKind.LINE: self._line_figure,
            }
            figure = builders[config.kind](config)
            self._apply_layout(figure, config)
            chart = PlotlyChart(name=config.name, figure=figure)

        self._live += 1
        logger.debug("chart_rendered", chart=config.name.value, kind=config.kind.value)
        return chart

    def release(self, handle: PlotlyChart) -> None:
        if handle.released:
            return
        handle.released = True
        handle.figure = None
        self._live -= 1
        logger.debug("chart_released", chart=handle.name.value)

    # =========================================================================
    # FIGURE BUILDERS
    # =========================================================================

    def _pie_figure(self, config: ChartConfig) -> go.Figure:
        series = config.series[0]
        hole = 0.55 if config.kind == ChartKind.DOUGHNUT else 0.0
        return go.Figure(
            data=[
                go.Pie(
                    labels=list(config.labels),
                    values=list(series.values),
                    hole=hole,
                    marker=dict(colors=list(series.colors) or None),
                    sort=False,
                    textinfo="percent",
                    hovertemplate=(
                        f"%{{label}}: {config.currency_symbol} %{{value:,.2f}}"
                        " (%{percent})<extra></extra>"
                    ),
                )
            ]
        )

    def _bar_figure(self, config: ChartConfig) -> go.Figure:
        figure = go.Figure()
        for series in config.series:
            figure.add_trace(
                go.Bar(
                    name=series.label,
                    x=list(config.labels),
                    y=list(series.values),
                    marker_color=series.colors[0] if series.colors else None,
                    hovertemplate=(
                        f"{series.label}: {config.currency_symbol} %{{y:,.2f}}<extra></extra>"
                    ),
                )
            )
        figure.update_layout(barmode="group")
        return figure

    def _line_figure(self, config: ChartConfig) -> go.Figure:
        figure = go.Figure()
        for series in config.series:
            color = series.colors[0] if series.colors else None
            figure.add_trace(
                go.Scatter(
                    name=series.label,
                    x=list(config.labels),
                    y=list(series.values),
                    mode="lines+markers",
                    line=dict(color=color, shape="spline", width=2),
                    fill="tozeroy" if series.fill else None,
                    hovertemplate=(
                        f"{series.label}: {config.currency_symbol} %{{y:,.2f}}<extra></extra>"
                    ),
                )
            )
        figure.update_layout(hovermode="x unified")
        return figure

    def _placeholder_figure(self, config: ChartConfig) -> go.Figure:
        figure = go.Figure()
        figure.add_annotation(
            text=config.message or "",
            x=0.5,
            y=0.5,
            xref="paper",
            yref="paper",
            showarrow=False,
            font=dict(size=14),
        )
        figure.update_layout(
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            margin=dict(l=8, r=8, t=8, b=8),
            template="plotly_dark" if config.dark_mode else "plotly_white",
        )
        return figure

    def _apply_layout(self, figure: go.Figure, config: ChartConfig) -> None:
        grid = DARK_GRID if config.dark_mode else LIGHT_GRID
        font_size = 10 if config.compact else 12
        figure.update_layout(
            template="plotly_dark" if config.dark_mode else "plotly_white",
            margin=dict(t=30, b=10, l=10, r=10),
            font=dict(size=font_size),
            showlegend=config.kind != ChartKind.DOUGHNUT,
            legend=dict(orientation="h" if config.compact else "v"),
        )
        if config.kind in (ChartKind.BAR, ChartKind.LINE):
            figure.update_yaxes(
                rangemode="tozero",
                tickprefix=f"{config.currency_symbol} ",
                gridcolor=grid,
            )
            figure.update_xaxes(
                showgrid=False,
                tickangle=-45 if config.compact else 0,
            )
