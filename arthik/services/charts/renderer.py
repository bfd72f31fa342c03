"""
Chart Renderer

Shapes dashboard data into one ChartConfig per chart slot and installs the
rendered handle in the state store. Installing goes through
`AppState.set_chart`, which releases the slot's previous handle, so
rendering any chart any number of times leaves exactly one live widget
per slot.

Empty data still renders: a placeholder chart carrying a hint message
takes the slot.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from arthik.models.entities import AccountCategory, DashboardPayload, MonthlyReport
from arthik.models.preferences import Preferences
from arthik.services.charts.interface import (
    ChartBackend,
    ChartConfig,
    ChartKind,
    ChartName,
    ChartSeries,
)
from arthik.state.store import AppState
from arthik.views.formatting import format_month


logger = structlog.get_logger(__name__)

MONTHLY_OVERVIEW_EMPTY = "Add transactions to see your monthly overview"
BUDGET_EMPTY = "Set budgets in expense accounts to see comparison"
ASSETS_EMPTY = "Add assets to see distribution"

PROGRESS_POINTS = 6

GREEN = "rgba(76, 175, 80, 0.8)"
RED = "rgba(244, 67, 54, 0.8)"
ORANGE = "rgba(255, 152, 0, 0.8)"
BLUE = "rgba(66, 165, 245, 0.6)"


class ChartRenderer:
    """Renders the four dashboard charts into the store's registry."""

    def __init__(
        self,
        state: AppState,
        backend: ChartBackend,
        currency_symbol: str = "Rs",
    ):
        self._state = state
        self._backend = backend
        self._currency_symbol = currency_symbol

    def _config(self, name: ChartName, kind: ChartKind, preferences: Preferences, compact: bool, **fields) -> ChartConfig:
        return ChartConfig(
            name=name,
            kind=kind,
            currency_symbol=self._currency_symbol,
            dark_mode=preferences.dark_mode,
            compact=compact,
            **fields,
        )

    def _placeholder(self, name: ChartName, message: str, preferences: Preferences) -> ChartConfig:
        return self._config(name, ChartKind.PLACEHOLDER, preferences, False, message=message)

    def _install(self, config: ChartConfig) -> None:
        handle = self._backend.render(config)
        self._state.set_chart(config.name, handle)

    # =========================================================================
    # CHARTS
    # =========================================================================

    def render_monthly_overview(
        self,
        payload: DashboardPayload,
        preferences: Preferences,
        compact: bool = False,
    ) -> None:
        """Income / expenses / savings doughnut for the current month."""
        name = ChartName.MONTHLY_OVERVIEW
        if payload.month_income == 0 and payload.month_expenses == 0:
            self._install(self._placeholder(name, MONTHLY_OVERVIEW_EMPTY, preferences))
            return

        savings = max(Decimal("0"), payload.month_savings)
        self._install(self._config(
            name,
            ChartKind.DOUGHNUT,
            preferences,
            compact,
            labels=("Income", "Expenses", "Savings"),
            series=(ChartSeries(
                values=(float(payload.month_income), float(payload.month_expenses), float(savings)),
                colors=(GREEN, RED, ORANGE),
            ),),
        ))

    def render_budget(
        self,
        payload: DashboardPayload,
        preferences: Preferences,
        compact: bool = False,
    ) -> None:
        """Budget vs actual spend per expense account."""
        name = ChartName.BUDGET
        items = payload.budget_vs_expenses
        if not items:
            self._install(self._placeholder(name, BUDGET_EMPTY, preferences))
            return

        self._install(self._config(
            name,
            ChartKind.BAR,
            preferences,
            compact,
            labels=tuple(item.category for item in items),
            series=(
                ChartSeries(
                    label="Budget",
                    values=tuple(float(item.budget) for item in items),
                    colors=(BLUE,),
                ),
                ChartSeries(
                    label="Actual",
                    values=tuple(float(item.actual) for item in items),
                    colors=(ORANGE,),
                ),
            ),
        ))

    def render_progress(
        self,
        payload: DashboardPayload,
        preferences: Preferences,
        compact: bool = False,
        today: Optional[date] = None,
    ) -> None:
        """
        Net worth, liabilities and savings over the last six months.

        With no history yet, a single point for today is built from the
        current figures.
        """
        history = list(payload.historical_data[-PROGRESS_POINTS:])
        if not history:
            history = [MonthlyReport(
                date=(today or date.today()).isoformat(),
                net_worth=payload.net_worth,
                liabilities=payload.total_liabilities,
                savings=payload.month_savings,
            )]

        self._install(self._config(
            ChartName.PROGRESS,
            ChartKind.LINE,
            preferences,
            compact,
            labels=tuple(format_month(point.date) for point in history),
            series=(
                ChartSeries(
                    label="Net Worth",
                    values=tuple(float(p.net_worth) for p in history),
                    colors=(GREEN,),
                    fill=True,
                ),
                ChartSeries(
                    label="Liabilities",
                    values=tuple(float(p.liabilities) for p in history),
                    colors=(RED,),
                ),
                ChartSeries(
                    label="Monthly Savings",
                    values=tuple(float(p.savings) for p in history),
                    colors=(ORANGE,),
                ),
            ),
        ))

    def render_asset_distribution(
        self,
        preferences: Preferences,
        compact: bool = False,
    ) -> None:
        """Pie of Assets accounts with a positive balance, from the store."""
        name = ChartName.ASSET_DISTRIBUTION
        assets = [
            a for a in self._state.accounts
            if a.category == AccountCategory.ASSETS and a.current_balance > 0
        ]
        if not assets:
            self._install(self._placeholder(name, ASSETS_EMPTY, preferences))
            return

        palette = preferences.palette
        self._install(self._config(
            name,
            ChartKind.PIE,
            preferences,
            compact,
            labels=tuple(a.name for a in assets),
            series=(ChartSeries(
                values=tuple(float(a.current_balance) for a in assets),
                colors=tuple(palette[i % len(palette)] for i in range(len(assets))),
            ),),
        ))

    def render_all(
        self,
        payload: DashboardPayload,
        preferences: Preferences,
        compact: bool = False,
    ) -> None:
        self.render_monthly_overview(payload, preferences, compact)
        self.render_budget(payload, preferences, compact)
        self.render_progress(payload, preferences, compact)
        self.render_asset_distribution(preferences, compact)
        logger.debug("charts_rendered", live=len(self._state.live_charts()))
