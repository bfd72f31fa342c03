"""Tests for chart rendering and the chart handle registry."""

import pytest
from datetime import date
from decimal import Decimal

from arthik.models.entities import Account, AccountCategory, DashboardPayload, MonthlyReport
from arthik.models.preferences import Accent, ACCENT_PALETTES, Preferences
from arthik.services.charts import ChartConfig, ChartKind, ChartName, ChartSeries, PlotlyChartBackend
from arthik.services.charts.renderer import (
    ASSETS_EMPTY,
    BUDGET_EMPTY,
    MONTHLY_OVERVIEW_EMPTY,
    ChartRenderer,
)
from arthik.services.storage import MemoryStorage
from arthik.state import AppState, SessionStore

from conftest import login


PREFS = Preferences()


@pytest.fixture
def state(charts) -> AppState:
    return AppState(SessionStore(MemoryStorage()), charts)


@pytest.fixture
def renderer(state, charts) -> ChartRenderer:
    return ChartRenderer(state, charts)


class TestChartRegistry:
    """Tests for handle ownership."""

    def test_double_render_leaves_one_handle_per_chart(self, renderer, state, charts):
        """Test rendering all charts twice leaves exactly four live handles."""
        payload = DashboardPayload(month_income=Decimal("100"), month_expenses=Decimal("40"))
        renderer.render_all(payload, PREFS)
        renderer.render_all(payload, PREFS)

        assert len(charts.rendered) == 8
        assert len(charts.live) == 4
        assert set(state.live_charts()) == set(ChartName)

    @pytest.mark.asyncio
    async def test_dashboard_reload_does_not_leak(self, client, charts):
        """Test repeated dashboard loads keep one handle per chart."""
        await login(client)
        await client.dashboard.load()
        await client.dashboard.load()

        assert len(charts.live) == len(ChartName)


class TestChartData:
    """Tests for the data each chart is given."""

    def test_monthly_overview_placeholder(self, renderer, state):
        """Test zero income and expenses render the hint."""
        renderer.render_monthly_overview(DashboardPayload(), PREFS)
        handle = state.get_chart(ChartName.MONTHLY_OVERVIEW)
        assert handle.config.kind == ChartKind.PLACEHOLDER
        assert handle.config.message == MONTHLY_OVERVIEW_EMPTY

    def test_monthly_overview_clamps_negative_savings(self, renderer, state):
        """Test negative savings show as zero in the doughnut."""
        payload = DashboardPayload(
            month_income=Decimal("100"),
            month_expenses=Decimal("150"),
            month_savings=Decimal("-50"),
        )
        renderer.render_monthly_overview(payload, PREFS)
        config = state.get_chart(ChartName.MONTHLY_OVERVIEW).config
        assert config.kind == ChartKind.DOUGHNUT
        assert config.series[0].values == (100.0, 150.0, 0.0)

    def test_budget_placeholder(self, renderer, state):
        """Test no budget rows render the hint."""
        renderer.render_budget(DashboardPayload(), PREFS)
        assert state.get_chart(ChartName.BUDGET).config.message == BUDGET_EMPTY

    def test_progress_uses_last_six_points(self, renderer, state):
        """Test only the most recent six history points are drawn."""
        history = [
            MonthlyReport(date=f"2024-{month:02d}-01", net_worth=Decimal(month * 100))
            for month in range(1, 10)
        ]
        renderer.render_progress(DashboardPayload(historical_data=history), PREFS)
        config = state.get_chart(ChartName.PROGRESS).config
        assert config.labels == ("Apr 2024", "May 2024", "Jun 2024", "Jul 2024", "Aug 2024", "Sep 2024")
        assert config.series[0].values[-1] == 900.0

    def test_progress_without_history_uses_today(self, renderer, state):
        """Test an empty history becomes one point from current figures."""
        payload = DashboardPayload(net_worth=Decimal("1234"), total_liabilities=Decimal("10"))
        renderer.render_progress(payload, PREFS, today=date(2024, 3, 20))
        config = state.get_chart(ChartName.PROGRESS).config
        assert config.labels == ("Mar 2024",)
        assert config.series[0].values == (1234.0,)
        assert config.series[1].values == (10.0,)

    def test_asset_distribution_uses_positive_assets(self, renderer, state):
        """Test only Assets with a positive balance are included."""
        state.set_accounts([
            Account(name="Bank", category=AccountCategory.ASSETS, current_balance=Decimal("500")),
            Account(name="Empty", category=AccountCategory.ASSETS, current_balance=Decimal("0")),
            Account(name="Card", category=AccountCategory.LIABILITIES, current_balance=Decimal("90")),
        ])
        prefs = Preferences(accent=Accent.TEAL)
        renderer.render_asset_distribution(prefs)
        config = state.get_chart(ChartName.ASSET_DISTRIBUTION).config
        assert config.labels == ("Bank",)
        assert config.series[0].colors == (ACCENT_PALETTES[Accent.TEAL][0],)

    def test_asset_distribution_placeholder(self, renderer, state):
        """Test no positive assets render the hint."""
        renderer.render_asset_distribution(PREFS)
        assert state.get_chart(ChartName.ASSET_DISTRIBUTION).config.message == ASSETS_EMPTY


class TestPlotlyBackend:
    """Tests for the Plotly adapter."""

    def test_renders_figure(self):
        """Test a bar config becomes a figure with one trace per series."""
        backend = PlotlyChartBackend()
        config = ChartConfig(
            name=ChartName.BUDGET,
            kind=ChartKind.BAR,
            labels=("Food", "Rent"),
            series=(
                ChartSeries(label="Budget", values=(100.0, 200.0)),
                ChartSeries(label="Actual", values=(80.0, 200.0)),
            ),
        )
        chart = backend.render(config)
        assert len(chart.figure.data) == 2
        assert backend.live_count == 1

    def test_placeholder_carries_message(self):
        """Test a placeholder figure keeps its hint."""
        backend = PlotlyChartBackend()
        chart = backend.render(ChartConfig(
            name=ChartName.BUDGET, kind=ChartKind.PLACEHOLDER, message=BUDGET_EMPTY,
        ))
        assert chart.is_placeholder
        assert chart.message == BUDGET_EMPTY

    def test_release_is_idempotent(self):
        """Test releasing twice counts once and drops the figure."""
        backend = PlotlyChartBackend()
        chart = backend.render(ChartConfig(
            name=ChartName.PROGRESS, kind=ChartKind.LINE, labels=("Mar 2024",),
            series=(ChartSeries(label="Net Worth", values=(1.0,)),),
        ))
        backend.release(chart)
        backend.release(chart)
        assert chart.figure is None
        assert backend.live_count == 0
