"""
Dashboard Controller

Fetches the aggregate payload, stores it, and renders the stat tiles,
quick stats, account pills and the four charts from it. The only write
it performs is storing the payload.
"""

from arthik.controllers.base import ClientContext, report_failure
from arthik.models.views import ViewRegion
from arthik.services.api.errors import ApiError
from arthik.services.charts.interface import ChartBackend
from arthik.services.charts.renderer import ChartRenderer
from arthik.views.dashboard import build_dashboard_view


class DashboardController:
    """Dashboard load and render."""

    def __init__(self, ctx: ClientContext, chart_backend: ChartBackend):
        self._ctx = ctx
        self._charts = ChartRenderer(
            ctx.state, chart_backend, currency_symbol=ctx.settings.currency_symbol
        )
        self.compact = False

    @property
    def charts(self) -> ChartRenderer:
        return self._charts

    async def load(self) -> None:
        try:
            payload = await self._ctx.gateway.get_dashboard()
        except ApiError as e:
            report_failure(self._ctx, e, "load dashboard", "Failed to load dashboard data")
            return

        self._ctx.state.set_dashboard(payload)
        self._ctx.audit.log_loaded("dashboard", 1)
        self.render()

    def render(self) -> None:
        """Render tiles and charts from the stored payload. No network."""
        state = self._ctx.state
        payload = state.dashboard
        if payload is None:
            return

        formatter = self._ctx.formatter
        self._ctx.ui.render(ViewRegion.DASHBOARD, build_dashboard_view(state, formatter, payload))
        self._charts.render_all(payload, self._ctx.preferences.current, compact=self.compact)

    def render_account_figures(self) -> None:
        """
        Redraw the parts of the dashboard built from the account list.

        Runs after every accounts load, so pills and the asset chart follow
        the stored accounts even when the dashboard payload arrived first.
        """
        state = self._ctx.state
        if state.dashboard is None:
            return

        self._ctx.ui.render(
            ViewRegion.DASHBOARD,
            build_dashboard_view(state, self._ctx.formatter, state.dashboard),
        )
        self._charts.render_asset_distribution(self._ctx.preferences.current, compact=self.compact)
