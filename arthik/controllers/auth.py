"""
Auth Controller

Session lifecycle: silent re-entry at startup, login, logout, and the
forced logout the gateway triggers on any 401.

After a login the collections are fetched fresh, in order: accounts first
(the dashboard pills and the transaction dropdowns need them), then the
dashboard, then transactions.
"""

import structlog

from arthik.controllers.accounts import AccountsController
from arthik.controllers.base import ClientContext, report_failure
from arthik.controllers.dashboard import DashboardController
from arthik.controllers.transactions import TransactionsController
from arthik.models.audit import ClientEventBuilder
from arthik.models.views import NoticeLevel, Screen, Tab
from arthik.navigation import NavigationController
from arthik.services.api.errors import ApiError, RateLimitedError


logger = structlog.get_logger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please login again."


class AuthController:
    """Login, logout and session restore."""

    def __init__(
        self,
        ctx: ClientContext,
        navigation: NavigationController,
        accounts: AccountsController,
        dashboard: DashboardController,
        transactions: TransactionsController,
    ):
        self._ctx = ctx
        self._navigation = navigation
        self._accounts = accounts
        self._dashboard = dashboard
        self._transactions = transactions
        self._logging_out = False

    async def start(self) -> bool:
        """
        Restore a stored session, if there is one.

        Returns:
            True if the client resumed on the main screen
        """
        session = self._ctx.state.session
        if session.hydrated:
            return session.is_authenticated()

        if not session.hydrate():
            self._navigation.show_login()
            return False

        self._ctx.audit.log(ClientEventBuilder.session_restored())
        self._navigation.show_main()
        await self._navigation.select_tab(Tab.DASHBOARD, load=False)
        await self.load_initial_data()
        return self._ctx.state.is_authenticated

    async def load_initial_data(self) -> None:
        """Load accounts, dashboard and transactions in order; stop if the session ends."""
        loads = (
            self._accounts.load,
            self._dashboard.load,
            lambda: self._transactions.load(reset_page=True),
        )
        for load in loads:
            if not self._ctx.state.is_authenticated:
                return
            await load()

    async def login(self, password: str) -> bool:
        if not password:
            self._ctx.notify("Please enter a password", NoticeLevel.WARNING)
            return False

        try:
            result = await self._ctx.gateway.login(password)
        except RateLimitedError as e:
            report_failure(self._ctx, e, "login", e.message)
            return False
        except ApiError as e:
            report_failure(self._ctx, e, "login", "Login failed. Please try again.")
            return False

        if not result.success or not result.token:
            message = result.message or result.error or "Invalid password"
            self._ctx.audit.log(ClientEventBuilder.login_rejected(message))
            self._ctx.notify(message, NoticeLevel.ERROR)
            return False

        session = self._ctx.state.session
        session.set_token(result.token)
        if result.csrf_token:
            session.set_csrf_token(result.csrf_token)

        self._ctx.audit.log(ClientEventBuilder.login_succeeded())
        self._navigation.show_main()
        await self._navigation.select_tab(Tab.DASHBOARD, load=False)
        await self.load_initial_data()
        return True

    async def logout(self) -> bool:
        if not self._ctx.ui.confirm("Are you sure you want to logout?"):
            self._ctx.audit.log_cancelled("logout")
            return False

        self._logging_out = True
        try:
            await self._ctx.gateway.logout()
        except ApiError as e:
            logger.info("logout_request_failed", error=str(e))
        finally:
            self._logging_out = False

        self._ctx.audit.log(ClientEventBuilder.logout())
        self._end_session()
        return True

    async def handle_unauthorized(self, path: str = "") -> None:
        """Forced logout, run by the gateway after a 401 cleared the session."""
        if self._logging_out or self._ctx.state.screen == Screen.LOGIN:
            # A logout in progress or a concurrent 401 ends the session instead
            return
        self._ctx.audit.log(ClientEventBuilder.forced_logout(path))
        self._end_session()
        self._ctx.notify(SESSION_EXPIRED_MESSAGE, NoticeLevel.WARNING)

    def _end_session(self) -> None:
        self._ctx.state.reset_state()
        self._ctx.state.set_active_tab(Tab.DASHBOARD)
        self._navigation.show_login()
