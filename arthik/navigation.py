"""
Navigation

The tab state machine of the main screen and the login/main screen switch.

Tabs: dashboard (initial), ledger, accounts, planner. Selecting a tab
activates it in the UI, records it in the store and runs its load routine:

    dashboard -> dashboard
    ledger    -> back to page 1, transactions
    accounts  -> accounts
    planner   -> recurrences and notes, concurrently

Window resizes are debounced and reload the dashboard, but only while the
dashboard tab is showing and the session is authenticated.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from arthik.controllers.accounts import AccountsController
from arthik.controllers.base import ClientContext
from arthik.controllers.dashboard import DashboardController
from arthik.controllers.notes import NotesController
from arthik.controllers.recurrences import RecurrencesController
from arthik.controllers.transactions import TransactionsController
from arthik.models.audit import ClientEventBuilder
from arthik.models.views import Screen, Tab


logger = structlog.get_logger(__name__)

MIN_RESIZE_DEBOUNCE = 0.25


class ResizeDebouncer:
    """
    Runs a callback once a burst of triggers has been quiet for `delay` seconds.

    Each trigger cancels the pending run and schedules a new one on the
    running event loop.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], delay: float = MIN_RESIZE_DEBOUNCE):
        self._callback = callback
        self._delay = max(delay, MIN_RESIZE_DEBOUNCE)
        self._task: Optional[asyncio.Task] = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        await asyncio.sleep(self._delay)
        await self._callback()

    async def wait(self) -> None:
        """Wait for the pending run, if any, to finish."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None


class NavigationController:
    """Tab switching and screen switching."""

    def __init__(
        self,
        ctx: ClientContext,
        dashboard: DashboardController,
        transactions: TransactionsController,
        accounts: AccountsController,
        recurrences: RecurrencesController,
        notes: NotesController,
    ):
        self._ctx = ctx
        self._dashboard = dashboard
        self._transactions = transactions
        self._accounts = accounts
        self._recurrences = recurrences
        self._notes = notes
        self._debouncer = ResizeDebouncer(
            self._on_resize_settled, delay=ctx.settings.resize_debounce_seconds
        )

    @property
    def active_tab(self) -> Tab:
        return self._ctx.state.active_tab

    @property
    def debouncer(self) -> ResizeDebouncer:
        return self._debouncer

    # =========================================================================
    # TABS
    # =========================================================================

    async def select_tab(self, tab: Tab, load: bool = True) -> None:
        """
        Switch to `tab`.

        Args:
            tab: Target tab
            load: Run the tab's load routine afterwards
        """
        self._ctx.ui.activate_tab(tab)
        self._ctx.state.set_active_tab(tab)
        self._ctx.audit.log(ClientEventBuilder.tab_selected(tab.value))

        if load:
            await self.load_tab(tab)

    async def load_tab(self, tab: Tab) -> None:
        if tab == Tab.DASHBOARD:
            await self._dashboard.load()
        elif tab == Tab.LEDGER:
            self._ctx.state.set_current_page(1)
            await self._transactions.load(reset_page=True)
        elif tab == Tab.ACCOUNTS:
            await self._accounts.load()
        elif tab == Tab.PLANNER:
            await asyncio.gather(self._recurrences.load(), self._notes.load())

    # =========================================================================
    # RESIZE
    # =========================================================================

    def on_resize(self) -> None:
        """Record a window resize; the dashboard reloads once resizing stops."""
        self._debouncer.trigger()

    async def _on_resize_settled(self) -> None:
        state = self._ctx.state
        if state.active_tab != Tab.DASHBOARD or not state.is_authenticated:
            return
        await self._dashboard.load()

    # =========================================================================
    # SCREENS
    # =========================================================================

    def show_login(self) -> None:
        self._debouncer.cancel()
        self._ctx.state.set_screen(Screen.LOGIN)
        self._ctx.ui.show_screen(Screen.LOGIN)

    def show_main(self) -> None:
        self._ctx.state.set_screen(Screen.MAIN)
        self._ctx.ui.show_screen(Screen.MAIN)
