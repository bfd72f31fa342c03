"""
Main Orchestrator for the Arthik client

This module ties together all the components and routes every user action:

    UI event -> typed Action -> Dispatcher -> controller
             -> ApiGateway -> AppState -> views / charts -> UI

The dispatcher's handler table is checked against every Action subclass
when it is built, so a new action without a handler fails at startup
instead of being silently dropped.

A forced logout (any 401) is wired from the gateway straight to the auth
controller; no other component needs to know about it.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx
import structlog

from arthik.audit.logger import AuditLogger
from arthik.config.settings import ApiSettings, ClientSettings, get_settings
from arthik.controllers.accounts import AccountsController
from arthik.controllers.auth import AuthController
from arthik.controllers.base import ClientContext, LoadTarget
from arthik.controllers.dashboard import DashboardController
from arthik.controllers.notes import NotesController
from arthik.controllers.recurrences import RecurrencesController
from arthik.controllers.settings import SettingsController
from arthik.controllers.transactions import TransactionsController
from arthik.models import actions as a
from arthik.models.entities import EntityKind
from arthik.navigation import NavigationController
from arthik.services.api.gateway import ApiGateway
from arthik.services.charts.interface import ChartBackend
from arthik.services.charts.plotly_backend import PlotlyChartBackend
from arthik.services.storage.interface import KeyValueStorage
from arthik.services.storage.local import JsonFileStorage, MemoryStorage
from arthik.state.preferences import PreferencesStore
from arthik.state.session import SessionStore
from arthik.state.store import AppState
from arthik.ui.interface import UserInterface


logger = structlog.get_logger(__name__)

Handler = Callable[[Any], Any]


class UnhandledActionError(Exception):
    """Raised when the handler table does not cover every action type."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"No handler for actions: {', '.join(missing)}")


class Dispatcher:
    """
    Routes typed actions to controller operations.

    Handlers may be plain functions or coroutines; `dispatch` awaits the
    latter.
    """

    def __init__(self, handlers: dict[type[a.Action], Handler]):
        missing = [cls.__name__ for cls in a.all_action_types() if cls not in handlers]
        if missing:
            raise UnhandledActionError(missing)
        self._handlers = dict(handlers)

    @property
    def action_types(self) -> frozenset[type[a.Action]]:
        return frozenset(self._handlers)

    async def dispatch(self, action: a.Action) -> Any:
        handler = self._handlers.get(type(action))
        if handler is None:
            raise UnhandledActionError([type(action).__name__])

        logger.debug("action_dispatched", action=type(action).__name__)
        result = handler(action)
        if inspect.isawaitable(result):
            result = await result
        return result


@dataclass
class ArthikClient:
    """Every wired component of one client session."""

    context: ClientContext
    dispatcher: Dispatcher
    auth: AuthController
    navigation: NavigationController
    dashboard: DashboardController
    transactions: TransactionsController
    accounts: AccountsController
    recurrences: RecurrencesController
    notes: NotesController
    settings: SettingsController
    chart_backend: ChartBackend

    @property
    def state(self) -> AppState:
        return self.context.state

    @property
    def audit(self) -> AuditLogger:
        return self.context.audit

    async def start(self) -> bool:
        return await self.auth.start()

    async def dispatch(self, action: a.Action) -> Any:
        return await self.dispatcher.dispatch(action)

    async def aclose(self) -> None:
        self.navigation.debouncer.cancel()
        self.context.state.release_all_charts()
        await self.context.gateway.aclose()


def build_dispatcher(
    auth: AuthController,
    navigation: NavigationController,
    transactions: TransactionsController,
    accounts: AccountsController,
    recurrences: RecurrencesController,
    notes: NotesController,
    settings: SettingsController,
) -> Dispatcher:
    """Build the handler table for every action type."""
    by_entity = {
        EntityKind.TRANSACTION: transactions,
        EntityKind.ACCOUNT: accounts,
        EntityKind.RECURRENCE: recurrences,
        EntityKind.NOTE: notes,
    }

    handlers: dict[type[a.Action], Handler] = {
        # Session and navigation
        a.Login: lambda act: auth.login(act.password),
        a.Logout: lambda act: auth.logout(),
        a.SelectTab: lambda act: navigation.select_tab(act.tab),
        a.Resize: lambda act: navigation.on_resize(),
        a.ChangePage: lambda act: transactions.change_page(act.delta),
        a.OpenCreateForm: lambda act: by_entity[act.entity].open_create_form(),
        a.CloseCreateForm: lambda act: by_entity[act.entity].close_create_form(),

        # Transactions
        a.CreateTransaction: lambda act: transactions.create(act.form),
        a.EditTransaction: lambda act: transactions.enter_edit(act.transaction_id),
        a.CancelTransactionEdit: lambda act: transactions.cancel_edit(),
        a.SaveTransaction: lambda act: transactions.save_edit(act.transaction_id, act.form),
        a.DeleteTransaction: lambda act: transactions.delete(act.transaction_id),

        # Accounts
        a.CreateAccount: lambda act: accounts.create(act.form),
        a.EditAccount: lambda act: accounts.enter_edit(act.name),
        a.CancelAccountEdit: lambda act: accounts.cancel_edit(),
        a.SaveAccount: lambda act: accounts.save_edit(act.original_name, act.form),
        a.DeleteAccount: lambda act: accounts.delete(act.name),

        # Recurring transactions
        a.CreateRecurrence: lambda act: recurrences.create(act.form),
        a.EditRecurrence: lambda act: recurrences.enter_edit(act.recurrence_id),
        a.CancelRecurrenceEdit: lambda act: recurrences.cancel_edit(),
        a.SaveRecurrence: lambda act: recurrences.save_edit(act.recurrence_id, act.form),
        a.DeleteRecurrence: lambda act: recurrences.delete(act.recurrence_id),
        a.ApplyRecurrence: lambda act: recurrences.apply(act.recurrence_id),

        # Notes
        a.CreateNote: lambda act: notes.create(act.form),
        a.EditNote: lambda act: notes.enter_edit(act.note_id),
        a.CancelNoteEdit: lambda act: notes.cancel_edit(),
        a.SaveNote: lambda act: notes.save_edit(act.note_id, act.form),
        a.DeleteNote: lambda act: notes.delete(act.note_id),

        # Settings
        a.ChangeTheme: lambda act: settings.change_theme(act.theme),
        a.ToggleHideAmounts: lambda act: settings.toggle_hide_amounts(act.enabled),
        a.ChangeAccent: lambda act: settings.change_accent(act.accent),
        a.ChangePassword: lambda act: settings.change_password(
            act.old_password, act.new_password, act.confirm_password
        ),
    }
    return Dispatcher(handlers)


def create_app_components(
    ui: UserInterface,
    api_settings: Optional[ApiSettings] = None,
    client_settings: Optional[ClientSettings] = None,
    session_storage: Optional[KeyValueStorage] = None,
    preferences_storage: Optional[KeyValueStorage] = None,
    chart_backend: Optional[ChartBackend] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ArthikClient:
    """
    Factory function to create all application components.

    Args:
        ui: Front end implementing the UI port
        api_settings: Backend settings (default: from environment)
        client_settings: Client settings (default: from environment)
        session_storage: Session-scoped storage (default: per settings)
        preferences_storage: Durable storage (default: per settings)
        chart_backend: Chart library adapter (default: Plotly)
        transport: httpx transport override, used by tests

    Returns:
        A fully wired ArthikClient
    """
    if api_settings is None:
        api_settings = get_settings().api
    if client_settings is None:
        client_settings = get_settings().client

    if session_storage is None:
        if client_settings.session_file:
            session_storage = JsonFileStorage(client_settings.session_file)
        else:
            session_storage = MemoryStorage()
    if preferences_storage is None:
        preferences_storage = JsonFileStorage(client_settings.preferences_file)
    if chart_backend is None:
        chart_backend = PlotlyChartBackend()

    session = SessionStore(session_storage)
    state = AppState(session, chart_backend)
    gateway = ApiGateway(session, settings=api_settings, transport=transport)

    ctx = ClientContext(
        state=state,
        gateway=gateway,
        ui=ui,
        audit=AuditLogger(history_size=client_settings.event_history_size),
        preferences=PreferencesStore(preferences_storage),
        settings=client_settings,
    )

    dashboard = DashboardController(ctx, chart_backend)
    transactions = TransactionsController(ctx)
    accounts = AccountsController(ctx)
    recurrences = RecurrencesController(ctx)
    notes = NotesController(ctx)

    ctx.register_loader(LoadTarget.DASHBOARD, dashboard.load)
    ctx.register_loader(LoadTarget.TRANSACTIONS, transactions.reload_in_place)
    ctx.register_loader(LoadTarget.ACCOUNTS, accounts.load)
    ctx.register_loader(LoadTarget.RECURRENCES, recurrences.load)
    ctx.register_loader(LoadTarget.NOTES, notes.load)
    ctx.add_account_view(dashboard.render_account_figures)

    navigation = NavigationController(ctx, dashboard, transactions, accounts, recurrences, notes)
    auth = AuthController(ctx, navigation, accounts, dashboard, transactions)
    gateway.set_unauthorized_handler(auth.handle_unauthorized)

    settings = SettingsController(
        ctx,
        amount_views=(
            dashboard.render,
            transactions.render,
            accounts.render,
            recurrences.render,
        ),
        chart_views=(dashboard.render,),
    )

    dispatcher = build_dispatcher(
        auth, navigation, transactions, accounts, recurrences, notes, settings
    )

    logger.info("client_created", base_url=api_settings.base_url)

    return ArthikClient(
        context=ctx,
        dispatcher=dispatcher,
        auth=auth,
        navigation=navigation,
        dashboard=dashboard,
        transactions=transactions,
        accounts=accounts,
        recurrences=recurrences,
        notes=notes,
        settings=settings,
        chart_backend=chart_backend,
    )
