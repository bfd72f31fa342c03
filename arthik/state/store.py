"""
Application State Store

The single in-memory copy of everything the client has fetched, plus the
UI state that decides how it is shown: the ledger page, which row of each
list is in edit mode, which creation forms are open, the active tab and
screen, and the live chart handles.

Rules:
1. Every write goes through an explicit setter; collections are handed out
   as tuples so readers cannot mutate them.
2. Collections are only ever replaced whole, with what the backend returned.
3. Writes are serialised by one re-entrant lock.
4. Chart handles are owned here. A handle is released before its slot is
   overwritten or cleared.
"""

import threading
from typing import Any, Iterable, Optional

import structlog

from arthik.models.entities import (
    Account,
    DashboardPayload,
    EntityKind,
    Note,
    Recurrence,
    Transaction,
)
from arthik.models.views import Screen, Tab
from arthik.services.charts.interface import ChartBackend, ChartName
from arthik.state.session import SessionStore


logger = structlog.get_logger(__name__)


class AppState:
    """Client-side application state."""

    def __init__(self, session: SessionStore, chart_backend: ChartBackend):
        """
        Initialize the store.

        Args:
            session: Session tokens, cleared by `reset_state`
            chart_backend: Releases chart handles this store evicts
        """
        self._session = session
        self._chart_backend = chart_backend
        self._lock = threading.RLock()

        self._accounts: tuple[Account, ...] = ()
        self._transactions: tuple[Transaction, ...] = ()
        self._recurrences: tuple[Recurrence, ...] = ()
        self._notes: tuple[Note, ...] = ()
        self._dashboard: Optional[DashboardPayload] = None

        self._current_page = 1
        self._editing_transaction_id: Optional[str] = None
        self._editing_account_name: Optional[str] = None
        self._editing_recurrence_id: Optional[str] = None
        self._editing_note_id: Optional[str] = None
        self._open_forms: set[EntityKind] = set()

        self._charts: dict[ChartName, Any] = {name: None for name in ChartName}

        self._active_tab = Tab.DASHBOARD
        self._screen = Screen.LOGIN

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def session(self) -> SessionStore:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated()

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._accounts

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    @property
    def recurrences(self) -> tuple[Recurrence, ...]:
        return self._recurrences

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    @property
    def dashboard(self) -> Optional[DashboardPayload]:
        return self._dashboard

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def editing_transaction_id(self) -> Optional[str]:
        return self._editing_transaction_id

    @property
    def editing_account_name(self) -> Optional[str]:
        return self._editing_account_name

    @property
    def editing_recurrence_id(self) -> Optional[str]:
        return self._editing_recurrence_id

    @property
    def editing_note_id(self) -> Optional[str]:
        return self._editing_note_id

    @property
    def active_tab(self) -> Tab:
        return self._active_tab

    @property
    def screen(self) -> Screen:
        return self._screen

    def is_form_open(self, entity: EntityKind) -> bool:
        return entity in self._open_forms

    def get_chart(self, name: ChartName) -> Any:
        return self._charts[name]

    def live_charts(self) -> dict[ChartName, Any]:
        """Chart slots currently holding a handle."""
        return {name: h for name, h in self._charts.items() if h is not None}

    def find_account(self, name: str) -> Optional[Account]:
        return next((a for a in self._accounts if a.name == name), None)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._transactions if t.id == transaction_id), None)

    def find_recurrence(self, recurrence_id: str) -> Optional[Recurrence]:
        return next((r for r in self._recurrences if r.id == recurrence_id), None)

    def find_note(self, note_id: str) -> Optional[Note]:
        return next((n for n in self._notes if n.id == note_id), None)

    # =========================================================================
    # COLLECTION SETTERS
    # =========================================================================

    def set_accounts(self, accounts: Iterable[Account]) -> None:
        with self._lock:
            self._accounts = tuple(accounts)

    def set_transactions(self, transactions: Iterable[Transaction]) -> None:
        with self._lock:
            self._transactions = tuple(transactions)

    def set_recurrences(self, recurrences: Iterable[Recurrence]) -> None:
        with self._lock:
            self._recurrences = tuple(recurrences)

    def set_notes(self, notes: Iterable[Note]) -> None:
        with self._lock:
            self._notes = tuple(notes)

    def set_dashboard(self, payload: Optional[DashboardPayload]) -> None:
        with self._lock:
            self._dashboard = payload

    # =========================================================================
    # UI STATE SETTERS
    # =========================================================================

    def set_current_page(self, page: int) -> None:
        with self._lock:
            self._current_page = max(1, page)

    def set_editing_transaction_id(self, transaction_id: Optional[str]) -> None:
        with self._lock:
            self._editing_transaction_id = transaction_id

    def set_editing_account_name(self, name: Optional[str]) -> None:
        with self._lock:
            self._editing_account_name = name

    def set_editing_recurrence_id(self, recurrence_id: Optional[str]) -> None:
        with self._lock:
            self._editing_recurrence_id = recurrence_id

    def set_editing_note_id(self, note_id: Optional[str]) -> None:
        with self._lock:
            self._editing_note_id = note_id

    def set_form_open(self, entity: EntityKind, is_open: bool) -> None:
        with self._lock:
            if is_open:
                self._open_forms.add(entity)
            else:
                self._open_forms.discard(entity)

    def set_active_tab(self, tab: Tab) -> None:
        with self._lock:
            self._active_tab = tab

    def set_screen(self, screen: Screen) -> None:
        with self._lock:
            self._screen = screen

    # =========================================================================
    # CHART REGISTRY
    # =========================================================================

    def set_chart(self, name: ChartName, handle: Any) -> None:
        """Store a chart handle, releasing whatever the slot held before."""
        with self._lock:
            previous = self._charts[name]
            if previous is not None and previous is not handle:
                self._chart_backend.release(previous)
            self._charts[name] = handle

    def release_chart(self, name: ChartName) -> None:
        with self._lock:
            handle = self._charts[name]
            if handle is not None:
                self._chart_backend.release(handle)
                self._charts[name] = None

    def release_all_charts(self) -> None:
        with self._lock:
            for name in ChartName:
                self.release_chart(name)

    # =========================================================================
    # RESET
    # =========================================================================

    def reset_state(self) -> None:
        """
        Return to the logged-out state.

        Clears every collection, edit marker, open form and the dashboard
        payload, resets the page, releases every chart and clears the
        session. Display preferences live elsewhere and are untouched.
        """
        with self._lock:
            self._accounts = ()
            self._transactions = ()
            self._recurrences = ()
            self._notes = ()
            self._dashboard = None
            self._current_page = 1
            self._editing_transaction_id = None
            self._editing_account_name = None
            self._editing_recurrence_id = None
            self._editing_note_id = None
            self._open_forms.clear()
            self.release_all_charts()
            self._session.clear()

        logger.info("state_reset")
