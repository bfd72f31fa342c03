"""
View Models

Everything a front end needs to draw the client, computed from the state
store by the pure builders in `arthik.views`. A front end only reads these;
it never reaches into the store or mutates a previously rendered view.

At most one row per list carries an edit form, matching the store's single
edit marker per entity type.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from arthik.models.entities import AccountCategory


class ViewModel(BaseModel):
    """Base for immutable view models."""

    model_config = ConfigDict(frozen=True)


class Tab(str, Enum):
    """Top-level tabs of the main screen."""
    DASHBOARD = "dashboard"
    LEDGER = "ledger"
    ACCOUNTS = "accounts"
    PLANNER = "planner"


class Screen(str, Enum):
    LOGIN = "login"
    MAIN = "main"


class ViewRegion(str, Enum):
    """Named regions of the UI a view can be rendered into."""
    DASHBOARD = "dashboard"
    LEDGER = "ledger"
    ACCOUNTS = "accounts"
    ACCOUNT_OPTIONS = "account_options"
    RECURRENCES = "recurrences"
    NOTES = "notes"


class NoticeLevel(str, Enum):
    """Severity of a user-facing notice."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(ViewModel):
    """A blocking message shown to the user."""

    message: str
    level: NoticeLevel = NoticeLevel.INFO


# =============================================================================
# SHARED
# =============================================================================

class AccountOption(ViewModel):
    """One entry of an account dropdown."""

    value: str
    label: str


class AccountOptionsView(ViewModel):
    options: tuple[AccountOption, ...] = ()


# =============================================================================
# LEDGER
# =============================================================================

class TransactionEditForm(ViewModel):
    """Inline edit form prefilled from the stored transaction."""

    id: str
    date: str
    time: str
    from_account: str
    to_account: str
    description: str
    amount: str
    account_options: tuple[AccountOption, ...] = ()


class TransactionRow(ViewModel):
    """One ledger row, either static or rendered as an edit form."""

    id: str
    date_label: str
    time_label: str
    from_account: str
    to_account: str
    description: str
    amount_label: str
    is_positive: bool
    edit_form: Optional[TransactionEditForm] = None

    @property
    def is_editing(self) -> bool:
        return self.edit_form is not None


class PaginationView(ViewModel):
    current_page: int
    total_pages: int
    has_previous: bool
    has_next: bool

    @property
    def label(self) -> str:
        return f"Page {self.current_page} of {self.total_pages}"


class LedgerView(ViewModel):
    rows: tuple[TransactionRow, ...] = ()
    pagination: PaginationView
    show_create_form: bool = False
    empty_message: Optional[str] = None


# =============================================================================
# ACCOUNTS
# =============================================================================

class AccountEditForm(ViewModel):
    """
    Inline account edit form.

    Category-conditional fields are repopulated from the stored record.
    """

    original_name: str
    name: str
    category: AccountCategory
    include_in_net_worth: bool
    show_budget: bool = False
    budget: Optional[str] = None
    show_dates: bool = False
    due_date: Optional[str] = None
    last_payment_date: Optional[str] = None


class AccountRow(ViewModel):
    name: str
    category: AccountCategory
    balance_label: str
    net_worth_label: str
    details: tuple[tuple[str, str], ...] = ()
    edit_form: Optional[AccountEditForm] = None

    @property
    def is_editing(self) -> bool:
        return self.edit_form is not None


class AccountGroup(ViewModel):
    category: AccountCategory
    rows: tuple[AccountRow, ...] = ()


class AccountsView(ViewModel):
    groups: tuple[AccountGroup, ...] = ()
    show_create_form: bool = False
    empty_message: Optional[str] = None


# =============================================================================
# PLANNER
# =============================================================================

class RecurrenceEditForm(ViewModel):
    id: str
    day_of_month: int
    from_account: str
    to_account: str
    description: str
    amount: str
    account_options: tuple[AccountOption, ...] = ()


class RecurrenceRow(ViewModel):
    id: str
    next_date_label: str
    description: str
    route_label: str
    amount_label: str
    edit_form: Optional[RecurrenceEditForm] = None

    @property
    def is_editing(self) -> bool:
        return self.edit_form is not None


class RecurrencesView(ViewModel):
    rows: tuple[RecurrenceRow, ...] = ()
    show_create_form: bool = False
    empty_message: Optional[str] = None


class NoteEditForm(ViewModel):
    id: str
    heading: str
    content: str


class NoteCard(ViewModel):
    id: str
    heading: str
    created_label: str
    content: str
    edit_form: Optional[NoteEditForm] = None

    @property
    def is_editing(self) -> bool:
        return self.edit_form is not None


class NotesView(ViewModel):
    cards: tuple[NoteCard, ...] = ()
    show_create_form: bool = False
    empty_message: Optional[str] = None


# =============================================================================
# DASHBOARD
# =============================================================================

class StatTile(ViewModel):
    """A fixed display slot holding one formatted figure."""

    key: str
    label: str
    value: str


class QuickStat(ViewModel):
    label: str
    value: str
    caption: str
    positive: bool


class AccountPill(ViewModel):
    name: str
    amount_label: str


class PillSection(ViewModel):
    category: AccountCategory
    label: str
    pills: tuple[AccountPill, ...] = ()

    @property
    def count(self) -> int:
        return len(self.pills)


class DashboardView(ViewModel):
    tiles: tuple[StatTile, ...] = ()
    quick_stats: tuple[QuickStat, ...] = ()
    pill_sections: tuple[PillSection, ...] = ()
    chart_names: tuple[str, ...] = Field(default=())

    def tile(self, key: str) -> StatTile:
        """Look up a stat tile by its slot key."""
        for tile in self.tiles:
            if tile.key == key:
                return tile
        raise KeyError(key)


AnyView = Union[
    DashboardView,
    LedgerView,
    AccountsView,
    AccountOptionsView,
    RecurrencesView,
    NotesView,
]
