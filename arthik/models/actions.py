"""
User Actions

Every user interaction is a typed Action carrying its own payload. Front
ends construct actions; the dispatcher in `arthik.orchestrator` routes each
one to exactly one handler, so handlers never look anything up by string.

Form payloads hold the raw text the user typed. Parsing and bounds checks
happen in `arthik.validation`, before anything reaches the network.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from arthik.models.entities import EntityKind
from arthik.models.preferences import Accent, Theme
from arthik.models.views import Tab


# =============================================================================
# FORM PAYLOADS
# =============================================================================

class FormPayload(BaseModel):
    """Raw user input for one form."""

    model_config = ConfigDict(frozen=True)


class TransactionForm(FormPayload):
    from_account: str = ""
    to_account: str = ""
    description: str = ""
    amount: str = ""
    date: str = ""
    time: str = ""


class AccountForm(FormPayload):
    """
    Account create/edit input.

    `budget` is read only for Expenses, the two dates only for Liabilities.
    """

    name: str = ""
    category: str = ""
    include_in_net_worth: bool = True
    budget: str = ""
    due_date: str = ""
    last_payment_date: str = ""


class RecurrenceForm(FormPayload):
    day_of_month: str = ""
    from_account: str = ""
    to_account: str = ""
    description: str = ""
    amount: str = ""


class NoteForm(FormPayload):
    heading: str = ""
    content: str = ""


# =============================================================================
# ACTIONS
# =============================================================================

class Action(BaseModel):
    """Base class of every user action."""

    model_config = ConfigDict(frozen=True)


# Session & navigation

class Login(Action):
    password: str


class Logout(Action):
    pass


class SelectTab(Action):
    tab: Tab


class Resize(Action):
    """The window was resized."""


class ChangePage(Action):
    delta: int


class OpenCreateForm(Action):
    entity: EntityKind


class CloseCreateForm(Action):
    entity: EntityKind


# Transactions

class CreateTransaction(Action):
    form: TransactionForm


class EditTransaction(Action):
    transaction_id: str


class CancelTransactionEdit(Action):
    pass


class SaveTransaction(Action):
    transaction_id: str
    form: TransactionForm


class DeleteTransaction(Action):
    transaction_id: str


# Accounts

class CreateAccount(Action):
    form: AccountForm


class EditAccount(Action):
    name: str


class CancelAccountEdit(Action):
    pass


class SaveAccount(Action):
    original_name: str
    form: AccountForm


class DeleteAccount(Action):
    name: str


# Recurrences

class CreateRecurrence(Action):
    form: RecurrenceForm


class EditRecurrence(Action):
    recurrence_id: str


class CancelRecurrenceEdit(Action):
    pass


class SaveRecurrence(Action):
    recurrence_id: str
    form: RecurrenceForm


class DeleteRecurrence(Action):
    recurrence_id: str


class ApplyRecurrence(Action):
    recurrence_id: str


# Notes

class CreateNote(Action):
    form: NoteForm


class EditNote(Action):
    note_id: str


class CancelNoteEdit(Action):
    pass


class SaveNote(Action):
    note_id: str
    form: NoteForm


class DeleteNote(Action):
    note_id: str


# Settings

class ChangeTheme(Action):
    theme: Theme


class ToggleHideAmounts(Action):
    enabled: bool


class ChangeAccent(Action):
    accent: Accent


class ChangePassword(Action):
    old_password: str
    new_password: str
    confirm_password: Optional[str] = None


def all_action_types() -> list[type[Action]]:
    """Every concrete Action subclass, including nested subclasses."""
    found: list[type[Action]] = []
    pending = list(Action.__subclasses__())
    while pending:
        cls = pending.pop(0)
        found.append(cls)
        pending.extend(cls.__subclasses__())
    return found
