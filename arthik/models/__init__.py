"""
Data Models Package

This package contains all Pydantic models used by the Arthik client.
Wire records, view models, user actions and client events all conform
to these schemas.
"""

from arthik.models.entities import (
    MAX_AMOUNT,
    Account,
    AccountCategory,
    BudgetExpense,
    DashboardPayload,
    EntityKind,
    LoginResult,
    MonthlyReport,
    Note,
    Recurrence,
    SettingsResult,
    Transaction,
    TransactionRequest,
)
from arthik.models.audit import (
    ClientEvent,
    ClientEventBuilder,
    ClientEventType,
    EventSeverity,
)
from arthik.models.preferences import Accent, Preferences, Theme
from arthik.models.views import (
    Notice,
    NoticeLevel,
    Screen,
    Tab,
    ViewRegion,
)

__all__ = [
    # Wire models
    "MAX_AMOUNT",
    "Account",
    "AccountCategory",
    "BudgetExpense",
    "DashboardPayload",
    "EntityKind",
    "LoginResult",
    "MonthlyReport",
    "Note",
    "Recurrence",
    "SettingsResult",
    "Transaction",
    "TransactionRequest",
    # Client events
    "ClientEvent",
    "ClientEventBuilder",
    "ClientEventType",
    "EventSeverity",
    # Preferences
    "Accent",
    "Preferences",
    "Theme",
    # Views
    "Notice",
    "NoticeLevel",
    "Screen",
    "Tab",
    "ViewRegion",
]
