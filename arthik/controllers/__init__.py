"""Controllers: one per entity plus the dashboard and settings."""

from arthik.controllers.accounts import AccountsController
from arthik.controllers.base import ClientContext, EntityController, LoadTarget, report_failure
from arthik.controllers.dashboard import DashboardController
from arthik.controllers.notes import NotesController
from arthik.controllers.recurrences import RecurrencesController
from arthik.controllers.settings import SettingsController
from arthik.controllers.transactions import TransactionsController

__all__ = [
    "AccountsController",
    "ClientContext",
    "DashboardController",
    "EntityController",
    "LoadTarget",
    "NotesController",
    "RecurrencesController",
    "SettingsController",
    "TransactionsController",
    "report_failure",
]
