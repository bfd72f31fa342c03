"""
Pure view builders.

Each builder reads the state store and returns an immutable view model.
Builders never write to the store and never talk to the network.
"""

from arthik.views.accounts import build_accounts_view
from arthik.views.dashboard import build_dashboard_view, compute_ratios
from arthik.views.formatting import Formatter
from arthik.views.ledger import build_account_options_view, build_ledger_view
from arthik.views.planner import build_notes_view, build_recurrences_view

__all__ = [
    "Formatter",
    "build_account_options_view",
    "build_accounts_view",
    "build_dashboard_view",
    "build_ledger_view",
    "build_notes_view",
    "build_recurrences_view",
    "compute_ratios",
]
