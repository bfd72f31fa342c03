"""Accounts view: accounts grouped by category, one row optionally in edit mode."""

from arthik.models.entities import Account, AccountCategory, EntityKind
from arthik.models.views import AccountEditForm, AccountGroup, AccountRow, AccountsView
from arthik.state.store import AppState
from arthik.views.formatting import Formatter

EMPTY_ACCOUNTS_MESSAGE = "No accounts yet"


def _details(account: Account, formatter: Formatter) -> tuple[tuple[str, str], ...]:
    if account.category == AccountCategory.LIABILITIES:
        details = []
        if account.due_date:
            details.append(("Next Due Date", account.due_date))
        if account.last_payment_date:
            details.append(("Last Payment", account.last_payment_date))
        return tuple(details)

    if account.category == AccountCategory.EXPENSES and account.budget and account.budget > 0:
        return (("Monthly Budget", formatter.money(account.budget)),)

    return ()


def build_account_edit_form(account: Account) -> AccountEditForm:
    """
    Edit form prefilled from the stored account.

    Expenses get their budget back, Liabilities their two dates.
    """
    is_expense = account.category == AccountCategory.EXPENSES
    is_liability = account.category == AccountCategory.LIABILITIES
    return AccountEditForm(
        original_name=account.name,
        name=account.name,
        category=account.category,
        include_in_net_worth=account.include_in_net_worth,
        show_budget=is_expense,
        budget=f"{account.budget or 0}" if is_expense else None,
        show_dates=is_liability,
        due_date=(account.due_date or "") if is_liability else None,
        last_payment_date=(account.last_payment_date or "") if is_liability else None,
    )


def build_accounts_view(state: AppState, formatter: Formatter) -> AccountsView:
    editing_name = state.editing_account_name
    groups = []

    for category in AccountCategory:
        members = [a for a in state.accounts if a.category == category]
        if not members:
            continue
        rows = tuple(
            AccountRow(
                name=a.name,
                category=a.category,
                balance_label=formatter.money(a.current_balance),
                net_worth_label="Included in Net Worth" if a.include_in_net_worth else "Not included",
                details=_details(a, formatter),
                edit_form=build_account_edit_form(a) if a.name == editing_name else None,
            )
            for a in members
        )
        groups.append(AccountGroup(category=category, rows=rows))

    return AccountsView(
        groups=tuple(groups),
        show_create_form=state.is_form_open(EntityKind.ACCOUNT),
        empty_message=None if groups else EMPTY_ACCOUNTS_MESSAGE,
    )
