"""
Ledger View

Builds the paginated transaction list from the store. Pagination is done
here, over the full list the store holds; the backend is never asked for
a page.
"""

import math

from arthik.models.entities import Account, EntityKind, Transaction
from arthik.models.views import (
    AccountOption,
    AccountOptionsView,
    LedgerView,
    PaginationView,
    TransactionEditForm,
    TransactionRow,
)
from arthik.state.store import AppState
from arthik.views.formatting import Formatter, format_date, format_time

EMPTY_LEDGER_MESSAGE = "No transactions yet"


def total_pages(item_count: int, page_size: int) -> int:
    """Number of pages for `item_count` items; never less than one."""
    return max(1, math.ceil(item_count / page_size))


def clamp_page(page: int, item_count: int, page_size: int) -> int:
    return min(max(1, page), total_pages(item_count, page_size))


def build_account_options(accounts: tuple[Account, ...]) -> tuple[AccountOption, ...]:
    return tuple(
        AccountOption(value=a.name, label=f"{a.name} ({a.category.value})")
        for a in accounts
    )


def build_account_options_view(state: AppState) -> AccountOptionsView:
    return AccountOptionsView(options=build_account_options(state.accounts))


def _edit_form(transaction: Transaction, options: tuple[AccountOption, ...]) -> TransactionEditForm:
    return TransactionEditForm(
        id=transaction.id,
        date=transaction.date.strftime("%Y-%m-%d"),
        time=transaction.date.strftime("%H:%M"),
        from_account=transaction.from_account,
        to_account=transaction.to_account,
        description=transaction.description,
        amount=f"{transaction.amount}",
        account_options=options,
    )


def build_ledger_view(state: AppState, page_size: int, formatter: Formatter) -> LedgerView:
    """
    Build the ledger page the store's current page points at.

    The row whose id matches the transaction edit marker carries an edit
    form; every other row is static.
    """
    transactions = state.transactions
    pages = total_pages(len(transactions), page_size)
    page = min(state.current_page, pages)

    start = (page - 1) * page_size
    page_items = transactions[start:start + page_size]

    editing_id = state.editing_transaction_id
    options = build_account_options(state.accounts) if editing_id else ()

    rows = tuple(
        TransactionRow(
            id=t.id,
            date_label=format_date(t.date),
            time_label=format_time(t.date),
            from_account=t.from_account,
            to_account=t.to_account,
            description=t.description,
            amount_label=formatter.money(abs(t.amount)),
            is_positive=t.amount > 0,
            edit_form=_edit_form(t, options) if t.id == editing_id else None,
        )
        for t in page_items
    )

    return LedgerView(
        rows=rows,
        pagination=PaginationView(
            current_page=page,
            total_pages=pages,
            has_previous=page > 1,
            has_next=page < pages,
        ),
        show_create_form=state.is_form_open(EntityKind.TRANSACTION),
        empty_message=None if rows else EMPTY_LEDGER_MESSAGE,
    )
