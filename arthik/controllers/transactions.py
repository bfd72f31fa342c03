"""
Transactions Controller

Owns the ledger: loading, paging, and create/edit/delete of transactions.
Every successful write reloads transactions, accounts and the dashboard,
since any transfer moves two balances and the net worth.
"""

from typing import Optional

from arthik.controllers.base import ClientContext, EntityController, LoadTarget
from arthik.models.actions import TransactionForm
from arthik.models.entities import EntityKind
from arthik.models.views import ViewRegion
from arthik.services.api.errors import ApiError
from arthik.validation.validator import FormValidationError, validate_transaction
from arthik.views.ledger import build_ledger_view, clamp_page, total_pages


class TransactionsController(EntityController):
    """Ledger operations."""

    entity = EntityKind.TRANSACTION
    label = "transaction"

    def __init__(self, ctx: ClientContext):
        super().__init__(ctx)
        self._page_size = ctx.settings.page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def _set_marker(self, key: Optional[str]) -> None:
        self.state.set_editing_transaction_id(key)

    def _get_marker(self) -> Optional[str]:
        return self.state.editing_transaction_id

    def render(self) -> None:
        view = build_ledger_view(self.state, self._page_size, self._ctx.formatter)
        self.ui.render(ViewRegion.LEDGER, view)

    # =========================================================================
    # LOAD & PAGING
    # =========================================================================

    async def load(self, reset_page: bool = True) -> None:
        """
        Fetch every transaction and show one page.

        Args:
            reset_page: Go back to page 1 (tab navigation). When False the
                current page is kept, pulled back to the last page if the
                list got shorter.
        """
        try:
            transactions = await self.gateway.list_transactions()
        except ApiError as e:
            self.fail(e, "load transactions", "Failed to load transactions")
            return

        self.state.set_transactions(transactions)
        if reset_page:
            self.state.set_current_page(1)
        else:
            self.state.set_current_page(
                clamp_page(self.state.current_page, len(transactions), self._page_size)
            )
        self._ctx.audit.log_loaded(self.label, len(transactions))
        self.render()

    async def reload_in_place(self) -> None:
        await self.load(reset_page=False)

    def change_page(self, delta: int) -> bool:
        """
        Move `delta` pages. Moves that would leave [1, total pages] do nothing.

        Returns:
            True if the page changed
        """
        pages = total_pages(len(self.state.transactions), self._page_size)
        target = self.state.current_page + delta
        if target < 1 or target > pages:
            return False
        self.state.set_current_page(target)
        self.render()
        return True

    # =========================================================================
    # WRITES
    # =========================================================================

    async def _after_write(self) -> None:
        await self._ctx.reload(LoadTarget.TRANSACTIONS, LoadTarget.ACCOUNTS, LoadTarget.DASHBOARD)

    async def create(self, form: TransactionForm) -> bool:
        """Validate and create a transaction. Returns True on success."""
        try:
            request = validate_transaction(form)
            await self.gateway.save_transaction(request)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "create transaction", "Failed to save transaction")
            return False

        self._ctx.audit.log_created(self.label)
        self.state.set_form_open(self.entity, False)
        await self._after_write()
        return True

    async def save_edit(self, transaction_id: str, form: TransactionForm) -> bool:
        """Replace the transaction with `transaction_id` by the form's content."""
        try:
            request = validate_transaction(form, transaction_id=transaction_id)
            await self.gateway.save_transaction(request)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "update transaction", "Failed to update transaction")
            return False

        self._ctx.audit.log_updated(self.label, transaction_id)
        self._set_marker(None)
        await self._after_write()
        return True

    async def delete(self, transaction_id: str) -> bool:
        if not self.confirm("Are you sure you want to delete this transaction?", "delete transaction"):
            return False

        try:
            await self.gateway.delete_transaction(transaction_id)
        except ApiError as e:
            self.fail(e, "delete transaction", "Failed to delete transaction")
            return False

        self._ctx.audit.log_deleted(self.label, transaction_id)
        self._set_marker(None)
        await self._after_write()
        return True
