"""
Accounts Controller

Accounts are identified by name, and the backend has no rename: an edit
deletes the old account and recreates it under the new name, carrying the
category and the current balance over.

Other views built from the account list (the dashboard pills and asset
chart) register with `ClientContext.add_account_view` and are redrawn
whenever a fresh list is stored, whichever response arrived first.
"""

from typing import Optional

import structlog

from arthik.controllers.base import EntityController, LoadTarget
from arthik.models.actions import AccountForm
from arthik.models.entities import EntityKind
from arthik.models.views import NoticeLevel, ViewRegion
from arthik.services.api.errors import ApiError
from arthik.validation.validator import FormValidationError, validate_account
from arthik.views.accounts import build_accounts_view
from arthik.views.ledger import build_account_options_view


logger = structlog.get_logger(__name__)


class AccountsController(EntityController):
    """Account list operations."""

    entity = EntityKind.ACCOUNT
    label = "account"

    def _set_marker(self, key: Optional[str]) -> None:
        self.state.set_editing_account_name(key)

    def _get_marker(self) -> Optional[str]:
        return self.state.editing_account_name

    def render(self) -> None:
        self.ui.render(ViewRegion.ACCOUNTS, build_accounts_view(self.state, self._ctx.formatter))
        self.ui.render(ViewRegion.ACCOUNT_OPTIONS, build_account_options_view(self.state))

    async def load(self) -> None:
        try:
            accounts = await self.gateway.list_accounts()
        except ApiError as e:
            self.fail(e, "load accounts", "Failed to load accounts")
            return

        self.state.set_accounts(accounts)
        self._ctx.audit.log_loaded(self.label, len(accounts))
        self.render()
        for render in self._ctx.account_views:
            render()

    async def _after_write(self) -> None:
        await self._ctx.reload(LoadTarget.ACCOUNTS, LoadTarget.DASHBOARD)

    async def create(self, form: AccountForm) -> bool:
        try:
            account = validate_account(form)
            await self.gateway.add_account(account)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "create account", "Failed to add account")
            return False

        self._ctx.audit.log_created(self.label, account.name)
        self.state.set_form_open(self.entity, False)
        await self._after_write()
        self._ctx.notify("Account added successfully!", NoticeLevel.SUCCESS)
        return True

    async def save_edit(self, original_name: str, form: AccountForm) -> bool:
        """
        Apply an account edit as delete-then-recreate.

        If the recreate fails after the delete went through, the lists are
        reloaded so the view matches what the backend now holds.
        """
        existing = self.state.find_account(original_name)
        if existing is None:
            logger.warning("account_edit_target_missing", name=original_name)
            self._set_marker(None)
            self.render()
            return False

        try:
            updated = validate_account(form, existing=existing)
        except FormValidationError as e:
            self.fail(e, "update account", "Failed to save account changes")
            return False

        try:
            await self.gateway.delete_account(original_name)
        except ApiError as e:
            self.fail(e, "update account", "Failed to save account changes")
            return False

        try:
            await self.gateway.add_account(updated)
        except ApiError as e:
            self.fail(e, "update account", "Failed to save account changes")
            if self.state.is_authenticated:
                self._set_marker(None)
                await self._after_write()
            return False

        self._ctx.audit.log_updated(self.label, original_name)
        self._set_marker(None)
        await self._after_write()
        return True

    async def delete(self, name: str) -> bool:
        message = f'Are you sure you want to delete "{name}"? This cannot be undone.'
        if not self.confirm(message, "delete account"):
            return False

        try:
            await self.gateway.delete_account(name)
        except ApiError as e:
            self.fail(e, "delete account", "Failed to delete account")
            return False

        self._ctx.audit.log_deleted(self.label, name)
        self._set_marker(None)
        await self._after_write()
        return True
