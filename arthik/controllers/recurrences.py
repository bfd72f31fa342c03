"""
Recurrences Controller

Monthly recurring transfers. Applying one creates a real transaction on
the backend, so an apply reloads everything that transaction touches.
"""

from typing import Optional

from arthik.controllers.base import EntityController, LoadTarget
from arthik.models.actions import RecurrenceForm
from arthik.models.audit import ClientEventBuilder
from arthik.models.entities import EntityKind
from arthik.models.views import NoticeLevel, ViewRegion
from arthik.services.api.errors import ApiError
from arthik.validation.validator import FormValidationError, validate_recurrence
from arthik.views.planner import build_recurrences_view


class RecurrencesController(EntityController):
    """Recurring transfer operations."""

    entity = EntityKind.RECURRENCE
    label = "recurrence"

    def _set_marker(self, key: Optional[str]) -> None:
        self.state.set_editing_recurrence_id(key)

    def _get_marker(self) -> Optional[str]:
        return self.state.editing_recurrence_id

    def render(self) -> None:
        view = build_recurrences_view(self.state, self._ctx.formatter)
        self.ui.render(ViewRegion.RECURRENCES, view)

    async def load(self) -> None:
        try:
            recurrences = await self.gateway.list_recurrences()
        except ApiError as e:
            self.fail(e, "load recurrences", "Failed to load recurrences")
            return

        self.state.set_recurrences(recurrences)
        self._ctx.audit.log_loaded(self.label, len(recurrences))
        self.render()

    async def create(self, form: RecurrenceForm) -> bool:
        """Create a recurrence; its first date is the next matching day from today."""
        try:
            recurrence = validate_recurrence(form)
            await self.gateway.save_recurrence(recurrence)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "create recurrence", "Failed to save recurrence")
            return False

        self._ctx.audit.log_created(self.label)
        self.state.set_form_open(self.entity, False)
        await self._ctx.reload(LoadTarget.RECURRENCES)
        return True

    async def save_edit(self, recurrence_id: str, form: RecurrenceForm) -> bool:
        """
        Replace a recurrence.

        The scheduled date is kept unless the day of month changed.
        """
        existing = self.state.find_recurrence(recurrence_id)
        try:
            recurrence = validate_recurrence(form, recurrence_id=recurrence_id)
            if existing is not None and existing.day_of_month == recurrence.day_of_month:
                recurrence = recurrence.model_copy(update={"next_date": existing.next_date})
            await self.gateway.save_recurrence(recurrence)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "update recurrence", "Failed to save recurrence")
            return False

        self._ctx.audit.log_updated(self.label, recurrence_id)
        self._set_marker(None)
        await self._ctx.reload(LoadTarget.RECURRENCES)
        return True

    async def delete(self, recurrence_id: str) -> bool:
        message = "Are you sure you want to delete this recurring transaction?"
        if not self.confirm(message, "delete recurrence"):
            return False

        try:
            await self.gateway.delete_recurrence(recurrence_id)
        except ApiError as e:
            self.fail(e, "delete recurrence", "Failed to delete recurrence")
            return False

        self._ctx.audit.log_deleted(self.label, recurrence_id)
        if self._get_marker() == recurrence_id:
            self._set_marker(None)
        await self._ctx.reload(LoadTarget.RECURRENCES)
        return True

    async def apply(self, recurrence_id: str) -> bool:
        """Post the recurring transfer now, then refresh everything it touched."""
        if not self.confirm("Apply this recurring transaction now?", "apply recurrence"):
            return False

        try:
            await self.gateway.apply_recurrence(recurrence_id)
        except ApiError as e:
            self.fail(e, "apply recurrence", "Failed to apply recurrence")
            return False

        self._ctx.audit.log(ClientEventBuilder.recurrence_applied(recurrence_id))
        self._ctx.notify("Transaction applied successfully!", NoticeLevel.SUCCESS)
        await self._ctx.reload(
            LoadTarget.RECURRENCES,
            LoadTarget.ACCOUNTS,
            LoadTarget.TRANSACTIONS,
            LoadTarget.DASHBOARD,
        )
        return True
