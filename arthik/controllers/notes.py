"""Notes Controller"""

from datetime import datetime, timezone
from typing import Optional

from arthik.controllers.base import EntityController, LoadTarget
from arthik.models.actions import NoteForm
from arthik.models.entities import EntityKind
from arthik.models.views import ViewRegion
from arthik.services.api.errors import ApiError
from arthik.validation.validator import FormValidationError, validate_note
from arthik.views.planner import build_notes_view


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class NotesController(EntityController):
    """Free-text notes. The creation timestamp is set here, once."""

    entity = EntityKind.NOTE
    label = "note"

    def _set_marker(self, key: Optional[str]) -> None:
        self.state.set_editing_note_id(key)

    def _get_marker(self) -> Optional[str]:
        return self.state.editing_note_id

    def render(self) -> None:
        self.ui.render(ViewRegion.NOTES, build_notes_view(self.state))

    async def load(self) -> None:
        try:
            notes = await self.gateway.list_notes()
        except ApiError as e:
            self.fail(e, "load notes", "Failed to load notes")
            return

        self.state.set_notes(notes)
        self._ctx.audit.log_loaded(self.label, len(notes))
        self.render()

    async def create(self, form: NoteForm) -> bool:
        try:
            note = validate_note(form, note_id="", created=_now_iso())
            await self.gateway.save_note(note)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "create note", "Failed to save note")
            return False

        self._ctx.audit.log_created(self.label)
        self.state.set_form_open(self.entity, False)
        await self._ctx.reload(LoadTarget.NOTES)
        return True

    async def save_edit(self, note_id: str, form: NoteForm) -> bool:
        """Resend the note under its id, keeping the original creation time."""
        existing = self.state.find_note(note_id)
        created = existing.created if existing is not None else None
        try:
            note = validate_note(form, note_id=note_id, created=created)
            await self.gateway.save_note(note)
        except (ApiError, FormValidationError) as e:
            self.fail(e, "update note", "Failed to save note")
            return False

        self._ctx.audit.log_updated(self.label, note_id)
        self._set_marker(None)
        await self._ctx.reload(LoadTarget.NOTES)
        return True

    async def delete(self, note_id: str) -> bool:
        if not self.confirm("Are you sure you want to delete this note?", "delete note"):
            return False

        try:
            await self.gateway.delete_note(note_id)
        except ApiError as e:
            self.fail(e, "delete note", "Failed to delete note")
            return False

        self._ctx.audit.log_deleted(self.label, note_id)
        if self._get_marker() == note_id:
            self._set_marker(None)
        await self._ctx.reload(LoadTarget.NOTES)
        return True
