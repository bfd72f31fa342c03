"""Planner views: recurring transfers and notes."""

from arthik.models.entities import EntityKind, Note, Recurrence
from arthik.models.views import (
    NoteCard,
    NoteEditForm,
    NotesView,
    RecurrenceEditForm,
    RecurrenceRow,
    RecurrencesView,
)
from arthik.state.store import AppState
from arthik.views.formatting import Formatter, format_datetime, format_short_date
from arthik.views.ledger import build_account_options

EMPTY_RECURRENCES_MESSAGE = "No recurring transactions yet"
EMPTY_NOTES_MESSAGE = "No notes yet."

ARROW = "→"


def _recurrence_form(recurrence: Recurrence, state: AppState) -> RecurrenceEditForm:
    return RecurrenceEditForm(
        id=recurrence.id,
        day_of_month=recurrence.day_of_month,
        from_account=recurrence.from_account,
        to_account=recurrence.to_account,
        description=recurrence.description,
        amount=f"{recurrence.amount}",
        account_options=build_account_options(state.accounts),
    )


def build_recurrences_view(state: AppState, formatter: Formatter) -> RecurrencesView:
    editing_id = state.editing_recurrence_id
    rows = tuple(
        RecurrenceRow(
            id=r.id,
            next_date_label=format_short_date(r.next_date),
            description=r.description,
            route_label=(
                f"{r.from_account} {ARROW} {r.to_account} | Day {r.day_of_month} of month"
            ),
            amount_label=formatter.money(r.amount),
            edit_form=_recurrence_form(r, state) if r.id == editing_id else None,
        )
        for r in state.recurrences
    )
    return RecurrencesView(
        rows=rows,
        show_create_form=state.is_form_open(EntityKind.RECURRENCE),
        empty_message=None if rows else EMPTY_RECURRENCES_MESSAGE,
    )


def _note_form(note: Note) -> NoteEditForm:
    return NoteEditForm(id=note.id, heading=note.heading, content=note.content)


def build_notes_view(state: AppState) -> NotesView:
    editing_id = state.editing_note_id
    cards = tuple(
        NoteCard(
            id=n.id,
            heading=n.heading,
            created_label=format_datetime(n.created),
            content=n.content,
            edit_form=_note_form(n) if n.id == editing_id else None,
        )
        for n in state.notes
    )
    return NotesView(
        cards=cards,
        show_create_form=state.is_form_open(EntityKind.NOTE),
        empty_message=None if cards else EMPTY_NOTES_MESSAGE,
    )
