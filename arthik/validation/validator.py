"""
Form Validation

Every user form is checked here before anything is sent to the backend.
A failure raises FormValidationError with a message meant for the user;
nothing is silently fixed beyond trimming surrounding whitespace.

Length limits are checked against the text as typed, before trimming.
"""

import calendar
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from arthik.models.actions import AccountForm, NoteForm, RecurrenceForm, TransactionForm
from arthik.models.entities import (
    MAX_AMOUNT,
    Account,
    AccountCategory,
    Note,
    Recurrence,
    TransactionRequest,
)


# =============================================================================
# LIMITS
# =============================================================================

MAX_INPUT_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 1000
MAX_NOTE_CONTENT_LENGTH = 2 * MAX_DESCRIPTION_LENGTH
MIN_PASSWORD_LENGTH = 6


class FormValidationError(Exception):
    """User input failed a client-side check. Nothing was sent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


# =============================================================================
# FIELD CHECKS
# =============================================================================

def validate_text(value: Optional[str], max_length: int, label: str = "Input", field: Optional[str] = None) -> str:
    """
    Check a required free-text field.

    Returns:
        The trimmed text
    """
    if value is None or not value.strip():
        raise FormValidationError(f"{label} is required", field)
    if len(value) > max_length:
        raise FormValidationError(
            f"{label} exceeds maximum length of {max_length} characters", field
        )
    return value.strip()


def validate_amount(value: Optional[str], field: str = "amount") -> Decimal:
    """
    Parse a money amount in [0, MAX_AMOUNT].

    Raises:
        FormValidationError: Not a number, negative, or too large
    """
    raw = (value or "").strip().replace(",", "")
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise FormValidationError("Invalid amount", field)

    if not amount.is_finite():
        raise FormValidationError("Invalid amount", field)
    if amount < 0:
        raise FormValidationError("Amount cannot be negative", field)
    if amount > MAX_AMOUNT:
        raise FormValidationError("Amount exceeds maximum allowed value", field)

    return amount


def validate_date(value: str, field: str = "date") -> str:
    """Check a YYYY-MM-DD date string."""
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise FormValidationError("Invalid date, expected YYYY-MM-DD", field)
    return value


def validate_time(value: str, field: str = "time") -> str:
    """Check an HH:MM time string."""
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        raise FormValidationError("Invalid time, expected HH:MM", field)
    return value


def validate_day_of_month(value: Optional[str]) -> int:
    try:
        day = int((value or "").strip())
    except ValueError:
        day = 0
    if day < 1 or day > 31:
        raise FormValidationError("Please enter a valid day of month (1-31)", "day_of_month")
    return day


# =============================================================================
# RECURRENCE SCHEDULING
# =============================================================================

def next_occurrence(day_of_month: int, today: Optional[date] = None) -> date:
    """
    Next date falling on `day_of_month`, on or after `today`.

    Months shorter than `day_of_month` use their last day.

    Args:
        day_of_month: 1-31
        today: Reference date; defaults to the local date

    Returns:
        This month's occurrence if it has not passed, else next month's
    """
    today = today or date.today()

    candidate = _clamped(today.year, today.month, day_of_month)
    if candidate >= today:
        return candidate

    year, month = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
    return _clamped(year, month, day_of_month)


def _clamped(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


# =============================================================================
# FORMS
# =============================================================================

def validate_transaction(form: TransactionForm, transaction_id: str = "") -> TransactionRequest:
    """
    Validate a transaction form.

    Args:
        form: Raw input
        transaction_id: Existing id for an edit, "" for a new transaction

    Returns:
        The request to send
    """
    if not form.from_account:
        raise FormValidationError("Please select From account", "from_account")
    if not form.to_account:
        raise FormValidationError("Please select To account", "to_account")

    amount = validate_amount(form.amount)
    description = validate_text(
        form.description, MAX_DESCRIPTION_LENGTH, "Description", "description"
    )

    if not form.date or not form.time:
        raise FormValidationError("Please select date and time", "date")

    return TransactionRequest(
        id=transaction_id,
        from_account=form.from_account,
        to_account=form.to_account,
        description=description,
        amount=amount,
        date=validate_date(form.date.strip()),
        time=validate_time(form.time.strip()),
    )


def validate_account(
    form: AccountForm,
    existing: Optional[Account] = None,
) -> Account:
    """
    Validate an account form.

    For an edit, pass the stored account: its category and balance carry
    over, since neither can be changed from the form.
    """
    name = validate_text(form.name, MAX_INPUT_LENGTH, "Account name", "name")

    if existing is not None:
        category = existing.category
        balance = existing.current_balance
    else:
        try:
            category = AccountCategory(form.category)
        except ValueError:
            raise FormValidationError("Please select account type", "category")
        balance = Decimal("0")

    budget = None
    due_date = None
    last_payment_date = None

    if category == AccountCategory.EXPENSES:
        budget = validate_amount(form.budget, "budget") if form.budget.strip() else Decimal("0")
    elif category == AccountCategory.LIABILITIES:
        if form.due_date.strip():
            due_date = validate_date(form.due_date.strip(), "due_date")
        if form.last_payment_date.strip():
            last_payment_date = validate_date(form.last_payment_date.strip(), "last_payment_date")

    return Account(
        name=name,
        category=category,
        include_in_net_worth=form.include_in_net_worth,
        current_balance=balance,
        budget=budget,
        due_date=due_date,
        last_payment_date=last_payment_date,
    )


def validate_recurrence(
    form: RecurrenceForm,
    recurrence_id: str = "",
    today: Optional[date] = None,
) -> Recurrence:
    """Validate a recurrence form and schedule its next date."""
    day = validate_day_of_month(form.day_of_month)

    if not form.from_account or not form.to_account:
        raise FormValidationError("Please select both From and To accounts", "from_account")

    description = validate_text(
        form.description, MAX_DESCRIPTION_LENGTH, "Description", "description"
    )
    amount = validate_amount(form.amount)

    return Recurrence(
        id=recurrence_id,
        from_account=form.from_account,
        to_account=form.to_account,
        description=description,
        amount=amount,
        day_of_month=day,
        next_date=next_occurrence(day, today),
    )


def validate_note(form: NoteForm, note_id: str = "", created: Optional[str] = None) -> Note:
    heading = validate_text(form.heading, MAX_INPUT_LENGTH, "Heading", "heading")
    content = validate_text(form.content, MAX_NOTE_CONTENT_LENGTH, "Content", "content")
    return Note(id=note_id, heading=heading, content=content, created=created)


def validate_password_change(old_password: str, new_password: str, confirm_password: Optional[str]) -> None:
    """Check a password change before it is sent."""
    if not old_password:
        raise FormValidationError("Please enter your current password", "old_password")
    if not new_password:
        raise FormValidationError("Please enter a new password", "new_password")
    if confirm_password is not None and new_password != confirm_password:
        raise FormValidationError("New passwords do not match!", "confirm_password")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", "new_password"
        )
