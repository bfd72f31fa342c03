"""Client-side form validation."""

from arthik.validation.validator import (
    FormValidationError,
    next_occurrence,
    validate_account,
    validate_amount,
    validate_note,
    validate_password_change,
    validate_recurrence,
    validate_text,
    validate_transaction,
)

__all__ = [
    "FormValidationError",
    "next_occurrence",
    "validate_account",
    "validate_amount",
    "validate_note",
    "validate_password_change",
    "validate_recurrence",
    "validate_text",
    "validate_transaction",
]
