"""
Core Data Models for the Arthik client

These models mirror the records the backend sends and accepts. They are
value records: the backend is the single source of truth, and the client
never derives persisted numeric state (balances, net worth) itself.

Field names are snake_case in Python and camelCase on the wire. Money is
held as Decimal and written to JSON as a number, which is what the backend
decodes into float64.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# SHARED TYPES
# =============================================================================

MAX_AMOUNT = Decimal("999999999.99")

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class WireModel(BaseModel):
    """Base for records exchanged with the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON body the backend expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountCategory(str, Enum):
    """
    Account categories.

    Closed set; a category cannot be changed once the account exists.
    """
    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSES = "Expenses"


class EntityKind(str, Enum):
    """Entity types that own a controller, a list view and an edit marker."""
    ACCOUNT = "account"
    TRANSACTION = "transaction"
    RECURRENCE = "recurrence"
    NOTE = "note"


# =============================================================================
# ENTITIES
# =============================================================================

class Account(WireModel):
    """
    A named account.

    `name` is the identity. `current_balance` is computed by the backend.
    Due/payment dates only apply to Liabilities, `budget` only to Expenses.
    """

    name: str = Field(..., min_length=1)
    category: AccountCategory
    include_in_net_worth: bool = True
    current_balance: Money = Decimal("0")
    due_date: Optional[str] = None
    last_payment_date: Optional[str] = None
    budget: Optional[Money] = None

    @field_validator('due_date', 'last_payment_date', mode='before')
    @classmethod
    def empty_date_is_none(cls, v):
        """The backend sends "" for unset dates."""
        if v == "":
            return None
        return v


class Transaction(WireModel):
    """
    A transfer between two accounts, as returned by the backend.

    Immutable once applied except by full replace-by-id.
    """

    id: str
    from_account: str = Field(..., alias="from")
    to_account: str = Field(..., alias="to")
    description: str = ""
    amount: Money
    date: datetime


class TransactionRequest(WireModel):
    """
    Transaction create/update payload.

    An empty `id` creates a new transaction; an existing id replaces it.
    """

    id: str = ""
    from_account: str = Field(..., alias="from")
    to_account: str = Field(..., alias="to")
    description: str
    amount: Money = Field(..., ge=0, le=MAX_AMOUNT)
    date: str = Field(..., description="YYYY-MM-DD")
    time: str = Field(..., description="HH:MM")


class Recurrence(WireModel):
    """A monthly recurring transfer definition."""

    id: str = ""
    from_account: str = Field(..., alias="from")
    to_account: str = Field(..., alias="to")
    description: str = ""
    amount: Money
    day_of_month: int = Field(..., ge=1, le=31)
    next_date: date

    @field_validator('next_date', mode='before')
    @classmethod
    def date_part_only(cls, v):
        """The backend sends RFC 3339 timestamps; only the date matters."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v

    @field_serializer('next_date', when_used='json')
    def serialize_next_date(self, v: date) -> str:
        return f"{v.isoformat()}T00:00:00Z"


class Note(WireModel):
    """A free-text note. An empty id means the note has not been created yet."""

    id: str = ""
    heading: str = ""
    content: str = ""
    created: Optional[str] = None


# =============================================================================
# DASHBOARD AGGREGATES
# =============================================================================

class BudgetExpense(WireModel):
    """Budget vs actual spend for one expense account."""

    category: str
    budget: Money = Decimal("0")
    actual: Money = Decimal("0")


class MonthlyReport(WireModel):
    """One point of the net-worth history."""

    date: str
    net_worth: Money = Decimal("0")
    liabilities: Money = Decimal("0")
    savings: Money = Decimal("0")


class DashboardPayload(WireModel):
    """
    Aggregate figures computed by the backend.

    Missing figures default to zero and missing lists to empty.
    """

    total_assets: Money = Decimal("0")
    total_liabilities: Money = Decimal("0")
    net_worth: Money = Decimal("0")
    month_income: Money = Decimal("0")
    month_expenses: Money = Decimal("0")
    month_savings: Money = Decimal("0")
    budget_vs_expenses: list[BudgetExpense] = Field(default_factory=list)
    historical_data: list[MonthlyReport] = Field(default_factory=list)
    csrf_token: Optional[str] = None

    @field_validator('budget_vs_expenses', 'historical_data', mode='before')
    @classmethod
    def null_list_is_empty(cls, v):
        """Go encodes a nil slice as null."""
        return v if v is not None else []


# =============================================================================
# AUTH & SETTINGS RESPONSES
# =============================================================================

class LoginResult(WireModel):
    """Response of POST /login."""

    success: bool = False
    token: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    csrf_token: Optional[str] = None


class SettingsResult(WireModel):
    """Generic success/error response used by settings and write endpoints."""

    success: bool = False
    message: Optional[str] = None
    error: Optional[str] = None
