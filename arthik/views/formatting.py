"""Display formatting shared by the view builders."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Union

from arthik.models.preferences import Preferences

Number = Union[Decimal, float, int]

HIDDEN_AMOUNT = "••••"


@dataclass(frozen=True)
class Formatter:
    """Formats figures for display, honouring the hide-amounts preference."""

    currency_symbol: str = "Rs"
    hide_amounts: bool = False

    @classmethod
    def from_preferences(cls, preferences: Preferences, currency_symbol: str = "Rs") -> "Formatter":
        return cls(currency_symbol=currency_symbol, hide_amounts=preferences.hide_amounts)

    def money(self, amount: Number) -> str:
        """`Rs 1234.50`, or `Rs ••••` when amounts are hidden."""
        if self.hide_amounts:
            return f"{self.currency_symbol} {HIDDEN_AMOUNT}"
        return f"{self.currency_symbol} {Decimal(str(amount)):.2f}"

    def percent(self, value: float) -> str:
        return f"{value:.1f}%"


def format_date(value: Union[date, datetime]) -> str:
    """`05 Mar 2024`"""
    return value.strftime("%d %b %Y")


def format_short_date(value: Union[date, datetime]) -> str:
    """`05 Mar`"""
    return value.strftime("%d %b")


def format_time(value: datetime) -> str:
    return value.strftime("%H:%M")


def format_datetime(value: Union[str, datetime, None]) -> str:
    """
    Date and time of an ISO timestamp.

    Unparseable or missing values are returned as given (or "").
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return f"{format_date(value)}, {format_time(value)}"


def format_month(value: str) -> str:
    """Month label of a YYYY-MM-DD (or longer) date string: `Mar 2024`."""
    try:
        parsed = datetime.strptime(value[:10], "%Y-%m-%d")
    except ValueError:
        return value
    return parsed.strftime("%b %Y")
