"""
Dashboard View

Formats the backend's aggregate figures into fixed stat tiles and derives
the display-only ratios shown as quick stats. Nothing computed here is
ever sent back or stored; the backend stays the source of truth for every
balance and total.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from arthik.models.entities import AccountCategory, DashboardPayload
from arthik.models.views import (
    AccountPill,
    DashboardView,
    PillSection,
    QuickStat,
    StatTile,
)
from arthik.services.charts.interface import ChartName
from arthik.state.store import AppState
from arthik.views.formatting import Formatter


# Slot key -> label, in display order
TILE_LABELS: dict[str, str] = {
    "totalAssets": "Total Assets",
    "totalLiabilities": "Total Liabilities",
    "netWorth": "Net Worth",
    "monthIncome": "Income",
    "monthExpenses": "Expenses",
    "monthSavings": "Savings",
}

PILL_CATEGORIES = (
    AccountCategory.ASSETS,
    AccountCategory.LIABILITIES,
    AccountCategory.REVENUE,
)

EXCELLENT_SAVINGS_RATE = 20.0


@dataclass(frozen=True)
class DashboardRatios:
    """Display-only figures derived from one dashboard payload."""

    savings_rate: float
    net_worth_growth: float
    debt_to_asset: float
    budget_remaining: Decimal


def _percentage(part: Decimal, whole: Decimal) -> float:
    return float(part / whole * 100)


def compute_ratios(payload: DashboardPayload) -> DashboardRatios:
    """
    Derive the quick-stat ratios.

    - savings rate: savings / income, 0 without income
    - net-worth growth: last two history points, 0 with fewer than two
      points or a zero previous value
    - debt to asset: liabilities / assets, 0 without assets
    - budget remaining: sum of budgets minus this month's expenses
    """
    savings_rate = 0.0
    if payload.month_income > 0:
        savings_rate = _percentage(payload.month_savings, payload.month_income)

    growth = 0.0
    history = payload.historical_data
    if len(history) >= 2:
        latest = history[-1].net_worth
        previous = history[-2].net_worth
        if previous != 0:
            growth = _percentage(latest - previous, abs(previous))

    debt_to_asset = 0.0
    if payload.total_assets > 0:
        debt_to_asset = _percentage(payload.total_liabilities, payload.total_assets)

    total_budget = sum((item.budget for item in payload.budget_vs_expenses), Decimal("0"))

    return DashboardRatios(
        savings_rate=round(savings_rate, 1),
        net_worth_growth=round(growth, 1),
        debt_to_asset=round(debt_to_asset, 1),
        budget_remaining=total_budget - payload.month_expenses,
    )


def build_quick_stats(payload: DashboardPayload, formatter: Formatter) -> tuple[QuickStat, ...]:
    ratios = compute_ratios(payload)
    excellent = ratios.savings_rate > EXCELLENT_SAVINGS_RATE
    within_budget = ratios.budget_remaining > 0
    growing = ratios.net_worth_growth >= 0

    return (
        QuickStat(
            label="Savings Rate",
            value=formatter.percent(ratios.savings_rate),
            caption="Excellent!" if excellent else "Keep going!",
            positive=excellent,
        ),
        QuickStat(
            label="Budget Remaining",
            value=formatter.money(ratios.budget_remaining),
            caption="Within budget" if within_budget else "Over budget",
            positive=within_budget,
        ),
        QuickStat(
            label="Net Worth Growth",
            value=formatter.percent(ratios.net_worth_growth),
            caption="Growing" if growing else "Declining",
            positive=growing,
        ),
        QuickStat(
            label="Debt to Asset",
            value=formatter.percent(ratios.debt_to_asset),
            caption="Ratio",
            positive=payload.total_assets > payload.total_liabilities,
        ),
    )


def build_pill_sections(state: AppState, formatter: Formatter) -> tuple[PillSection, ...]:
    sections = []
    for category in PILL_CATEGORIES:
        pills = tuple(
            AccountPill(name=a.name, amount_label=formatter.money(a.current_balance))
            for a in state.accounts
            if a.category == category
        )
        sections.append(PillSection(category=category, label=category.value, pills=pills))
    return tuple(sections)


def build_dashboard_view(
    state: AppState,
    formatter: Formatter,
    payload: Optional[DashboardPayload] = None,
) -> DashboardView:
    """
    Build the dashboard from the stored payload.

    Without a payload (not loaded yet) every tile shows zero.
    """
    payload = payload or state.dashboard or DashboardPayload()

    figures = {
        "totalAssets": payload.total_assets,
        "totalLiabilities": payload.total_liabilities,
        "netWorth": payload.net_worth,
        "monthIncome": payload.month_income,
        "monthExpenses": payload.month_expenses,
        "monthSavings": payload.month_savings,
    }
    tiles = tuple(
        StatTile(key=key, label=label, value=formatter.money(figures[key]))
        for key, label in TILE_LABELS.items()
    )

    return DashboardView(
        tiles=tiles,
        quick_stats=build_quick_stats(payload, formatter),
        pill_sections=build_pill_sections(state, formatter),
        chart_names=tuple(name.value for name in ChartName),
    )
