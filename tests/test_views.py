"""Tests for the pure view builders."""

import pytest
from datetime import datetime, date, timezone
from decimal import Decimal

from arthik.models.entities import (
    Account,
    AccountCategory,
    BudgetExpense,
    DashboardPayload,
    MonthlyReport,
    Note,
    Recurrence,
    Transaction,
)
from arthik.models.preferences import Preferences
from arthik.services.storage import MemoryStorage
from arthik.state import AppState, SessionStore
from arthik.views.accounts import EMPTY_ACCOUNTS_MESSAGE, build_accounts_view
from arthik.views.dashboard import build_dashboard_view, compute_ratios
from arthik.views.formatting import Formatter, format_datetime, format_month
from arthik.views.ledger import build_ledger_view, clamp_page, total_pages
from arthik.views.planner import (
    EMPTY_NOTES_MESSAGE,
    EMPTY_RECURRENCES_MESSAGE,
    build_notes_view,
    build_recurrences_view,
)


FORMATTER = Formatter()


@pytest.fixture
def state(charts) -> AppState:
    return AppState(SessionStore(MemoryStorage()), charts)


def transaction(tid: str, amount: str) -> Transaction:
    return Transaction(
        id=tid,
        from_account="Bank",
        to_account="Food",
        description="Lunch",
        amount=Decimal(amount),
        date=datetime(2024, 3, 5, 13, 45, tzinfo=timezone.utc),
    )


class TestFormatting:
    """Tests for display formatting."""

    def test_money(self):
        """Test amounts get the currency and two decimals."""
        assert FORMATTER.money(Decimal("1234.5")) == "Rs 1234.50"

    def test_hidden_money(self):
        """Test hidden amounts keep the currency and mask the figure."""
        formatter = Formatter.from_preferences(Preferences(hide_amounts=True))
        assert formatter.money(Decimal("99")) == "Rs ••••"

    def test_month_label(self):
        """Test month labels from ISO dates."""
        assert format_month("2024-03-01T00:00:00Z") == "Mar 2024"
        assert format_month("soon") == "soon"

    def test_datetime_label(self):
        """Test note timestamps become readable, bad ones pass through."""
        assert format_datetime("2024-03-05T08:30:00.000Z") == "05 Mar 2024, 08:30"
        assert format_datetime("yesterday") == "yesterday"
        assert format_datetime(None) == ""


class TestDashboardView:
    """Tests for stat tiles and derived ratios."""

    def test_ratios(self):
        """Test savings rate, debt ratio and budget remaining."""
        payload = DashboardPayload(
            total_assets=Decimal("10000"),
            total_liabilities=Decimal("2500"),
            month_income=Decimal("5000"),
            month_savings=Decimal("1500"),
            month_expenses=Decimal("3500"),
            budget_vs_expenses=[BudgetExpense(category="Food", budget=Decimal("4000"))],
            historical_data=[
                MonthlyReport(date="2024-02-01", net_worth=Decimal("8000")),
                MonthlyReport(date="2024-03-01", net_worth=Decimal("10000")),
            ],
        )
        ratios = compute_ratios(payload)
        assert ratios.savings_rate == 30.0
        assert ratios.debt_to_asset == 25.0
        assert ratios.net_worth_growth == 25.0
        assert ratios.budget_remaining == Decimal("500")

    def test_ratios_without_data_are_zero(self):
        """Test empty figures give zero ratios, not errors."""
        ratios = compute_ratios(DashboardPayload(
            historical_data=[
                MonthlyReport(date="2024-02-01", net_worth=Decimal("0")),
                MonthlyReport(date="2024-03-01", net_worth=Decimal("100")),
            ],
        ))
        assert ratios.savings_rate == 0.0
        assert ratios.net_worth_growth == 0.0
        assert ratios.debt_to_asset == 0.0

    def test_quick_stat_captions(self, state):
        """Test captions flip with the figures."""
        payload = DashboardPayload(
            month_income=Decimal("100"),
            month_savings=Decimal("10"),
            month_expenses=Decimal("90"),
        )
        view = build_dashboard_view(state, FORMATTER, payload)
        captions = {stat.label: stat.caption for stat in view.quick_stats}
        assert captions["Savings Rate"] == "Keep going!"
        assert captions["Budget Remaining"] == "Over budget"
        assert captions["Net Worth Growth"] == "Growing"

    def test_tiles_default_to_zero(self, state):
        """Test the dashboard renders before any payload arrives."""
        view = build_dashboard_view(state, FORMATTER)
        assert view.tile("netWorth").value == "Rs 0.00"
        assert len(view.tiles) == 6

    def test_pills_by_category(self, state):
        """Test pills list Assets, Liabilities and Revenue accounts."""
        state.set_accounts([
            Account(name="Bank", category=AccountCategory.ASSETS, current_balance=Decimal("10")),
            Account(name="Food", category=AccountCategory.EXPENSES),
        ])
        view = build_dashboard_view(state, FORMATTER)
        sections = {s.label: s.count for s in view.pill_sections}
        assert sections == {"Assets": 1, "Liabilities": 0, "Revenue": 0}


class TestLedgerView:
    """Tests for the transaction list."""

    def test_page_math(self):
        """Test page counts and clamping."""
        assert total_pages(0, 100) == 1
        assert total_pages(250, 100) == 3
        assert clamp_page(7, 250, 100) == 3
        assert clamp_page(0, 250, 100) == 1

    def test_rows_show_absolute_amounts(self, state):
        """Test the sign only sets the colour flag."""
        state.set_transactions([transaction("t1", "-40.5"), transaction("t2", "12")])
        rows = build_ledger_view(state, 100, FORMATTER).rows
        assert rows[0].amount_label == "Rs 40.50"
        assert not rows[0].is_positive
        assert rows[1].is_positive
        assert rows[0].date_label == "05 Mar 2024"
        assert rows[0].time_label == "13:45"

    def test_editing_row_gets_prefilled_form(self, state):
        """Test only the marked row carries an edit form."""
        state.set_accounts([Account(name="Bank", category=AccountCategory.ASSETS)])
        state.set_transactions([transaction("t1", "5"), transaction("t2", "6")])
        state.set_editing_transaction_id("t2")

        rows = build_ledger_view(state, 100, FORMATTER).rows
        assert rows[0].edit_form is None
        form = rows[1].edit_form
        assert (form.date, form.time, form.amount) == ("2024-03-05", "13:45", "6")
        assert [o.value for o in form.account_options] == ["Bank"]

    def test_empty_ledger(self, state):
        """Test an empty list shows the empty message on page 1 of 1."""
        view = build_ledger_view(state, 100, FORMATTER)
        assert view.empty_message == "No transactions yet"
        assert view.pagination.label == "Page 1 of 1"


class TestAccountsView:
    """Tests for the grouped account list."""

    def test_groups_follow_category_order(self, state):
        """Test groups appear in category order and skip empty ones."""
        state.set_accounts([
            Account(name="Food", category=AccountCategory.EXPENSES, budget=Decimal("400")),
            Account(name="Card", category=AccountCategory.LIABILITIES, due_date="2024-04-05"),
            Account(name="Bank", category=AccountCategory.ASSETS, include_in_net_worth=False),
        ])
        view = build_accounts_view(state, FORMATTER)

        assert [g.category for g in view.groups] == [
            AccountCategory.ASSETS, AccountCategory.LIABILITIES, AccountCategory.EXPENSES,
        ]
        assert view.groups[0].rows[0].net_worth_label == "Not included"
        assert view.groups[1].rows[0].details == (("Next Due Date", "2024-04-05"),)
        assert view.groups[2].rows[0].details == (("Monthly Budget", "Rs 400.00"),)

    def test_edit_form_prefills_category_fields(self, state):
        """Test an Expenses edit form shows the budget and no dates."""
        state.set_accounts([Account(name="Food", category=AccountCategory.EXPENSES, budget=Decimal("400"))])
        state.set_editing_account_name("Food")
        form = build_accounts_view(state, FORMATTER).groups[0].rows[0].edit_form
        assert form.show_budget and form.budget == "400"
        assert not form.show_dates

    def test_empty(self, state):
        """Test no accounts shows the empty message."""
        assert build_accounts_view(state, FORMATTER).empty_message == EMPTY_ACCOUNTS_MESSAGE


class TestPlannerViews:
    """Tests for recurrences and notes."""

    def test_recurrence_row(self, state):
        """Test the route label and next date."""
        state.set_recurrences([Recurrence(
            id="r1", from_account="Bank", to_account="Rent", description="Rent",
            amount=Decimal("15000"), day_of_month=5, next_date=date(2024, 4, 5),
        )])
        row = build_recurrences_view(state, FORMATTER).rows[0]
        assert row.route_label == "Bank → Rent | Day 5 of month"
        assert row.next_date_label == "05 Apr"
        assert row.amount_label == "Rs 15000.00"

    def test_note_card(self, state):
        """Test cards show the creation time and the edit form when marked."""
        state.set_notes([Note(id="n1", heading="Goals", content="Save", created="2024-03-05T08:30:00Z")])
        state.set_editing_note_id("n1")
        card = build_notes_view(state).cards[0]
        assert card.created_label == "05 Mar 2024, 08:30"
        assert card.is_editing

    def test_empty_messages(self, state):
        """Test both planner lists have empty messages."""
        assert build_recurrences_view(state, FORMATTER).empty_message == EMPTY_RECURRENCES_MESSAGE
        assert build_notes_view(state).empty_message == EMPTY_NOTES_MESSAGE
