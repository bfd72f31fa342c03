"""
Streamlit Frontend for Arthik

A thin front end over the client engine. Every button builds a typed
Action and hands it to the dispatcher; what gets drawn comes only from the
view models the engine pushed into StreamlitUI.

DESIGN PRINCIPLES:
1. The engine decides, the page only draws
2. Destructive steps ask first (two-step confirmation)
3. One notice per failed operation, shown at the top of the page
4. Charts are read from the store's registry, never built here

Streamlit reruns this script on every interaction, so the client, its
event loop and the UI adapter live in st.session_state for the lifetime of
the browser session.
"""

import asyncio
from collections import deque
from datetime import date, datetime
from typing import Any, Optional

import streamlit as st

from arthik.config import validate_all_settings
from arthik.models import actions as a
from arthik.models.entities import AccountCategory, EntityKind
from arthik.models.preferences import Accent, Theme
from arthik.models.views import (
    AccountOption,
    AnyView,
    Notice,
    NoticeLevel,
    Screen,
    Tab,
    ViewRegion,
)
from arthik.orchestrator import ArthikClient, create_app_components
from arthik.services.charts.interface import ChartName
from arthik.ui.interface import UserInterface


# Page configuration
st.set_page_config(
    page_title="Arthik",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .positive-amount {
        color: #10b981;
        font-weight: bold;
    }
    .negative-amount {
        color: #ef4444;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)

TAB_LABELS = {
    Tab.DASHBOARD: "📊 Dashboard",
    Tab.LEDGER: "📒 Ledger",
    Tab.ACCOUNTS: "🏦 Accounts",
    Tab.PLANNER: "🗓️ Planner",
}


class StreamlitUI(UserInterface):
    """
    UI port backed by st.session_state.

    Views are kept per region and drawn on the next rerun. Confirmation is
    two-step: the first `confirm` call records the question and answers no;
    once the user agrees, the same action is dispatched again and the
    recorded answer is yes.
    """

    def __init__(self):
        self.screen = Screen.LOGIN
        self.active_tab = Tab.DASHBOARD
        self.views: dict[ViewRegion, AnyView] = {}
        self.notices: deque[Notice] = deque()
        self.pending_question: Optional[str] = None
        self._approved: Optional[str] = None

    def show_screen(self, screen: Screen) -> None:
        self.screen = screen
        if screen == Screen.LOGIN:
            self.views.clear()

    def activate_tab(self, tab: Tab) -> None:
        self.active_tab = tab

    def render(self, region: ViewRegion, view: AnyView) -> None:
        self.views[region] = view

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def confirm(self, message: str) -> bool:
        if self._approved == message:
            self._approved = None
            return True
        self.pending_question = message
        return False

    def approve(self) -> None:
        self._approved = self.pending_question
        self.pending_question = None

    def dismiss(self) -> None:
        self.pending_question = None


def get_loop() -> asyncio.AbstractEventLoop:
    """One event loop per browser session, reused across reruns."""
    if "loop" not in st.session_state:
        st.session_state.loop = asyncio.new_event_loop()
    return st.session_state.loop


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    return get_loop().run_until_complete(coro)


def get_client() -> tuple[ArthikClient, StreamlitUI]:
    """Get or create the client of this browser session."""
    if "client" not in st.session_state:
        ui = StreamlitUI()
        client = create_app_components(ui)
        st.session_state.ui = ui
        st.session_state.client = client
        run_async(client.start())
    return st.session_state.client, st.session_state.ui


def dispatch(action: a.Action) -> Any:
    """Dispatch an action; remember it if it is waiting on a confirmation."""
    client, ui = get_client()
    result = run_async(client.dispatch(action))
    if ui.pending_question is not None:
        st.session_state.pending_action = action
    return result


def option_values(options: tuple[AccountOption, ...]) -> list[str]:
    return [""] + [option.value for option in options]


def option_label(options: tuple[AccountOption, ...]):
    labels = {option.value: option.label for option in options}
    return lambda value: labels.get(value, "Select account")


def index_of(values: list[str], value: str) -> int:
    return values.index(value) if value in values else 0


def account_options() -> tuple[AccountOption, ...]:
    _, ui = get_client()
    view = ui.views.get(ViewRegion.ACCOUNT_OPTIONS)
    return view.options if view is not None else ()


# =============================================================================
# NOTICES & CONFIRMATION
# =============================================================================

def render_notices(ui: StreamlitUI):
    while ui.notices:
        notice = ui.notices.popleft()
        if notice.level == NoticeLevel.ERROR:
            st.error(notice.message)
        elif notice.level == NoticeLevel.WARNING:
            st.warning(notice.message)
        elif notice.level == NoticeLevel.SUCCESS:
            st.success(notice.message)
        else:
            st.info(notice.message)


def render_confirmation(ui: StreamlitUI):
    if ui.pending_question is None:
        return

    st.warning(ui.pending_question)
    col1, col2 = st.columns(2)
    with col1:
        if st.button("✅ Yes", type="primary", key="confirm_yes"):
            ui.approve()
            action = st.session_state.pop("pending_action", None)
            if action is not None:
                dispatch(action)
            st.rerun()
    with col2:
        if st.button("❌ No", key="confirm_no"):
            ui.dismiss()
            st.session_state.pop("pending_action", None)
            st.rerun()


# =============================================================================
# LOGIN
# =============================================================================

def render_login_page():
    st.title("💰 Arthik")
    st.markdown("Personal finance, one ledger.")

    with st.form("login_form"):
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", type="primary")

    if submitted:
        dispatch(a.Login(password=password))
        st.rerun()


# =============================================================================
# DASHBOARD
# =============================================================================

def render_chart(client: ArthikClient, name: ChartName):
    handle = client.state.get_chart(name)
    if handle is None or handle.figure is None:
        return
    st.plotly_chart(handle.figure, use_container_width=True, key=f"chart_{name.value}")


def render_dashboard_tab(client: ArthikClient, ui: StreamlitUI):
    view = ui.views.get(ViewRegion.DASHBOARD)
    if view is None:
        st.info("Loading dashboard...")
        return

    columns = st.columns(len(view.tiles) or 1)
    for column, tile in zip(columns, view.tiles):
        column.metric(tile.label, tile.value)

    st.markdown("---")
    columns = st.columns(len(view.quick_stats) or 1)
    for column, stat in zip(columns, view.quick_stats):
        column.metric(stat.label, stat.value, stat.caption,
                      delta_color="normal" if stat.positive else "inverse")

    col1, col2 = st.columns(2)
    with col1:
        render_chart(client, ChartName.MONTHLY_OVERVIEW)
        render_chart(client, ChartName.PROGRESS)
    with col2:
        render_chart(client, ChartName.BUDGET)
        render_chart(client, ChartName.ASSET_DISTRIBUTION)

    for section in view.pill_sections:
        with st.expander(f"{section.label} ({section.count})"):
            for pill in section.pills:
                st.markdown(f"**{pill.name}** · {pill.amount_label}")


# =============================================================================
# LEDGER
# =============================================================================

def transaction_fields(prefix: str, options, values: Optional[dict] = None) -> a.TransactionForm:
    values = values or {}
    choices = option_values(options)
    label = option_label(options)
    now = datetime.now()

    col1, col2 = st.columns(2)
    with col1:
        from_account = st.selectbox("From", choices, format_func=label, key=f"{prefix}_from",
                                    index=index_of(choices, values.get("from_account", "")))
        description = st.text_input("Description", value=values.get("description", ""),
                                    key=f"{prefix}_description")
        day = st.date_input("Date", key=f"{prefix}_date",
                            value=date.fromisoformat(values["date"]) if values.get("date") else now.date())
    with col2:
        to_account = st.selectbox("To", choices, format_func=label, key=f"{prefix}_to",
                                  index=index_of(choices, values.get("to_account", "")))
        amount = st.text_input("Amount", value=values.get("amount", ""), key=f"{prefix}_amount")
        moment = st.time_input("Time", key=f"{prefix}_time",
                               value=datetime.strptime(values["time"], "%H:%M").time()
                               if values.get("time") else now.time())

    return a.TransactionForm(
        from_account=from_account,
        to_account=to_account,
        description=description,
        amount=amount,
        date=day.isoformat() if day else "",
        time=moment.strftime("%H:%M") if moment else "",
    )


def render_ledger_tab(ui: StreamlitUI):
    view = ui.views.get(ViewRegion.LEDGER)
    options = account_options()

    if st.button("➕ Add Transaction", key="open_transaction_form"):
        dispatch(a.OpenCreateForm(entity=EntityKind.TRANSACTION))
        st.rerun()

    if view is not None and view.show_create_form:
        with st.form("create_transaction"):
            form = transaction_fields("new_txn", options)
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("Save", type="primary")
            cancel = col2.form_submit_button("Cancel")
        if save:
            dispatch(a.CreateTransaction(form=form))
            st.rerun()
        if cancel:
            dispatch(a.CloseCreateForm(entity=EntityKind.TRANSACTION))
            st.rerun()

    if view is None:
        return
    if view.empty_message:
        st.info(view.empty_message)
        return

    for row in view.rows:
        if row.is_editing:
            edit = row.edit_form
            with st.form(f"edit_txn_{row.id}"):
                form = transaction_fields(f"edit_{row.id}", edit.account_options, edit.model_dump())
                col1, col2 = st.columns(2)
                save = col1.form_submit_button("Save", type="primary")
                cancel = col2.form_submit_button("Cancel")
            if save:
                dispatch(a.SaveTransaction(transaction_id=row.id, form=form))
                st.rerun()
            if cancel:
                dispatch(a.CancelTransactionEdit())
                st.rerun()
            continue

        css = "positive-amount" if row.is_positive else "negative-amount"
        col1, col2, col3, col4, col5 = st.columns([2, 3, 3, 1, 1])
        col1.markdown(f"{row.date_label}<br/><small>{row.time_label}</small>", unsafe_allow_html=True)
        col2.markdown(f"**{row.description}**<br/><small>{row.from_account} → {row.to_account}</small>",
                      unsafe_allow_html=True)
        col3.markdown(f'<span class="{css}">{row.amount_label}</span>', unsafe_allow_html=True)
        if col4.button("✏️", key=f"edit_{row.id}"):
            dispatch(a.EditTransaction(transaction_id=row.id))
            st.rerun()
        if col5.button("🗑️", key=f"delete_{row.id}"):
            dispatch(a.DeleteTransaction(transaction_id=row.id))
            st.rerun()

    pagination = view.pagination
    col1, col2, col3 = st.columns([1, 2, 1])
    if col1.button("◀ Previous", disabled=not pagination.has_previous, key="page_prev"):
        dispatch(a.ChangePage(delta=-1))
        st.rerun()
    col2.markdown(f"<center>{pagination.label}</center>", unsafe_allow_html=True)
    if col3.button("Next ▶", disabled=not pagination.has_next, key="page_next"):
        dispatch(a.ChangePage(delta=1))
        st.rerun()


# =============================================================================
# ACCOUNTS
# =============================================================================

def account_fields(prefix: str, values: Optional[dict] = None, category_locked: bool = False) -> a.AccountForm:
    values = values or {}
    categories = [c.value for c in AccountCategory]
    current = values.get("category") or categories[0]
    if isinstance(current, AccountCategory):
        current = current.value

    name = st.text_input("Name", value=values.get("name", ""), key=f"{prefix}_name")
    category = st.selectbox("Category", categories, index=index_of(categories, current),
                            disabled=category_locked, key=f"{prefix}_category")
    include = st.checkbox("Include in net worth", value=values.get("include_in_net_worth", True),
                          key=f"{prefix}_include")
    budget = st.text_input("Monthly budget (Expenses)", value=values.get("budget") or "",
                           key=f"{prefix}_budget")
    due_date = st.text_input("Next due date (Liabilities, YYYY-MM-DD)",
                             value=values.get("due_date") or "", key=f"{prefix}_due")
    last_payment = st.text_input("Last payment date (Liabilities, YYYY-MM-DD)",
                                 value=values.get("last_payment_date") or "", key=f"{prefix}_paid")

    return a.AccountForm(
        name=name,
        category=category,
        include_in_net_worth=include,
        budget=budget,
        due_date=due_date,
        last_payment_date=last_payment,
    )


def render_accounts_tab(ui: StreamlitUI):
    view = ui.views.get(ViewRegion.ACCOUNTS)

    if st.button("➕ Add Account", key="open_account_form"):
        dispatch(a.OpenCreateForm(entity=EntityKind.ACCOUNT))
        st.rerun()

    if view is not None and view.show_create_form:
        with st.form("create_account"):
            form = account_fields("new_acct")
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("Save", type="primary")
            cancel = col2.form_submit_button("Cancel")
        if save:
            dispatch(a.CreateAccount(form=form))
            st.rerun()
        if cancel:
            dispatch(a.CloseCreateForm(entity=EntityKind.ACCOUNT))
            st.rerun()

    if view is None:
        return
    if view.empty_message:
        st.info(view.empty_message)
        return

    for group in view.groups:
        st.subheader(group.category.value)
        for row in group.rows:
            if row.is_editing:
                with st.form(f"edit_acct_{row.name}"):
                    form = account_fields(f"edit_{row.name}", row.edit_form.model_dump(),
                                          category_locked=True)
                    col1, col2 = st.columns(2)
                    save = col1.form_submit_button("Save", type="primary")
                    cancel = col2.form_submit_button("Cancel")
                if save:
                    dispatch(a.SaveAccount(original_name=row.edit_form.original_name, form=form))
                    st.rerun()
                if cancel:
                    dispatch(a.CancelAccountEdit())
                    st.rerun()
                continue

            col1, col2, col3, col4 = st.columns([3, 2, 1, 1])
            details = " · ".join(f"{label}: {value}" for label, value in row.details)
            col1.markdown(f"**{row.name}**<br/><small>{details}</small>", unsafe_allow_html=True)
            col2.markdown(f"{row.balance_label}<br/><small>{row.net_worth_label}</small>",
                          unsafe_allow_html=True)
            if col3.button("✏️", key=f"edit_acct_btn_{row.name}"):
                dispatch(a.EditAccount(name=row.name))
                st.rerun()
            if col4.button("🗑️", key=f"delete_acct_{row.name}"):
                dispatch(a.DeleteAccount(name=row.name))
                st.rerun()


# =============================================================================
# PLANNER
# =============================================================================

def recurrence_fields(prefix: str, options, values: Optional[dict] = None) -> a.RecurrenceForm:
    values = values or {}
    choices = option_values(options)
    label = option_label(options)

    day = st.text_input("Day of month", value=str(values.get("day_of_month", "")), key=f"{prefix}_day")
    col1, col2 = st.columns(2)
    from_account = col1.selectbox("From", choices, format_func=label, key=f"{prefix}_from",
                                  index=index_of(choices, values.get("from_account", "")))
    to_account = col2.selectbox("To", choices, format_func=label, key=f"{prefix}_to",
                                index=index_of(choices, values.get("to_account", "")))
    description = st.text_input("Description", value=values.get("description", ""), key=f"{prefix}_desc")
    amount = st.text_input("Amount", value=values.get("amount", ""), key=f"{prefix}_amount")

    return a.RecurrenceForm(
        day_of_month=day,
        from_account=from_account,
        to_account=to_account,
        description=description,
        amount=amount,
    )


def note_fields(prefix: str, values: Optional[dict] = None) -> a.NoteForm:
    values = values or {}
    heading = st.text_input("Heading", value=values.get("heading", ""), key=f"{prefix}_heading")
    content = st.text_area("Content", value=values.get("content", ""), key=f"{prefix}_content")
    return a.NoteForm(heading=heading, content=content)


def render_recurrences(ui: StreamlitUI):
    st.subheader("🔁 Recurring Transactions")
    view = ui.views.get(ViewRegion.RECURRENCES)
    options = account_options()

    if st.button("➕ Add Recurring", key="open_recurrence_form"):
        dispatch(a.OpenCreateForm(entity=EntityKind.RECURRENCE))
        st.rerun()

    if view is not None and view.show_create_form:
        with st.form("create_recurrence"):
            form = recurrence_fields("new_rec", options)
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("Save", type="primary")
            cancel = col2.form_submit_button("Cancel")
        if save:
            dispatch(a.CreateRecurrence(form=form))
            st.rerun()
        if cancel:
            dispatch(a.CloseCreateForm(entity=EntityKind.RECURRENCE))
            st.rerun()

    if view is None:
        return
    if view.empty_message:
        st.info(view.empty_message)
        return

    for row in view.rows:
        if row.is_editing:
            edit = row.edit_form
            with st.form(f"edit_rec_{row.id}"):
                form = recurrence_fields(f"edit_{row.id}", edit.account_options, edit.model_dump())
                col1, col2 = st.columns(2)
                save = col1.form_submit_button("Save", type="primary")
                cancel = col2.form_submit_button("Cancel")
            if save:
                dispatch(a.SaveRecurrence(recurrence_id=row.id, form=form))
                st.rerun()
            if cancel:
                dispatch(a.CancelRecurrenceEdit())
                st.rerun()
            continue

        col1, col2, col3, col4, col5 = st.columns([3, 2, 1, 1, 1])
        col1.markdown(f"**{row.description}**<br/><small>{row.route_label}</small>", unsafe_allow_html=True)
        col2.markdown(f"{row.amount_label}<br/><small>Next: {row.next_date_label}</small>",
                      unsafe_allow_html=True)
        if col3.button("▶️", key=f"apply_rec_{row.id}", help="Apply now"):
            dispatch(a.ApplyRecurrence(recurrence_id=row.id))
            st.rerun()
        if col4.button("✏️", key=f"edit_rec_btn_{row.id}"):
            dispatch(a.EditRecurrence(recurrence_id=row.id))
            st.rerun()
        if col5.button("🗑️", key=f"delete_rec_{row.id}"):
            dispatch(a.DeleteRecurrence(recurrence_id=row.id))
            st.rerun()


def render_notes(ui: StreamlitUI):
    st.subheader("📝 Notes")
    view = ui.views.get(ViewRegion.NOTES)

    if st.button("➕ Add Note", key="open_note_form"):
        dispatch(a.OpenCreateForm(entity=EntityKind.NOTE))
        st.rerun()

    if view is not None and view.show_create_form:
        with st.form("create_note"):
            form = note_fields("new_note")
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("Save", type="primary")
            cancel = col2.form_submit_button("Cancel")
        if save:
            dispatch(a.CreateNote(form=form))
            st.rerun()
        if cancel:
            dispatch(a.CloseCreateForm(entity=EntityKind.NOTE))
            st.rerun()

    if view is None:
        return
    if view.empty_message:
        st.info(view.empty_message)
        return

    for card in view.cards:
        if card.is_editing:
            with st.form(f"edit_note_{card.id}"):
                form = note_fields(f"edit_{card.id}", card.edit_form.model_dump())
                col1, col2 = st.columns(2)
                save = col1.form_submit_button("Save", type="primary")
                cancel = col2.form_submit_button("Cancel")
            if save:
                dispatch(a.SaveNote(note_id=card.id, form=form))
                st.rerun()
            if cancel:
                dispatch(a.CancelNoteEdit())
                st.rerun()
            continue

        with st.container(border=True):
            st.markdown(f"**{card.heading}**  \n<small>{card.created_label}</small>", unsafe_allow_html=True)
            st.markdown(card.content)
            col1, col2 = st.columns(2)
            if col1.button("✏️ Edit", key=f"edit_note_btn_{card.id}"):
                dispatch(a.EditNote(note_id=card.id))
                st.rerun()
            if col2.button("🗑️ Delete", key=f"delete_note_{card.id}"):
                dispatch(a.DeleteNote(note_id=card.id))
                st.rerun()


def render_planner_tab(ui: StreamlitUI):
    col1, col2 = st.columns(2)
    with col1:
        render_recurrences(ui)
    with col2:
        render_notes(ui)


# =============================================================================
# SETTINGS SIDEBAR
# =============================================================================

def render_settings_sidebar(client: ArthikClient):
    preferences = client.settings.preferences

    st.sidebar.title("💰 Arthik")
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Display")

    dark = st.sidebar.toggle("Dark mode", value=preferences.dark_mode)
    if dark != preferences.dark_mode:
        dispatch(a.ChangeTheme(theme=Theme.DARK if dark else Theme.LIGHT))
        st.rerun()

    hide = st.sidebar.toggle("Hide amounts", value=preferences.hide_amounts)
    if hide != preferences.hide_amounts:
        dispatch(a.ToggleHideAmounts(enabled=hide))
        st.rerun()

    accents = list(Accent)
    accent = st.sidebar.selectbox("Accent", accents, index=accents.index(preferences.accent),
                                  format_func=lambda x: x.value.title())
    if accent != preferences.accent:
        dispatch(a.ChangeAccent(accent=accent))
        st.rerun()

    compact = st.sidebar.toggle("Compact charts", value=client.dashboard.compact)
    if compact != client.dashboard.compact:
        client.dashboard.compact = compact
        dispatch(a.Resize())
        run_async(client.navigation.debouncer.wait())
        st.rerun()

    st.sidebar.markdown("---")
    with st.sidebar.expander("🔑 Change Password"):
        with st.form("change_password"):
            old = st.text_input("Current password", type="password")
            new = st.text_input("New password", type="password")
            confirm = st.text_input("Confirm new password", type="password")
            submitted = st.form_submit_button("Change")
        if submitted:
            dispatch(a.ChangePassword(old_password=old, new_password=new, confirm_password=confirm))
            st.rerun()

    with st.sidebar.expander("🩺 Connection Status"):
        status = validate_all_settings()
        for key in ("api", "client"):
            if status.get(key, False):
                st.success(f"✅ {key} settings")
            else:
                st.error(f"❌ {key}: {status.get(f'{key}_error', 'Not configured')}")

    with st.sidebar.expander("📜 Recent Activity"):
        for event in client.audit.recent_events(limit=20):
            st.caption(f"{event.timestamp:%H:%M:%S} · {event.description}")

    st.sidebar.markdown("---")
    if st.sidebar.button("🚪 Logout"):
        dispatch(a.Logout())
        st.rerun()


# =============================================================================
# MAIN
# =============================================================================

def main():
    """Main application entry point."""
    client, ui = get_client()

    render_notices(ui)
    render_confirmation(ui)

    if ui.screen == Screen.LOGIN:
        render_login_page()
        return

    render_settings_sidebar(client)

    tabs = list(TAB_LABELS)
    selected = st.radio(
        "Navigate to:",
        tabs,
        index=tabs.index(ui.active_tab),
        format_func=lambda tab: TAB_LABELS[tab],
        horizontal=True,
        label_visibility="collapsed",
    )
    if selected != ui.active_tab:
        dispatch(a.SelectTab(tab=selected))
        st.rerun()

    if ui.active_tab == Tab.DASHBOARD:
        render_dashboard_tab(client, ui)
    elif ui.active_tab == Tab.LEDGER:
        render_ledger_tab(ui)
    elif ui.active_tab == Tab.ACCOUNTS:
        render_accounts_tab(ui)
    elif ui.active_tab == Tab.PLANNER:
        render_planner_tab(ui)


if __name__ == "__main__":
    main()
