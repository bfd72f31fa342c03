"""
Shared fixtures for the Arthik tests.

No real network: the backend is an in-memory fake served through
httpx.MockTransport. The UI and the chart library are replaced by
recording doubles.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import unquote

import httpx
import pytest

from arthik.config.settings import ApiSettings, ClientSettings
from arthik.models.views import AnyView, Notice, NoticeLevel, Screen, Tab, ViewRegion
from arthik.orchestrator import ArthikClient, create_app_components
from arthik.services.charts.interface import ChartBackend, ChartConfig
from arthik.services.storage.local import MemoryStorage
from arthik.ui.interface import UserInterface


BASE_URL = "http://testserver/api"
PASSWORD = "secret123"


# =============================================================================
# UI DOUBLE
# =============================================================================

class FakeUI(UserInterface):
    """Records everything the engine pushes; answers confirmations with `confirm_answer`."""

    def __init__(self):
        self.screens: list[Screen] = []
        self.tabs: list[Tab] = []
        self.views: dict[ViewRegion, AnyView] = {}
        self.render_counts: dict[ViewRegion, int] = {}
        self.notices: list[Notice] = []
        self.prompts: list[str] = []
        self.confirm_answer = True

    @property
    def screen(self) -> Optional[Screen]:
        return self.screens[-1] if self.screens else None

    def show_screen(self, screen: Screen) -> None:
        self.screens.append(screen)

    def activate_tab(self, tab: Tab) -> None:
        self.tabs.append(tab)

    def render(self, region: ViewRegion, view: AnyView) -> None:
        self.views[region] = view
        self.render_counts[region] = self.render_counts.get(region, 0) + 1

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def confirm(self, message: str) -> bool:
        self.prompts.append(message)
        return self.confirm_answer

    def messages(self, level: Optional[NoticeLevel] = None) -> list[str]:
        return [n.message for n in self.notices if level is None or n.level == level]


# =============================================================================
# CHART DOUBLE
# =============================================================================

@dataclass
class FakeChart:
    config: ChartConfig
    released: bool = False


class FakeChartBackend(ChartBackend):
    """Counts live handles so leaks show up as a number."""

    def __init__(self):
        self.rendered: list[FakeChart] = []

    def render(self, config: ChartConfig) -> FakeChart:
        chart = FakeChart(config=config)
        self.rendered.append(chart)
        return chart

    def release(self, handle: FakeChart) -> None:
        handle.released = True

    @property
    def live(self) -> list[FakeChart]:
        return [c for c in self.rendered if not c.released]


# =============================================================================
# BACKEND DOUBLE
# =============================================================================

@dataclass
class FakeBackend:
    """
    In-memory stand-in for the REST API.

    `overrides` maps (method, path) to a queue of responses returned instead
    of the normal behaviour, one per request. `delays` holds the answer to
    (method, path) back for a number of seconds, so responses can be made to
    arrive in any order.
    """

    password: str = PASSWORD
    accounts: list[dict] = field(default_factory=list)
    transactions: list[dict] = field(default_factory=list)
    recurrences: list[dict] = field(default_factory=list)
    notes: list[dict] = field(default_factory=list)
    dashboard: dict = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    overrides: dict[tuple[str, str], list[httpx.Response]] = field(default_factory=dict)
    delays: dict[tuple[str, str], float] = field(default_factory=dict)
    token: Optional[str] = None
    logins: int = 0
    next_id: int = 1

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle_async)

    def override(self, method: str, path: str, response: httpx.Response) -> None:
        self.overrides.setdefault((method, path), []).append(response)

    def delay(self, method: str, path: str, seconds: float) -> None:
        self.delays[(method, path)] = seconds

    def expire_session(self) -> None:
        self.token = None

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method)
            and (path is None or self._path(r) == path)
        ]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return unquote(request.url.path[len("/api"):])

    def _new_id(self, prefix: str) -> str:
        value = f"{prefix}{self.next_id}"
        self.next_id += 1
        return value

    async def handle_async(self, request: httpx.Request) -> httpx.Response:
        seconds = self.delays.get((request.method, self._path(request)))
        if seconds:
            await asyncio.sleep(seconds)
        return self.handle(request)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, self._path(request)

        queued = self.overrides.get((method, path))
        if queued:
            return queued.pop(0)

        body = json.loads(request.content) if request.content else None

        if path == "/login":
            if body and body.get("password") == self.password:
                self.logins += 1
                self.token = f"token-{self.logins}"
                return httpx.Response(200, json={
                    "success": True,
                    "token": self.token,
                    "csrfToken": f"csrf-{self.logins}",
                })
            return httpx.Response(200, json={"success": False, "message": "Invalid password"})

        if request.headers.get("Authorization") != f"Bearer {self.token}" or self.token is None:
            return httpx.Response(401, json={"error": "Unauthorized"})

        if path == "/logout":
            self.token = None
            return httpx.Response(200, json={"success": True})

        if path == "/dashboard":
            return httpx.Response(200, json=self.dashboard)

        if path == "/settings":
            if method == "GET":
                return httpx.Response(200, json={"theme": "light"})
            if "newPassword" in body:
                if body["oldPassword"] != self.password:
                    return httpx.Response(200, json={"success": False, "error": "Incorrect password"})
                self.password = body["newPassword"]
                return httpx.Response(200, json={"success": True, "message": "Password updated"})
            return httpx.Response(200, json={"success": True})

        if path.startswith("/recurrence/apply/"):
            return httpx.Response(200, json={"success": True})

        for prefix, items, key, id_prefix in (
            ("/accounts", self.accounts, "name", None),
            ("/transactions", self.transactions, "id", "t"),
            ("/recurrence", self.recurrences, "id", "r"),
            ("/notes", self.notes, "id", "n"),
        ):
            if path == prefix and method == "GET":
                return httpx.Response(200, json=items)
            if path == prefix and method == "POST":
                return self._upsert(items, key, id_prefix, body)
            if path.startswith(prefix + "/") and method == "DELETE":
                target = path[len(prefix) + 1:]
                items[:] = [item for item in items if item[key] != target]
                return httpx.Response(200, json={"success": True})

        return httpx.Response(404, json={"error": "Not found"})

    def _upsert(self, items: list[dict], key: str, id_prefix: Optional[str], body: dict) -> httpx.Response:
        record = dict(body)
        if id_prefix is not None and not record.get("id"):
            record["id"] = self._new_id(id_prefix)
        if "time" in record and "date" in record:
            record["date"] = f"{record.pop('date')}T{record.pop('time')}:00Z"
        for i, item in enumerate(items):
            if item[key] == record[key]:
                items[i] = record
                break
        else:
            items.append(record)
        return httpx.Response(200, json={"success": True})


# =============================================================================
# DATA
# =============================================================================

def make_account(name: str, category: str = "Assets", balance: float = 0, **extra: Any) -> dict:
    return {
        "name": name,
        "category": category,
        "includeInNetWorth": True,
        "currentBalance": balance,
        **extra,
    }


def make_transaction(tid: str, amount: float = 100.0, day: int = 1, **extra: Any) -> dict:
    return {
        "id": tid,
        "from": "Salary",
        "to": "Bank",
        "description": f"Transaction {tid}",
        "amount": amount,
        "date": f"2024-03-{day:02d}T09:30:00Z",
        **extra,
    }


def make_dashboard(**extra: Any) -> dict:
    base = {
        "totalAssets": 50000,
        "totalLiabilities": 10000,
        "netWorth": 40000,
        "monthIncome": 8000,
        "monthExpenses": 5000,
        "monthSavings": 3000,
        "budgetVsExpenses": [{"category": "Food", "budget": 4000, "actual": 3500}],
        "historicalData": [
            {"date": "2024-02-01", "netWorth": 36000, "liabilities": 11000, "savings": 2500},
            {"date": "2024-03-01", "netWorth": 40000, "liabilities": 10000, "savings": 3000},
        ],
    }
    base.update(extra)
    return base


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def ui() -> FakeUI:
    return FakeUI()


@pytest.fixture
def charts() -> FakeChartBackend:
    return FakeChartBackend()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(
        accounts=[
            make_account("Bank", "Assets", 25000),
            make_account("Salary", "Revenue", 0),
            make_account("Food", "Expenses", 0, budget=4000),
        ],
        transactions=[make_transaction("t100"), make_transaction("t101", amount=-40.5, day=2)],
        dashboard=make_dashboard(),
    )


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(base_url=BASE_URL, retry_attempts=2, retry_wait_min=0, retry_wait_max=0)


@pytest.fixture
def client_settings() -> ClientSettings:
    return ClientSettings(page_size=100, resize_debounce_seconds=0.25)


@pytest.fixture
def session_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def preferences_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def client(
    ui, charts, backend, api_settings, client_settings, session_storage, preferences_storage
) -> ArthikClient:
    return create_app_components(
        ui,
        api_settings=api_settings,
        client_settings=client_settings,
        session_storage=session_storage,
        preferences_storage=preferences_storage,
        chart_backend=charts,
        transport=backend.transport(),
    )


async def login(client: ArthikClient, password: str = PASSWORD) -> bool:
    """Log in through the auth controller."""
    return await client.auth.login(password)
