"""
Controller Base

Shared plumbing for the entity controllers:
- ClientContext bundles the collaborators every controller needs
- Loaders let one controller ask for other collections to be refreshed
  without importing the controllers that own them
- EntityController fixes the common operation shape and the single place
  where failures become user notices

Failure policy: a controller catches every API and form error, shows one
notice (none once the session has ended), logs it, and leaves the store as
it was. Nothing is re-raised to the caller.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog

from arthik.audit.logger import AuditLogger
from arthik.config.settings import ClientSettings
from arthik.models.audit import ClientEventBuilder
from arthik.models.entities import EntityKind
from arthik.models.views import Notice, NoticeLevel
from arthik.services.api.errors import (
    AuthenticationFailedError,
    RateLimitedError,
    SessionEndedError,
    SessionError,
    ValidationFailedError,
)
from arthik.services.api.gateway import ApiGateway
from arthik.state.preferences import PreferencesStore
from arthik.state.store import AppState
from arthik.ui.interface import UserInterface
from arthik.validation.validator import FormValidationError
from arthik.views.formatting import Formatter


logger = structlog.get_logger(__name__)

Loader = Callable[[], Awaitable[None]]
Renderer = Callable[[], None]


class LoadTarget(str, Enum):
    """Things that can be reloaded from the backend."""
    ACCOUNTS = "accounts"
    TRANSACTIONS = "transactions"
    RECURRENCES = "recurrences"
    NOTES = "notes"
    DASHBOARD = "dashboard"


@dataclass
class ClientContext:
    """Collaborators shared by every controller of one client session."""

    state: AppState
    gateway: ApiGateway
    ui: UserInterface
    audit: AuditLogger
    preferences: PreferencesStore
    settings: ClientSettings
    loaders: dict[LoadTarget, Loader] = field(default_factory=dict)
    account_views: list[Renderer] = field(default_factory=list)

    @property
    def formatter(self) -> Formatter:
        return Formatter.from_preferences(
            self.preferences.current, currency_symbol=self.settings.currency_symbol
        )

    def register_loader(self, target: LoadTarget, loader: Loader) -> None:
        self.loaders[target] = loader

    def add_account_view(self, render: Renderer) -> None:
        """Redraw `render` every time a fresh account list is stored."""
        self.account_views.append(render)

    async def reload(self, *targets: LoadTarget) -> None:
        """
        Reload several targets concurrently.

        Each loader handles its own failures, so one failing load never
        stops the others.
        """
        await asyncio.gather(*(self.loaders[target]() for target in targets))

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        self.ui.notify(Notice(message=message, level=level))


def report_failure(ctx: ClientContext, error: Exception, operation: str, fallback: str) -> None:
    """
    Turn a caught failure into at most one notice.

    Args:
        ctx: Client context
        error: What went wrong
        operation: Short name for logs, e.g. "load accounts"
        fallback: Notice text for transport and unknown failures
    """
    if isinstance(error, (AuthenticationFailedError, SessionEndedError)):
        # The forced logout or the logout already told the user
        logger.info("notice_suppressed", operation=operation)
        return

    if isinstance(error, FormValidationError):
        ctx.audit.log(ClientEventBuilder.precondition_failed(operation, error.message))
        ctx.notify(error.message, NoticeLevel.WARNING)
        return

    if isinstance(error, SessionError):
        ctx.audit.log(ClientEventBuilder.precondition_failed(operation, error.message))
        ctx.notify(error.message, NoticeLevel.ERROR)
        return

    if isinstance(error, RateLimitedError):
        ctx.audit.log(ClientEventBuilder.rate_limited(operation))
        ctx.notify(error.message, NoticeLevel.WARNING)
        return

    if isinstance(error, ValidationFailedError):
        ctx.audit.log_request_failed(operation, error)
        ctx.notify(error.message, NoticeLevel.ERROR)
        return

    ctx.audit.log_request_failed(operation, error)
    ctx.notify(fallback, NoticeLevel.ERROR)


class EntityController(ABC):
    """
    Common shape of the per-entity controllers.

    Subclasses implement the network calls and the view; marker, form and
    failure handling live here.
    """

    entity: EntityKind
    label: str

    def __init__(self, ctx: ClientContext):
        self._ctx = ctx

    @property
    def state(self) -> AppState:
        return self._ctx.state

    @property
    def gateway(self) -> ApiGateway:
        return self._ctx.gateway

    @property
    def ui(self) -> UserInterface:
        return self._ctx.ui

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    @abstractmethod
    async def load(self) -> None:
        """Fetch the collection, replace it in the store and render."""
        pass

    @abstractmethod
    def render(self) -> None:
        """Render this entity's view from the store. No network."""
        pass

    @abstractmethod
    def _set_marker(self, key: Optional[str]) -> None:
        pass

    @abstractmethod
    def _get_marker(self) -> Optional[str]:
        pass

    def enter_edit(self, key: str) -> None:
        """Put one row in edit mode, taking the marker from any other row."""
        self._set_marker(key)
        self.render()

    def cancel_edit(self) -> None:
        self._set_marker(None)
        self.render()

    def open_create_form(self) -> None:
        self.state.set_form_open(self.entity, True)
        self.render()

    def close_create_form(self) -> None:
        self.state.set_form_open(self.entity, False)
        self.render()

    def confirm(self, message: str, action: str) -> bool:
        """Ask before a destructive step; a refusal is logged and nothing else happens."""
        if self.ui.confirm(message):
            return True
        self._ctx.audit.log_cancelled(action)
        return False

    def fail(self, error: Exception, operation: str, fallback: str) -> None:
        report_failure(self._ctx, error, operation, fallback)
