"""
Client Event Models

Every significant client action is recorded as a ClientEvent so a session
can be reconstructed from the log: which views were loaded, which writes
were sent, which failures reached the user and which were suppressed.

Events are append-only; the in-memory history is bounded but never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ClientEventType(str, Enum):
    """Types of events the client records."""
    # Session
    SESSION_RESTORED = "session_restored"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_REJECTED = "login_rejected"
    LOGOUT = "logout"
    FORCED_LOGOUT = "forced_logout"

    # Navigation
    TAB_SELECTED = "tab_selected"

    # Entity flows
    COLLECTION_LOADED = "collection_loaded"
    ENTITY_CREATED = "entity_created"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_DELETED = "entity_deleted"
    RECURRENCE_APPLIED = "recurrence_applied"
    ACTION_CANCELLED = "action_cancelled"

    # Settings
    PREFERENCE_CHANGED = "preference_changed"
    PASSWORD_CHANGED = "password_changed"

    # Failures
    PRECONDITION_FAILED = "precondition_failed"
    REQUEST_FAILED = "request_failed"
    RATE_LIMITED = "rate_limited"


class EventSeverity(str, Enum):
    """Severity level for client events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ClientEvent(BaseModel):
    """A single client event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: ClientEventType
    severity: EventSeverity = EventSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
        }


class ClientEventBuilder:
    """
    Helper class to build client events with common patterns.

    Usage:
        event = ClientEventBuilder.collection_loaded("account", 12)
        event = ClientEventBuilder.request_failed("load accounts", exc)
    """

    @staticmethod
    def session_restored() -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.SESSION_RESTORED,
            description="Session restored from storage",
        )

    @staticmethod
    def login_succeeded() -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.LOGIN_SUCCEEDED,
            description="Login succeeded",
        )

    @staticmethod
    def login_rejected(message: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.LOGIN_REJECTED,
            severity=EventSeverity.WARNING,
            description="Login rejected by backend",
            details={"message": message},
        )

    @staticmethod
    def logout() -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.LOGOUT,
            description="User logged out",
        )

    @staticmethod
    def forced_logout(path: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.FORCED_LOGOUT,
            severity=EventSeverity.WARNING,
            description="Backend rejected the session; logged out",
            details={"path": path},
        )

    @staticmethod
    def tab_selected(tab: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.TAB_SELECTED,
            severity=EventSeverity.DEBUG,
            description=f"Tab selected: {tab}",
            details={"tab": tab},
        )

    @staticmethod
    def collection_loaded(entity_type: str, count: int) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.COLLECTION_LOADED,
            severity=EventSeverity.DEBUG,
            entity_type=entity_type,
            description=f"Loaded {count} {entity_type} record(s)",
            details={"count": count},
        )

    @staticmethod
    def entity_created(entity_type: str, entity_id: Optional[str] = None) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.ENTITY_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} created",
        )

    @staticmethod
    def entity_updated(entity_type: str, entity_id: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} updated",
        )

    @staticmethod
    def entity_deleted(entity_type: str, entity_id: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.ENTITY_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
        )

    @staticmethod
    def recurrence_applied(recurrence_id: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.RECURRENCE_APPLIED,
            entity_type="recurrence",
            entity_id=recurrence_id,
            description="Recurring transaction applied",
        )

    @staticmethod
    def action_cancelled(action: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.ACTION_CANCELLED,
            severity=EventSeverity.DEBUG,
            description=f"User declined: {action}",
            details={"action": action},
        )

    @staticmethod
    def preference_changed(name: str, value: Any) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.PREFERENCE_CHANGED,
            description=f"Preference changed: {name}",
            details={"name": name, "value": value},
        )

    @staticmethod
    def password_changed() -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.PASSWORD_CHANGED,
            description="Password changed",
        )

    @staticmethod
    def precondition_failed(operation: str, message: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.PRECONDITION_FAILED,
            severity=EventSeverity.WARNING,
            description=f"Rejected before sending: {operation}",
            error_message=message,
            details={"operation": operation},
        )

    @staticmethod
    def request_failed(operation: str, error: Exception) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.REQUEST_FAILED,
            severity=EventSeverity.ERROR,
            description=f"Request failed: {operation}",
            error_type=type(error).__name__,
            error_message=str(error),
            details={"operation": operation},
        )

    @staticmethod
    def rate_limited(operation: str) -> ClientEvent:
        return ClientEvent(
            event_type=ClientEventType.RATE_LIMITED,
            severity=EventSeverity.WARNING,
            description=f"Rate limited: {operation}",
            details={"operation": operation},
        )
