"""
Audit Logger

Every significant client action is logged as a ClientEvent.
This provides:
1. Traceability of what the client sent and what came back
2. Debugging capability for failures the user only saw as a notice
3. A short in-app history shown on the settings page

The audit logger:
- Never raises; logging problems must not break a user flow
- Keeps a bounded in-memory history, newest last
"""

from collections import deque
from typing import Any, Optional

import structlog

from arthik.models.audit import ClientEvent, ClientEventBuilder, EventSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central client event log.

    Logs events to the structured local log and keeps the most recent
    ones in memory for display.
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many events `recent_events` keeps.
        """
        self._history: deque[ClientEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger(__name__)

    def log(self, event: ClientEvent) -> None:
        """Log a client event locally and remember it."""
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("client_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("client_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("client_event", **log_dict)
        else:
            self._logger.info("client_event", **log_dict)

        self._history.append(event)

    def recent_events(self, limit: Optional[int] = None) -> list[ClientEvent]:
        """
        Get the most recent events.

        Args:
            limit: Maximum number of events to return

        Returns:
            Events newest first
        """
        events = list(reversed(self._history))
        if limit is not None:
            events = events[:limit]
        return events

    def clear(self) -> None:
        self._history.clear()

    # -------------------------------------------------------------------------
    # Shortcuts for the common events
    # -------------------------------------------------------------------------

    def log_loaded(self, entity_type: str, count: int) -> None:
        self.log(ClientEventBuilder.collection_loaded(entity_type, count))

    def log_created(self, entity_type: str, entity_id: Optional[str] = None) -> None:
        self.log(ClientEventBuilder.entity_created(entity_type, entity_id))

    def log_updated(self, entity_type: str, entity_id: str) -> None:
        self.log(ClientEventBuilder.entity_updated(entity_type, entity_id))

    def log_deleted(self, entity_type: str, entity_id: str) -> None:
        self.log(ClientEventBuilder.entity_deleted(entity_type, entity_id))

    def log_cancelled(self, action: str) -> None:
        self.log(ClientEventBuilder.action_cancelled(action))

    def log_request_failed(self, operation: str, error: Exception) -> None:
        """Log a failed round trip at error level."""
        self.log(ClientEventBuilder.request_failed(operation, error))

    def log_preference(self, name: str, value: Any) -> None:
        self.log(ClientEventBuilder.preference_changed(name, value))
