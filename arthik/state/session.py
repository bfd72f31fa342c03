"""
Session Store

Holds the bearer token and the CSRF token for the current login and
mirrors them into session-scoped storage, so a restarted front end can
pick the session up again without a new login.

The client never tracks token expiry; the backend answers 401 when a token
is no longer good, and the gateway clears the session then.
"""

import threading
from typing import Optional

import structlog

from arthik.services.storage import KeyValueStorage, StorageError


logger = structlog.get_logger(__name__)

TOKEN_KEY = "authToken"
CSRF_KEY = "csrfToken"


class SessionStore:
    """
    Auth and CSRF tokens for one client session.

    `authenticated` is true exactly when a non-empty token is held.
    """

    def __init__(self, storage: KeyValueStorage):
        """
        Initialize session store.

        Args:
            storage: Session-scoped storage the tokens are mirrored to
        """
        self._storage = storage
        self._token: Optional[str] = None
        self._csrf_token: Optional[str] = None
        self._hydrated = False
        self._lock = threading.RLock()

    # =========================================================================
    # STARTUP
    # =========================================================================

    def hydrate(self) -> bool:
        """
        Restore tokens from storage.

        Runs once per process; later calls change nothing.

        Returns:
            True if a session token is held after hydration
        """
        with self._lock:
            if self._hydrated:
                return self.is_authenticated()
            self._hydrated = True

            try:
                token = self._storage.get(TOKEN_KEY)
                csrf_token = self._storage.get(CSRF_KEY)
            except StorageError as e:
                logger.warning("session_restore_failed", error=str(e))
                return False

            if token:
                self._token = str(token)
                self._csrf_token = str(csrf_token) if csrf_token else None
                logger.info("session_restored", has_csrf=self._csrf_token is not None)

            return self.is_authenticated()

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    # =========================================================================
    # TOKENS
    # =========================================================================

    def set_token(self, token: Optional[str]) -> None:
        """
        Set or clear the session token.

        A non-empty token is persisted; None (or "") removes it from storage.
        """
        with self._lock:
            self._token = token or None
            if self._token:
                self._write(TOKEN_KEY, self._token)
            else:
                self._remove(TOKEN_KEY)

    def get_token(self) -> Optional[str]:
        return self._token

    def is_authenticated(self) -> bool:
        return self._token is not None

    def set_csrf_token(self, token: Optional[str]) -> None:
        with self._lock:
            self._csrf_token = token or None
            if self._csrf_token:
                self._write(CSRF_KEY, self._csrf_token)
            else:
                self._remove(CSRF_KEY)

    def get_csrf_token(self) -> Optional[str]:
        return self._csrf_token

    def clear(self) -> None:
        """Drop both tokens from memory and storage."""
        with self._lock:
            self._token = None
            self._csrf_token = None
            self._remove(TOKEN_KEY)
            self._remove(CSRF_KEY)

    # =========================================================================
    # STORAGE HELPERS
    # =========================================================================

    def _write(self, key: str, value: str) -> None:
        try:
            self._storage.set(key, value)
        except StorageError as e:
            # The in-memory session still works; only the restart path is lost
            logger.warning("session_persist_failed", key=key, error=str(e))

    def _remove(self, key: str) -> None:
        try:
            self._storage.delete(key)
        except StorageError as e:
            logger.warning("session_clear_failed", key=key, error=str(e))
