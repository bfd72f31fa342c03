"""Client state: session tokens, display preferences and the application store."""

from arthik.state.preferences import PreferencesStore
from arthik.state.session import SessionStore
from arthik.state.store import AppState

__all__ = ["AppState", "PreferencesStore", "SessionStore"]
