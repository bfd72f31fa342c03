"""
Arthik - Client Package

The client engine of a single-user personal-finance app: it keeps a
local copy of accounts, transactions, recurring transactions, notes and
the dashboard in step with the backend, and renders them.

DESIGN PRINCIPLES:
1. The backend is the source of truth; every write is followed by a fresh read
2. One place owns each concern: the gateway talks, the store remembers,
   controllers decide, views shape
3. Fail visibly: every failed operation shows exactly one notice
4. A 401 anywhere logs the user out everywhere
5. Every user-visible step is auditable
"""

__version__ = "1.0.0"
__author__ = "Arthik Team"
