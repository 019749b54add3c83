"""db: ledger database layer (SQLAlchemy).

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ORM models from ``church_ledger.db.models``
- Engine/session helpers from ``church_ledger.db.client``
"""

from __future__ import annotations

from .client import dispose_engine, get_engine, get_session, session_scope
from .models import Base, LedgerTransaction

metadata = Base.metadata

__all__ = [
    "Base",
    "LedgerTransaction",
    "dispose_engine",
    "get_engine",
    "get_session",
    "metadata",
    "session_scope",
]
