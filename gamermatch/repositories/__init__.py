"""SQLAlchemy implementations of the GamerMatch ledgers."""

from typing import Optional

from gamermatch.repositories.blocks import SqlBlockLedger
from gamermatch.repositories.matches import SqlMatchLedger
from gamermatch.repositories.profiles import SqlProfileStore
from gamermatch.repositories.reports import SqlDeletionLedger, SqlReportLedger
from gamermatch.repositories.swipes import SqlSwipeLedger
from gamermatch.utils.database import SessionFactory


class SqlEnv:
    """Every ledger, sharing one session factory (the configured database by default)."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        self.profiles = SqlProfileStore(session_factory)
        self.swipes = SqlSwipeLedger(session_factory)
        self.matches = SqlMatchLedger(session_factory)
        self.blocks = SqlBlockLedger(session_factory)
        self.reports = SqlReportLedger(session_factory)
        self.deletions = SqlDeletionLedger(session_factory)


__all__ = [
    "SqlBlockLedger",
    "SqlDeletionLedger",
    "SqlEnv",
    "SqlMatchLedger",
    "SqlProfileStore",
    "SqlReportLedger",
    "SqlSwipeLedger",
]
