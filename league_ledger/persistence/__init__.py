"""
Persistence layer for ledger state.
No business logic, only read/write interfaces.
"""
from .db import get_connection, init_db, set_db_path, get_db_path
from .repositories import (
    TeamRepository,
    PlayerRepository,
    MatchRepository,
    CounterRepository,
    LedgerStore,
)

__all__ = [
    "get_connection",
    "init_db",
    "set_db_path",
    "get_db_path",
    "TeamRepository",
    "PlayerRepository",
    "MatchRepository",
    "CounterRepository",
    "LedgerStore",
]
