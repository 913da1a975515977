"""
Service layer: the league ledger state machine.
Persistence is handled by league_ledger.persistence; the ledger itself never touches storage.
"""
from .ledger_service import (
    DEFAULT_ADMIN,
    DEFAULT_PRIZE_POOL,
    MAX_AMOUNT,
    LeagueLedger,
    check_snapshot,
    split_prize,
)

__all__ = [
    "DEFAULT_ADMIN",
    "DEFAULT_PRIZE_POOL",
    "MAX_AMOUNT",
    "LeagueLedger",
    "check_snapshot",
    "split_prize",
]
