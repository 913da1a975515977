"""
League ledger: teams, players, matches and balances for a sports league.
"""
from league_ledger.models import LedgerSnapshot, Match, MatchStatus, Player, Principal, Team
from league_ledger.results import Err, LedgerError, Ok, Result
from league_ledger.services import LeagueLedger

__all__ = [
    "LeagueLedger",
    "LedgerSnapshot",
    "Team",
    "Player",
    "Match",
    "MatchStatus",
    "Principal",
    "Ok",
    "Err",
    "LedgerError",
    "Result",
]
