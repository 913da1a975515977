"""
Shared fixtures: fresh ledgers and a ledger holding a rostered player.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from league_ledger.persistence import db as ledger_db
from league_ledger.persistence import set_db_path
from league_ledger.services import DEFAULT_ADMIN, LeagueLedger

ADMIN = DEFAULT_ADMIN
MATCH_DATE = 1625097600


def build_rostered_ledger(prize_pool: int = 1_000_000) -> LeagueLedger:
    """
    Teams 1 (owner1) and 2 (owner2); player 1 on team 1's roster.
    Team 2 has won match 1 and holds the prize pool.
    Players only join rosters through persisted state, so the roster is seeded via restore.
    """
    ledger = LeagueLedger(prize_pool=prize_pool)
    ledger.create_team("owner1", "Team A")
    ledger.create_team("owner2", "Team B")
    ledger.add_player(ADMIN, "Player 1", 1_000_000)
    snap = ledger.snapshot()
    snap.players[1].team_id = 1
    snap.teams[1].players.append(1)
    ledger = LeagueLedger.restore(snap, prize_pool=prize_pool)
    ledger.schedule_match(ADMIN, 1, 2, MATCH_DATE)
    ledger.report_match_result(ADMIN, 1, 0, 2)
    return ledger


@pytest.fixture
def ledger():
    return LeagueLedger()


@pytest.fixture
def two_teams(ledger):
    """Team 1 'Team A' (owner1), team 2 'Team B' (owner2)."""
    ledger.create_team("owner1", "Team A")
    ledger.create_team("owner2", "Team B")
    return ledger


@pytest.fixture
def rostered():
    return build_rostered_ledger()


@pytest.fixture
def ledger_db_path(tmp_path, monkeypatch):
    """Point the process-wide DB path at a temp file; the previous path is restored afterwards."""
    monkeypatch.setattr(ledger_db, "_db_path", ledger_db._db_path)
    db_path = tmp_path / "ledger_test.db"
    set_db_path(db_path)
    return db_path
