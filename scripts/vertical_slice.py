#!/usr/bin/env python3
"""
Vertical slice: Create teams → Schedule match → Report result → Withdraw → Persist → Reload.
Run from project root: python3 scripts/vertical_slice.py
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from league_ledger.persistence import LedgerStore, get_connection, init_db, set_db_path
from league_ledger.results import Err
from league_ledger.services import DEFAULT_ADMIN, LeagueLedger


def _check(label: str, result) -> None:
    if isinstance(result, Err):
        print(f"{label}: FAILED {result.error.value} ({result.error.code})")
        sys.exit(1)
    print(f"{label}: {result.value}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Use data/vertical_slice.db for demo (distinct from ledger.db)
    db_path = PROJECT_ROOT / "data" / "vertical_slice.db"
    set_db_path(db_path)
    init_db(db_path=db_path)

    ledger = LeagueLedger()
    admin = DEFAULT_ADMIN

    # 1. Two teams, one player
    _check("create team A", ledger.create_team("owner1", "Team A"))
    _check("create team B", ledger.create_team("owner2", "Team B"))
    _check("add player", ledger.add_player(admin, "Player 1", 1_000_000))

    # 2. Schedule and report a match
    _check("schedule match", ledger.schedule_match(admin, 1, 2, 1625097600))
    _check("report 3-1", ledger.report_match_result(admin, 1, 3, 1))
    print("Second report rejected:", ledger.report_match_result(admin, 1, 3, 1))

    # 3. Withdraw half the prize
    _check("withdraw 500000", ledger.withdraw_balance("owner1", 1, 500_000))
    print("Overdraw rejected:", ledger.withdraw_balance("owner1", 1, 600_000))

    # 4. Persist and reload
    conn = get_connection()
    try:
        store = LedgerStore()
        store.save(conn, ledger.snapshot())
        reloaded = LeagueLedger.restore(store.load(conn))
    finally:
        conn.close()

    print("Reloaded teams:")
    print(json.dumps([t.to_dict() for t in reloaded.list_teams()], indent=2))
    print("Reloaded matches:")
    print(json.dumps([m.to_dict() for m in reloaded.list_matches()], indent=2))
    _check("next team id after reload", reloaded.create_team("owner3", "Team C"))


if __name__ == "__main__":
    main()
