"""
Repository interfaces for ledger data.
No business logic, only read/write operations.
Write methods do not commit; LedgerStore wraps them in one transaction.
"""
from __future__ import annotations

import logging
import sqlite3

from league_ledger.models import LedgerSnapshot, Match, Player, Team

logger = logging.getLogger(__name__)


# ---------- TeamRepository ----------


class TeamRepository:
    """Teams and their rosters (team_players)."""

    def insert(self, conn: sqlite3.Connection, team: Team) -> None:
        conn.execute(
            "INSERT INTO teams (id, name, owner, balance) VALUES (?, ?, ?, ?)",
            (team.id, team.name, team.owner, team.balance),
        )

    def insert_roster(self, conn: sqlite3.Connection, team: Team) -> None:
        conn.executemany(
            "INSERT INTO team_players (team_id, player_id, position) VALUES (?, ?, ?)",
            [(team.id, pid, i) for i, pid in enumerate(team.players)],
        )

    def get(self, conn: sqlite3.Connection, team_id: int) -> Team | None:
        row = conn.execute(
            "SELECT id, name, owner, balance FROM teams WHERE id = ?", (team_id,)
        ).fetchone()
        if row is None:
            return None
        return Team(
            id=row["id"],
            name=row["name"],
            owner=row["owner"],
            balance=row["balance"],
            players=self.get_players(conn, row["id"]),
        )

    def get_players(self, conn: sqlite3.Connection, team_id: int) -> list[int]:
        """Roster player ids in insertion order."""
        rows = conn.execute(
            "SELECT player_id FROM team_players WHERE team_id = ? ORDER BY position",
            (team_id,),
        ).fetchall()
        return [r["player_id"] for r in rows]

    def list_all(self, conn: sqlite3.Connection) -> list[Team]:
        rows = conn.execute("SELECT id, name, owner, balance FROM teams ORDER BY id").fetchall()
        return [
            Team(
                id=r["id"],
                name=r["name"],
                owner=r["owner"],
                balance=r["balance"],
                players=self.get_players(conn, r["id"]),
            )
            for r in rows
        ]

    def delete_rosters(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM team_players")

    def delete_all(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM teams")


# ---------- PlayerRepository ----------


class PlayerRepository:
    def insert(self, conn: sqlite3.Connection, player: Player) -> None:
        conn.execute(
            "INSERT INTO players (id, name, team_id, value) VALUES (?, ?, ?, ?)",
            (player.id, player.name, player.team_id, player.value),
        )

    def get(self, conn: sqlite3.Connection, player_id: int) -> Player | None:
        row = conn.execute(
            "SELECT id, name, team_id, value FROM players WHERE id = ?", (player_id,)
        ).fetchone()
        if row is None:
            return None
        return Player(id=row["id"], name=row["name"], team_id=row["team_id"], value=row["value"])

    def list_all(self, conn: sqlite3.Connection) -> list[Player]:
        rows = conn.execute("SELECT id, name, team_id, value FROM players ORDER BY id").fetchall()
        return [
            Player(id=r["id"], name=r["name"], team_id=r["team_id"], value=r["value"])
            for r in rows
        ]

    def delete_all(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM players")


# ---------- MatchRepository ----------


class MatchRepository:
    def insert(self, conn: sqlite3.Connection, match: Match) -> None:
        conn.execute(
            """INSERT INTO matches (id, home_team, away_team, date, home_score, away_score, status)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                match.id, match.home_team, match.away_team, match.date,
                match.home_score, match.away_score, match.status,
            ),
        )

    def get(self, conn: sqlite3.Connection, match_id: int) -> Match | None:
        row = conn.execute(
            "SELECT id, home_team, away_team, date, home_score, away_score, status FROM matches WHERE id = ?",
            (match_id,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_match(row)

    def list_all(self, conn: sqlite3.Connection) -> list[Match]:
        rows = conn.execute(
            "SELECT id, home_team, away_team, date, home_score, away_score, status FROM matches ORDER BY id"
        ).fetchall()
        return [_row_to_match(r) for r in rows]

    def delete_all(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM matches")


def _row_to_match(row: sqlite3.Row) -> Match:
    return Match(
        id=row["id"],
        home_team=row["home_team"],
        away_team=row["away_team"],
        date=row["date"],
        home_score=row["home_score"],
        away_score=row["away_score"],
        status=row["status"],
    )


# ---------- CounterRepository ----------


class CounterRepository:
    """Last issued id per collection: 'team', 'player', 'match'."""

    def set(self, conn: sqlite3.Connection, name: str, last_id: int) -> None:
        conn.execute(
            """INSERT INTO ledger_counters (name, last_id) VALUES (?, ?)
               ON CONFLICT(name) DO UPDATE SET last_id = excluded.last_id""",
            (name, last_id),
        )

    def get(self, conn: sqlite3.Connection, name: str) -> int:
        row = conn.execute("SELECT last_id FROM ledger_counters WHERE name = ?", (name,)).fetchone()
        return row["last_id"] if row is not None else 0


# ---------- LedgerStore ----------


class LedgerStore:
    """
    Saves and loads a whole LedgerSnapshot. Collections and counters are
    written in one transaction, so they are never out of step on disk.
    """

    def __init__(self) -> None:
        self._team_repo = TeamRepository()
        self._player_repo = PlayerRepository()
        self._match_repo = MatchRepository()
        self._counter_repo = CounterRepository()

    def save(self, conn: sqlite3.Connection, snapshot: LedgerSnapshot) -> None:
        """Replace stored state with snapshot. Rolls back on any error."""
        with conn:
            # Children first: team_players and players reference teams.
            self._team_repo.delete_rosters(conn)
            self._player_repo.delete_all(conn)
            self._match_repo.delete_all(conn)
            self._team_repo.delete_all(conn)
            for team in snapshot.teams.values():
                self._team_repo.insert(conn, team)
            for player in snapshot.players.values():
                self._player_repo.insert(conn, player)
            for team in snapshot.teams.values():
                self._team_repo.insert_roster(conn, team)
            for match in snapshot.matches.values():
                self._match_repo.insert(conn, match)
            self._counter_repo.set(conn, "team", snapshot.last_team_id)
            self._counter_repo.set(conn, "player", snapshot.last_player_id)
            self._counter_repo.set(conn, "match", snapshot.last_match_id)
        logger.info(
            "ledger saved: %s teams, %s players, %s matches",
            len(snapshot.teams), len(snapshot.players), len(snapshot.matches),
        )

    def load(self, conn: sqlite3.Connection) -> LedgerSnapshot:
        """Read stored state. An empty database yields an empty snapshot."""
        return LedgerSnapshot(
            teams={t.id: t for t in self._team_repo.list_all(conn)},
            players={p.id: p for p in self._player_repo.list_all(conn)},
            matches={m.id: m for m in self._match_repo.list_all(conn)},
            last_team_id=self._counter_repo.get(conn, "team"),
            last_player_id=self._counter_repo.get(conn, "player"),
            last_match_id=self._counter_repo.get(conn, "match"),
        )
