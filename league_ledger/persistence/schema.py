"""
SQLite schema for the league ledger.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def teams_schema() -> str:
    return """
    CREATE TABLE IF NOT EXISTS teams (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        owner TEXT NOT NULL,
        balance INTEGER NOT NULL DEFAULT 0 CHECK (balance >= 0)
    );
    CREATE INDEX IF NOT EXISTS ix_teams_owner ON teams(owner);
    """


def players_schema() -> str:
    """team_id NULL = free agent."""
    return """
    CREATE TABLE IF NOT EXISTS players (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        team_id INTEGER,
        value INTEGER NOT NULL CHECK (value >= 0),
        FOREIGN KEY (team_id) REFERENCES teams(id)
    );
    CREATE INDEX IF NOT EXISTS ix_players_team ON players(team_id);
    """


def team_players_schema() -> str:
    """Roster membership. position keeps insertion order for display."""
    return """
    CREATE TABLE IF NOT EXISTS team_players (
        team_id INTEGER NOT NULL,
        player_id INTEGER NOT NULL,
        position INTEGER NOT NULL,
        PRIMARY KEY (team_id, player_id),
        FOREIGN KEY (team_id) REFERENCES teams(id),
        FOREIGN KEY (player_id) REFERENCES players(id)
    );
    CREATE UNIQUE INDEX IF NOT EXISTS ix_team_players_player ON team_players(player_id);
    """


def matches_schema() -> str:
    """Team ids are not foreign keys: matches may reference teams that do not exist."""
    return """
    CREATE TABLE IF NOT EXISTS matches (
        id INTEGER PRIMARY KEY,
        home_team INTEGER NOT NULL,
        away_team INTEGER NOT NULL,
        date INTEGER NOT NULL,
        home_score INTEGER,
        away_score INTEGER,
        status TEXT NOT NULL DEFAULT 'scheduled'
    );
    CREATE INDEX IF NOT EXISTS ix_matches_status ON matches(status);
    """


def ledger_counters_schema() -> str:
    """Last issued id per collection. Never reset apart from its collection."""
    return """
    CREATE TABLE IF NOT EXISTS ledger_counters (
        name TEXT PRIMARY KEY,
        last_id INTEGER NOT NULL DEFAULT 0
    );
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: teams, players, team_players, matches, ledger_counters."""
    return "\n".join([
        teams_schema(),
        players_schema(),
        team_players_schema(),
        matches_schema(),
        ledger_counters_schema(),
    ])
