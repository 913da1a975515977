"""
Data models for the league ledger.
Domain objects only; no persistence or API logic.

Teams, players and matches reference each other by id; the ledger owns all
three collections and validates every lookup at use time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType

# Opaque caller identity supplied by the authentication layer. Equality only.
Principal = NewType("Principal", str)


# ---------- Match status (state machine) ----------
class MatchStatus(str, Enum):
    """Match lifecycle: scheduled → completed. One-shot, no reverse transition."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


# ---------- Team ----------
@dataclass
class Team:
    """
    A team owned by one principal. balance is in the smallest currency unit.
    players is the roster; insertion order is kept for display.
    """
    id: int
    name: str
    owner: str
    balance: int = 0
    players: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner,
            "balance": self.balance,
            "players": list(self.players),
        }


# ---------- Player ----------
@dataclass
class Player:
    """
    A player created by the league admin. team_id None = free agent.
    value is a reference price only; trades may use any price.
    """
    id: int
    name: str
    value: int
    team_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "team_id": self.team_id,
            "value": self.value,
        }


# ---------- Match ----------
@dataclass
class Match:
    """
    A fixture between two distinct team ids. Team ids are not checked for
    existence when the match is scheduled.
    Scores stay None until the result is reported.
    """
    id: int
    home_team: int
    away_team: int
    date: int
    status: str = MatchStatus.SCHEDULED.value  # MatchStatus value
    home_score: int | None = None
    away_score: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "date": self.date,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "status": self.status,
        }


# ---------- LedgerSnapshot ----------
@dataclass
class LedgerSnapshot:
    """
    Full ledger state: the three collections plus their id counters.
    Counters travel with their collections so ids are never reused.
    """
    teams: dict[int, Team] = field(default_factory=dict)
    players: dict[int, Player] = field(default_factory=dict)
    matches: dict[int, Match] = field(default_factory=dict)
    last_team_id: int = 0
    last_player_id: int = 0
    last_match_id: int = 0
