"""
League ledger: authoritative store of teams, players and matches.
Enforces authorization, referential integrity and balance conservation.
Every operation returns a tagged Result and either fully applies or changes nothing.
"""
from __future__ import annotations

import copy
import logging
import threading

from league_ledger.models import LedgerSnapshot, Match, MatchStatus, Player, Principal, Team
from league_ledger.results import Err, LedgerError, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_ADMIN = Principal("contract-owner")
DEFAULT_PRIZE_POOL = 1_000_000
# Balances and amounts are stored as SQLite INTEGER (signed 64-bit).
MAX_AMOUNT = 2**63 - 1


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_amount(value: object) -> bool:
    """Whole, non-negative integer in the smallest currency unit, within int64."""
    return _is_int(value) and 0 <= value <= MAX_AMOUNT


def _is_id(value: object) -> bool:
    """Entity ids are positive ints; bools and floats never match a stored id."""
    return _is_int(value) and value > 0


def split_prize(prize_pool: int, home_score: int, away_score: int) -> tuple[int, int]:
    """
    Return (home_share, away_share). Winner takes the whole pool.
    Tie: floor half each, odd remainder to the home team, so shares sum to the pool.
    """
    if home_score > away_score:
        return prize_pool, 0
    if away_score > home_score:
        return 0, prize_pool
    half = prize_pool // 2
    return half + prize_pool % 2, half


class LeagueLedger:
    """
    In-memory ledger. One lock serializes every read and write, so no caller
    sees a player moved without its rosters updated.
    """

    def __init__(self, admin: Principal = DEFAULT_ADMIN, prize_pool: int = DEFAULT_PRIZE_POOL) -> None:
        if not _is_amount(prize_pool):
            raise ValueError(
                f"prize_pool must be an integer between 0 and {MAX_AMOUNT}, got {prize_pool!r}"
            )
        self.admin = admin
        self.prize_pool = prize_pool
        self._lock = threading.RLock()
        self._teams: dict[int, Team] = {}
        self._players: dict[int, Player] = {}
        self._matches: dict[int, Match] = {}
        self._last_team_id = 0
        self._last_player_id = 0
        self._last_match_id = 0

    def _reject(self, op: str, error: LedgerError, caller: Principal) -> Err:
        logger.debug("%s rejected: %s (caller=%s)", op, error.value, caller)
        return Err(error)

    def _team(self, team_id: object) -> Team | None:
        return self._teams.get(team_id) if _is_id(team_id) else None

    def _player(self, player_id: object) -> Player | None:
        return self._players.get(player_id) if _is_id(player_id) else None

    def _match(self, match_id: object) -> Match | None:
        return self._matches.get(match_id) if _is_id(match_id) else None

    # ---------- Teams ----------

    def create_team(self, caller: Principal, name: str) -> Result[int]:
        """Any caller may create a team. Returns the new team id."""
        with self._lock:
            self._last_team_id += 1
            team_id = self._last_team_id
            self._teams[team_id] = Team(id=team_id, name=name, owner=caller)
        logger.info("team %s created: name=%r owner=%s", team_id, name, caller)
        return Ok(team_id)

    def withdraw_balance(self, caller: Principal, team_id: int, amount: int) -> Result[bool]:
        """Owner removes funds from the team balance. Funds leave the ledger."""
        with self._lock:
            team = self._team(team_id)
            if team is None:
                return self._reject("withdraw_balance", LedgerError.NOT_FOUND, caller)
            if team.owner != caller:
                return self._reject("withdraw_balance", LedgerError.UNAUTHORIZED, caller)
            if not _is_amount(amount):
                return self._reject("withdraw_balance", LedgerError.INVALID_VALUE, caller)
            if team.balance < amount:
                return self._reject("withdraw_balance", LedgerError.INSUFFICIENT_FUNDS, caller)
            team.balance -= amount
            balance = team.balance
        logger.info("team %s withdrew %s (balance now %s)", team_id, amount, balance)
        return Ok(True)

    # ---------- Players ----------

    def add_player(self, caller: Principal, name: str, value: int) -> Result[int]:
        """Admin only. New players start as free agents."""
        with self._lock:
            if caller != self.admin:
                return self._reject("add_player", LedgerError.OWNER_ONLY, caller)
            if not _is_amount(value):
                return self._reject("add_player", LedgerError.INVALID_VALUE, caller)
            self._last_player_id += 1
            player_id = self._last_player_id
            self._players[player_id] = Player(id=player_id, name=name, value=value)
        logger.info("player %s added: name=%r value=%s", player_id, name, value)
        return Ok(player_id)

    def trade_player(
        self,
        caller: Principal,
        player_id: int,
        from_team_id: int,
        to_team_id: int,
        price: int,
    ) -> Result[bool]:
        """
        Move a player from from_team to to_team; price moves from buyer to seller.
        Only the selling team's owner may trade, and only a player it currently holds.
        The buyer's consent is not checked. from_team_id == to_team_id is allowed.
        """
        with self._lock:
            player = self._player(player_id)
            from_team = self._team(from_team_id)
            to_team = self._team(to_team_id)
            if player is None or from_team is None or to_team is None:
                return self._reject("trade_player", LedgerError.NOT_FOUND, caller)
            if player.team_id != from_team_id or from_team.owner != caller:
                return self._reject("trade_player", LedgerError.UNAUTHORIZED, caller)
            if not _is_amount(price):
                return self._reject("trade_player", LedgerError.INVALID_VALUE, caller)
            if to_team.balance < price:
                return self._reject("trade_player", LedgerError.INSUFFICIENT_FUNDS, caller)
            if from_team is not to_team and from_team.balance + price > MAX_AMOUNT:
                return self._reject("trade_player", LedgerError.INVALID_VALUE, caller)

            player.team_id = to_team_id
            from_team.balance += price
            from_team.players = [pid for pid in from_team.players if pid != player_id]
            to_team.balance -= price
            to_team.players.append(player_id)
        logger.info(
            "player %s traded from team %s to team %s for %s",
            player_id, from_team_id, to_team_id, price,
        )
        return Ok(True)

    # ---------- Matches ----------

    def schedule_match(
        self, caller: Principal, home_team_id: int, away_team_id: int, date: int
    ) -> Result[int]:
        """
        Admin only. Home and away must be distinct positive ids. Team ids are
        not checked for existence here; report_match_result resolves them.
        """
        with self._lock:
            if caller != self.admin:
                return self._reject("schedule_match", LedgerError.OWNER_ONLY, caller)
            if not (_is_id(home_team_id) and _is_id(away_team_id)):
                return self._reject("schedule_match", LedgerError.INVALID_VALUE, caller)
            if home_team_id == away_team_id:
                return self._reject("schedule_match", LedgerError.INVALID_VALUE, caller)
            self._last_match_id += 1
            match_id = self._last_match_id
            self._matches[match_id] = Match(
                id=match_id, home_team=home_team_id, away_team=away_team_id, date=date,
            )
        logger.info("match %s scheduled: %s vs %s at %s", match_id, home_team_id, away_team_id, date)
        return Ok(match_id)

    def report_match_result(
        self, caller: Principal, match_id: int, home_score: int, away_score: int
    ) -> Result[bool]:
        """
        Admin only. Completes a scheduled match and pays out the prize pool.
        A second report on the same match fails with INVALID_VALUE.
        If either team no longer resolves, fails with NOT_FOUND and the match stays scheduled.
        """
        with self._lock:
            if caller != self.admin:
                return self._reject("report_match_result", LedgerError.OWNER_ONLY, caller)
            match = self._match(match_id)
            if match is None:
                return self._reject("report_match_result", LedgerError.NOT_FOUND, caller)
            if match.status != MatchStatus.SCHEDULED.value:
                return self._reject("report_match_result", LedgerError.INVALID_VALUE, caller)
            if not (_is_amount(home_score) and _is_amount(away_score)):
                return self._reject("report_match_result", LedgerError.INVALID_VALUE, caller)
            home = self._team(match.home_team)
            away = self._team(match.away_team)
            if home is None or away is None:
                return self._reject("report_match_result", LedgerError.NOT_FOUND, caller)
            home_share, away_share = split_prize(self.prize_pool, home_score, away_score)
            if home.balance + home_share > MAX_AMOUNT or away.balance + away_share > MAX_AMOUNT:
                return self._reject("report_match_result", LedgerError.INVALID_VALUE, caller)

            match.home_score = home_score
            match.away_score = away_score
            match.status = MatchStatus.COMPLETED.value
            home.balance += home_share
            away.balance += away_share
        logger.info(
            "match %s completed %s-%s: paid home=%s away=%s",
            match_id, home_score, away_score, home_share, away_share,
        )
        return Ok(True)

    # ---------- Reads ----------

    def get_team(self, team_id: int) -> Team | None:
        with self._lock:
            team = self._team(team_id)
            return copy.deepcopy(team) if team is not None else None

    def get_player(self, player_id: int) -> Player | None:
        with self._lock:
            player = self._player(player_id)
            return copy.deepcopy(player) if player is not None else None

    def get_match(self, match_id: int) -> Match | None:
        with self._lock:
            match = self._match(match_id)
            return copy.deepcopy(match) if match is not None else None

    def list_teams(self) -> list[Team]:
        with self._lock:
            return [copy.deepcopy(self._teams[k]) for k in sorted(self._teams)]

    def list_players(self) -> list[Player]:
        with self._lock:
            return [copy.deepcopy(self._players[k]) for k in sorted(self._players)]

    def list_matches(self) -> list[Match]:
        with self._lock:
            return [copy.deepcopy(self._matches[k]) for k in sorted(self._matches)]

    def team_balance(self, team_id: int) -> Result[int]:
        with self._lock:
            team = self._team(team_id)
            if team is None:
                return Err(LedgerError.NOT_FOUND)
            return Ok(team.balance)

    def total_balance(self) -> int:
        """Sum of all team balances."""
        with self._lock:
            return sum(t.balance for t in self._teams.values())

    # ---------- Snapshot / restore ----------

    def snapshot(self) -> LedgerSnapshot:
        """Detached copy of the full state, counters included."""
        with self._lock:
            return LedgerSnapshot(
                teams=copy.deepcopy(self._teams),
                players=copy.deepcopy(self._players),
                matches=copy.deepcopy(self._matches),
                last_team_id=self._last_team_id,
                last_player_id=self._last_player_id,
                last_match_id=self._last_match_id,
            )

    @classmethod
    def restore(
        cls,
        snapshot: LedgerSnapshot,
        admin: Principal = DEFAULT_ADMIN,
        prize_pool: int = DEFAULT_PRIZE_POOL,
    ) -> LeagueLedger:
        """
        Build a ledger from persisted state. Raises ValueError if the snapshot
        breaks roster consistency, holds a non-integer id, or a counter is behind its collection.
        """
        problems = check_snapshot(snapshot)
        if problems:
            raise ValueError("Inconsistent ledger snapshot: " + "; ".join(problems))
        ledger = cls(admin=admin, prize_pool=prize_pool)
        ledger._teams = copy.deepcopy(snapshot.teams)
        ledger._players = copy.deepcopy(snapshot.players)
        ledger._matches = copy.deepcopy(snapshot.matches)
        ledger._last_team_id = snapshot.last_team_id
        ledger._last_player_id = snapshot.last_player_id
        ledger._last_match_id = snapshot.last_match_id
        logger.info(
            "ledger restored: %s teams, %s players, %s matches",
            len(ledger._teams), len(ledger._players), len(ledger._matches),
        )
        return ledger


def check_snapshot(snapshot: LedgerSnapshot) -> list[str]:
    """Return a list of integrity problems; empty means the snapshot is consistent."""
    problems: list[str] = []
    for name, collection, last in (
        ("team", snapshot.teams, snapshot.last_team_id),
        ("player", snapshot.players, snapshot.last_player_id),
        ("match", snapshot.matches, snapshot.last_match_id),
    ):
        bad_keys = [k for k in collection if not _is_id(k)]
        if bad_keys:
            problems.append(f"{name} ids must be positive integers: {bad_keys!r}")
            continue
        if collection and max(collection) > last:
            problems.append(f"{name} counter {last} is behind id {max(collection)}")
        for key, entity in collection.items():
            if key != entity.id or not _is_id(entity.id):
                problems.append(f"{name} keyed {key} has id {entity.id!r}")
    for team in snapshot.teams.values():
        if not _is_amount(team.balance):
            problems.append(f"team {team.id} balance {team.balance!r} is out of range")
        if len(set(team.players)) != len(team.players):
            problems.append(f"team {team.id} lists a player twice")
        for pid in team.players:
            player = snapshot.players.get(pid) if _is_id(pid) else None
            if player is None or player.team_id != team.id:
                problems.append(f"team {team.id} lists player {pid!r} not assigned to it")
    for player in snapshot.players.values():
        if player.team_id is None:
            continue
        team = snapshot.teams.get(player.team_id) if _is_id(player.team_id) else None
        if team is None or player.id not in team.players:
            problems.append(f"player {player.id} assigned to team {player.team_id!r} but not on its roster")
    for match in snapshot.matches.values():
        if not (_is_id(match.home_team) and _is_id(match.away_team)):
            problems.append(f"match {match.id} references a non-integer team id")
    return problems
