"""
REST API for the league ledger.
Thin wrappers around LeagueLedger: the caller comes from the bearer token and
ledger results are surfaced without reinterpretation.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from league_ledger.auth import decode_token
from league_ledger.models import Principal
from league_ledger.persistence import LedgerStore, get_connection, get_db_path, init_db
from league_ledger.results import Err, LedgerError, Result
from league_ledger.services import DEFAULT_ADMIN, DEFAULT_PRIZE_POOL, MAX_AMOUNT, LeagueLedger

logger = logging.getLogger(__name__)

# Error kind -> HTTP status
_ERROR_STATUS: dict[LedgerError, int] = {
    LedgerError.OWNER_ONLY: 403,
    LedgerError.UNAUTHORIZED: 403,
    LedgerError.NOT_FOUND: 404,
    LedgerError.INVALID_VALUE: 400,
    LedgerError.INSUFFICIENT_FUNDS: 409,
}


def _new_ledger() -> LeagueLedger:
    admin = Principal(os.environ.get("LEAGUE_ADMIN", DEFAULT_ADMIN))
    prize_pool = int(os.environ.get("LEAGUE_PRIZE_POOL", DEFAULT_PRIZE_POOL))
    return LeagueLedger(admin=admin, prize_pool=prize_pool)


_ledger: LeagueLedger = _new_ledger()


def get_ledger() -> LeagueLedger:
    return _ledger


def reset_ledger(ledger: LeagueLedger | None = None) -> LeagueLedger:
    """Replace the process-wide ledger (tests, or after loading persisted state)."""
    global _ledger
    _ledger = ledger if ledger is not None else _new_ledger()
    return _ledger


def load_ledger_from_db() -> LeagueLedger:
    """Restore the process-wide ledger from the configured SQLite database."""
    init_db()
    conn = get_connection()
    try:
        snapshot = LedgerStore().load(conn)
    finally:
        conn.close()
    ledger = LeagueLedger.restore(snapshot, admin=_ledger.admin, prize_pool=_ledger.prize_pool)
    logger.info("process ledger loaded from %s", get_db_path())
    return reset_ledger(ledger)


def save_ledger_to_db() -> None:
    init_db()
    conn = get_connection()
    try:
        LedgerStore().save(conn, _ledger.snapshot())
    finally:
        conn.close()
    logger.info("process ledger saved to %s", get_db_path())


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    persist = os.environ.get("LEAGUE_LEDGER_PERSIST", "").strip() == "1"
    if not persist:
        yield
        return
    load_ledger_from_db()
    try:
        yield
    finally:
        save_ledger_to_db()


# ---------- FastAPI app ----------
app = FastAPI(
    title="League Ledger API",
    description="Teams, players, matches and balances for a sports league",
    version="0.1.0",
    lifespan=lifespan,
)

security = HTTPBearer(auto_error=False)


# ---------- Request models ----------


class CreateTeamRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class AddPlayerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    value: int = Field(..., ge=0, le=MAX_AMOUNT, description="Reference price in the smallest currency unit")


class TradePlayerRequest(BaseModel):
    from_team_id: int
    to_team_id: int
    price: int = Field(..., ge=0, le=MAX_AMOUNT)


class ScheduleMatchRequest(BaseModel):
    home_team_id: int
    away_team_id: int
    date: int = Field(..., description="Opaque integer timestamp")


class ReportResultRequest(BaseModel):
    home_score: int = Field(..., ge=0, le=MAX_AMOUNT)
    away_score: int = Field(..., ge=0, le=MAX_AMOUNT)


class WithdrawRequest(BaseModel):
    amount: int = Field(..., ge=0, le=MAX_AMOUNT)


def _require_caller(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> Principal:
    """Caller principal from the JWT subject. 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Bearer token required")
    caller = decode_token(credentials.credentials)
    if caller is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return caller


def _unwrap(result: Result[Any]) -> Any:
    if isinstance(result, Err):
        raise HTTPException(status_code=_ERROR_STATUS[result.error], detail=result.to_dict())
    return result.value


# ---------- Teams ----------


@app.post("/teams")
def create_team(req: CreateTeamRequest, caller: Principal = Depends(_require_caller)) -> dict:
    team_id = _unwrap(get_ledger().create_team(caller, req.name))
    return {"team_id": team_id}


@app.get("/teams")
def list_teams() -> dict:
    return {"teams": [t.to_dict() for t in get_ledger().list_teams()]}


@app.get("/teams/{team_id}")
def get_team(team_id: int) -> dict:
    team = get_ledger().get_team(team_id)
    if team is None:
        raise HTTPException(status_code=404, detail=Err(LedgerError.NOT_FOUND).to_dict())
    return team.to_dict()


@app.post("/teams/{team_id}/withdraw")
def withdraw_balance(team_id: int, req: WithdrawRequest, caller: Principal = Depends(_require_caller)) -> dict:
    ok = _unwrap(get_ledger().withdraw_balance(caller, team_id, req.amount))
    return {"ok": ok}


# ---------- Players ----------


@app.post("/players")
def add_player(req: AddPlayerRequest, caller: Principal = Depends(_require_caller)) -> dict:
    player_id = _unwrap(get_ledger().add_player(caller, req.name, req.value))
    return {"player_id": player_id}


@app.get("/players/{player_id}")
def get_player(player_id: int) -> dict:
    player = get_ledger().get_player(player_id)
    if player is None:
        raise HTTPException(status_code=404, detail=Err(LedgerError.NOT_FOUND).to_dict())
    return player.to_dict()


@app.post("/players/{player_id}/trade")
def trade_player(player_id: int, req: TradePlayerRequest, caller: Principal = Depends(_require_caller)) -> dict:
    ok = _unwrap(
        get_ledger().trade_player(caller, player_id, req.from_team_id, req.to_team_id, req.price)
    )
    return {"ok": ok}


# ---------- Matches ----------


@app.post("/matches")
def schedule_match(req: ScheduleMatchRequest, caller: Principal = Depends(_require_caller)) -> dict:
    match_id = _unwrap(
        get_ledger().schedule_match(caller, req.home_team_id, req.away_team_id, req.date)
    )
    return {"match_id": match_id}


@app.get("/matches/{match_id}")
def get_match(match_id: int) -> dict:
    match = get_ledger().get_match(match_id)
    if match is None:
        raise HTTPException(status_code=404, detail=Err(LedgerError.NOT_FOUND).to_dict())
    return match.to_dict()


@app.post("/matches/{match_id}/result")
def report_match_result(match_id: int, req: ReportResultRequest, caller: Principal = Depends(_require_caller)) -> dict:
    ok = _unwrap(
        get_ledger().report_match_result(caller, match_id, req.home_score, req.away_score)
    )
    return {"ok": ok}


# ---------- Run with: uvicorn league_ledger.api:app --reload ----------
