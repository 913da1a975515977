"""
Caller identity: JWT bearer tokens.
The token subject is the caller principal, passed to the ledger verbatim.
"""
from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from league_ledger.models import Principal

SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "league-ledger-dev-secret-change-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


def create_access_token(principal: str, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    """Issue a token whose subject is the principal. Empty principals are refused."""
    if not isinstance(principal, str) or not principal:
        raise ValueError("principal must be a non-empty string")
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({"sub": principal, "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Principal | None:
    """Caller principal from a token, or None if the token is invalid, expired or has no subject."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return Principal(subject)
