"""
Tagged operation results for the ledger.
Every ledger operation returns Ok(value) or Err(kind); expected failures are
never raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class LedgerError(str, Enum):
    """Stable error identifiers. code is the numeric contract error code."""
    OWNER_ONLY = "owner-only"
    NOT_FOUND = "not-found"
    UNAUTHORIZED = "unauthorized"
    INVALID_VALUE = "invalid-value"
    INSUFFICIENT_FUNDS = "insufficient-funds"

    @property
    def code(self) -> int:
        return _ERROR_CODES[self]


_ERROR_CODES: dict[LedgerError, int] = {
    LedgerError.OWNER_ONLY: 100,
    LedgerError.NOT_FOUND: 101,
    LedgerError.UNAUTHORIZED: 102,
    LedgerError.INVALID_VALUE: 104,
    LedgerError.INSUFFICIENT_FUNDS: 105,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: LedgerError

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, object]:
        return {"error": self.error.value, "code": self.error.code}


Result = Union[Ok[T], Err]
