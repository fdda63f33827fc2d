from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from library_desk.book import Book
    from library_desk.user import User


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    UNAVAILABLE = "unavailable"


class OutcomeKind(Enum):
    BORROWED = "borrowed"
    QUEUED = "queued"
    RESERVED = "reserved"
    RETURNED = "returned"
    REASSIGNED = "reassigned"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    NOT_BORROWED = "not_borrowed"
    ALREADY_BORROWED = "already_borrowed"
    ALREADY_RESERVED = "already_reserved"
    AVAILABLE = "available"
    ON_LOAN = "on_loan"


_ERRORS = {
    OutcomeKind.NOT_FOUND: ErrorKind.NOT_FOUND,
    OutcomeKind.UNAVAILABLE: ErrorKind.UNAVAILABLE,
    OutcomeKind.NOT_BORROWED: ErrorKind.INVALID_STATE,
    OutcomeKind.ALREADY_BORROWED: ErrorKind.INVALID_STATE,
    OutcomeKind.ALREADY_RESERVED: ErrorKind.INVALID_STATE,
    OutcomeKind.AVAILABLE: ErrorKind.INVALID_STATE,
    OutcomeKind.ON_LOAN: ErrorKind.INVALID_STATE,
}


@dataclass(frozen=True)
class Outcome:
    """Result of a lending operation.

    Failures are reported here instead of being raised, so the caller can
    print ``message`` verbatim and branch on ``kind`` when it needs to
    (the menu offers a reservation after an ``UNAVAILABLE`` result).
    """

    kind: OutcomeKind
    message: str
    book: Optional["Book"] = None
    position: Optional[int] = None
    next_user: Optional["User"] = None

    @property
    def error(self) -> Optional[ErrorKind]:
        return _ERRORS.get(self.kind)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return self.message


def not_found() -> Outcome:
    return Outcome(OutcomeKind.NOT_FOUND, "Book not found")
