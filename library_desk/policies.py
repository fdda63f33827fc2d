"""Borrow policies.

A policy decides what a borrow request does when the book is already out.
Policies are plain enum members; the behaviour lives in module level
functions looked up from ``_HANDLERS`` so every policy is a pure function of
``(user, book)`` plus the mutation it documents.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict

from library_desk.errors import ParseError
from library_desk.results import Outcome, OutcomeKind

if TYPE_CHECKING:
    from library_desk.book import Book
    from library_desk.user import User


class BorrowPolicy(Enum):
    STRICT = "strict"
    QUEUE = "queue"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, raw: str | None) -> "BorrowPolicy":
        """Accept either the value (``strict``) or the label, case-insensitively."""
        text = (raw or "").strip().casefold()
        for policy in cls:
            if text in (policy.value, policy.label.casefold()):
                return policy
        choices = ", ".join(policy.value for policy in cls)
        raise ParseError(f"Unknown borrow policy '{raw}'. Use one of: {choices}.")


_LABELS = {
    BorrowPolicy.STRICT: "Strict availability",
    BorrowPolicy.QUEUE: "Queue on unavailable",
}


def _lend(user: "User", book: "Book") -> Outcome:
    book.available = False
    user.borrowed_books.append(book)
    return Outcome(OutcomeKind.BORROWED, "Book successfully borrowed", book=book)


def strict_borrow(user: "User", book: "Book") -> Outcome:
    if book.available:
        return _lend(user, book)
    return Outcome(OutcomeKind.UNAVAILABLE, "Book is unavailable", book=book)


def queue_borrow(user: "User", book: "Book") -> Outcome:
    if book.available:
        return _lend(user, book)

    position = book.queue_position(user)
    if position is None:
        book.waiting_list.append(user)
        position = len(book.waiting_list)
    return Outcome(
        OutcomeKind.QUEUED,
        f"Book is unavailable. You are number {position} in the waiting list",
        book=book,
        position=position,
    )


_HANDLERS: Dict[BorrowPolicy, Callable[["User", "Book"], Outcome]] = {
    BorrowPolicy.STRICT: strict_borrow,
    BorrowPolicy.QUEUE: queue_borrow,
}


def execute_borrow(user: "User", book: "Book") -> Outcome:
    return _HANDLERS[user.policy](user, book)
