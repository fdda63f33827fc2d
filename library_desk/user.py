from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from library_desk.policies import BorrowPolicy

if TYPE_CHECKING:
    from library_desk.book import Book


class User:
    """A library patron and the books they currently hold."""

    def __init__(self, user_id: int, name: str, email: Optional[str] = None,
                 policy: BorrowPolicy = BorrowPolicy.QUEUE) -> None:
        self.user_id = user_id
        self.name = name.strip()
        self.email = email.strip() if email and email.strip() else None
        self.policy = policy
        self.borrowed_books: List["Book"] = []

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"ID: {self.user_id}, Name: {self.name}, Borrowed books: {len(self.borrowed_books)}"

    def __repr__(self) -> str:  # pragma: no cover
        return f"User({self.user_id!r}, {self.name!r})"

    def holds(self, book: "Book") -> bool:
        return any(held is book for held in self.borrowed_books)

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "policy": self.policy.value,
            "borrowed": [book.title for book in self.borrowed_books],
        }
