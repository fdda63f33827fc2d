from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from library_desk.user import User


class Book:
    """Represents a single title held by the library."""

    def __init__(self, book_id: int, title: str, author: str, year: int, genre: str = "") -> None:
        self.book_id = book_id
        self.title = title.strip()
        self.author = author.strip()
        self.year = year
        self.genre = genre.strip()
        self.available = True
        # FIFO, one entry per user
        self.waiting_list: List["User"] = []

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (f"ID: {self.book_id}, Title: {self.title}, Author: {self.author}, "
                f"Genre: {self.genre}, Year: {self.year}, Available: {self.available}")

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book({self.book_id!r}, {self.title!r})"

    def queue_position(self, user: "User") -> int | None:
        """1-based position of ``user`` in the waiting list, or None."""
        for index, waiting in enumerate(self.waiting_list, 1):
            if waiting is user:
                return index
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.book_id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "year": self.year,
            "available": self.available,
            "waiting_list": [user.name for user in self.waiting_list],
        }

