from __future__ import annotations

import logging
from typing import List, Optional

from library_desk.book import Book
from library_desk.errors import DuplicateIdError
from library_desk.user import User

logger = logging.getLogger(__name__)


class Library:
    """In-memory registry of every book and user in the session.

    Records are kept in insertion order. Duplicate ids are accepted unless
    the store was built with ``strict_ids=True``.
    """

    def __init__(self, strict_ids: bool = False) -> None:
        self.strict_ids = strict_ids
        self.books: List[Book] = []
        self.users: List[User] = []

    # ------------------------- Books ------------------------- #
    def add_book(self, book: Book) -> None:
        if self.find_book(book.book_id) is not None:
            if self.strict_ids:
                raise DuplicateIdError("book", book.book_id)
            logger.warning(f"Book ID {book.book_id} is already in the catalog; adding anyway")
        self.books.append(book)

    def remove_book(self, book: Book) -> None:
        """Remove ``book`` by identity. Does nothing if it is not stored."""
        self.books = [b for b in self.books if b is not book]

    def find_book_by_title(self, title: str) -> Optional[Book]:
        """First book whose title matches ``title`` ignoring case."""
        wanted = (title or "").strip().casefold()
        for book in self.books:
            if book.title.casefold() == wanted:
                return book
        return None

    def find_book(self, book_id: int) -> Optional[Book]:
        for book in self.books:
            if book.book_id == book_id:
                return book
        return None

    def list_books(self) -> List[Book]:
        return list(self.books)

    # ------------------------- Users ------------------------- #
    def add_user(self, user: User) -> None:
        if self.find_user(user.user_id) is not None:
            if self.strict_ids:
                raise DuplicateIdError("user", user.user_id)
            logger.warning(f"User ID {user.user_id} is already registered; adding anyway")
        self.users.append(user)

    def find_user(self, user_id: int) -> Optional[User]:
        for user in self.users:
            if user.user_id == user_id:
                return user
        return None

    def list_users(self) -> List[User]:
        return list(self.users)
