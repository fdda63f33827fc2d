"""Borrow, return and reservation rules.

Per book the lifecycle is::

    Available --borrow--> Held
    Held --borrow (queue policy)--> Held + Queued
    Held + Queued --return--> Held (next user in line)
    Held (nobody waiting) --return--> Available

Every call runs to completion against the store; nothing here is safe to
share between threads.
"""
from __future__ import annotations

import logging

from library_desk.book import Book
from library_desk.library import Library
from library_desk.policies import BorrowPolicy, execute_borrow
from library_desk.results import Outcome, OutcomeKind, not_found
from library_desk.user import User

logger = logging.getLogger(__name__)


class LendingService:
    """Applies lending operations to a :class:`Library`."""

    def __init__(self, library: Library) -> None:
        self.library = library

    # ------------------------- Catalog ------------------------- #
    def add_book(self, book: Book) -> None:
        self.library.add_book(book)
        logger.info(f"Added book {book.book_id}: {book.title}")

    def add_user(self, user: User) -> None:
        self.library.add_user(user)
        logger.info(f"Added user {user.user_id}: {user.name}")

    def remove_book(self, title: str) -> Outcome:
        book = self.library.find_book_by_title(title)
        if book is None:
            return not_found()
        if not book.available or book.waiting_list:
            return Outcome(OutcomeKind.ON_LOAN, "Book is currently on loan and cannot be removed", book=book)
        self.library.remove_book(book)
        logger.info(f"Removed book {book.book_id}: {book.title}")
        return Outcome(OutcomeKind.REMOVED, "Book removed", book=book)

    # ------------------------- Lending ------------------------- #
    def borrow(self, user: User, title: str) -> Outcome:
        book = self.library.find_book_by_title(title)
        if book is None:
            return not_found()
        if user.holds(book):
            return Outcome(OutcomeKind.ALREADY_BORROWED, "You already have this book borrowed", book=book)

        outcome = execute_borrow(user, book)
        logger.info(f"{user.name} borrow '{book.title}' ({user.policy.value}): {outcome.kind.value}")
        return outcome

    def return_book(self, user: User, title: str) -> Outcome:
        book = self.library.find_book_by_title(title)
        if book is None:
            return not_found()
        if not user.holds(book):
            return Outcome(OutcomeKind.NOT_BORROWED, "You do not have this book borrowed", book=book)

        user.borrowed_books.remove(book)
        if book.waiting_list:
            # Hand the copy straight to the next in line; it never becomes available.
            next_user = book.waiting_list.pop(0)
            next_user.borrowed_books.append(book)
            logger.info(f"'{book.title}' returned by {user.name}, passed to {next_user.name}")
            return Outcome(
                OutcomeKind.REASSIGNED,
                f"Book returned successfully. It has been passed to {next_user.name}, "
                f"who was next in the waiting list",
                book=book,
                next_user=next_user,
            )

        book.available = True
        logger.info(f"'{book.title}' returned by {user.name}")
        return Outcome(OutcomeKind.RETURNED, "Book returned successfully", book=book)

    def reserve(self, user: User, title: str) -> Outcome:
        """Explicitly join the waiting list of a book that is out.

        This is the follow-up step offered to users on the strict policy;
        queue-policy users are enrolled by :meth:`borrow` itself.
        """
        book = self.library.find_book_by_title(title)
        if book is None:
            return not_found()
        if user.holds(book):
            return Outcome(OutcomeKind.ALREADY_BORROWED, "You already have this book borrowed", book=book)
        if book.available:
            return Outcome(OutcomeKind.AVAILABLE, "Book is available, borrow it instead", book=book)

        position = book.queue_position(user)
        if position is not None:
            return Outcome(OutcomeKind.ALREADY_RESERVED, "You have already reserved this book",
                           book=book, position=position)

        book.waiting_list.append(user)
        position = len(book.waiting_list)
        logger.info(f"{user.name} reserved '{book.title}' at position {position}")
        return Outcome(OutcomeKind.RESERVED, f"Book reserved for you. You are number {position} in the waiting list",
                       book=book, position=position)

    def change_policy(self, user: User, policy: BorrowPolicy) -> None:
        user.policy = policy
        logger.info(f"{user.name} now uses the '{policy.value}' borrow policy")
