import logging

import pytest

from library_desk.book import Book
from library_desk.policies import BorrowPolicy
from library_desk.results import ErrorKind, OutcomeKind
from library_desk.user import User


def holders(lib, book):
    return [u for u in lib.list_users() if u.holds(book)]


def assert_loan_invariant(lib):
    for book in lib.list_books():
        count = len(holders(lib, book))
        if book.available:
            assert count == 0
        else:
            assert count == 1


def test_borrow_not_found(service, alice):
    outcome = service.borrow(alice, "Missing Book")
    assert outcome.kind is OutcomeKind.NOT_FOUND
    assert outcome.error is ErrorKind.NOT_FOUND
    assert outcome.message == "Book not found"
    assert alice.borrowed_books == []


def test_borrow_by_title_case_insensitive(service, lib, alice):
    outcome = service.borrow(alice, "book one")
    assert outcome.kind is OutcomeKind.BORROWED
    assert alice.borrowed_books == [lib.find_book(1)]
    assert lib.find_book(1).available is False


def test_borrow_already_held(service, lib, alice):
    service.borrow(alice, "Book One")
    outcome = service.borrow(alice, "Book One")

    assert outcome.kind is OutcomeKind.ALREADY_BORROWED
    assert outcome.error is ErrorKind.INVALID_STATE
    assert lib.find_book(1).waiting_list == []
    assert alice.borrowed_books == [lib.find_book(1)]


def test_hand_off_scenario(service, lib, alice, bob):
    b1 = lib.find_book(1)

    assert service.borrow(alice, "Book One").kind is OutcomeKind.BORROWED
    assert b1.available is False

    queued = service.borrow(bob, "Book One")
    assert queued.kind is OutcomeKind.QUEUED
    assert queued.position == 1
    assert b1.waiting_list == [bob]

    returned = service.return_book(alice, "Book One")
    assert returned.kind is OutcomeKind.REASSIGNED
    assert returned.next_user is bob
    assert "Bob" in returned.message
    assert b1.available is False
    assert b1.waiting_list == []
    assert bob.borrowed_books == [b1]
    assert alice.borrowed_books == []
    assert_loan_invariant(lib)


def test_return_promotes_longest_waiting(service, lib, alice, bob):
    carol = User(3, "Carol")
    lib.add_user(carol)

    service.borrow(alice, "Book Two")
    service.borrow(bob, "Book Two")
    service.borrow(carol, "Book Two")
    # Repeated request must not move Carol ahead or add a second entry
    service.borrow(carol, "Book Two")

    first = service.return_book(alice, "Book Two")
    assert first.next_user is bob
    second = service.return_book(bob, "Book Two")
    assert second.next_user is carol

    book = lib.find_book(2)
    assert book.available is False
    assert carol.borrowed_books == [book]

    last = service.return_book(carol, "Book Two")
    assert last.kind is OutcomeKind.RETURNED
    assert book.available is True
    assert_loan_invariant(lib)


def test_round_trip_restores_state(service, lib, alice):
    book = lib.find_book(3)
    before = book.available

    service.borrow(alice, "Book Three")
    outcome = service.return_book(alice, "Book Three")

    assert outcome.kind is OutcomeKind.RETURNED
    assert outcome.message == "Book returned successfully"
    assert book.available is before
    assert alice.borrowed_books == []


def test_return_not_borrowed_leaves_state_unchanged(service, lib, alice, bob):
    service.borrow(alice, "Book One")
    service.borrow(bob, "Book One")
    book = lib.find_book(1)

    outcome = service.return_book(bob, "Book One")

    assert outcome.kind is OutcomeKind.NOT_BORROWED
    assert outcome.error is ErrorKind.INVALID_STATE
    assert outcome.message == "You do not have this book borrowed"
    assert book.available is False
    assert book.waiting_list == [bob]
    assert alice.borrowed_books == [book]
    assert bob.borrowed_books == []


def test_return_not_found(service, alice):
    assert service.return_book(alice, "Nope").kind is OutcomeKind.NOT_FOUND


def test_strict_user_gets_unavailable(service, lib, alice, carol):
    service.borrow(alice, "Book One")
    outcome = service.borrow(carol, "Book One")

    assert outcome.kind is OutcomeKind.UNAVAILABLE
    assert outcome.error is ErrorKind.UNAVAILABLE
    assert lib.find_book(1).waiting_list == []


def test_reserve_after_unavailable(service, lib, alice, carol):
    service.borrow(alice, "Book One")
    service.borrow(carol, "Book One")

    reserved = service.reserve(carol, "Book One")
    assert reserved.kind is OutcomeKind.RESERVED
    assert reserved.position == 1
    assert reserved.message.startswith("Book reserved for you")

    again = service.reserve(carol, "Book One")
    assert again.kind is OutcomeKind.ALREADY_RESERVED
    assert again.error is ErrorKind.INVALID_STATE
    assert again.message == "You have already reserved this book"
    assert lib.find_book(1).waiting_list == [carol]

    service.return_book(alice, "Book One")
    assert carol.holds(lib.find_book(1))


def test_reserve_edge_cases(service, alice):
    assert service.reserve(alice, "Missing").kind is OutcomeKind.NOT_FOUND
    assert service.reserve(alice, "Book One").kind is OutcomeKind.AVAILABLE

    service.borrow(alice, "Book One")
    assert service.reserve(alice, "Book One").kind is OutcomeKind.ALREADY_BORROWED


def test_change_policy_applies_to_next_borrow(service, lib, alice, bob):
    service.borrow(alice, "Book One")
    service.change_policy(bob, BorrowPolicy.STRICT)
    assert service.borrow(bob, "Book One").kind is OutcomeKind.UNAVAILABLE

    service.change_policy(bob, BorrowPolicy.QUEUE)
    assert service.borrow(bob, "Book One").kind is OutcomeKind.QUEUED


def test_remove_book(service, lib):
    outcome = service.remove_book("book two")
    assert outcome.kind is OutcomeKind.REMOVED
    assert lib.find_book(2) is None

    assert service.remove_book("book two").kind is OutcomeKind.NOT_FOUND


def test_remove_book_on_loan_is_refused(service, lib, alice):
    service.borrow(alice, "Book One")
    outcome = service.remove_book("Book One")

    assert outcome.kind is OutcomeKind.ON_LOAN
    assert outcome.error is ErrorKind.INVALID_STATE
    assert lib.find_book(1) is not None


def test_add_book_and_user(service, lib):
    service.add_book(Book(9, "New Arrival", "Author Z", 2024, "Poetry"))
    service.add_user(User(9, "Zed"))
    assert lib.find_book_by_title("new arrival").book_id == 9
    assert lib.find_user(9).name == "Zed"


def test_transitions_are_logged(service, alice, caplog):
    with caplog.at_level(logging.INFO, logger="library_desk.lending"):
        service.borrow(alice, "Book One")
        service.return_book(alice, "Book One")

    messages = [r.getMessage() for r in caplog.records]
    assert any("borrowed" in m for m in messages)
    assert any("returned by Alice" in m for m in messages)


@pytest.mark.parametrize("steps", [
    [("alice", "borrow"), ("bob", "borrow"), ("alice", "return"), ("bob", "return")],
    [("bob", "borrow"), ("alice", "borrow"), ("alice", "borrow"), ("bob", "return")],
    [("alice", "borrow"), ("alice", "return"), ("bob", "return"), ("bob", "borrow")],
])
def test_loan_invariant_holds_after_each_step(service, lib, alice, bob, steps):
    users = {"alice": alice, "bob": bob}
    for who, action in steps:
        if action == "borrow":
            service.borrow(users[who], "Book One")
        else:
            service.return_book(users[who], "Book One")
        assert_loan_invariant(lib)
