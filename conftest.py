import pytest

from library_desk.book import Book
from library_desk.lending import LendingService
from library_desk.library import Library
from library_desk.policies import BorrowPolicy
from library_desk.ui_helpers import OUTPUT_MODE_ENV
from library_desk.user import User


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # The CLI stores the output mode in the environment; restore it after every test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def lib():
    lib = Library()
    lib.add_book(Book(1, "Book One", "Author A", 2000, "Fiction"))
    lib.add_book(Book(2, "Book Two", "Author B", 2005, "Science"))
    lib.add_book(Book(3, "Book Three", "Author C", 2010, "History"))
    return lib


@pytest.fixture
def service(lib):
    return LendingService(lib)


@pytest.fixture
def alice(lib):
    user = User(1, "Alice", "alice@example.com")
    lib.add_user(user)
    return user


@pytest.fixture
def bob(lib):
    user = User(2, "Bob")
    lib.add_user(user)
    return user


@pytest.fixture
def carol(lib):
    user = User(3, "Carol", policy=BorrowPolicy.STRICT)
    lib.add_user(user)
    return user


@pytest.fixture
def data_files(tmp_path):
    books = tmp_path / "books.csv"
    books.write_text(
        "id,title,author,year,genre\n"
        "1,Book One,Author A,2000,Fiction\n"
        "2,Book Two,Author B,2005,Science\n"
        "3,Broken Row,Nobody\n"
        "4,\"Dune, Part One\",Frank Herbert,1965,Science Fiction\n",
        encoding="utf-8",
    )
    users = tmp_path / "users.csv"
    users.write_text(
        "id,name,email\n"
        "1,User A,a@example.com\n"
        "2,User B,\n"
        "x,Bad Id,bad@example.com\n",
        encoding="utf-8",
    )
    return books, users
