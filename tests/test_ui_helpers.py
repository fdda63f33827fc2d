import io
import json

from rich.console import Console

from library_desk.loader import LoadReport
from library_desk.ui_helpers import (
    get_output_mode,
    print_book_list,
    print_load_reports,
    print_user_list,
    set_output_mode,
)


def make_console():
    return Console(file=io.StringIO(), width=200, color_system=None)


def test_output_mode_switch():
    assert get_output_mode() == "plain"
    set_output_mode("JSON")
    assert get_output_mode() == "json"
    set_output_mode("bogus")
    assert get_output_mode() == "json"


def test_plain_book_list_shows_waiting_list(service, lib, alice, bob):
    service.borrow(alice, "Book One")
    service.borrow(bob, "Book One")
    console = make_console()

    print_book_list(lib.list_books(), console=console)
    out = console.file.getvalue()

    assert "ID: 1, Title: Book One, Author: Author A, Genre: Fiction, Year: 2000, Available: No" in out
    assert "Waiting list: Bob" in out
    assert "ID: 2, Title: Book Two" in out


def test_empty_lists():
    console = make_console()
    print_book_list([], console=console)
    print_user_list([], console=console)
    out = console.file.getvalue()
    assert "No books in library." in out
    assert "No users registered." in out


def test_json_user_list(service, alice, lib):
    service.borrow(alice, "Book Two")
    set_output_mode("json")
    console = make_console()

    print_user_list(lib.list_users(), console=console)
    data = json.loads(console.file.getvalue())

    assert data == [{
        "id": 1,
        "name": "Alice",
        "email": "alice@example.com",
        "policy": "queue",
        "borrowed": ["Book Two"],
    }]


def test_rich_book_list_renders_table(lib):
    set_output_mode("rich")
    console = make_console()
    print_book_list(lib.list_books(), console=console)
    out = console.file.getvalue()
    assert "Catalog" in out
    assert "Book Three" in out


def test_plain_user_list_shows_policy(lib, carol):
    console = make_console()
    print_user_list(lib.list_users(), console=console)
    assert "Policy: Strict availability" in console.file.getvalue()


def test_load_report_lines():
    console = make_console()
    print_load_reports([
        LoadReport(source="books.csv", loaded=2, skipped=[3, 5]),
        LoadReport(source="users.csv", missing=True),
    ], console=console)
    out = console.file.getvalue()
    assert "books.csv: 2 loaded, 2 skipped (lines 3, 5)" in out
    assert "users.csv: not found (starting empty)" in out


def test_load_report_error_line():
    console = make_console()
    report = LoadReport(source="books.csv", error="'utf-8' codec can't decode byte 0xe9")
    print_load_reports([report], console=console)
    assert "books.csv: could not be read (starting empty): 'utf-8' codec can't decode byte 0xe9" in console.file.getvalue()

    set_output_mode("json")
    console = make_console()
    print_load_reports([report], console=console)
    assert json.loads(console.file.getvalue())[0]["error"] == report.error
