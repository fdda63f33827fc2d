"""Interactive numbered menu on top of :class:`LendingService`."""
from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from library_desk.book import Book
from library_desk.errors import DuplicateIdError, ParseError
from library_desk.lending import LendingService
from library_desk.policies import BorrowPolicy
from library_desk.results import Outcome, OutcomeKind
from library_desk.ui_helpers import print_book_list, print_user_list
from library_desk.user import User
from library_desk.validators import TextValidator, parse_int, parse_year


MENU_ITEMS = [
    ("1", "Add book", "➕"),
    ("2", "Remove book", "🗑️"),
    ("3", "Borrow book", "📖"),
    ("4", "Return book", "↩️"),
    ("5", "Add user", "👤"),
    ("6", "Select current user", "🔑"),
    ("7", "View all books", "📚"),
    ("8", "View all users", "👥"),
    ("9", "Change borrow policy", "⚙️"),
    ("0", "Exit", "🚪"),
]


class Shell:
    """Translates menu choices into lending calls and prints the results."""

    def __init__(self, service: LendingService, console: Optional[Console] = None,
                 title: str = "Library Management System",
                 default_policy: BorrowPolicy = BorrowPolicy.QUEUE) -> None:
        self.service = service
        self.console = console or Console()
        self.title = title
        self.default_policy = default_policy
        self.current_user: Optional[User] = None
        self._actions = {
            "1": self.add_book,
            "2": self.remove_book,
            "3": self.borrow,
            "4": self.return_book,
            "5": self.add_user,
            "6": self.select_user,
            "7": self.list_books,
            "8": self.list_users,
            "9": self.change_policy,
        }

    # ------------------------- Loop ------------------------- #
    def render_menu(self) -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in MENU_ITEMS:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        who = escape(self.current_user.name) if self.current_user else "nobody"
        self.console.print(Panel(
            table,
            title=self.title,
            subtitle=f"Current user: {who}",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        ))

    def run(self) -> None:
        choices = [key for key, _, _ in MENU_ITEMS]
        while True:
            self.render_menu()
            try:
                choice = self._ask("Choose an option", choices=choices)
            except EOFError:
                self.console.print()
                break

            if choice == "0":
                self.console.print("[green]Goodbye![/]")
                break
            try:
                self._actions[choice]()
            except EOFError:
                self.console.print()
                break
            except ParseError as e:
                self.console.print(f"[bold red]Invalid input:[/] {escape(str(e))}")
            except DuplicateIdError as e:
                self.console.print(f"[bold red]Error:[/] {escape(str(e))}")
            self.console.print()

    def _ask(self, prompt: str, **kwargs) -> str:
        return Prompt.ask(prompt, console=self.console, **kwargs).strip()

    def _show(self, outcome: Outcome) -> None:
        if outcome.ok:
            style = "yellow" if outcome.kind is OutcomeKind.QUEUED else "green"
        else:
            style = "red"
        self.console.print(f"[{style}]{escape(outcome.message)}[/]")

    def _require_user(self) -> Optional[User]:
        if self.current_user is None:
            self.console.print("[yellow]Please select a current user first.[/]")
        return self.current_user

    # ------------------------- Actions ------------------------- #
    def add_book(self) -> None:
        book_id = parse_int(self._ask("Enter book ID"), "Book ID")
        title = TextValidator.require(self._ask("Enter book title"), "Title")
        author = TextValidator.require(self._ask("Enter book author"), "Author")
        genre = self._ask("Enter book genre", default="")
        year = parse_year(self._ask("Enter publication year"))
        self.service.add_book(Book(book_id, title, author, year, genre))
        self.console.print("[green]Book added successfully.[/]")

    def remove_book(self) -> None:
        title = self._ask("Enter book title to remove")
        self._show(self.service.remove_book(title))

    def borrow(self) -> None:
        user = self._require_user()
        if user is None:
            return
        title = self._ask("Enter book title to borrow")
        outcome = self.service.borrow(user, title)
        self._show(outcome)
        if outcome.kind is OutcomeKind.UNAVAILABLE:
            if Confirm.ask("Do you want to reserve it?", default=False, console=self.console):
                self._show(self.service.reserve(user, title))

    def return_book(self) -> None:
        user = self._require_user()
        if user is None:
            return
        title = self._ask("Enter book title to return")
        self._show(self.service.return_book(user, title))

    def add_user(self) -> None:
        user_id = parse_int(self._ask("Enter user ID"), "User ID")
        name = TextValidator.require(self._ask("Enter user name"), "Name")
        email = TextValidator.validate_email(self._ask("Enter user email (optional)", default=""))
        self.service.add_user(User(user_id, name, email, policy=self.default_policy))
        self.console.print("[green]User added successfully.[/]")

    def select_user(self) -> None:
        user_id = parse_int(self._ask("Enter user ID"), "User ID")
        user = self.service.library.find_user(user_id)
        if user is None:
            self.console.print("[red]User not found[/]")
            return
        self.current_user = user
        self.console.print(f"[green]Current user set to {escape(user.name)}[/]")

    def list_books(self) -> None:
        print_book_list(self.service.library.list_books(), console=self.console)

    def list_users(self) -> None:
        print_user_list(self.service.library.list_users(), console=self.console)

    def change_policy(self) -> None:
        user = self._require_user()
        if user is None:
            return
        for policy in BorrowPolicy:
            self.console.print(f"  [bold]{policy.value}[/] - {policy.label}")
        policy = BorrowPolicy.parse(self._ask("Choose borrow policy", default=user.policy.value))
        self.service.change_policy(user, policy)
        self.console.print(f"[green]Borrow policy for {escape(user.name)} set to {policy.label}.[/]")
