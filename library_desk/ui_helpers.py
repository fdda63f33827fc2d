import json
import os
from typing import Any, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode
    # anything else keeps the current mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _emit(console: Console, text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_book(book: Any) -> str:
    return (f"ID: {book.book_id}, Title: {book.title}, Author: {book.author}, "
            f"Genre: {book.genre or '-'}, Year: {book.year}, Available: {_yes_no(book.available)}")


def format_user(user: Any) -> str:
    borrowed = ", ".join(b.title for b in user.borrowed_books) or "-"
    return (f"ID: {user.user_id}, Name: {user.name}, Email: {user.email or '-'}, "
            f"Policy: {user.policy.label}, Borrowed: {borrowed}")


def print_book_list(books: List[Any], console: Optional[Console] = None) -> None:
    """Print the catalog in the current output mode.
    - plain: one line per book plus its waiting list, or 'No books in library.'
    - json: JSON array of book dicts
    - rich: Rich table
    """
    console = console or _console
    mode = get_output_mode()

    if not books:
        _emit(console, "No books in library.")
        return

    if mode == "json":
        _emit(console, json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Catalog", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Genre", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Available")
        table.add_column("Waiting list", style="yellow")
        for b in books:
            table.add_row(
                str(b.book_id), b.title, b.author, b.genre or "-", str(b.year),
                "[green]Yes[/]" if b.available else "[red]No[/]",
                " → ".join(u.name for u in b.waiting_list) or "-",
            )
        console.print(table)
    else:
        for b in books:
            _emit(console, format_book(b))
            if b.waiting_list:
                _emit(console, "    Waiting list: " + ", ".join(u.name for u in b.waiting_list))


def print_user_list(users: List[Any], console: Optional[Console] = None) -> None:
    """Print registered users with their borrow policy in the current output mode."""
    console = console or _console
    mode = get_output_mode()

    if not users:
        _emit(console, "No users registered.")
        return

    if mode == "json":
        _emit(console, json.dumps([u.to_dict() for u in users], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Users", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Email", style="white")
        table.add_column("Policy", style="cyan")
        table.add_column("Borrowed", style="white")
        for u in users:
            table.add_row(str(u.user_id), u.name, u.email or "-", u.policy.label,
                          ", ".join(b.title for b in u.borrowed_books) or "-")
        console.print(table)
    else:
        for u in users:
            _emit(console, format_user(u))


def print_load_reports(reports: List[Any], console: Optional[Console] = None) -> None:
    """Print CSV load results.
    - plain: one summary line per file
    - json: JSON array
    - rich: Panel per file
    """
    console = console or _console
    mode = get_output_mode()

    if mode == "json":
        _emit(console, json.dumps([r.to_dict() for r in reports], ensure_ascii=False))
        return

    for r in reports:
        if r.missing:
            line = f"{r.source}: not found (starting empty)"
        elif r.error:
            line = f"{r.source}: could not be read (starting empty): {r.error}"
        else:
            line = f"{r.source}: {r.loaded} loaded, {r.skipped_count} skipped"
            if r.skipped:
                line += " (lines " + ", ".join(str(n) for n in r.skipped) + ")"
        if mode == "rich":
            border = "red" if r.error else ("yellow" if r.skipped else "green")
            console.print(Panel.fit(line, title="📄 Load report", border_style=border))
        else:
            _emit(console, line)
