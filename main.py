import logging
from dataclasses import dataclass, replace
from typing import List, Optional

import typer
from rich.console import Console

from config import Settings, settings
from library_desk.errors import ParseError
from library_desk.lending import LendingService
from library_desk.library import Library
from library_desk.loader import LoadReport, load_books, load_users, seed_demo_data
from library_desk.policies import BorrowPolicy
from library_desk.shell import Shell
from library_desk.ui_helpers import print_book_list, print_load_reports, print_user_list, set_output_mode

APP_NAME = "Library CLI"

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything one run of the program works against; discarded on exit."""
    settings: Settings
    policy: BorrowPolicy
    service: LendingService
    reports: List[LoadReport]


def create_session(cfg: Settings) -> Session:
    """Build the store, load the CSV files and wire up the lending service."""
    policy = BorrowPolicy.parse(cfg.default_policy)
    library = Library(strict_ids=cfg.strict_ids)
    reports = [
        load_books(library, cfg.books_file),
        load_users(library, cfg.users_file, policy),
    ]
    if cfg.seed_demo and not library.list_books() and not library.list_users():
        seed_demo_data(library, policy)
        logger.info("Seeded demo catalog")
    return Session(settings=cfg, policy=policy, service=LendingService(library), reports=reports)


def run_menu(session: Session) -> None:
    Shell(
        session.service,
        console=console,
        title=session.settings.app_name,
        default_policy=session.policy,
    ).run()


# --- Typer CLI application ---
app = typer.Typer(help=APP_NAME)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    books: Optional[str] = typer.Option(None, "--books", help="Book CSV file (id,title,author,year,genre)"),
    users: Optional[str] = typer.Option(None, "--users", help="User CSV file (id,name,email)"),
    demo: bool = typer.Option(False, "--demo", help="Seed a sample catalog when nothing was loaded"),
    strict_ids: Optional[bool] = typer.Option(
        None, "--strict-ids/--lenient-ids", help="Reject duplicate book and user IDs"
    ),
):
    """Global options; with no command the interactive menu starts."""
    if output:
        set_output_mode(output)

    overrides = {}
    if books is not None:
        overrides["books_file"] = books
    if users is not None:
        overrides["users_file"] = users
    if demo:
        overrides["seed_demo"] = True
    if strict_ids is not None:
        overrides["strict_ids"] = strict_ids
    cfg = replace(Settings(), **overrides)

    try:
        ctx.obj = create_session(cfg)
    except ParseError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    if ctx.invoked_subcommand is None:
        run_menu(ctx.obj)


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(ctx.obj)


@app.command("list")
def cli_list(ctx: typer.Context):
    """List the loaded catalog."""
    print_book_list(ctx.obj.service.library.list_books())


@app.command("users")
def cli_users(ctx: typer.Context):
    """List the loaded users and their borrow policy."""
    print_user_list(ctx.obj.service.library.list_users())


@app.command("check")
def cli_check(ctx: typer.Context):
    """Show how many rows each data file contributed and which were skipped."""
    print_load_reports(ctx.obj.reports)


def run() -> None:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(name)s: %(message)s")
    app()


if __name__ == "__main__":
    run()
