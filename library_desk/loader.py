"""CSV ingestion for the initial catalog and user list.

Book files use the column order ``id,title,author,year,genre`` and user files
``id,name,email``. The first line is a header. Rows that are too short or
carry a blank title/author/name or a non-numeric id/year are skipped and
reported. A file that cannot be read or decoded loads nothing; none of this
is fatal.
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from library_desk.book import Book
from library_desk.errors import DuplicateIdError
from library_desk.library import Library
from library_desk.policies import BorrowPolicy
from library_desk.user import User
from library_desk.validators import TextValidator

logger = logging.getLogger(__name__)

BOOK_FIELDS = ("id", "title", "author", "year", "genre")
USER_FIELDS = ("id", "name", "email")
MIN_USER_FIELDS = 2  # email is optional

PathLike = Union[str, Path]


@dataclass
class LoadReport:
    source: str
    loaded: int = 0
    skipped: List[int] = field(default_factory=list)
    missing: bool = False
    error: Optional[str] = None

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "loaded": self.loaded,
            "skipped": self.skipped_count,
            "skipped_lines": list(self.skipped),
            "missing": self.missing,
            "error": self.error,
        }


def _parse_book(row: Sequence[str]) -> Optional[Book]:
    if len(row) < len(BOOK_FIELDS):
        return None
    book_id, title, author, year, genre = (value.strip() for value in row[:len(BOOK_FIELDS)])
    try:
        return Book(
            book_id=int(book_id),
            title=TextValidator.require(title, "Title"),
            author=TextValidator.require(author, "Author"),
            year=int(year),
            genre=genre,
        )
    except ValueError:  # includes ParseError
        return None


def _user_parser(policy: BorrowPolicy) -> Callable[[Sequence[str]], Optional[User]]:
    def parse(row: Sequence[str]) -> Optional[User]:
        if len(row) < MIN_USER_FIELDS:
            return None
        user_id, name = row[0].strip(), row[1].strip()
        email = row[2] if len(row) > 2 else None
        try:
            return User(user_id=int(user_id), name=TextValidator.require(name, "Name"), email=email, policy=policy)
        except ValueError:
            return None
    return parse


def _load(path: PathLike, parse, add) -> LoadReport:
    path = Path(path)
    report = LoadReport(source=str(path))
    if not path.exists():
        logger.info(f"{path} not found, starting with an empty set")
        report.missing = True
        return report

    # Decode the whole file up front so an unreadable file adds nothing.
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"{path}: could not be read, starting with an empty set ({e})")
        report.error = str(e)
        return report

    reader = csv.reader(io.StringIO(text, newline=""))
    next(reader, None)  # header
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        line = reader.line_num
        entity = parse(row)
        if entity is None:
            logger.warning(f"{path}:{line}: skipping malformed row {row!r}")
            report.skipped.append(line)
            continue
        try:
            add(entity)
        except DuplicateIdError as e:
            logger.warning(f"{path}:{line}: {e}")
            report.skipped.append(line)
            continue
        report.loaded += 1

    logger.info(f"Loaded {report.loaded} rows from {path} ({report.skipped_count} skipped)")
    return report


def load_books(library: Library, path: PathLike) -> LoadReport:
    """Add every well-formed book row of ``path`` to ``library``."""
    return _load(path, _parse_book, library.add_book)


def load_users(library: Library, path: PathLike, policy: BorrowPolicy = BorrowPolicy.QUEUE) -> LoadReport:
    """Add every well-formed user row of ``path`` to ``library``, all on ``policy``."""
    return _load(path, _user_parser(policy), library.add_user)


def seed_demo_data(library: Library, policy: BorrowPolicy = BorrowPolicy.QUEUE) -> None:
    """Populate a small sample catalog for trying out the menu."""
    for book in (
        Book(1, "Book One", "Author A", 2000, "Fiction"),
        Book(2, "Book Two", "Author B", 2005, "Science"),
        Book(3, "Book Three", "Author C", 2010, "History"),
    ):
        library.add_book(book)
    library.add_user(User(1, "User A", policy=policy))
    library.add_user(User(2, "User B", policy=policy))
