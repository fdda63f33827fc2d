class LibraryError(Exception):
    """Base exception for lending desk errors."""


class DuplicateIdError(LibraryError):
    """Raised in strict-ids mode when a book or user id is already taken."""

    def __init__(self, kind: str, entity_id: int) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} with ID {entity_id} already exists.")


class ParseError(LibraryError, ValueError):
    """Raised when operator input cannot be parsed."""
