import re
from typing import Optional

from library_desk.errors import ParseError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_int(raw: Optional[str], field: str = "value") -> int:
    """Parse a whole number typed at the menu."""
    text = (raw or "").strip()
    try:
        return int(text)
    except ValueError:
        raise ParseError(f"{field} must be a whole number, got '{text}'") from None


def parse_year(raw: Optional[str]) -> int:
    year = parse_int(raw, "Publication year")
    if year < 0 or year > 9999:
        raise ParseError(f"Publication year out of range: {year}")
    return year


class TextValidator:
    """Basic checks for free text typed at the menu."""

    @staticmethod
    def require(text: Optional[str], field: str) -> str:
        if text is None or not text.strip():
            raise ParseError(f"{field} cannot be empty")
        return text.strip()

    @staticmethod
    def validate_email(email: Optional[str]) -> Optional[str]:
        """Blank means no email; anything else must look like an address."""
        if email is None or not email.strip():
            return None
        email = email.strip()
        if not _EMAIL_RE.match(email):
            raise ParseError(f"Invalid email address: '{email}'")
        return email
