import logging
import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _log_level() -> str:
    level = os.getenv("LOG_LEVEL", "WARNING").upper()
    # Unknown names come back as "Level X" strings rather than numbers
    return level if isinstance(logging.getLevelName(level), int) else "WARNING"


@dataclass
class Settings:
    # Application settings
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Library Management System"))
    log_level: str = field(default_factory=_log_level)

    # Initial data files (missing file = empty set)
    books_file: str = field(default_factory=lambda: os.getenv("LIBRARY_BOOKS_FILE", "books.csv"))
    users_file: str = field(default_factory=lambda: os.getenv("LIBRARY_USERS_FILE", "users.csv"))
    seed_demo: bool = field(default_factory=lambda: _env_flag("LIBRARY_SEED_DEMO"))

    # Lending behaviour
    strict_ids: bool = field(default_factory=lambda: _env_flag("LIBRARY_STRICT_IDS"))
    default_policy: str = field(default_factory=lambda: os.getenv("LIBRARY_DEFAULT_POLICY", "queue"))


settings = Settings()
