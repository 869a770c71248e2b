"""Database connection and small helpers shared by the repositories."""

from __future__ import annotations

import hashlib
import math
import sqlite3
from datetime import datetime
from os import PathLike

# Maximum number of items in paginated lists.
PAGINATION_MAX = 25


def _adapt_datetime(value: datetime) -> str:
    return value.isoformat(" ")


def _convert_datetime(value: bytes) -> datetime:
    return datetime.fromisoformat(value.decode())


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("timestamp", _convert_datetime)
sqlite3.register_converter("datetime", _convert_datetime)


def connect(database: str | PathLike[str]) -> sqlite3.Connection:
    """Open a database connection in autocommit mode with datetime conversion."""
    connection = sqlite3.connect(
        database,
        detect_types=sqlite3.PARSE_DECLTYPES,
        isolation_level=None,
        check_same_thread=False,
    )
    connection.execute("SELECT 1").fetchone()
    return connection


def hash_string(s: str) -> str:
    """Return the hex SHA-256 digest of a string."""
    return hashlib.sha256(s.encode()).hexdigest()


def truncate(s: str, length: int) -> str:
    """Shorten a string to ``length`` characters, ending it with an ellipsis."""
    if len(s) > length:
        return s[: length - 3] + "..."
    return s


def page_count(total: int) -> int:
    """Number of pages needed to show ``total`` items."""
    return math.ceil(total / PAGINATION_MAX)