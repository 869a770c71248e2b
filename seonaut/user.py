"""Storage of user accounts."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from seonaut.models import User


class UserNotFoundError(LookupError):
    """No active user matches the lookup."""


class UserRepository:
    """Reads and writes the ``users`` table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def sign_up(self, email: str, password: str) -> User:
        """Insert a new user and return it as stored."""
        with self.db:
            self.db.execute(
                "INSERT INTO users (email, password, created) VALUES (?, ?, ?)",
                (email, password, datetime.now()),
            )
        return self.find_by_email(email)

    def find_by_email(self, email: str) -> User:
        """Return the active user with this email, or raise UserNotFoundError."""
        row = self.db.execute(
            "SELECT id, email, password FROM users WHERE email = ? AND deleting = 0",
            (email,),
        ).fetchone()
        if row is None:
            raise UserNotFoundError(email)
        user_id, user_email, hashed = row
        return User(id=user_id, email=user_email, password=hashed)

    def update_password(self, email: str, hashed_password: str) -> None:
        """Set a new password for the user with this email."""
        with self.db:
            self.db.execute(
                "UPDATE users SET password = ? WHERE email = ?",
                (hashed_password, email),
            )

    def disable(self, user: User) -> None:
        """Mark the user as being deleted, which makes it inactive."""
        with self.db:
            self.db.execute("UPDATE users SET deleting = 1 WHERE id = ?", (user.id,))

    def delete(self, user: User) -> None:
        """Remove the user."""
        with self.db:
            self.db.execute("DELETE FROM users WHERE id = ?", (user.id,))